from typing import Any, Dict, List, Optional
from app.sao.jsonplaceholder_sao import JsonPlaceholderSAO, jsonplaceholder_sao
import structlog

logger = structlog.get_logger()


class ThirdPartyService:
    def __init__(self, sao: Optional[JsonPlaceholderSAO] = None):
        self.sao = sao or jsonplaceholder_sao

    async def get_users(self) -> List[Dict[str, Any]]:
        users = await self.sao.get_users()
        logger.info("Fetched third-party users", count=len(users), base_url=self.sao.base_url)
        return users


thirdparty_service = ThirdPartyService()
