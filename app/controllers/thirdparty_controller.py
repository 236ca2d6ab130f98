from fastapi import APIRouter, Depends
from typing import Any, Dict, List
from app.services.thirdparty_service import ThirdPartyService, thirdparty_service

router = APIRouter(prefix="/thirdparty", tags=["Third Party"])


def get_thirdparty_service() -> ThirdPartyService:
    return thirdparty_service


@router.get("/users", response_model=List[Dict[str, Any]])
async def list_users(service: ThirdPartyService = Depends(get_thirdparty_service)):
    """Users from JSONPlaceholder, passed through unchanged"""
    return await service.get_users()
