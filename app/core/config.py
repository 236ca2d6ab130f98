from pydantic_settings import BaseSettings
from typing import List, Union
import os
import json

from app.models.enums import StorageBackend


class Settings(BaseSettings):
    log_level: str = "INFO"
    environment: str = "local"
    api_prefix: str = ""
    # "mongo" serves /products from MongoDB, "csv" from a flat file
    storage_backend: str = "mongo"
    # CORS origins - can be JSON array or comma-separated string
    cors_origins: Union[List[str], str] = ["*"]

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_database: str = "products"
    mongo_products_collection: str = "products"
    mongo_server_selection_timeout_ms: int = 3000

    # CSV store
    csv_path: str = "data/products.csv"

    # JSONPlaceholder integration
    thirdparty_base_url: str = "https://jsonplaceholder.typicode.com"
    thirdparty_connect_timeout: float = 10.0
    thirdparty_request_timeout: float = 20.0

    def get_cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        if isinstance(self.cors_origins, str):
            try:
                origins = json.loads(self.cors_origins)
            except (json.JSONDecodeError, ValueError):
                # Comma-separated
                origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        else:
            origins = self.cors_origins

        return origins if isinstance(origins, list) else [origins]

    def get_storage_backend(self) -> StorageBackend:
        try:
            return StorageBackend(self.storage_backend.strip().lower())
        except ValueError:
            allowed = ", ".join(backend.value for backend in StorageBackend)
            raise ValueError(
                f"Unsupported storage backend '{self.storage_backend}', expected one of: {allowed}"
            )

    class Config:
        env_file = f"config/{os.getenv('ENV', 'local')}.env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
