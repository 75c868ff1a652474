# catalog_api/config.py
import os
from dataclasses import dataclass
from typing import List

# Settings are read from the environment once, at import time.


@dataclass
class Settings:
    project_name: str = os.getenv("PROJECT_NAME", "catalog-api")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "3000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    mongo_url: str = os.getenv("MONGO_URL", "mongodb://127.0.0.1:27017")
    db_name: str = os.getenv("DB_NAME", "shop")
    collection_name: str = os.getenv("COLLECTION_NAME", "products")
    # upper bound for a single store call, also used as server selection timeout
    store_timeout: float = float(os.getenv("STORE_TIMEOUT_SECONDS", "5"))

    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
