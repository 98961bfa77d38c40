from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import SecretStr
from typing import List


class Settings(BaseSettings):
    PROJECT_NAME: str = "Spark Matching"
    DATABASE_URL: str
    SECRET_KEY: SecretStr
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 8  # 8 days
    API_V1_STR: str = "/api/v1"

    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    # Discovery
    CANDIDATE_POOL_LIMIT: int = 50 # Max rows read before the preference filter runs

    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

settings = Settings()
