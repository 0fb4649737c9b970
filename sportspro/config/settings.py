from typing import List

from pydantic_settings import BaseSettings
import os


class Settings(BaseSettings):
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    MONGO_DATABASE: str = os.getenv("MONGO_DATABASE", "sportspro")

    PLATFORM_NAME: str = os.getenv("PLATFORM_NAME", "SportsPro")

    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "sportspro-development-secret")
    JWT_LIFETIME_SECONDS: int = int(os.getenv("JWT_LIFETIME_SECONDS", "3600"))
    CLIENT_ORIGIN: str = os.getenv("CLIENT_ORIGIN", "http://localhost:3000")

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    RATE_LIMITING_ENABLED: bool = os.getenv("RATE_LIMITING_ENABLED", "false").lower() == "true"

    # Read-modify-write attempts on a cart before giving up with a 409
    CART_COMMIT_ATTEMPTS: int = int(os.getenv("CART_COMMIT_ATTEMPTS", "5"))

    @property
    def client_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CLIENT_ORIGIN.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = True


# create a singleton instance
settings = Settings()
