from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    PROJECT_NAME: str = "Facility Booking API"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"

    # Database
    DATABASE_URL: str = "sqlite:///./booking.db"

    # Security
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    # Claim the identity provider puts the role in (ASP.NET style tokens)
    ROLE_CLAIM: str = "http://schemas.microsoft.com/ws/2008/06/identity/claims/role"

    # CORS
    BACKEND_CORS_ORIGINS: list[str] = []

    # Cloudinary Configuration
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None
    ROOM_IMAGE_FOLDER: str = "room_images"

    # Booking rules
    ALLOW_ADMIN_CANCEL: bool = False
    SLOT_LOCK_TIMEOUT_SECONDS: float = 5.0
    BOOKED_DATES_MAX_RANGE_DAYS: int = 366

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
