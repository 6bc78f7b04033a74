from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    # Database
    DATABASE_URL: Optional[str] = None
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: str = "5432"
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = "postgres"
    DATABASE_NAME: str = "budget_planner_db"

    # JWT
    SECRET_KEY: str = "supersecretkey_change_this"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Invite links
    INVITE_LINK_LIFETIME_DAYS: int = 30
    INVITE_LINK_REFRESH_HOURS: int = 24
    INVITE_LINK_REFRESH_ENABLED: bool = True

    # Weight of each dashboard role in the category priority blend
    ROLE_WEIGHTS: Dict[str, float] = {
        "ENTREPRENEUR": 0.8,
        "EMPLOYEE": 0.7,
        "RETIREE": 0.5,
        "HOUSEMAKER": 0.4,
        "STUDENT": 0.3,
        "CHILD": 0.2,
        "NONE": 0.1,
    }

    # Logging
    LOG_FILE: str = "app.log"
    LOG_ROTATION: str = "500 MB"
    LOG_LEVEL: str = "DEBUG"

    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )


settings = Settings()
