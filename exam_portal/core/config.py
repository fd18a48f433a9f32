from pydantic_settings import BaseSettings
from typing import Optional, List

class Settings(BaseSettings):
    PROJECT_NAME: str = "Exam Portal"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 1 day

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    # Database Configuration
    # "sqlite://" keeps everything in memory for the lifetime of the process
    DATABASE_URL: str = "sqlite://"

    # Exams
    EXAM_QUESTION_COUNTS: List[int] = [20, 25, 50]
    EXAM_SESSION_TTL_HOURS: int = 24  # 0 disables eviction of abandoned sessions
    EXAM_SESSION_SWEEP_MINUTES: int = 30

    # Seeded administrator
    FIRST_ADMIN_USERNAME: str = "admin"
    FIRST_ADMIN_PASSWORD: str = "adminpass"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    class Config:
        env_file = ".env"

settings = Settings()
