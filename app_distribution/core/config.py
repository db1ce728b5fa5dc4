from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "App Distribution Backend"
    DATABASE_URL: str = "sqlite:///./app_distribution.db"
    GOOGLE_DRIVE_API_URL: str = "https://www.googleapis.com/drive/v3"
    GOOGLE_DRIVE_DOWNLOAD_URL: str = "https://drive.google.com/uc"
    GOOGLE_ACCESS_TOKEN: str = ""
    GOOGLE_TIMEOUT_SECONDS: float = 10.0
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
