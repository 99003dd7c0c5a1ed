from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "AXII"
    API_V1_STR: str = "/api/v1"
    DATABASE_URL: str = "sqlite+aiosqlite:///./axii.db"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"
    SQL_ECHO: bool = False

    # Dispositivos
    DEFAULT_ROOM: str = "Não Atribuída"
    DEVICE_STALE_MINUTES: int = 10
    DEVICE_SWEEP_SECONDS: int = 60  # 0 desliga a varredura periódica

    class Config:
        env_file = ".env"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

settings = Settings()
