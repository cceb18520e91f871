from pydantic_settings import BaseSettings, SettingsConfigDict
class Settings(BaseSettings):
    APP_ENV: str = "dev"
    APP_SECRET: str
    DB_URL: str
    JWT_ISS: str = "menuboard"
    JWT_EXP_MIN: int = 12*60
    TZ: str = "America/Sao_Paulo"
    LOG_LEVEL: str = "INFO"
    ROTATION_SECONDS: float = 5.0
    RESTAURANT_NAME: str = "Quintal Café e Doceria"
    ADMIN_EMAIL: str | None = None
    ADMIN_PASSWORD: str | None = None
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
settings = Settings()
