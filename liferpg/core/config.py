from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://liferpg:liferpg@db:5432/liferpg"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Used for users that never set a timezone of their own.
    DEFAULT_TIMEZONE: str = "Asia/Almaty"

    # Create the 32 starter actions for every new user.
    SEED_DEFAULT_ACTIONS: bool = True

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://liferpg.app,https://api.liferpg.app"
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
