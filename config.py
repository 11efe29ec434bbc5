import logging
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///database.db" #SQLite database will be stored in database.db unless DPH_DATABASE_URL is set
    autosave_delay_seconds: float = 1.0 #debounce window before a draft is saved
    success_dismiss_seconds: float = 3.5 #how long the submission confirmation stays up
    session_lifetime_hours: int = 24
    form_idle_seconds: float = 30 * 60 #open form sessions untouched this long are dropped
    max_form_sessions: int = 1000
    draft_store_key: str = "clientPortalForm"
    seed_demo_users: bool = True
    log_level: str = "INFO"

    #loads DPH_* variables from the environment or a .env file
    model_config = SettingsConfigDict(env_prefix="DPH_", env_file=".env", extra="ignore")


settings = Settings()


def configure_logging(level: str | None = None):
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
