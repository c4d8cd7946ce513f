from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "data/memopad.db"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    rate_limit_enabled: bool = True
    memo_preview_length: int = 150
    max_title_length: int = 200
    max_content_length: int = 100_000
    rate_limit_read: str = "120/minute"
    rate_limit_write: str = "30/minute"
    rate_limit_editor: str = "600/minute"

    model_config = {"env_prefix": "MEMOPAD_"}


settings = Settings()
