from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    id_strategy: Literal["counter", "random"] = "random"
    response_header: str = "X-Request-ID"
    log_format: Literal["text", "json"] = "text"
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
