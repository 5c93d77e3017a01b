from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    mongo_db_connection_string: str = Field(default="mongodb://localhost:27017")
    mongo_db_name: str = Field(default="personalproject")

    google_client_id: str = Field(default="")
    google_client_secret: str = Field(default="")
    # Falls back to a random per-process key in main.py when unset
    session_secret: str = Field(default="")
    oauth_callback_url: str | None = Field(default=None)

    allowed_hosts: str = Field(default="*")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def allowed_hosts_list(self) -> List[str]:
        return [host.strip() for host in self.allowed_hosts.split(",") if host.strip()]


settings = Settings()
