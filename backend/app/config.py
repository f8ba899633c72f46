from functools import lru_cache
from typing import Optional

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    github_user: Optional[str] = Field(default=None, alias="GITHUB_USER")
    github_token: Optional[str] = Field(default=None, alias="GITHUB_TOKEN")
    github_base_url: HttpUrl = Field(
        default="https://api.github.com", alias="GITHUB_BASE_URL"
    )  # for GitHub Enterprise or local mocks
    github_proxy: Optional[str] = Field(default=None, alias="GITHUB_PROXY")
    github_timeout_ms: int = Field(default=8000, alias="GITHUB_TIMEOUT_MS")
    github_user_agent: str = Field(default="portfolio-site", alias="GITHUB_USER_AGENT")
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"  # ignore unrelated env vars to avoid validation errors

    @property
    def default_user(self) -> Optional[str]:
        if self.github_user is None:
            return None
        return self.github_user.strip() or None


@lru_cache
def get_settings() -> Settings:
    return Settings()
