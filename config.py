"""
Configuration loaded from the environment (and a local .env file when present).

CLI flags override these values; see cli._apply_overrides.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_LLM_MODEL = "gemini-2.5-flash"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v.strip() if v is not None and v.strip() else default


@dataclass(frozen=True)
class Settings:
    jira_host: Optional[str]
    jira_user_email: Optional[str]
    jira_api_token: Optional[str]
    github_token: Optional[str]
    github_api_url: str
    google_api_key: Optional[str]
    llm_model: str
    users_file: str
    http_timeout: float


def load_settings() -> Settings:
    """Load settings from environment with safe defaults for local runs."""
    load_dotenv()
    return Settings(
        jira_host=_env("JIRA_HOST"),
        jira_user_email=_env("JIRA_USER_EMAIL"),
        jira_api_token=_env("JIRA_API_TOKEN"),
        github_token=_env("GITHUB_TOKEN"),
        github_api_url=_env("GITHUB_API_URL", "https://api.github.com"),
        google_api_key=_env("GOOGLE_API_KEY"),
        llm_model=_env("WORKPULSE_LLM_MODEL", DEFAULT_LLM_MODEL),
        users_file=_env("WORKPULSE_USERS_FILE", "users.json"),
        http_timeout=float(_env("WORKPULSE_HTTP_TIMEOUT", "30") or 30),
    )
