from pydantic import BaseModel, Field
from functools import lru_cache
from typing import List, Mapping, Optional
import os

DEFAULT_CREDENTIAL_PREFIX = "LEVEL_INFINITE_COOKIE_"
TRUTHY = {"1", "true", "yes", "on"}


def load_credentials(max_count: int, environ: Optional[Mapping[str, str]] = None,
                     prefix: str = DEFAULT_CREDENTIAL_PREFIX) -> List[str]:
    """Collect account cookies from numbered slots, stopping at the first hole."""
    source = os.environ if environ is None else environ
    credentials: List[str] = []
    for i in range(1, max_count + 1):
        value = source.get(f"{prefix}{i}")
        if not value or not value.strip():
            break
        credentials.append(value)
    return credentials


class Settings(BaseModel):
    credentials: List[str] = Field(default_factory=list)
    max_accounts: int = 20
    credential_prefix: str = DEFAULT_CREDENTIAL_PREFIX
    telegram_bot_token: str | None = None
    telegram_chat_id: str | None = None
    timezone: str = "Asia/Shanghai"
    checkin_cron: str = "0 1 * * *"
    request_timeout_seconds: float = 30.0
    daily_system_error_as_done: bool = True
    manual_trigger_token: str | None = None
    redis_url: str = "redis://localhost:6379/0"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        max_accounts = int(env.get("MAX_ACCOUNTS", 20))
        prefix = env.get("CREDENTIAL_PREFIX") or DEFAULT_CREDENTIAL_PREFIX
        return cls(
            credentials=load_credentials(max_accounts, env, prefix),
            max_accounts=max_accounts,
            credential_prefix=prefix,
            telegram_bot_token=env.get("TELEGRAM_BOT_TOKEN") or None,
            telegram_chat_id=env.get("TELEGRAM_CHAT_ID") or None,
            timezone=env.get("TIMEZONE", "Asia/Shanghai"),
            checkin_cron=env.get("CHECKIN_CRON", "0 1 * * *"),
            request_timeout_seconds=float(env.get("REQUEST_TIMEOUT_SECONDS", 30)),
            daily_system_error_as_done=env.get("DAILY_SYSTEM_ERROR_AS_DONE", "true").strip().lower() in TRUTHY,
            manual_trigger_token=env.get("MANUAL_TRIGGER_TOKEN") or None,
            redis_url=env.get("REDIS_URL", "redis://localhost:6379/0"),
            log_level=env.get("LOG_LEVEL", "INFO"),
        )

    @property
    def telegram_enabled(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
