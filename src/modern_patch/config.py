"""Runtime configuration read from the environment."""

import os

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PATCH_DIR = "patches"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_TIMEOUT = 120
DEFAULT_ISSUE_URL = "https://github.com/issues/new"


class PatchSettings(BaseModel):
    """Settings shared by the CLI and the engine components."""

    model_config = ConfigDict(frozen=True)

    patch_dir: str = DEFAULT_PATCH_DIR
    log_level: str = DEFAULT_LOG_LEVEL
    command_timeout: int = Field(default=DEFAULT_TIMEOUT, gt=0)
    issue_url: str = DEFAULT_ISSUE_URL


def load_settings() -> PatchSettings:
    """Build settings from MODERN_PATCH_* environment variables.

    The CLI loads a .env file (python-dotenv) before calling this.
    Unparseable timeouts fall back to the default.
    """
    raw_timeout = os.getenv("MODERN_PATCH_TIMEOUT", "")
    try:
        timeout = int(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    except ValueError:
        timeout = DEFAULT_TIMEOUT
    if timeout <= 0:
        timeout = DEFAULT_TIMEOUT

    return PatchSettings(
        patch_dir=os.getenv("MODERN_PATCH_DIR") or DEFAULT_PATCH_DIR,
        log_level=(os.getenv("MODERN_PATCH_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        command_timeout=timeout,
        issue_url=os.getenv("MODERN_PATCH_ISSUE_URL") or DEFAULT_ISSUE_URL,
    )
