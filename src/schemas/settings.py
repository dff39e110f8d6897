"""Reader configuration."""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "https://what-if.xkcd.com"
DEFAULT_MATHJAX_URL = "https://cdn.mathjax.org/mathjax/latest/MathJax.js"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 6.1; WOW64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/32.0.1700.19 Safari/537.36"
)


class ThemeSettings(BaseModel):
    """Theme flags used to pick the article stylesheet.

    Attributes:
        amoled: Pure black theme, wins over night when both are set
        night: Dark theme
        invert: Invert illustration colors in the dark themes
    """

    amoled: bool = False
    night: bool = False
    invert: bool = False


class ReaderSettings(BaseModel):
    """Settings for synchronization, offline storage and rendering.

    Attributes:
        offline_root: Directory holding offline copies
        offline_mode: Keep every article available offline and read from
            the local copies
        theme: Theme flags
        base_url: Archive host; all asset URLs are pinned to it
        mathjax_url: Remote math rendering script used when online
        timeout: HTTP timeout in seconds
        retry_attempts: Attempts for transient network failures
        retry_delay: Delay between attempts in seconds
        user_agent: User-Agent header sent to the archive
        max_concurrency: Upper bound of simultaneous batch downloads,
            None for no bound
    """

    offline_root: Path = Field(default_factory=lambda: Path.home() / ".whatif-sync")
    offline_mode: bool = False
    theme: ThemeSettings = Field(default_factory=ThemeSettings)
    base_url: str = DEFAULT_BASE_URL
    mathjax_url: str = DEFAULT_MATHJAX_URL
    timeout: float = 30
    retry_attempts: int = Field(default=3, ge=1)
    retry_delay: float = 1
    user_agent: str = DEFAULT_USER_AGENT
    max_concurrency: int | None = Field(default=None, ge=1)

    @classmethod
    def load(cls, path: Path | None) -> "ReaderSettings":
        """Load settings from a JSON file, falling back to defaults."""
        if path is None or not path.exists():
            return cls()
        data = json.loads(path.read_text())
        return cls.model_validate(data)

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2))

    def client_config(self) -> dict[str, Any]:
        """Build the dict config understood by the HTTP clients."""
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "retry_attempts": self.retry_attempts,
            "retry_delay": self.retry_delay,
            "headers": {"User-Agent": self.user_agent},
        }
