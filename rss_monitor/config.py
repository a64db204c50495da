"""Configuration loader for rss_monitor.

Values come from ``RSS_MONITOR_*`` environment variables, optionally seeded
from a ``.env`` file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "RSS_MONITOR_"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


@dataclass(frozen=True)
class ListingSelectors:
    """CSS selectors locating the parts of one listing card."""
    card: str = "a.PostCard_post-card__z_Sqq"
    title: str = "h3.PostCard_post-heading__Ob1pu"
    date: str = "div.PostList_post-date__djrOA"
    category: str = "span.text-label"


@dataclass(frozen=True)
class FeedMeta:
    """Fixed channel metadata written into every generated feed."""
    title: str = "Anthropic News"
    description: str = "Latest news and updates from Anthropic"
    link: str = "https://www.anthropic.com/news"
    language: str = "en"
    image: str = "https://www.anthropic.com/images/icons/apple-touch-icon.png"
    favicon: str = "https://www.anthropic.com/favicon.ico"
    copyright: str = "Anthropic"
    generator: str = "Custom RSS Generator"
    author: str = "Anthropic"
    feed_link_base: str = "https://anthropic.com/news"

    def feed_link(self, feed_name: str) -> str:
        return f"{self.feed_link_base.rstrip('/')}/feed_{feed_name}.xml"


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3000


@dataclass
class MonitorConfig:
    source_url: str = "https://www.anthropic.com/news"
    base_url: str = "https://www.anthropic.com"
    feed_name: str = "anthropic"
    interval: float = 60.0
    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    data_dir: Path = Path(".")
    log_file: Optional[str] = "rss_monitor.log"
    log_level: str = "INFO"
    server: ServerConfig = field(default_factory=ServerConfig)
    meta: FeedMeta = field(default_factory=FeedMeta)
    selectors: ListingSelectors = field(default_factory=ListingSelectors)

    @property
    def state_file(self) -> Path:
        return self.data_dir / "news_state.json"

    @property
    def feeds_dir(self) -> Path:
        return self.data_dir / "feeds"


def _env(name: str, default: str) -> str:
    return os.getenv(ENV_PREFIX + name, default)


def _env_number(name: str, default: float, cast=float):
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from e


def load_config(env_file: Optional[str] = None) -> MonitorConfig:
    """
    Build a MonitorConfig from the environment.

    Variables already set in the process environment win over the `.env` file.
    """
    load_dotenv(env_file)

    log_file = _env("LOG_FILE", "rss_monitor.log").strip() or None
    port = _env_number("PORT", _platform_port(ServerConfig.port), cast=int)

    return MonitorConfig(
        source_url=_env("SOURCE_URL", MonitorConfig.source_url),
        base_url=_env("BASE_URL", MonitorConfig.base_url),
        feed_name=_env("FEED_NAME", MonitorConfig.feed_name),
        interval=_env_number("INTERVAL", MonitorConfig.interval),
        timeout=_env_number("TIMEOUT", MonitorConfig.timeout),
        user_agent=_env("USER_AGENT", DEFAULT_USER_AGENT),
        data_dir=Path(_env("DATA_DIR", ".")),
        log_file=log_file,
        log_level=_env("LOG_LEVEL", "INFO").upper(),
        server=ServerConfig(
            host=_env("HOST", ServerConfig.host),
            port=port,
        ),
    )


def _platform_port(default: int) -> int:
    # Hosting platforms commonly inject an unprefixed PORT
    raw = os.getenv("PORT")
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"PORT must be an integer, got {raw!r}") from e
