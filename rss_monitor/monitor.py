from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from .config import MonitorConfig
from .dedup import merge_articles
from .fetcher import fetch_listing
from .models import Article
from .parser import parse_listing
from .publisher import publish_feed
from .store import load_articles, save_articles
from .utils import utcnow

FetchFn = Callable[[str], str]
Clock = Callable[[], datetime]


@dataclass
class CycleResult:
    fetched: int = 0
    added: int = 0
    total: int = 0
    published: bool = False
    saved: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Monitor:
    """
    Watches the listing page and keeps the feed and state file up to date.

    Cycle: fetch → extract → load state → merge → (if anything new) publish feed, save state

    `run_once` performs a single cycle and never raises; `run_forever` repeats it
    with `config.interval` seconds between the end of one cycle and the start
    of the next.
    """

    def __init__(
        self,
        config: MonitorConfig,
        *,
        fetch: Optional[FetchFn] = None,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self._fetch = fetch or self._fetch_listing
        self._clock = clock or utcnow
        self.log = logger or logging.getLogger(__name__)

    def _fetch_listing(self, url: str) -> str:
        return fetch_listing(url, timeout=self.config.timeout, user_agent=self.config.user_agent)

    def _extract(self, html: str) -> List[Article]:
        return parse_listing(
            html,
            base_url=self.config.base_url,
            selectors=self.config.selectors,
            now=self._clock(),
            logger=self.log,
        )

    def run_once(self) -> CycleResult:
        result = CycleResult()
        try:
            html = self._fetch(self.config.source_url)
            current = self._extract(html)
            result.fetched = len(current)

            existing = load_articles(self.config.state_file, logger=self.log)
            merged = merge_articles(existing, current)
            result.total = len(merged.articles)

            if not merged.is_new:
                self.log.info("No new articles found")
                return result

            result.added = len(merged.added)
            self.log.info("Found %d new articles", result.added)
            for article in merged.added:
                self.log.info("New article: %s (%s)", article.title, article.link)

            publish_feed(
                merged.articles,
                self.config.feed_name,
                self.config.feeds_dir,
                self.config.meta,
                logger=self.log,
            )
            result.published = True
            result.saved = save_articles(self.config.state_file, merged.articles, logger=self.log)
        except Exception as e:
            result.error = f"{type(e).__name__}: {e}"
            self.log.error("Monitoring error: %s", result.error)
        return result

    def run_forever(
        self,
        *,
        stop_event: Optional[threading.Event] = None,
        sleep: Optional[Callable[[float], None]] = None,
        max_cycles: Optional[int] = None,
    ) -> int:
        """
        Run cycles until `stop_event` is set or `max_cycles` have run.

        The wait between cycles is `stop_event.wait(interval)` unless a `sleep`
        callable is given. Returns the number of cycles run.
        """
        stop_event = stop_event or threading.Event()
        wait = sleep or stop_event.wait
        cycles = 0

        self.log.info("Starting RSS feed monitor for %s", self.config.source_url)
        while not stop_event.is_set():
            self.run_once()
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            if stop_event.is_set():
                break
            wait(self.config.interval)

        self.log.info("RSS feed monitor stopped after %d cycles", cycles)
        return cycles
