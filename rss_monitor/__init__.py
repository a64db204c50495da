"""
rss_monitor

Watches a news listing page that has no feed of its own and publishes one.

Core ideas:
- Input: one HTML listing page
- Process: fetch → extract → merge with known articles (by link) → sort (newest first)
- Output: feeds/feed_<name>.xml (RSS 2.0) plus a JSON state file of every article seen

Example
-------
from rss_monitor import Monitor, load_config

monitor = Monitor(load_config())
result = monitor.run_once()
print(result.fetched, result.added, result.total)

monitor.run_forever()
"""
from .models import Article
from .config import MonitorConfig, load_config
from .dedup import MergeResult, merge_articles
from .monitor import CycleResult, Monitor

__all__ = [
    "Article",
    "MonitorConfig",
    "load_config",
    "MergeResult",
    "merge_articles",
    "CycleResult",
    "Monitor",
]
