"""
Durable storage of every article seen so far, as a JSON array on disk.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from dateutil.parser import isoparse

from .exceptions import PublishError, StateCorruptError
from .models import Article, DEFAULT_CATEGORY
from .utils import atomic_write_bytes, to_utc, utcnow

module_logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def article_to_dict(article: Article) -> Dict[str, Any]:
    return {
        "title": article.title,
        "link": article.link,
        "date": to_utc(article.date).isoformat(),
        "category": article.category,
        "description": article.description,
    }


def _parse_stored_date(value: Any, now: datetime) -> datetime:
    if isinstance(value, str) and value.strip():
        try:
            return to_utc(isoparse(value.strip()))
        except (ValueError, OverflowError):
            pass
    return now


def article_from_dict(
    record: Dict[str, Any],
    *,
    now: Optional[datetime] = None,
    logger: Optional[logging.Logger] = None,
) -> Optional[Article]:
    """
    Rebuild an Article from a stored record.

    Returns None when the record has no usable link or title. A date that does not
    parse is replaced by `now` instead of dropping the record.
    """
    link = record.get("link")
    title = record.get("title")
    if not isinstance(link, str) or not link.strip():
        return None
    if not isinstance(title, str) or not title.strip():
        return None

    now = now or utcnow()
    date = _parse_stored_date(record.get("date"), now)
    if date is now:
        log = logger or module_logger
        log.warning("Invalid stored date %r for %s, using current time", record.get("date"), link)

    category = record.get("category")
    description = record.get("description")
    return Article(
        title=title,
        link=link,
        date=date,
        category=category if isinstance(category, str) and category else DEFAULT_CATEGORY,
        description=description if isinstance(description, str) else title,
    )


def read_state(path: PathLike, *, logger: Optional[logging.Logger] = None) -> List[Article]:
    """
    Load the state file.

    Returns [] when the file does not exist. Raises StateCorruptError when it
    exists but is not a JSON array.
    """
    path = Path(path)
    if not path.exists():
        return []

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise StateCorruptError(f"Unreadable state file: {path} ({e})") from e

    if not isinstance(data, list):
        raise StateCorruptError(f"State file does not hold a JSON array: {path}")

    log = logger or module_logger
    now = utcnow()
    articles: List[Article] = []
    seen: Set[str] = set()
    for record in data:
        article = article_from_dict(record, now=now, logger=log) if isinstance(record, dict) else None
        if article is None:
            log.warning("Skipping malformed state record: %r", record)
            continue
        if article.link in seen:
            continue
        seen.add(article.link)
        articles.append(article)
    return articles


def load_articles(path: PathLike, *, logger: Optional[logging.Logger] = None) -> List[Article]:
    """Like read_state, but a corrupt file means starting fresh rather than failing."""
    log = logger or module_logger
    try:
        return read_state(path, logger=log)
    except StateCorruptError as e:
        log.error("Error loading state: %s - Starting fresh", e)
        return []


def write_state(path: PathLike, articles: Iterable[Article]) -> int:
    """
    Atomically replace the state file with `articles`.

    Returns the number of records written. Raises PublishError on failure.
    """
    records = [article_to_dict(a) for a in articles]
    payload = json.dumps(records, ensure_ascii=False, indent=2).encode("utf-8")
    try:
        atomic_write_bytes(path, payload)
    except OSError as e:
        raise PublishError(f"Could not write state file: {path} ({e})") from e
    return len(records)


def save_articles(
    path: PathLike,
    articles: Iterable[Article],
    *,
    logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Persist `articles`, logging instead of raising on failure.

    Returns True if the file was written.
    """
    log = logger or module_logger
    try:
        count = write_state(path, articles)
    except PublishError as e:
        log.error("Error saving state: %s", e)
        return False
    log.info("Saved %d articles to state file", count)
    return True
