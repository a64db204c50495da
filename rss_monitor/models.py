from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

DEFAULT_CATEGORY = "News"


@dataclass(frozen=True)
class Article:
    """
    A single article seen on the listing page.

    `link` is the identity key: two articles with the same link are the same
    article, whatever their other fields say. `date` is always timezone-aware UTC.
    """
    title: str
    link: str
    date: datetime
    category: str = DEFAULT_CATEGORY
    description: str = ""
