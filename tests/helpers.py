"""Builders for listing markup and articles used across tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from rss_monitor.models import Article

CARD = """
<a class="PostCard_post-card__z_Sqq" href="{href}">
  <h3 class="PostCard_post-heading__Ob1pu">{title}</h3>
  <div class="PostList_post-date__djrOA">{date}</div>
  <span class="text-label">{category}</span>
</a>
"""


def make_card(href: str, title: str, date: str = "Jan 1, 2024", category: str = "Product") -> str:
    return CARD.format(href=href, title=title, date=date, category=category)


def make_listing(*cards: str) -> str:
    return "<html><body><main>" + "".join(cards) + "</main></body></html>"


def make_article(link: str, day: int = 1, title: Optional[str] = None) -> Article:
    title = title or f"Article {link}"
    return Article(
        title=title,
        link=link,
        date=datetime(2024, 1, day, tzinfo=timezone.utc),
        category="News",
        description=title,
    )
