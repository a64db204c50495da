from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .config import ListingSelectors
from .exceptions import ParseError
from .models import Article, DEFAULT_CATEGORY
from .utils import to_utc, utcnow

module_logger = logging.getLogger(__name__)

# Listing labels look like "Mar 4, 2024"
DATE_FORMAT = "%b %d, %Y"


def _text(card, selector: str) -> Optional[str]:
    elem = card.select_one(selector)
    if elem is None:
        return None
    # Collapse whitespace across nested inline elements: "<h3>A <em>B</em></h3>" -> "A B"
    text = " ".join(elem.get_text().split())
    return text or None


def parse_date_label(label: str) -> datetime:
    """Parse a listing date label as UTC midnight. Raises ValueError on mismatch."""
    return datetime.strptime(label.strip(), DATE_FORMAT).replace(tzinfo=timezone.utc)


def parse_card(
    card,
    *,
    base_url: str,
    selectors: ListingSelectors,
    now: datetime,
    logger: Optional[logging.Logger] = None,
) -> Optional[Article]:
    """
    Map one listing card to an Article.

    Returns None for cards that have no title or no link; such cards are not articles.
    """
    log = logger or module_logger
    title = _text(card, selectors.title)
    if not title:
        log.debug("Skipping listing card without a title")
        return None

    href = (card.get("href") or "").strip()
    if not href:
        log.debug("Skipping listing card without a link: %s", title)
        return None
    link = urljoin(base_url, href)

    date = now
    label = _text(card, selectors.date)
    if label:
        try:
            date = parse_date_label(label)
        except ValueError:
            log.warning("Could not parse date %r for article: %s", label, title)

    category = _text(card, selectors.category) or DEFAULT_CATEGORY

    return Article(
        title=title,
        link=link,
        date=date,
        category=category,
        description=title,
    )


def parse_listing(
    html: str,
    *,
    base_url: str,
    selectors: Optional[ListingSelectors] = None,
    now: Optional[datetime] = None,
    logger: Optional[logging.Logger] = None,
) -> List[Article]:
    """
    Extract articles from listing page markup, in page order.

    `now` is the fallback date for cards without a usable date label; it defaults
    to the current UTC time, taken once per call. Log records go to `logger`,
    or to this module's logger when none is given.

    Raises ParseError if the markup cannot be parsed at all.
    """
    log = logger or module_logger
    selectors = selectors or ListingSelectors()
    now = to_utc(now) if now is not None else utcnow()

    try:
        soup = BeautifulSoup(html, "html.parser")
        cards = soup.select(selectors.card)
    except Exception as e:
        raise ParseError(f"Could not parse listing markup ({e})") from e

    articles: List[Article] = []
    for card in cards:
        article = parse_card(card, base_url=base_url, selectors=selectors, now=now, logger=log)
        if article is not None:
            articles.append(article)

    log.info("Parsed %d articles from %d listing cards", len(articles), len(cards))
    return articles
