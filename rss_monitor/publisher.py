"""
Render articles as an RSS 2.0 document and publish it under feeds/.

Documents are built with ElementTree, which takes care of escaping, and written
with an atomic replace so the HTTP server never serves a half-written file.
"""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from datetime import datetime
from email.utils import format_datetime
from pathlib import Path
from typing import Iterable, Optional, Union

from .config import FeedMeta
from .exceptions import PublishError
from .models import Article
from .utils import atomic_write_bytes, to_utc, utcnow, xml_safe

module_logger = logging.getLogger(__name__)

ATOM_NS = "http://www.w3.org/2005/Atom"
CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"
DC_NS = "http://purl.org/dc/elements/1.1/"
RSS_DOCS = "https://validator.w3.org/feed/docs/rss2.html"

ET.register_namespace("atom", ATOM_NS)
ET.register_namespace("content", CONTENT_NS)
ET.register_namespace("dc", DC_NS)

PathLike = Union[str, Path]


def _rfc822(dt: datetime) -> str:
    return format_datetime(to_utc(dt), usegmt=True)


def _sub(parent: ET.Element, tag: str, text: Optional[str] = None, **attrib: str) -> ET.Element:
    elem = ET.SubElement(parent, tag, attrib)
    if text is not None:
        elem.text = xml_safe(text)
    return elem


def _add_item(channel: ET.Element, article: Article) -> None:
    item = _sub(channel, "item")
    _sub(item, "title", article.title)
    _sub(item, "link", article.link)
    _sub(item, "guid", article.link)
    _sub(item, "pubDate", _rfc822(article.date))
    _sub(item, "description", article.description)
    _sub(item, f"{{{CONTENT_NS}}}encoded", article.description)
    if article.category:
        _sub(item, "category", article.category)


def build_feed(
    articles: Iterable[Article],
    feed_name: str,
    meta: Optional[FeedMeta] = None,
    *,
    updated: Optional[datetime] = None,
) -> ET.Element:
    """
    Build the <rss> element for `articles`, keeping their order.

    Callers pass articles already sorted newest first.
    """
    meta = meta or FeedMeta()
    updated = updated or utcnow()

    rss = ET.Element("rss", {"version": "2.0"})
    channel = _sub(rss, "channel")
    _sub(channel, "title", meta.title)
    _sub(channel, "link", meta.link)
    _sub(channel, "description", meta.description)
    _sub(channel, "lastBuildDate", _rfc822(updated))
    _sub(channel, "docs", RSS_DOCS)
    _sub(channel, "generator", meta.generator)
    _sub(channel, "language", meta.language)
    _sub(channel, "copyright", meta.copyright)
    _sub(channel, f"{{{DC_NS}}}creator", meta.author)

    image = _sub(channel, "image")
    _sub(image, "title", meta.title)
    _sub(image, "url", meta.image)
    _sub(image, "link", meta.link)

    _sub(
        channel,
        f"{{{ATOM_NS}}}link",
        href=meta.feed_link(feed_name),
        rel="self",
        type="application/rss+xml",
    )

    for article in articles:
        _add_item(channel, article)
    return rss


def render_rss(
    articles: Iterable[Article],
    feed_name: str,
    meta: Optional[FeedMeta] = None,
    *,
    updated: Optional[datetime] = None,
) -> bytes:
    rss = build_feed(articles, feed_name, meta, updated=updated)
    return ET.tostring(rss, encoding="utf-8", xml_declaration=True)


def feed_path(feeds_dir: PathLike, feed_name: str) -> Path:
    return Path(feeds_dir) / f"feed_{feed_name}.xml"


def publish_feed(
    articles: Iterable[Article],
    feed_name: str,
    feeds_dir: PathLike,
    meta: Optional[FeedMeta] = None,
    *,
    logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Render and atomically write `feeds_dir/feed_<feed_name>.xml`.

    Raises PublishError if the document cannot be rendered or written.
    """
    target = feed_path(feeds_dir, feed_name)
    try:
        document = render_rss(articles, feed_name, meta)
        target.parent.mkdir(parents=True, exist_ok=True)
        atomic_write_bytes(target, document)
    except (OSError, ValueError, TypeError) as e:
        raise PublishError(f"Could not publish feed {feed_name!r} to {target} ({e})") from e

    (logger or module_logger).info("Successfully saved RSS feed to %s", target)
    return target


def read_feed(feeds_dir: PathLike, feed_name: str) -> Optional[bytes]:
    """Current bytes of the published feed, or None if it has not been generated yet."""
    try:
        return feed_path(feeds_dir, feed_name).read_bytes()
    except FileNotFoundError:
        return None
