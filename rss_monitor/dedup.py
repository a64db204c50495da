from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Sequence, Set

from .models import Article


@dataclass(frozen=True)
class MergeResult:
    """
    Outcome of merging a fresh fetch into the known articles.

    Unpacks as ``articles, is_new = merge_articles(...)``.
    """
    articles: List[Article]
    added: List[Article] = field(default_factory=list)

    @property
    def is_new(self) -> bool:
        return bool(self.added)

    def __iter__(self) -> Iterator:
        return iter((self.articles, self.is_new))


def sort_newest_first(articles: Iterable[Article]) -> List[Article]:
    # sorted() is stable with reverse=True, so equal dates keep discovery order
    return sorted(articles, key=lambda a: a.date, reverse=True)


def new_articles(existing: Iterable[Article], fetched: Iterable[Article]) -> List[Article]:
    """
    Articles from `fetched` whose link is unknown to `existing`.

    Keeps the first occurrence when a link repeats within `fetched` and preserves order.
    """
    seen: Set[str] = {a.link for a in existing}
    out: List[Article] = []
    for a in fetched:
        if a.link in seen:
            continue
        seen.add(a.link)
        out.append(a)
    return out


def merge_articles(existing: Sequence[Article], fetched: Iterable[Article]) -> MergeResult:
    """
    Append-only merge keyed by link.

    Known articles are never replaced, even if the page now shows different
    content for the same link. When nothing is new, `existing` is returned as is.
    """
    added = new_articles(existing, fetched)
    if not added:
        return MergeResult(articles=list(existing))
    return MergeResult(articles=sort_newest_first([*existing, *added]), added=added)
