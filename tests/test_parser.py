"""Tests for rss_monitor.parser module."""

import logging
from datetime import datetime, timezone
from unittest.mock import Mock, patch

import pytest

from rss_monitor.config import ListingSelectors
from rss_monitor.exceptions import ParseError
from rss_monitor.parser import parse_date_label, parse_listing
from tests.helpers import make_card, make_listing

BASE = "https://www.anthropic.com"
NOW = datetime(2024, 6, 1, 12, 30, 0, tzinfo=timezone.utc)


class TestParseListing:
    def test_extracts_all_fields(self) -> None:
        html = make_listing(make_card("/news/claude-3", "Introducing Claude 3", "Mar 4, 2024", "Announcements"))
        [article] = parse_listing(html, base_url=BASE, now=NOW)
        assert article.title == "Introducing Claude 3"
        assert article.link == "https://www.anthropic.com/news/claude-3"
        assert article.date == datetime(2024, 3, 4, tzinfo=timezone.utc)
        assert article.category == "Announcements"
        assert article.description == "Introducing Claude 3"

    def test_keeps_page_order(self) -> None:
        html = make_listing(
            make_card("/news/b", "Second", "Jan 2, 2024"),
            make_card("/news/a", "First", "Jan 1, 2024"),
        )
        titles = [a.title for a in parse_listing(html, base_url=BASE, now=NOW)]
        assert titles == ["Second", "First"]

    def test_absolute_link_passes_through(self) -> None:
        html = make_listing(make_card("https://example.com/post", "Elsewhere"))
        [article] = parse_listing(html, base_url=BASE, now=NOW)
        assert article.link == "https://example.com/post"

    def test_drops_card_without_title(self) -> None:
        html = make_listing(
            '<a class="PostCard_post-card__z_Sqq" href="/news/untitled"><div>No heading</div></a>',
            make_card("/news/ok", "Titled"),
        )
        articles = parse_listing(html, base_url=BASE, now=NOW)
        assert [a.link for a in articles] == ["https://www.anthropic.com/news/ok"]

    def test_drops_card_with_blank_title(self) -> None:
        html = make_listing(make_card("/news/blank", "   "))
        assert parse_listing(html, base_url=BASE, now=NOW) == []

    def test_drops_card_without_href(self) -> None:
        html = make_listing(
            '<a class="PostCard_post-card__z_Sqq">'
            '<h3 class="PostCard_post-heading__Ob1pu">Orphan</h3></a>'
        )
        assert parse_listing(html, base_url=BASE, now=NOW) == []

    def test_unparseable_date_falls_back_to_now(self) -> None:
        html = make_listing(make_card("/news/x", "Bad date", "Sometime soon"))
        [article] = parse_listing(html, base_url=BASE, now=NOW)
        assert article.date == NOW

    def test_missing_date_falls_back_to_now(self) -> None:
        html = make_listing(
            '<a class="PostCard_post-card__z_Sqq" href="/news/x">'
            '<h3 class="PostCard_post-heading__Ob1pu">No date</h3></a>'
        )
        [article] = parse_listing(html, base_url=BASE, now=NOW)
        assert article.date == NOW

    def test_default_now_is_current_utc_time(self) -> None:
        html = make_listing(make_card("/news/x", "Bad date", "not a date"))
        before = datetime.now(timezone.utc)
        [article] = parse_listing(html, base_url=BASE)
        after = datetime.now(timezone.utc)
        assert before <= article.date <= after
        assert article.date.tzinfo is not None

    def test_missing_category_uses_fallback(self) -> None:
        html = make_listing(
            '<a class="PostCard_post-card__z_Sqq" href="/news/x">'
            '<h3 class="PostCard_post-heading__Ob1pu">No label</h3>'
            '<div class="PostList_post-date__djrOA">Jan 5, 2024</div></a>'
        )
        [article] = parse_listing(html, base_url=BASE, now=NOW)
        assert article.category == "News"

    def test_takes_first_category_label(self) -> None:
        html = make_listing(
            '<a class="PostCard_post-card__z_Sqq" href="/news/x">'
            '<h3 class="PostCard_post-heading__Ob1pu">Two labels</h3>'
            '<span class="text-label">Policy</span><span class="text-label">Research</span></a>'
        )
        [article] = parse_listing(html, base_url=BASE, now=NOW)
        assert article.category == "Policy"

    def test_decodes_entities_in_title(self) -> None:
        html = make_listing(make_card("/news/x", "R&amp;D &lt;update&gt;"))
        [article] = parse_listing(html, base_url=BASE, now=NOW)
        assert article.title == "R&D <update>"

    def test_nested_markup_in_title_keeps_word_spacing(self) -> None:
        html = make_listing(make_card("/news/claude-3", "Introducing <em>Claude</em> 3"))
        [article] = parse_listing(html, base_url=BASE, now=NOW)
        assert article.title == "Introducing Claude 3"
        assert article.description == "Introducing Claude 3"

    def test_title_whitespace_is_collapsed(self) -> None:
        html = make_listing(make_card("/news/x", "\n  Claude\n    for   Work  "))
        [article] = parse_listing(html, base_url=BASE, now=NOW)
        assert article.title == "Claude for Work"

    def test_date_label_split_across_elements(self) -> None:
        html = make_listing(make_card("/news/x", "Split", "<span>Mar 4</span>, <span>2024</span>"))
        [article] = parse_listing(html, base_url=BASE, now=NOW)
        assert article.date == datetime(2024, 3, 4, tzinfo=timezone.utc)

    def test_page_without_cards_yields_nothing(self) -> None:
        assert parse_listing("<html><body><p>Maintenance</p></body></html>", base_url=BASE, now=NOW) == []

    def test_custom_selectors(self) -> None:
        selectors = ListingSelectors(card="article a", title="h2", date="time", category="em")
        html = '<article><a href="/p/1"><h2>Custom</h2><time>Feb 29, 2024</time></a></article>'
        [article] = parse_listing(html, base_url=BASE, selectors=selectors, now=NOW)
        assert article.title == "Custom"
        assert article.date == datetime(2024, 2, 29, tzinfo=timezone.utc)
        assert article.category == "News"

    @patch("rss_monitor.parser.BeautifulSoup")
    def test_parser_failure_raises_parse_error(self, mock_soup) -> None:
        mock_soup.side_effect = ValueError("broken markup")
        with pytest.raises(ParseError):
            parse_listing("<html>", base_url=BASE, now=NOW)


class TestParseDateLabel:
    def test_single_digit_day(self) -> None:
        assert parse_date_label("Mar 4, 2024") == datetime(2024, 3, 4, tzinfo=timezone.utc)

    def test_strips_whitespace(self) -> None:
        assert parse_date_label("  Dec 25, 2023 \n") == datetime(2023, 12, 25, tzinfo=timezone.utc)

    def test_rejects_other_formats(self) -> None:
        with pytest.raises(ValueError):
            parse_date_label("2024-03-04")


class TestParserLogging:
    def test_summary_goes_to_given_logger(self) -> None:
        logger = Mock(spec=logging.Logger)
        parse_listing(make_listing(make_card("/news/a", "A")), base_url=BASE, now=NOW, logger=logger)
        logger.info.assert_called_once_with("Parsed %d articles from %d listing cards", 1, 1)

    def test_bad_date_warning_goes_to_given_logger(self) -> None:
        logger = Mock(spec=logging.Logger)
        parse_listing(make_listing(make_card("/news/a", "A", "soon")), base_url=BASE, now=NOW, logger=logger)
        assert logger.warning.call_count == 1
        assert logger.warning.call_args.args[1:] == ("soon", "A")

    def test_module_logger_is_the_default(self, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="rss_monitor.parser"):
            parse_listing(make_listing(make_card("/news/a", "A")), base_url=BASE, now=NOW)
        assert "Parsed 1 articles from 1 listing cards" in caplog.text
