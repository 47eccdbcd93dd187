"""
News sources for the sentiment step.

Every source implements ``fetch_articles() -> list[Article]``:
  StaticNewsSource  — fixed market headlines (no network)
  RssNewsSource     — feedparser over configurable FX news feeds
"""
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional, Protocol

import feedparser

from libs.config import Settings
from libs.domain_models.analysis import Article

logger = logging.getLogger(__name__)


class NewsSource(Protocol):
    def fetch_articles(self) -> list[Article]:
        ...


STATIC_ARTICLES = (
    Article(
        title="Market Update: EUR/USD Shows Strong Momentum",
        description="The EUR/USD pair has shown strong momentum today amid positive economic indicators.",
        published_at="2026-02-19T10:00:00Z",
        source="Financial Times",
    ),
    Article(
        title="Cryptocurrency Markets Volatile After Regulatory Announcement",
        description="Major cryptocurrencies experience volatility following new regulatory guidelines.",
        published_at="2026-02-19T09:30:00Z",
        source="Bloomberg",
    ),
)


class StaticNewsSource:
    """Serves a fixed article list; the default until a news API is wired in."""

    def __init__(self, articles: Optional[list[Article]] = None):
        self._articles = list(STATIC_ARTICLES if articles is None else articles)

    def fetch_articles(self) -> list[Article]:
        return list(self._articles)


def _parse_pub_date(entry) -> Optional[datetime]:
    """Try to parse published date from an RSS entry."""
    published = getattr(entry, "published", None)
    if not published:
        return None
    try:
        parsed = parsedate_to_datetime(published)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _feed_name(feed, url: str) -> str:
    return feed.get("feed", {}).get("title") or url


def parse_feed(url: str) -> list[Article]:
    """Parse a single RSS feed. Unreachable or malformed feeds yield no articles."""
    feed = feedparser.parse(url)
    if feed.bozo and not feed.entries:
        logger.warning("Feed %s unusable: %s", url, feed.get("bozo_exception"))
        return []

    source = _feed_name(feed, url)
    articles = []
    for entry in feed.entries:
        pub_date = _parse_pub_date(entry)
        articles.append(Article(
            title=getattr(entry, "title", "") or "",
            description=getattr(entry, "summary", "") or "",
            published_at=pub_date.isoformat() if pub_date else None,
            source=source,
        ))
    return articles


class RssNewsSource:
    """Aggregates several RSS feeds, newest first."""

    def __init__(self, feeds: list[str], limit: int = 50):
        self.feeds = list(feeds)
        self.limit = limit

    def fetch_articles(self) -> list[Article]:
        articles: list[Article] = []
        for url in self.feeds:
            articles.extend(parse_feed(url))
        articles.sort(key=lambda a: a.published_at or "", reverse=True)
        logger.info("Fetched %d articles from %d feeds", len(articles), len(self.feeds))
        return articles[:self.limit]


def build_news_source(settings: Settings) -> NewsSource:
    if settings.news_source == "rss":
        return RssNewsSource(settings.news_feeds)
    return StaticNewsSource()
