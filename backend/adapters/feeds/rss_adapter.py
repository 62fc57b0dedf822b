"""
RSS/Atom feed reader for the admin import tab.

Feeds are fetched with httpx, optionally through a public CORS proxy
(``?url=`` returning ``{"contents": "..."}``), and parsed with feedparser.
Only each item's title and plain-text description are kept.
"""

import base64
import logging
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

import feedparser
import httpx
from bs4 import BeautifulSoup

from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)

MIN_ITEMS = 1
MAX_ITEMS = 50

_SPACE_RE = re.compile(r"\s+")


# Custom Exceptions
class FeedError(Exception):
    """Base exception for feed import errors."""

    pass


class FeedValidationError(FeedError):
    """Raised before any network call for unusable input."""

    pass


class FeedFetchError(FeedError):
    """Raised when the feed (or proxy) cannot be downloaded."""

    pass


class FeedParseError(FeedError):
    """Raised when the downloaded markup is not a usable feed."""

    pass


@dataclass
class RssItem:
    """A feed entry reduced to what the import tab needs."""

    id: str
    title: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "title": self.title, "description": self.description}


def clamp_item_count(count: int) -> int:
    return max(MIN_ITEMS, min(MAX_ITEMS, int(count)))


def _plain_text(value: Optional[str]) -> str:
    if not value:
        return ""
    text = BeautifulSoup(value, "html.parser").get_text(separator=" ")
    return _SPACE_RE.sub(" ", text).strip()


def parse_feed(markup: str, limit: int) -> list[RssItem]:
    """
    Parse feed markup into at most *limit* items.

    Raises:
        FeedParseError: markup is not a feed or contains no items
    """
    parsed = feedparser.parse(markup)
    entries = parsed.entries or []
    if not entries:
        if parsed.bozo:
            reason = getattr(parsed, "bozo_exception", None) or "malformed markup"
            raise FeedParseError(f"Failed to parse feed: {reason}")
        raise FeedParseError("Feed contains no items")

    items = []
    for index, entry in enumerate(entries[:limit]):
        items.append(
            RssItem(
                id=f"rss-{index}",
                title=_plain_text(entry.get("title")) or "Untitled",
                description=_plain_text(entry.get("summary") or entry.get("description")),
            )
        )
    return items


class RssFeedReader:
    """Downloads and parses feeds for import."""

    def __init__(
        self,
        proxy_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.proxy_url = proxy_url if proxy_url is not None else (settings.rss_proxy_url or "")
        self.timeout = timeout or float(settings.rss_timeout)
        self._transport = transport

    @staticmethod
    def validate_url(url: str) -> str:
        url = (url or "").strip()
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise FeedValidationError("Feed URL must be an http(s) address")
        return url

    async def fetch(self, url: str, count: int = 5) -> list[RssItem]:
        """
        Fetch *url* and return up to *count* items (clamped to 1-50).

        Raises:
            FeedValidationError: bad URL
            FeedFetchError: network or proxy failure
            FeedParseError: unusable markup
        """
        url = self.validate_url(url)
        limit = clamp_item_count(count)
        markup = await self._download(url)
        items = parse_feed(markup, limit)
        logger.info("Imported %d feed items from %s", len(items), url)
        return items

    async def _download(self, url: str) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                if self.proxy_url:
                    response = await client.get(self.proxy_url, params={"url": url})
                    response.raise_for_status()
                    return self._unwrap_proxy_contents(response.json())
                response = await client.get(url)
                response.raise_for_status()
                return response.text
        except httpx.HTTPStatusError as e:
            logger.warning("Feed fetch returned HTTP %s for %s", e.response.status_code, url)
            raise FeedFetchError(
                f"Failed to fetch feed (HTTP {e.response.status_code}). Ensure the URL is valid."
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Feed fetch failed for %s: %s", url, e)
            raise FeedFetchError("Failed to fetch feed. Ensure the URL is valid.") from e
        except ValueError as e:
            raise FeedFetchError("Feed proxy returned an invalid response") from e

    @staticmethod
    def _unwrap_proxy_contents(payload: object) -> str:
        contents = payload.get("contents") if isinstance(payload, dict) else None
        if not isinstance(contents, str) or not contents:
            raise FeedFetchError("Feed proxy returned no contents")
        # Binary responses come back as a base64 data URL
        if contents.startswith("data:") and ";base64," in contents:
            encoded = contents.split(";base64,", 1)[1]
            return base64.b64decode(encoded).decode("utf-8", errors="replace")
        return contents
