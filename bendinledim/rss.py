"""Foreign music-news RSS aggregation for the import screen."""

from __future__ import annotations

import asyncio
import calendar
import logging
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import List, Optional

import feedparser
import httpx

log = logging.getLogger(__name__)

UA = "BenDinledim/1.0 (Music News Aggregator)"

RSS_FEEDS = [
    {"name": "Pitchfork", "url": "https://pitchfork.com/feed/feed-news/rss"},
    {"name": "NME", "url": "https://www.nme.com/news/music/feed"},
    {"name": "Consequence of Sound", "url": "https://consequence.net/feed/"},
    {"name": "Stereogum", "url": "https://www.stereogum.com/feed/"},
]

_TAG_RE = re.compile(r"<[^>]+>")
_IMG_RE = re.compile(r"<img[^>]+src=[\"']([^\"']+)[\"']", re.I)


@dataclass
class RSSItem:
    title: str
    link: str
    description: str
    pubDate: str
    source: str
    imageUrl: Optional[str] = None
    published_ts: float = 0.0

    def to_dict(self):
        out = asdict(self)
        out.pop("published_ts")
        return out


def _entry_image(entry) -> Optional[str]:
    for key in ("media_content", "media_thumbnail"):
        for media in entry.get(key) or []:
            if media.get("url"):
                return media["url"]
    for enc in entry.get("enclosures") or []:
        href = enc.get("href") or enc.get("url")
        if href and str(enc.get("type") or "image").startswith("image"):
            return href
    html = entry.get("summary") or ""
    for content in entry.get("content") or []:
        html += content.get("value") or ""
    m = _IMG_RE.search(html)
    return m.group(1) if m else None


def parse_items(xml: str, source_name: str) -> List[RSSItem]:
    feed = feedparser.parse(xml)
    items = []
    for entry in feed.entries:
        title = _TAG_RE.sub("", entry.get("title") or "").strip()
        if not title:
            continue
        description = _TAG_RE.sub("", entry.get("summary") or entry.get("description") or "").strip()
        parsed = entry.get("published_parsed") or entry.get("updated_parsed")
        items.append(RSSItem(
            title=title,
            link=(entry.get("link") or "").strip(),
            description=description[:300],
            pubDate=entry.get("published") or entry.get("updated") or "",
            source=source_name,
            imageUrl=_entry_image(entry),
            published_ts=float(calendar.timegm(parsed)) if parsed else 0.0,
        ))
    return items


class RSSAggregator:
    """Fetch every configured feed at once; give up on stragglers after `timeout` seconds."""

    def __init__(self, feeds=None, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.feeds = feeds if feeds is not None else RSS_FEEDS
        self.timeout = timeout
        self.transport = transport

    async def fetch_feed(self, client: httpx.AsyncClient, feed) -> List[RSSItem]:
        try:
            response = await client.get(feed["url"])
            response.raise_for_status()
            return parse_items(response.text, feed["name"])
        except httpx.HTTPError as e:
            log.warning("rss feed %s failed: %s", feed["name"], e)
        except Exception as e:
            log.warning("rss feed %s unusable: %r", feed["name"], e)
        return []

    async def fetch_all(self, source: Optional[str] = None) -> List[RSSItem]:
        feeds = self.feeds
        if source:
            feeds = [f for f in feeds if f["name"].lower() == source.lower()]
        if not feeds:
            return []

        async with httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": UA},
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            tasks = [asyncio.ensure_future(self.fetch_feed(client, f)) for f in feeds]
            done, pending = await asyncio.wait(tasks, timeout=self.timeout)
            for task in pending:
                task.cancel()
            if pending:
                log.warning("rss fan-out budget hit, %d feed(s) dropped", len(pending))
                await asyncio.gather(*pending, return_exceptions=True)

        items: List[RSSItem] = []
        for task in done:
            items.extend(task.result())
        items.sort(key=lambda it: it.published_ts, reverse=True)
        return items

    def aggregate(self, source: Optional[str] = None) -> List[RSSItem]:
        return asyncio.run(self.fetch_all(source))

    def source_names(self) -> List[str]:
        return [f["name"] for f in self.feeds]


def fetched_at() -> str:
    return datetime.now(timezone.utc).isoformat()
