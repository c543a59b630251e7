# bendinledim/images.py
"""
Article images from Wikimedia Commons.

We want a real photo of the subject (artist on stage, festival crowd), not a
band logo or a scanned ticket, so every hit is checked by title and mime type
before its URL is used.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

import requests

from .text import collapse_ws, extract_query_from_title

log = logging.getLogger(__name__)

COMMONS_API = "https://commons.wikimedia.org/w/api.php"
UA = "bendinledim/commons-image (server)"
TIMEOUT = 8
MAX_QUERY_LEN = 120
GENERIC_QUERY = "music"
FESTIVAL_QUERY = "music festival crowd"

FESTIVAL_RE = re.compile(r"festival|konser", re.I)
BAD_TITLE_WORDS = ("logo", "ticket")
GOOD_MIMES = ("image/jpeg", "image/png")

# query prefixes that should collapse to the bare artist name
QUERY_ARTISTS = ["Taylor Swift", "Olivia Rodrigo", "Arctic Monkeys", "Phoebe Bridgers", "Billie Eilish"]


def normalize_query(query: str) -> str:
    q = (query or "").strip()
    if not q:
        return q
    if re.match(r"arktik maymunlar", q, re.I):
        return "Arctic Monkeys"
    for artist in QUERY_ARTISTS:
        if q.lower().startswith(artist.lower()):
            return artist
    if re.search(r"boygenius", q, re.I):
        return "boygenius"
    return q


def clamp_query(q: str) -> str:
    return collapse_ws(q)[:MAX_QUERY_LEN]


def is_bad_title(title: str) -> bool:
    t = (title or "").lower()
    if not t:
        return True
    return any(w in t for w in BAD_TITLE_WORDS)


STOCK_MARKERS = ("images.unsplash.com", "placeholder.jpg")


def needs_replacement(url: Optional[str]) -> bool:
    """True for an empty, stock-photo, logo or ticket image URL."""
    u = (url or "").lower()
    if not u:
        return True
    return any(m in u for m in STOCK_MARKERS) or any(w in u for w in BAD_TITLE_WORDS)


class CommonsImageResolver:
    def __init__(self, http=None, timeout: float = TIMEOUT):
        self.http = http or requests.Session()
        self.timeout = timeout

    def _get(self, params: Dict[str, Any]) -> Dict[str, Any]:
        r = self.http.get(
            COMMONS_API,
            params={**params, "format": "json", "origin": "*"},
            headers={"User-Agent": UA},
            timeout=self.timeout,
        )
        r.raise_for_status()
        return r.json() or {}

    def search(self, query: str, limit: int = 8) -> List[Dict[str, Any]]:
        data = self._get({
            "action": "query",
            "list": "search",
            "srnamespace": 6,  # File:
            "srlimit": limit,
            "srsearch": clamp_query(normalize_query(query)),
        })
        hits = (data.get("query") or {}).get("search")
        return hits if isinstance(hits, list) else []

    def image_info(self, page_ids: List[int], width: int = 1400) -> Dict[str, Any]:
        if not page_ids:
            return {}
        data = self._get({
            "action": "query",
            "prop": "imageinfo",
            "pageids": "|".join(str(p) for p in page_ids),
            "iiprop": "url|mime",
            "iiurlwidth": width,
        })
        return (data.get("query") or {}).get("pages") or {}

    def fetch_image_url(self, query: str) -> Optional[str]:
        hits = self.search(query, 8)
        page_ids = [h["pageid"] for h in hits if isinstance(h.get("pageid"), int)]
        if not page_ids:
            return None
        pages = self.image_info(page_ids, 1400)

        # keep the search ranking, most relevant first
        for hit in hits:
            pid = hit.get("pageid")
            if not pid:
                continue
            page = pages.get(str(pid)) or {}
            infos = page.get("imageinfo") or []
            if not infos:
                continue
            if is_bad_title(page.get("title") or hit.get("title") or ""):
                continue
            info = infos[0]
            if str(info.get("mime") or "") not in GOOD_MIMES:
                continue
            url = info.get("thumburl") or info.get("url")
            if isinstance(url, str) and url.startswith("https://"):
                return url
        return None

    def pick(
        self,
        title: Optional[str] = None,
        category: Optional[str] = None,
        artist: Optional[str] = None,
        image_search: Optional[str] = None,
    ) -> Optional[str]:
        for q in candidate_queries(title=title, category=category, artist=artist, image_search=image_search):
            try:
                url = self.fetch_image_url(q)
            except (requests.RequestException, ValueError, AttributeError, TypeError) as e:
                log.warning("commons lookup failed for %r: %s", q, e)
                continue
            if url:
                return url
            log.debug("no usable commons image for %r", q)
        return None


def candidate_queries(
    title: Optional[str] = None,
    category: Optional[str] = None,
    artist: Optional[str] = None,
    image_search: Optional[str] = None,
) -> List[str]:
    category = (category or "").strip()
    out: List[str] = []
    # festival/concert pieces look right with a crowd shot
    if FESTIVAL_RE.search(category):
        out.append(FESTIVAL_QUERY)
    if image_search:
        out.append(image_search)
    if artist:
        out.append(artist)
    if title:
        out.append(extract_query_from_title(title))
    if category:
        out.append(category)
    out.append(GENERIC_QUERY)
    return [q.strip() for q in out if q and q.strip()]


def pick_article_image_url(title=None, category=None, artist=None, image_search=None, resolver=None):
    resolver = resolver or CommonsImageResolver()
    return resolver.pick(title=title, category=category, artist=artist, image_search=image_search)
