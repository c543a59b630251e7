# bendinledim/text.py
"""
Small pure helpers over titles, slugs and URLs.

The title heuristics (subject extraction, artist key) are tuned to the
Turkish headlines this site publishes; they are grouping signals and not an
entity resolver.
"""
from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Optional

from slugify import slugify as _slugify

# Artists that show up often enough that a plain substring check beats the
# title decomposition below.
KNOWN_ARTISTS = [
    "Taylor Swift",
    "Olivia Rodrigo",
    "Arctic Monkeys",
    "Phoebe Bridgers",
    "Billie Eilish",
    "boygenius",
    "Tame Impala",
    "The National",
    "Lana Del Rey",
    "Fontaines D.C.",
    "Black Country New Road",
    "Wet Leg",
    "Fleet Foxes",
    "Bon Iver",
    "Radiohead",
]

# Turkish renderings seen in generated titles -> canonical name
ARTIST_ALIASES = {
    "arktik maymunlar": "Arctic Monkeys",
}

_TR_SUFFIXES = ("in", "ın", "un", "ün", "dan", "den", "tan", "ten", "nun", "nün", "nin", "nın")
_TR_POSSESSIVE_RE = re.compile(
    r"^(.*?)(?:" + "|".join(q + s for q in ("'", "’") for s in _TR_SUFFIXES) + r")\b",
    re.IGNORECASE,
)
_EN_POSSESSIVE_RE = re.compile(r"^(.*?)'\s+")
_WS_RE = re.compile(r"\s+")


def slugify(text: str) -> str:
    """URL-safe slug; Turkish letters are transliterated (ğ->g, ı->i, ş->s...)."""
    return _slugify(text or "")


def title_subject(title: str) -> str:
    """Best-effort "who/what is this about" chunk of a headline.

    "Taylor Swift'in İndie Dönüşü"  -> "Taylor Swift"
    "Arctic Monkeys' The Car"       -> "Arctic Monkeys"
    "Glastonbury 2024: Kadro"       -> "Glastonbury 2024"
    """
    t = (title or "").strip()
    if not t:
        return ""

    m = _TR_POSSESSIVE_RE.match(t)
    if m and m.group(1).strip():
        return m.group(1).strip()

    m = _EN_POSSESSIVE_RE.match(t)
    if m and m.group(1).strip():
        return m.group(1).strip()

    chunk = t.split(":")[0].split("-")[0].strip()
    if len(chunk) >= 3:
        return chunk
    return t


def extract_query_from_title(title: str) -> str:
    return title_subject(title) or "music"


def known_artist_in(text: str) -> Optional[str]:
    low = (text or "").lower()
    if not low:
        return None
    for alias, name in ARTIST_ALIASES.items():
        if alias in low:
            return name
    for name in KNOWN_ARTISTS:
        if name.lower() in low:
            return name
    return None


def artist_key(title: str) -> str:
    """Lower-cased grouping key used to keep one artist per page section.

    An empty title gives an empty key, which never counts as a collision.
    """
    t = (title or "").strip()
    if not t:
        return ""
    name = known_artist_in(t)
    if name:
        return name.lower()
    return title_subject(t).lower()


def image_key(url: Optional[str]) -> str:
    u = (url or "").strip()
    if not u:
        return ""
    return u.split("#", 1)[0].split("?", 1)[0]


def collapse_ws(s: str) -> str:
    return _WS_RE.sub(" ", s or "").strip()


def estimate_read_time(content: str) -> int:
    return math.ceil(len(content or "") / 1000) or 5


def time_ago(when: datetime, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    seconds = int((now - when).total_seconds())

    if seconds < 60:
        return "az önce"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes} dakika önce"
    hours = minutes // 60
    if hours < 24:
        return f"{hours} saat önce"
    days = hours // 24
    if days < 7:
        return f"{days} gün önce"
    weeks = days // 7
    if weeks < 4:
        return f"{weeks} hafta önce"
    months = max(1, days // 30)
    if months < 12:
        return f"{months} ay önce"
    return f"{months // 12} yıl önce"
