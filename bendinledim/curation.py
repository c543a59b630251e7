# bendinledim/curation.py
"""
Home-page section curation.

A section asks for `limit` articles out of an over-fetched, newest-first
candidate list. We try to show each artist and each image at most once per
page, relaxing those rules only when the section would otherwise stay short:

  pass 1  skip seen slug, seen artist, seen image
  pass 2  skip seen slug, seen artist
  pass 3  skip seen slug

Selection is greedy in candidate order; nothing is re-ranked.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence, Set

from .text import artist_key, image_key


def _field(item: Any, *names: str) -> Any:
    for name in names:
        if isinstance(item, dict):
            if name in item:
                return item[name]
        elif hasattr(item, name):
            return getattr(item, name)
    return None


def item_keys(item: Any) -> tuple[str, str, str]:
    """(slug, artist key, image key) of an ORM article or a plain dict."""
    slug = _field(item, "slug") or ""
    title = _field(item, "title") or ""
    image = _field(item, "image_url", "imageUrl", "image")
    return slug, artist_key(title), image_key(image)


def curate(
    candidates: Sequence[Any],
    limit: int,
    seen_artists: Optional[Set[str]] = None,
    seen_images: Optional[Set[str]] = None,
) -> List[Any]:
    """Pick up to `limit` diverse items from `candidates`.

    `seen_artists` / `seen_images` carry identities already shown elsewhere on
    the page. They are only read; chain sections with `seed_keys`.
    """
    if limit is None or limit <= 0 or not candidates:
        return []

    seen_artists = set(seen_artists or ())
    seen_images = set(seen_images or ())
    keyed = [(item, *item_keys(item)) for item in candidates]
    chosen: List[Any] = []
    chosen_slugs: Set[str] = set()

    def sweep(check_artist: bool, check_image: bool):
        for item, slug, artist, image in keyed:
            if len(chosen) >= limit:
                return
            if slug in chosen_slugs:
                continue
            if check_artist and artist and artist in seen_artists:
                continue
            if check_image and image and image in seen_images:
                continue
            chosen.append(item)
            chosen_slugs.add(slug)
            if artist:
                seen_artists.add(artist)
            if image:
                seen_images.add(image)

    sweep(check_artist=True, check_image=True)
    if len(chosen) < limit:
        sweep(check_artist=True, check_image=False)
    if len(chosen) < limit:
        sweep(check_artist=False, check_image=False)
    return chosen


def seed_keys(items: Iterable[Any], seen_artists: Set[str], seen_images: Set[str]) -> None:
    """Record the identities of items already placed on the page."""
    for item in items:
        if item is None:
            continue
        _slug, artist, image = item_keys(item)
        if artist:
            seen_artists.add(artist)
        if image:
            seen_images.add(image)
