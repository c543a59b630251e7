# python -m bendinledim.scripts.backfill_images [--force] [--limit N] [--dry-run]
"""Give published articles a Wikimedia Commons image where they lack a real one."""
import argparse
import time

from bendinledim import create_app
from bendinledim.images import CommonsImageResolver, needs_replacement
from bendinledim.repository import get_repository

PAUSE = 0.3


def backfill(repo, resolver, force=False, limit=0, dry_run=False, pause=PAUSE):
    updated = matched = 0
    for a in repo.missing_images(include_all=force):
        if limit and matched >= limit:
            break
        if not needs_replacement(a.image_url):
            continue
        url = resolver.pick(title=a.title, category=a.category.name if a.category else None)
        if not url:
            print(f"[skip] {a.title}")
            continue
        print(f"{'[dry]' if dry_run else '[ok] '} {a.title}\n  {a.image_url or '-'}\n  -> {url}")
        matched += 1
        if dry_run:
            continue
        repo.update_article(a.slug, {"image_url": url})
        updated += 1
        if pause:
            time.sleep(pause)
    return updated


def main(argv=None):
    p = argparse.ArgumentParser(description=__doc__)
    p.add_argument("--force", action="store_true", help="also replace stock/logo/ticket images")
    p.add_argument("--limit", type=int, default=0)
    p.add_argument("--dry-run", action="store_true")
    args = p.parse_args(argv)

    app = create_app()
    with app.app_context():
        n = backfill(get_repository(), CommonsImageResolver(), force=args.force, limit=args.limit, dry_run=args.dry_run)
        print(f"Done. Updated {n} article(s)")


if __name__ == "__main__":
    main()
