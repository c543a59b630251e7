from flask import Blueprint, Response, current_app, jsonify, request

from .curation import curate, seed_keys
from .errors import NotFoundError
from .feeds import (
    FEED_SIZE,
    article_structured_data,
    home_structured_data,
    render_robots,
    render_rss,
    render_sitemap,
)
from .repository import get_repository
from .text import time_ago

main_bp = Blueprint("main", __name__)

LATEST_SIZE = 8
PICKS_SIZE = 4
OVERFETCH = 4
POPULAR_SIZE = 6


def card(a):
    return {
        "slug": a.slug,
        "title": a.title,
        "excerpt": a.excerpt,
        "imageUrl": a.image_url or "",
        "author": a.author,
        "readTime": a.read_time,
        "category": a.category.name if a.category else None,
        "categoryColor": a.category.color if a.category else None,
        "createdAt": a.created_at.isoformat() if a.created_at else None,
        "timeAgo": time_ago(a.created_at) if a.created_at else None,
    }


def popular_categories(repo):
    """Categories with the most articles, name order on ties."""
    rows = sorted(repo.categories_with_counts(), key=lambda row: -row[1])
    return [{"name": c.name, "slug": c.slug} for c, _n in rows[:POPULAR_SIZE]]


def _site_url():
    return current_app.config["SITE_URL"]


@main_bp.get("/")
def index():
    repo = get_repository()
    hero_list = repo.recent(1, featured=True)
    hero = hero_list[0] if hero_list else None

    seen_artists, seen_images = set(), set()
    seed_keys(hero_list, seen_artists, seen_images)

    latest = curate(repo.recent(LATEST_SIZE * OVERFETCH, featured=False), LATEST_SIZE, seen_artists, seen_images)
    seed_keys(latest, seen_artists, seen_images)

    shown = {a.slug for a in latest} | {a.slug for a in hero_list}
    pick_pool = [a for a in repo.recent(PICKS_SIZE * OVERFETCH, editors_pick=True) if a.slug not in shown]
    picks = curate(pick_pool, PICKS_SIZE, seen_artists, seen_images)

    return jsonify({
        "featured": card(hero) if hero else None,
        "latest": [card(a) for a in latest],
        "editorsPicks": [card(a) for a in picks],
        "popularCategories": popular_categories(repo),
        "structuredData": home_structured_data(hero, latest, _site_url()),
    })


@main_bp.get("/haber/<slug>")
def article(slug):
    a = get_repository().get_article(slug)
    if not a or not a.published:
        raise NotFoundError("Article not found")
    data = a.to_dict(with_comments=True)
    data["structuredData"] = article_structured_data(a, _site_url())
    return jsonify(data)


@main_bp.get("/kategori/<slug>")
def category(slug):
    repo = get_repository()
    c = repo.get_category(slug)
    if not c:
        raise NotFoundError("Category not found")
    return jsonify({"category": c.to_dict(), "articles": [card(a) for a in repo.published_in_category(c)]})


@main_bp.get("/etiket/<slug>")
def tag(slug):
    repo = get_repository()
    t = repo.get_tag(slug)
    if not t:
        raise NotFoundError("Tag not found")
    return jsonify({"tag": t.to_dict(), "articles": [card(a) for a in repo.published_with_tag(t)]})


@main_bp.get("/kategoriler")
def categories():
    rows = get_repository().categories_with_counts()
    return jsonify({"categories": [c.to_dict(article_count=n) for c, n in rows]})


@main_bp.get("/kesfet")
def explore():
    repo = get_repository()
    return jsonify({
        "articles": [card(a) for a in repo.all_published()],
        "categories": [c.to_dict(article_count=n) for c, n in repo.categories_with_counts()],
    })


@main_bp.get("/arama")
def search():
    q = (request.args.get("q") or "").strip()
    results = get_repository().search(q) if q else []
    return jsonify({"q": q, "articles": [card(a) for a in results]})


@main_bp.get("/rss.xml")
def rss_xml():
    articles = get_repository().recent(FEED_SIZE)
    return Response(
        render_rss(articles, _site_url()),
        content_type="application/rss+xml; charset=utf-8",
        headers={"Cache-Control": "public, max-age=0, s-maxage=600"},
    )


@main_bp.get("/sitemap.xml")
def sitemap_xml():
    repo = get_repository()
    return Response(
        render_sitemap(repo.list_categories(), repo.all_published(), _site_url()),
        content_type="application/xml; charset=utf-8",
        headers={"Cache-Control": "public, max-age=0, s-maxage=3600"},
    )


@main_bp.get("/robots.txt")
def robots():
    return Response(
        render_robots(_site_url()),
        content_type="text/plain; charset=utf-8",
        headers={"Cache-Control": "public, max-age=0, s-maxage=86400"},
    )
