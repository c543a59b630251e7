# bendinledim/feeds.py
"""RSS 2.0, sitemap, robots.txt and JSON-LD for the public site."""
from __future__ import annotations

import html
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Iterable, List, Optional

SITE_NAME = "Ben Dinledim"
SITE_DESCRIPTION = (
    "Yabancı indie müzik dünyasından en güncel haberler, albüm incelemeleri ve röportajlar."
)
FEED_SIZE = 30


def abs_url(base: str, pathname: str) -> str:
    base = (base or "").rstrip("/")
    path = pathname if (pathname or "").startswith("/") else f"/{pathname or ''}"
    return f"{base}{path}"


def article_path(slug: str) -> str:
    return f"/haber/{slug}"


def esc(s) -> str:
    return html.escape(str(s or ""), quote=True)


def cdata(s) -> str:
    # "]]>" would close the section early
    return str(s or "").replace("]]>", "]]&gt;")


def _utc(dt: Optional[datetime]) -> datetime:
    dt = dt or datetime.now(timezone.utc)
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def rfc822(dt: Optional[datetime]) -> str:
    return format_datetime(_utc(dt), usegmt=True)


def iso(dt: Optional[datetime]) -> str:
    return _utc(dt).isoformat()


def render_rss(articles: List, site_url: str) -> str:
    last_build = rfc822(articles[0].updated_at if articles else None)
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0">',
        "  <channel>",
        f"    <title>{esc(SITE_NAME)}</title>",
        f"    <link>{esc(site_url)}</link>",
        f"    <description>{esc(SITE_DESCRIPTION)}</description>",
        "    <language>tr</language>",
        f"    <lastBuildDate>{esc(last_build)}</lastBuildDate>",
    ]
    for a in articles:
        link = abs_url(site_url, article_path(a.slug))
        lines += [
            "    <item>",
            f"      <title><![CDATA[{cdata(a.title)}]]></title>",
            f"      <link>{esc(link)}</link>",
            f'      <guid isPermaLink="true">{esc(link)}</guid>',
            f"      <pubDate>{esc(rfc822(a.created_at))}</pubDate>",
            f"      <description><![CDATA[{cdata(a.excerpt)}]]></description>",
            f"      <category><![CDATA[{cdata(a.category.name if a.category else '')}]]></category>",
        ]
        if a.image_url:
            lines.append(f'      <enclosure url="{esc(a.image_url)}" type="image/jpeg" />')
        lines.append("    </item>")
    lines += ["  </channel>", "</rss>", ""]
    return "\n".join(lines)


def render_sitemap(categories: Iterable, articles: Iterable, site_url: str) -> str:
    urls = [
        (site_url.rstrip("/"), None),
        (abs_url(site_url, "/kesfet"), None),
        (abs_url(site_url, "/kategoriler"), None),
    ]
    urls += [(abs_url(site_url, f"/kategori/{c.slug}"), None) for c in categories]
    urls += [(abs_url(site_url, article_path(a.slug)), iso(a.updated_at)) for a in articles]

    out = ['<?xml version="1.0" encoding="UTF-8"?>', '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">']
    for loc, lastmod in urls:
        out.append("  <url>")
        out.append(f"    <loc>{esc(loc)}</loc>")
        if lastmod:
            out.append(f"    <lastmod>{esc(lastmod)}</lastmod>")
        out.append("  </url>")
    out += ["</urlset>", ""]
    return "\n".join(out)


def render_robots(site_url: str) -> str:
    return "\n".join([
        "User-agent: *",
        "Allow: /",
        f"Sitemap: {site_url.rstrip('/')}/sitemap.xml",
        "",
    ])


def _news_article(a, site_url: str) -> dict:
    return {
        "@type": "NewsArticle",
        "headline": a.title,
        "url": abs_url(site_url, article_path(a.slug)),
        "image": a.image_url,
        "datePublished": iso(a.created_at),
        "author": {"@type": "Person", "name": a.author},
    }


def home_structured_data(hero, latest: List, site_url: str) -> dict:
    items = [hero] if hero is not None else []
    items += list(latest)
    return {
        "@context": "https://schema.org",
        "@type": "ItemList",
        "itemListElement": [
            {"@type": "ListItem", "position": i + 1, "item": _news_article(a, site_url)}
            for i, a in enumerate(items)
        ],
    }


def article_structured_data(a, site_url: str) -> dict:
    data = _news_article(a, site_url)
    del data["url"]
    data.update({
        "@context": "https://schema.org",
        "description": a.excerpt,
        "dateModified": iso(a.updated_at),
        "publisher": {
            "@type": "Organization",
            "name": SITE_NAME,
            "logo": {"@type": "ImageObject", "url": abs_url(site_url, "/logo.png")},
        },
        "mainEntityOfPage": {"@type": "WebPage", "@id": abs_url(site_url, article_path(a.slug))},
        "articleSection": a.category.name if a.category else None,
        "keywords": ", ".join(t.name for t in a.tag_list),
    })
    return data
