import logging

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError as PydanticValidationError

from .assist import check_action, gemini_from_config, run_action, translate_rss_item
from .bootstrap import bootstrap_defaults
from .errors import ValidationError
from .generation import FlagPolicy, chat_from_config, draft_article, generate_articles
from .images import CommonsImageResolver, pick_article_image_url
from .repository import get_repository
from .rss import RSSAggregator, fetched_at
from .schemas import ArticleCreate, ArticleUpdate, CommentCreate, GenerateRequest, RSSItemIn
from .text import collapse_ws, estimate_read_time

log = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

IMPORT_CATEGORY = {"slug": "haber", "name": "Haber", "name_en": "News", "color": "#d97706"}


def _body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _parse(model, data):
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        raise ValidationError(f"Invalid field: {field}" if field else "Invalid request", details=str(e)) from e


def _flag(name):
    v = request.args.get(name)
    if v is None:
        return None
    return v.strip().lower() in ("1", "true", "yes")


# ---------- articles ----------
@api_bp.get("/articles")
def list_articles():
    result = get_repository().list_articles(
        category=request.args.get("category") or None,
        tag=request.args.get("tag") or None,
        search=request.args.get("search") or None,
        featured=_flag("featured"),
        editors_pick=_flag("editorsPick"),
        include_unpublished=bool(_flag("all")),
        page=request.args.get("page", 1, type=int),
        limit=request.args.get("limit", 10, type=int),
    )
    result["articles"] = [a.to_dict() for a in result["articles"]]
    return jsonify(result)


@api_bp.post("/articles")
def create_article():
    payload = _parse(ArticleCreate, _body())
    fields = payload.model_dump(exclude={"tag_ids"})
    if not fields["excerpt"]:
        fields["excerpt"] = collapse_ws(payload.content)[:200]
    article = get_repository().create_article(tag_ids=payload.tag_ids, **fields)
    log.info("article created: %s", article.slug)
    return jsonify(article.to_dict()), 201


@api_bp.get("/articles/<slug>")
def get_article(slug):
    return jsonify(get_repository().require_article(slug).to_dict(with_comments=True))


@api_bp.put("/articles/<slug>")
def update_article(slug):
    payload = _parse(ArticleUpdate, _body())
    fields = payload.model_dump(exclude_unset=True, exclude={"tag_ids"})
    article = get_repository().update_article(slug, fields, tag_ids=payload.tag_ids)
    return jsonify(article.to_dict())


@api_bp.delete("/articles/<slug>")
def delete_article(slug):
    get_repository().delete_article(slug)
    return jsonify({"success": True})


# ---------- taxonomy ----------
@api_bp.get("/categories")
def categories():
    return jsonify([c.to_dict(article_count=n) for c, n in get_repository().categories_with_counts()])


@api_bp.get("/tags")
def tags():
    return jsonify([t.to_dict(article_count=n) for t, n in get_repository().tags_with_counts()])


@api_bp.route("/bootstrap", methods=["GET", "POST"])
def bootstrap():
    cats, tag_rows = bootstrap_defaults(get_repository())
    return jsonify({
        "ok": True,
        "categories": [c.to_dict() for c in cats],
        "tags": [t.to_dict() for t in tag_rows],
    })


# ---------- comments ----------
@api_bp.post("/comments")
def create_comment():
    payload = _parse(CommentCreate, _body())
    comment = get_repository().add_comment(
        article_id=payload.article_id,
        author=payload.author,
        content=payload.content,
        email=payload.email,
    )
    return jsonify({"success": True, "comment": comment.to_dict()}), 201


# ---------- generation ----------
@api_bp.post("/ai-generate")
def ai_generate():
    req = _parse(GenerateRequest, _body())
    chat = chat_from_config(current_app.config)
    result = generate_articles(
        get_repository(),
        chat,
        count=req.count,
        resolver=CommonsImageResolver(),
        flags=FlagPolicy(featured=req.featured, editors_pick=req.editors_pick),
    )
    return jsonify({
        "success": True,
        "count": result.count,
        "skipped": result.skipped,
        "articles": [a.to_dict() for a in result.articles],
    })


@api_bp.get("/ai-generate")
def ai_generated_list():
    recent = get_repository().list_articles(include_unpublished=True, limit=20)["articles"]
    return jsonify({"articles": [a.to_dict() for a in recent]})


@api_bp.post("/chatgpt")
def chatgpt():
    body = _body()
    chat = chat_from_config(current_app.config, max_tokens=2000, temperature=0.7)
    draft = draft_article(chat, body.get("prompt") or "")
    return jsonify({"article": draft.model_dump(by_alias=True)})


@api_bp.post("/gemini")
def gemini():
    body = _body()
    check_action(body.get("action"), body)
    client = gemini_from_config(current_app.config)
    return jsonify({"result": run_action(client, body.get("action"), body)})


# ---------- foreign RSS ----------
@api_bp.get("/rss")
def rss_items():
    aggregator = RSSAggregator(timeout=current_app.config.get("RSS_TIMEOUT", 10))
    items = aggregator.aggregate(request.args.get("source") or None)
    return jsonify({
        "articles": [it.to_dict() for it in items],
        "sources": aggregator.source_names(),
        "fetchedAt": fetched_at(),
    })


@api_bp.post("/rss/translate")
def rss_translate():
    item = _parse(RSSItemIn, _body())
    client = gemini_from_config(current_app.config)
    return jsonify(translate_rss_item(client, item.title, item.description))


@api_bp.post("/rss/import")
def rss_import():
    item = _parse(RSSItemIn, _body())
    client = gemini_from_config(current_app.config)
    translated = translate_rss_item(client, item.title, item.description)

    repo = get_repository()
    category = repo.upsert_category(
        IMPORT_CATEGORY["slug"], IMPORT_CATEGORY["name"], IMPORT_CATEGORY["color"], IMPORT_CATEGORY["name_en"]
    )
    image_url = item.image_url or pick_article_image_url(title=item.title, category=category.name)

    content = translated["description"] or translated["title"]
    if item.link:
        content = f"{content}\n\nKaynak: {item.source or item.link} ({item.link})"
    article = repo.create_article(
        title=translated["title"],
        title_en=item.title,
        content=content,
        content_en=item.description or None,
        excerpt=collapse_ws(translated["description"])[:200],
        excerpt_en=collapse_ws(item.description)[:200] or None,
        image_url=image_url,
        read_time=estimate_read_time(content),
        published=False,
        category_id=category.id,
    )
    log.info("rss item imported as draft: %s", article.slug)
    return jsonify({"success": True, "article": article.to_dict()}), 201
