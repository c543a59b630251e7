# bendinledim/repository.py
"""
Persistence seam for articles, categories, tags and comments.

create_app() builds one ArticleRepository around the Flask-SQLAlchemy scoped
session and stores it in app.extensions["repository"]; views and scripts
reach it through get_repository() instead of importing a module global.
"""
from __future__ import annotations

import math
from typing import Any, Iterable, Optional

from flask import current_app
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload, selectinload

from .errors import NotFoundError, ValidationError
from .models import Article, ArticleTag, Category, Comment, Tag
from .text import slugify

# fields an editor may change through a partial update
UPDATABLE_FIELDS = (
    "title", "title_en", "content", "content_en", "excerpt", "excerpt_en",
    "image_url", "author", "read_time", "featured", "editors_pick",
    "published", "category_id",
)


def get_repository() -> "ArticleRepository":
    return current_app.extensions["repository"]


class ArticleRepository:
    def __init__(self, session):
        self.session = session

    # ---------- articles: reads ----------
    def _article_query(self):
        return self.session.query(Article).options(
            joinedload(Article.category),
            selectinload(Article.tags).joinedload(ArticleTag.tag),
        )

    def list_articles(
        self,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        search: Optional[str] = None,
        featured: Optional[bool] = None,
        editors_pick: Optional[bool] = None,
        include_unpublished: bool = False,
        page: int = 1,
        limit: int = 10,
    ) -> dict[str, Any]:
        page = max(1, int(page or 1))
        limit = max(1, min(100, int(limit or 10)))

        q = self._article_query()
        if not include_unpublished:
            q = q.filter(Article.published.is_(True))
        if category:
            q = q.join(Article.category).filter(Category.slug == category)
        if tag:
            q = q.filter(Article.tags.any(ArticleTag.tag.has(Tag.slug == tag)))
        if featured is not None:
            q = q.filter(Article.featured.is_(featured))
        if editors_pick is not None:
            q = q.filter(Article.editors_pick.is_(editors_pick))
        if search:
            q = q.filter(_text_match(search))

        total = q.order_by(None).count()
        items = (
            q.order_by(Article.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {
            "articles": items,
            "total": total,
            "page": page,
            "totalPages": math.ceil(total / limit),
        }

    def recent(self, limit: int, featured: Optional[bool] = None, editors_pick: Optional[bool] = None) -> list[Article]:
        q = self._article_query().filter(Article.published.is_(True))
        if featured is not None:
            q = q.filter(Article.featured.is_(featured))
        if editors_pick is not None:
            q = q.filter(Article.editors_pick.is_(editors_pick))
        return q.order_by(Article.created_at.desc()).limit(limit).all()

    def all_published(self) -> list[Article]:
        return (
            self._article_query()
            .filter(Article.published.is_(True))
            .order_by(Article.created_at.desc())
            .all()
        )

    def search(self, query: str) -> list[Article]:
        query = (query or "").strip()
        if not query:
            return []
        return (
            self._article_query()
            .filter(Article.published.is_(True), _text_match(query))
            .order_by(Article.created_at.desc())
            .all()
        )

    def get_article(self, slug: str) -> Optional[Article]:
        return self._article_query().filter(Article.slug == slug).first()

    def require_article(self, slug: str) -> Article:
        a = self.get_article(slug)
        if a is None:
            raise NotFoundError("Article not found")
        return a

    def find_by_title_fragment(self, fragment: str) -> Optional[Article]:
        if not fragment:
            return None
        return self.session.query(Article).filter(Article.title.contains(fragment, autoescape=True)).first()

    def slug_exists(self, slug: str) -> bool:
        return self.session.query(Article.id).filter(Article.slug == slug).first() is not None

    def unique_slug(self, title: str) -> str:
        """Slug for title, suffixed -1, -2, ... until no article uses it."""
        base = slugify(title) or "haber"
        slug, counter = base, 1
        while self.slug_exists(slug):
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    def missing_images(self, include_all: bool = False) -> list[Article]:
        q = self.session.query(Article).filter(Article.published.is_(True))
        if not include_all:
            q = q.filter(or_(Article.image_url.is_(None), Article.image_url == ""))
        return q.order_by(Article.created_at.desc()).all()

    def count_articles(self) -> int:
        return self.session.query(Article).count()

    def empty_content(self) -> list[Article]:
        return self.session.query(Article).filter(or_(Article.content.is_(None), Article.content == "")).all()

    # ---------- articles: writes ----------
    def create_article(self, tag_ids: Optional[Iterable[str]] = None, **fields) -> Article:
        if not (fields.get("title") or "").strip():
            raise ValidationError("Title is required")
        if not (fields.get("content") or "").strip():
            raise ValidationError("Content is required")
        if not fields.get("category_id") or self.session.get(Category, fields["category_id"]) is None:
            raise ValidationError("A valid category_id is required")

        if not fields.get("slug"):
            fields["slug"] = self.unique_slug(fields["title"])
        article = Article(**fields)
        if tag_ids:
            article.tags = self._tag_links(tag_ids)
        self.session.add(article)
        self._commit()
        return article

    def update_article(self, slug: str, fields: dict[str, Any], tag_ids: Optional[Iterable[str]] = None) -> Article:
        article = self.require_article(slug)
        if "category_id" in fields and self.session.get(Category, fields["category_id"]) is None:
            raise ValidationError("A valid category_id is required")
        links = self._tag_links(tag_ids) if tag_ids is not None else None
        for name in UPDATABLE_FIELDS:
            if name in fields:
                setattr(article, name, fields[name])
        if links is not None:
            # full replacement of the tag set
            article.tags = links
        self._commit()
        return article

    def delete_article(self, slug: str) -> None:
        article = self.require_article(slug)
        self.session.delete(article)
        self._commit()

    def _tag_links(self, tag_ids: Iterable[str]) -> list[ArticleTag]:
        links = []
        for tid in dict.fromkeys(tag_ids):
            tag = self.session.get(Tag, tid)
            if tag is None:
                raise ValidationError(f"Unknown tag id: {tid}")
            links.append(ArticleTag(tag=tag))
        return links

    def _commit(self):
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise ValidationError("Constraint violation", details=str(e.orig)) from e

    # ---------- categories & tags ----------
    def categories_with_counts(self) -> list[tuple[Category, int]]:
        rows = (
            self.session.query(Category, func.count(Article.id))
            .outerjoin(Article, Article.category_id == Category.id)
            .group_by(Category.id)
            .order_by(Category.name.asc())
            .all()
        )
        return [(c, n) for c, n in rows]

    def tags_with_counts(self) -> list[tuple[Tag, int]]:
        rows = (
            self.session.query(Tag, func.count(ArticleTag.article_id))
            .outerjoin(ArticleTag, ArticleTag.tag_id == Tag.id)
            .group_by(Tag.id)
            .order_by(Tag.name.asc())
            .all()
        )
        return [(t, n) for t, n in rows]

    def get_category(self, slug: str) -> Optional[Category]:
        return self.session.query(Category).filter(Category.slug == slug).first()

    def get_tag(self, slug: str) -> Optional[Tag]:
        return self.session.query(Tag).filter(Tag.slug == slug).first()

    def list_categories(self) -> list[Category]:
        return self.session.query(Category).order_by(Category.slug.asc()).all()

    def published_in_category(self, category: Category) -> list[Article]:
        return (
            self._article_query()
            .filter(Article.category_id == category.id, Article.published.is_(True))
            .order_by(Article.created_at.desc())
            .all()
        )

    def published_with_tag(self, tag: Tag) -> list[Article]:
        return (
            self._article_query()
            .filter(Article.published.is_(True), Article.tags.any(ArticleTag.tag_id == tag.id))
            .order_by(Article.created_at.desc())
            .all()
        )

    def ensure_category(self, category_id: str, name: str, color: str, name_en: Optional[str] = None) -> Category:
        """Create the category with this id unless it already exists."""
        cat = self.session.get(Category, category_id)
        if cat is None:
            cat = Category(id=category_id, name=name, name_en=name_en, slug=slugify(name), color=color)
            self.session.add(cat)
            self._commit()
        return cat

    def upsert_category(self, slug: str, name: str, color: str, name_en: Optional[str] = None) -> Category:
        cat = self.session.query(Category).filter(or_(Category.slug == slug, Category.name == name)).first()
        if cat is None:
            cat = Category(slug=slug, name=name, name_en=name_en, color=color)
            self.session.add(cat)
        else:
            cat.slug, cat.name, cat.name_en, cat.color = slug, name, name_en, color
        self._commit()
        return cat

    def upsert_tag(self, slug: str, name: str) -> Tag:
        tag = self.session.query(Tag).filter(or_(Tag.slug == slug, Tag.name == name)).first()
        if tag is None:
            tag = Tag(slug=slug, name=name)
            self.session.add(tag)
        else:
            tag.slug, tag.name = slug, name
        self._commit()
        return tag

    # ---------- comments ----------
    def add_comment(self, article_id: str, author: str, content: str, email: Optional[str] = None) -> Comment:
        if not (author or "").strip():
            raise ValidationError("Author name is required")
        if not (content or "").strip():
            raise ValidationError("Comment content is required")
        if len(content) > 5000:
            raise ValidationError("Comment is too long (max 5000 characters)")
        if not article_id or self.session.get(Article, article_id) is None:
            raise NotFoundError("Article not found")

        comment = Comment(
            article_id=article_id,
            author=author.strip(),
            email=(email or "").strip() or None,
            content=content.strip(),
            approved=False,
        )
        self.session.add(comment)
        self._commit()
        return comment


def _text_match(q: str):
    return or_(
        Article.title.contains(q, autoescape=True),
        Article.content.contains(q, autoescape=True),
        Article.excerpt.contains(q, autoescape=True),
    )
