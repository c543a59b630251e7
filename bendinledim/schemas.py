# bendinledim/schemas.py
from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

DRAFT_CATEGORY_SLUGS = ("haber", "tur", "inceleme", "roportaj", "ekipman", "derinlemesine")


class ArticleDraft(BaseModel):
    """One element of the array the model returns for bulk generation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: StrictStr
    excerpt: StrictStr
    content: StrictStr
    category: StrictStr
    artist: Optional[str] = None
    year: Optional[Union[int, str]] = None
    image_search: Optional[str] = Field(default=None, alias="imageSearch")

    @field_validator("artist", "image_search", mode="before")
    @classmethod
    def _loose_text(cls, v):
        if v is None:
            return None
        if isinstance(v, (list, tuple)):
            v = " ".join(str(x) for x in v)
        s = str(v).strip()
        return s or None

    @field_validator("year", mode="before")
    @classmethod
    def _loose_year(cls, v):
        return v if isinstance(v, (int, str)) and not isinstance(v, bool) else None


class SingleArticleDraft(BaseModel):
    """Strict-schema answer for a one-off draft built from an editor prompt."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: str = Field(min_length=15, max_length=120)
    excerpt: str = Field(min_length=40, max_length=220)
    content: str = Field(min_length=800)
    category_slug: Literal["haber", "tur", "inceleme", "roportaj", "ekipman", "derinlemesine"] = Field(alias="categorySlug")
    tags: List[str] = Field(default_factory=list, max_length=8)

    @field_validator("tags")
    @classmethod
    def _tag_lengths(cls, v):
        for t in v:
            if not 2 <= len(t) <= 40:
                raise ValueError(f"tag length out of range: {t!r}")
        return v


# JSON schema sent to OpenAI's structured output for SingleArticleDraft
SINGLE_DRAFT_JSON_SCHEMA = {
    "name": "music_article",
    "strict": True,
    "schema": {
        "type": "object",
        "additionalProperties": False,
        "properties": {
            "title": {"type": "string", "minLength": 15, "maxLength": 120},
            "excerpt": {"type": "string", "minLength": 40, "maxLength": 220},
            "content": {"type": "string", "minLength": 800},
            "categorySlug": {"type": "string", "enum": list(DRAFT_CATEGORY_SLUGS)},
            "tags": {
                "type": "array",
                "maxItems": 8,
                "items": {"type": "string", "minLength": 2, "maxLength": 40},
            },
        },
        "required": ["title", "excerpt", "content", "categorySlug", "tags"],
    },
}


class GenerateRequest(BaseModel):
    count: int = Field(default=5, ge=1, le=20)
    featured: bool = False
    editors_pick: bool = Field(default=False, alias="editorsPick")

    model_config = ConfigDict(populate_by_name=True)


class ArticleCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    category_id: str = Field(alias="categoryId", min_length=1)
    excerpt: str = ""
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    author: str = "Editör Ekibi"
    read_time: int = Field(default=5, alias="readTime", ge=1)
    featured: bool = False
    editors_pick: bool = Field(default=False, alias="editorsPick")
    published: bool = False
    title_en: Optional[str] = Field(default=None, alias="titleEn")
    content_en: Optional[str] = Field(default=None, alias="contentEn")
    excerpt_en: Optional[str] = Field(default=None, alias="excerptEn")
    tag_ids: Optional[List[str]] = Field(default=None, alias="tagIds")


class ArticleUpdate(BaseModel):
    """Partial update: only the keys present in the body are applied."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = None
    excerpt: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    author: Optional[str] = None
    read_time: Optional[int] = Field(default=None, alias="readTime", ge=1)
    featured: Optional[bool] = None
    editors_pick: Optional[bool] = Field(default=None, alias="editorsPick")
    published: Optional[bool] = None
    category_id: Optional[str] = Field(default=None, alias="categoryId")
    title_en: Optional[str] = Field(default=None, alias="titleEn")
    content_en: Optional[str] = Field(default=None, alias="contentEn")
    excerpt_en: Optional[str] = Field(default=None, alias="excerptEn")
    tag_ids: Optional[List[str]] = Field(default=None, alias="tagIds")


class CommentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    article_id: str = Field(alias="articleId")
    author: str
    content: str
    email: Optional[str] = None


class RSSItemIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(min_length=1)
    description: str = ""
    link: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    source: Optional[str] = None
