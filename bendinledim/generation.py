# bendinledim/generation.py
"""
AI drafting of music-news articles:
- asks OpenAI Chat for a JSON array of drafts (title, excerpt, content,
  category, artist, year, imageSearch),
- keeps only the elements that pass ArticleDraft validation,
- maps the category to a stable id (creating it when missing),
- drops near-duplicates by title prefix, picks a unique slug,
- finds a Commons photo and saves the article as published.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from .errors import ResponseShapeError, UpstreamConfigError, UpstreamRequestError, ValidationError
from .images import CommonsImageResolver
from .models import Article
from .schemas import SINGLE_DRAFT_JSON_SCHEMA, ArticleDraft, SingleArticleDraft
from .text import estimate_read_time

log = logging.getLogger(__name__)

DEFAULT_AUTHOR = "Editör Ekibi"
FALLBACK_CATEGORY = "Haberler"
DUPLICATE_PREFIX_LEN = 30

CATEGORY_IDS = {
    "Yeni Albümler": "cat1",
    "İncelemeler": "cat2",
    "Röportajlar": "cat3",
    "Konserler": "cat4",
    "Festival": "cat5",
    "Haberler": "cat6",
}

CATEGORY_COLORS = {
    "Yeni Albümler": "#8b5cf6",
    "İncelemeler": "#ec4899",
    "Röportajlar": "#3b82f6",
    "Konserler": "#22c55e",
    "Festival": "#f59e0b",
    "Haberler": "#d97706",
}

SYSTEM_PROMPT = (
    "Sen profesyonel bir müzik gazetecisi ve müzik tarihi uzmanısın. Yazıların kesinlikle doğru, "
    "bilgilendirici, yaratıcı ve SEO uyumlu olmalı. Gerçek müzik olaylarını anlatıyorsun."
)

USER_TMPL = """Sen bir müzik tarihi uzmanı ve gazetecisisin. 2020-2025 yılları arasında yabancı indie/alternatif/rock müzik dünyasında yaşanan GERÇEK ve EN ÖNEMLİ olayları derle.

Her haber için şunları oluştur (TÜMÜ TÜRKÇE):
1. title: Başlık (60-90 karakter, TÜRKÇE)
2. excerpt: Kısa özet (2-3 cümle, TÜRKÇE)
3. content: Detaylı içerik (400-600 kelime, gazetecilik kalitesinde, paragraflar arasında boş satır, TÜRKÇE)
4. category: Kategori ("Yeni Albümler", "İncelemeler", "Röportajlar", "Konserler", "Festival", veya "Haberler")
5. artist: Sanatçı/Band ismi (orijinal İngilizce)
6. year: Yıl (2020-2025)
7. imageSearch: Görsel arama kelimeleri (İngilizce)

MUTLAKA JSON formatında yanıt ver, sadece array döndür:
[
  {{
    "title": "...",
    "excerpt": "...",
    "content": "...",
    "category": "...",
    "artist": "...",
    "year": 202X,
    "imageSearch": "..."
  }}
]

Gerçek ve önemli olaylardan bazıları (bunları ve benzerlerini kullan):
- Arctic Monkeys'in "The Car" albümü (2022)
- Taylor Swift'in indie/folk dönüşü - folklore ve evermore (2020)
- Phoebe Bridgers'in "Punisher" albümü (2020)
- Boygenius süper grubunun kuruluşu ve albümü (2023)
- Tame Impala "The Slow Rush" (2020)
- Billie Eilish'in "Happier Than Ever" albümü (2021)
- Olivia Rodrigo'nun "SOUR" patlaması (2021)
- Pandemiden sonra festival dönüşleri (2022-2023)
- Fontaines D.C., Black Country New Road, Wet Leg gibi yeni nesil indie rock grupları

Her haber gerçek bir olayı anlatmalı ve TÜRKÇE olmalı. Toplam {count} adet haber oluştur."""

DRAFT_SYSTEM_PROMPT = (
    "Sen profesyonel bir muzik gazetecisi ve editorusun. Turkce yaz. Sadece istenen JSON'u dondur."
)

DRAFT_USER_TMPL = "\n".join([
    "Asagidaki prompt'a gore tek bir muzik haberi/icerigi olustur.",
    "",
    "Kurallar:",
    "- Turkce yaz.",
    "- Baslik SEO uyumlu, akici ve abartisiz olsun.",
    "- Icerik paragraflara ayrilsin, okumasi kolay olsun.",
    "- categorySlug su degerlerden biri olmali: haber, tur, inceleme, roportaj, ekipman, derinlemesine.",
    "- tags alanina 0-8 arasi etiket ekle (kisa kelimeler).",
    "",
    "PROMPT: {prompt}",
])


# ───────────────────────────────────────────────────────────────────────────
# OpenAI Chat
def _sanitize_api_key(k: str) -> str:
    k = (k or "").strip()
    for ch in ('“', '”', '„', '«', '»', "'", '"', '`'):
        k = k.replace(ch, "")
    k = k.replace("\u00A0", "").replace(" ", "")
    if not k.isascii():
        raise UpstreamConfigError("OPENAI_API_KEY contains non-ASCII characters")
    return k


class OpenAIChat:
    def __init__(self, api_key: str, model: str = "gpt-4o-mini", max_tokens: int = 4000, temperature: float = 0.8):
        if not api_key:
            raise UpstreamConfigError("OpenAI API key not configured")
        from openai import OpenAI
        self.client = OpenAI(api_key=_sanitize_api_key(api_key))
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    def complete(self, system: str, user: str, response_format: Optional[Dict[str, Any]] = None) -> str:
        import openai

        kwargs: Dict[str, Any] = {}
        if response_format:
            kwargs["response_format"] = response_format
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "system", "content": system}, {"role": "user", "content": user}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                **kwargs,
            )
        except openai.APIStatusError as e:
            raise UpstreamRequestError("OpenAI API request failed", details=e.response.text) from e
        except openai.APIError as e:
            raise UpstreamRequestError("OpenAI API request failed", details=str(e)) from e
        return (resp.choices[0].message.content or "").strip()


def chat_from_config(cfg, max_tokens: int = 4000, temperature: float = 0.8) -> OpenAIChat:
    return OpenAIChat(cfg.get("OPENAI_API_KEY", ""), cfg.get("OPENAI_MODEL", "gpt-4o-mini"), max_tokens, temperature)


# ───────────────────────────────────────────────────────────────────────────
# Model output parsing
def extract_json_array(text: str) -> str:
    """First balanced [...] span of text, string literals respected."""
    start = (text or "").find("[")
    if start == -1:
        raise ResponseShapeError("Failed to parse AI response", raw=text)

    depth, in_str, esc = 0, False, False
    for i in range(start, len(text)):
        ch = text[i]
        if in_str:
            if esc:
                esc = False
            elif ch == "\\":
                esc = True
            elif ch == '"':
                in_str = False
            continue
        if ch == '"':
            in_str = True
        elif ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]

    end = text.rfind("]")
    if end > start:
        return text[start:end + 1]
    raise ResponseShapeError("Failed to parse AI response", raw=text)


def parse_drafts(text: str) -> List[ArticleDraft]:
    span = extract_json_array(text)
    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        raise ResponseShapeError("Failed to parse AI response", details=str(e), raw=text) from e
    if not isinstance(data, list):
        raise ResponseShapeError("Failed to parse AI response", raw=text)

    drafts = []
    for i, item in enumerate(data):
        try:
            drafts.append(ArticleDraft.model_validate(item))
        except PydanticValidationError as e:
            log.info("discarding draft #%d: %d validation error(s)", i, e.error_count())
    return drafts


# ───────────────────────────────────────────────────────────────────────────
# Bulk generation
@dataclass
class FlagPolicy:
    """Merchandising flags applied to every saved draft."""

    featured: bool = False
    editors_pick: bool = False


@dataclass
class GenerationResult:
    articles: List[Article] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.articles)


def resolve_category(repository, name: str):
    if name not in CATEGORY_IDS:
        name = FALLBACK_CATEGORY
    return repository.ensure_category(CATEGORY_IDS[name], name, CATEGORY_COLORS.get(name, "#d97706"))


def save_draft(repository, draft: ArticleDraft, resolver, flags: FlagPolicy) -> Optional[Article]:
    category = resolve_category(repository, draft.category)

    existing = repository.find_by_title_fragment(draft.title[:DUPLICATE_PREFIX_LEN])
    if existing is not None:
        log.info("article already exists: %s", draft.title)
        return None

    slug = repository.unique_slug(draft.title)
    image_url = resolver.pick(
        title=draft.title,
        category=category.name,
        artist=draft.artist,
        image_search=draft.image_search,
    )
    return repository.create_article(
        title=draft.title,
        slug=slug,
        content=draft.content,
        excerpt=draft.excerpt,
        image_url=image_url,
        author=DEFAULT_AUTHOR,
        read_time=estimate_read_time(draft.content),
        featured=flags.featured,
        editors_pick=flags.editors_pick,
        published=True,
        category_id=category.id,
    )


def generate_articles(repository, chat, count: int = 5, resolver=None, flags: Optional[FlagPolicy] = None) -> GenerationResult:
    resolver = resolver or CommonsImageResolver()
    flags = flags or FlagPolicy()

    raw = chat.complete(SYSTEM_PROMPT, USER_TMPL.format(count=count))
    drafts = parse_drafts(raw)
    if not drafts:
        raise ResponseShapeError("No articles generated", raw=raw)

    result = GenerationResult()
    for draft in drafts:
        saved = save_draft(repository, draft, resolver, flags)
        if saved is None:
            result.skipped.append(draft.title)
        else:
            result.articles.append(saved)
    log.info("generated %d article(s), skipped %d duplicate(s)", result.count, len(result.skipped))
    return result


# ───────────────────────────────────────────────────────────────────────────
# One-off draft for the editor
def draft_article(chat, prompt: str) -> SingleArticleDraft:
    prompt = (prompt or "").strip()
    if not prompt:
        raise ValidationError("Missing prompt")

    raw = chat.complete(
        DRAFT_SYSTEM_PROMPT,
        DRAFT_USER_TMPL.format(prompt=prompt),
        response_format={"type": "json_schema", "json_schema": SINGLE_DRAFT_JSON_SCHEMA},
    )
    if not raw:
        raise ResponseShapeError("Empty OpenAI response")
    try:
        return SingleArticleDraft.model_validate_json(raw)
    except PydanticValidationError as e:
        raise ResponseShapeError("Failed to parse OpenAI JSON", details=str(e), raw=raw) from e
