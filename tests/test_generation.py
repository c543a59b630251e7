import json

import httpx
import openai
import pytest

from bendinledim.errors import ResponseShapeError, UpstreamConfigError, UpstreamRequestError, ValidationError
from bendinledim.generation import (
    FlagPolicy,
    OpenAIChat,
    draft_article,
    extract_json_array,
    generate_articles,
    parse_drafts,
)


class FakeChat:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def complete(self, system, user, response_format=None):
        self.calls.append({"system": system, "user": user, "response_format": response_format})
        return self.reply


class FakeResolver:
    def __init__(self, url="https://upload.test/img.jpg"):
        self.url = url
        self.calls = []

    def pick(self, title=None, category=None, artist=None, image_search=None):
        self.calls.append({"title": title, "category": category, "artist": artist, "image_search": image_search})
        return self.url


def _draft(title, category="Yeni Albümler", **extra):
    d = {"title": title, "excerpt": "Kısa özet", "content": "İçerik " * 300, "category": category}
    d.update(extra)
    return d


def test_extract_json_array_handles_prose_and_brackets_in_strings():
    text = 'Elbette! İşte liste:\n[{"title": "A [canlı]", "x": [1, 2]}]\nİyi okumalar.'
    assert json.loads(extract_json_array(text)) == [{"title": "A [canlı]", "x": [1, 2]}]


def test_extract_json_array_without_array_raises_with_raw():
    with pytest.raises(ResponseShapeError) as exc:
        extract_json_array("üzgünüm, yapamam")
    assert exc.value.raw == "üzgünüm, yapamam"


def test_parse_drafts_discards_malformed_entries():
    raw = json.dumps([
        _draft("Geçerli Başlık", artist=["Wet", "Leg"], year=2023),
        {"title": "Eksik alanlar"},
        {"title": 5, "excerpt": "x", "content": "y", "category": "Festival"},
        "metin",
    ])
    drafts = parse_drafts(raw)
    assert [d.title for d in drafts] == ["Geçerli Başlık"]
    assert drafts[0].artist == "Wet Leg"
    assert drafts[0].year == 2023


def test_generate_saves_drafts_with_flags_and_images(repo):
    chat = FakeChat(json.dumps([
        _draft("Wet Leg'in İkinci Albümü Geliyor", artist="Wet Leg", imageSearch="Wet Leg live"),
        _draft("Glastonbury 2024 Kadrosu Açıklandı", category="Festival"),
        _draft("Bilinmeyen Kategori Haberi", category="Magazin"),
    ]))
    resolver = FakeResolver()

    result = generate_articles(repo, chat, count=3, resolver=resolver, flags=FlagPolicy(featured=True))

    assert result.count == 3
    assert "Toplam 3 adet" in chat.calls[0]["user"]
    by_title = {a.title: a for a in result.articles}
    first = by_title["Wet Leg'in İkinci Albümü Geliyor"]
    assert first.slug == "wet-leg-in-ikinci-albumu-geliyor"
    assert first.published is True
    assert first.featured is True
    assert first.editors_pick is False
    assert first.image_url == "https://upload.test/img.jpg"
    assert first.read_time == 3
    assert first.category.id == "cat1"
    assert by_title["Glastonbury 2024 Kadrosu Açıklandı"].category.id == "cat5"
    assert by_title["Bilinmeyen Kategori Haberi"].category.name == "Haberler"
    assert resolver.calls[0]["artist"] == "Wet Leg"
    assert resolver.calls[0]["image_search"] == "Wet Leg live"


def test_generate_defaults_to_no_flags(repo):
    chat = FakeChat(json.dumps([_draft("Fleet Foxes Sürpriz Konser Verdi")]))
    result = generate_articles(repo, chat, resolver=FakeResolver())
    a = result.articles[0]
    assert (a.featured, a.editors_pick) == (False, False)


def test_generate_skips_title_prefix_duplicates(repo):
    title = "Phoebe Bridgers Yeni Şarkısını Paylaştı ve Turne Tarihlerini Duyurdu"
    generate_articles(repo, FakeChat(json.dumps([_draft(title)])), resolver=FakeResolver())

    again = FakeChat(json.dumps([_draft(title[:40] + " (Güncellendi)"), _draft("Bon Iver Geri Döndü")]))
    result = generate_articles(repo, again, resolver=FakeResolver())

    assert [a.title for a in result.articles] == ["Bon Iver Geri Döndü"]
    assert result.skipped == [title[:40] + " (Güncellendi)"]


def test_generate_disambiguates_slugs(repo, add_article):
    add_article("Yeni Albüm", slug="yeni-album")
    add_article("Başka", slug="yeni-album-1")
    # the prefix check looks at titles, not slugs
    result = generate_articles(repo, FakeChat(json.dumps([_draft("Yeni albüm!")])), resolver=FakeResolver())
    assert result.articles[0].slug == "yeni-album-2"


def test_generate_reports_empty_result(repo):
    with pytest.raises(ResponseShapeError, match="No articles generated"):
        generate_articles(repo, FakeChat('[{"title": "yarım"}]'), resolver=FakeResolver())


def test_generate_reports_unparseable_output(repo):
    with pytest.raises(ResponseShapeError) as exc:
        generate_articles(repo, FakeChat("Maalesef."), resolver=FakeResolver())
    assert exc.value.raw == "Maalesef."


def test_draft_article_validates_structured_answer():
    answer = {
        "title": "Tame Impala'dan Yeni Dönem",
        "excerpt": "Kevin Parker yeni albümün ilk şarkısını yayınladı ve turneyi duyurdu.",
        "content": "Paragraf. " * 100,
        "categorySlug": "haber",
        "tags": ["psikedelik", "Tame Impala"],
    }
    chat = FakeChat(json.dumps(answer))
    draft = draft_article(chat, "Tame Impala yeni şarkı")
    assert draft.category_slug == "haber"
    assert draft.tags == ["psikedelik", "Tame Impala"]
    assert chat.calls[0]["response_format"]["type"] == "json_schema"


def test_draft_article_rejects_bad_shape_and_blank_prompt():
    with pytest.raises(ValidationError):
        draft_article(FakeChat("{}"), "   ")
    with pytest.raises(ResponseShapeError):
        draft_article(FakeChat('{"title": "kısa"}'), "bir şey yaz")
    with pytest.raises(ResponseShapeError, match="Empty OpenAI response"):
        draft_article(FakeChat(""), "bir şey yaz")


def test_openai_chat_requires_key():
    with pytest.raises(UpstreamConfigError):
        OpenAIChat("")


def failing_openai_chat(monkeypatch, status=429, body="quota"):
    """A real OpenAIChat whose completions endpoint answers with an error status."""
    chat = OpenAIChat("sk-test")
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(status, text=body, request=request)

    def create(**kwargs):
        raise openai.APIStatusError("upstream error", response=response, body=None)

    monkeypatch.setattr(chat.client.chat.completions, "create", create)
    return chat


def test_openai_error_status_attaches_upstream_body(monkeypatch):
    chat = failing_openai_chat(monkeypatch)
    with pytest.raises(UpstreamRequestError) as exc:
        chat.complete("system", "user")
    assert exc.value.details == "quota"
    assert exc.value.status_code == 500
