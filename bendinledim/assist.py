# bendinledim/assist.py
"""Gemini-backed writing help for the editor: translate, complete, improve, excerpt."""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

import requests

from .errors import ResponseShapeError, UpstreamConfigError, UpstreamRequestError, ValidationError

log = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"

STYLE_GUIDE = {
    "news": "haber yazısı formatında, objektif ve bilgilendirici",
    "review": "müzik inceleme formatında, detaylı ve eleştirel",
    "interview": "röportaj formatında, akıcı ve ilgi çekici",
    "opinion": "köşe yazısı formatında, kişisel ve düşündürücü",
}

RSS_TRANSLATE_TMPL = """Sen profesyonel bir müzik gazetecisisin. Aşağıdaki İngilizce müzik haberini Türkçe'ye çevir.

Kurallar:
- Doğal ve akıcı Türkçe kullan
- Sanatçı ve şarkı isimlerini orijinal İngilizce halleriyle bırak
- Müzik terminolojisini uygun Türkçe karşılıklarıyla kullan
- Sadece JSON formatında yanıt ver, başka hiçbir şey yazma

Başlık: {title}
{body}

JSON formatında yanıt ver:
{{"title": "çevrilmiş başlık", "description": "çevrilmiş içerik"}}"""

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class GeminiClient:
    def __init__(self, api_key: str, model: str = "gemini-2.5-flash", http=None, timeout: float = 60.0):
        if not api_key:
            raise UpstreamConfigError("Gemini API key not configured")
        self.api_key = api_key
        self.model = model
        self.http = http or requests.Session()
        self.timeout = timeout

    def generate(self, prompt: str) -> str:
        url = f"{GEMINI_BASE_URL}/v1beta/models/{self.model}:generateContent"
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        try:
            r = self.http.post(url, params={"key": self.api_key}, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamRequestError("Gemini API error", details=str(e)) from e
        if not r.ok:
            raise UpstreamRequestError("Gemini API error", details=r.text)
        try:
            data = r.json()
        except ValueError as e:
            raise ResponseShapeError("Empty Gemini response", raw=r.text[:2000]) from e
        return _extract_text(data)


def _extract_text(data: Dict[str, Any]) -> str:
    try:
        return data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise ResponseShapeError("Empty Gemini response", raw=json.dumps(data)[:2000]) from e


def gemini_from_config(cfg) -> GeminiClient:
    return GeminiClient(cfg.get("GEMINI_API_KEY", ""), cfg.get("GEMINI_MODEL", "gemini-2.5-flash"))


def translate_text(client, text: str, target_lang: str = "en") -> str:
    lang_name = "English" if target_lang == "en" else "Turkish"
    return client.generate(
        f"Translate the following text to {lang_name}. Only return the translated text, nothing else:\n\n{text}"
    )


def complete_content(client, partial_text: str, style: str = "news") -> str:
    guide = STYLE_GUIDE.get(style, STYLE_GUIDE["news"])
    return client.generate(
        f"Sen bir müzik gazetecisisin. Aşağıdaki yarım kalmış Türkçe metni {guide} bir şekilde tamamla. "
        f"Sadece devam eden metni yaz, baştan yazma:\n\n{partial_text}"
    )


def improve_content(client, text: str) -> str:
    return client.generate(
        "Sen bir müzik editörüsün. Aşağıdaki Türkçe metni düzelt ve iyileştir. Yazım hatalarını düzelt, "
        "cümle yapısını geliştir, ama anlamı ve tonu koru. Sadece düzeltilmiş metni döndür:\n\n" + text
    )


def generate_excerpt(client, content: str) -> str:
    return client.generate(
        f"Aşağıdaki makale içeriğinden 1-2 cümlelik kısa bir özet çıkar. Sadece özeti yaz:\n\n{content}"
    )


ACTIONS = {
    "translate": lambda c, body: translate_text(c, body.get("text") or "", body.get("targetLang") or "en"),
    "complete": lambda c, body: complete_content(c, body.get("text") or "", body.get("style") or "news"),
    "improve": lambda c, body: improve_content(c, body.get("text") or ""),
    "excerpt": lambda c, body: generate_excerpt(c, body.get("text") or ""),
}


def check_action(action: Any, body: Dict[str, Any]):
    fn = ACTIONS.get(action) if isinstance(action, str) else None
    if fn is None:
        raise ValidationError("Invalid action")
    text = body.get("text")
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("Text is required")
    return fn


def run_action(client, action: Optional[str], body: Dict[str, Any]) -> str:
    return check_action(action, body)(client, body)


def translate_rss_item(client, title: str, description: Optional[str] = None) -> Dict[str, str]:
    if not (title or "").strip():
        raise ValidationError("Title is required")
    prompt = RSS_TRANSLATE_TMPL.format(
        title=title,
        body=f"İçerik: {description}" if description else "",
    )
    text = client.generate(prompt)
    m = _JSON_OBJECT_RE.search(text or "")
    if not m:
        raise ResponseShapeError("Translation format error", raw=text)
    try:
        translated = json.loads(m.group(0))
    except json.JSONDecodeError as e:
        raise ResponseShapeError("Translation format error", details=str(e), raw=text) from e
    if not isinstance(translated, dict):
        raise ResponseShapeError("Translation format error", raw=text)
    return {
        "title": str(translated.get("title") or title),
        "description": str(translated.get("description") or description or ""),
    }
