import requests

from bendinledim.images import (
    CommonsImageResolver,
    candidate_queries,
    clamp_query,
    needs_replacement,
    normalize_query,
)


class FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")

    def json(self):
        return self._payload


class FakeCommons:
    """Answers list=search and prop=imageinfo from canned tables keyed by query."""

    def __init__(self, hits=None, pages=None, fail=()):
        self.hits = hits or {}
        self.pages = pages or {}
        self.fail = set(fail)
        self.searches = []

    def get(self, url, params=None, headers=None, timeout=None):
        assert headers["User-Agent"]
        if params.get("list") == "search":
            q = params["srsearch"]
            self.searches.append(q)
            if q in self.fail:
                raise requests.ConnectionError("boom")
            return FakeResponse({"query": {"search": self.hits.get(q, [])}})
        ids = params["pageids"].split("|")
        return FakeResponse({"query": {"pages": {i: self.pages[i] for i in ids if i in self.pages}}})


def _page(title, mime="image/jpeg", thumb="https://upload.test/thumb.jpg"):
    return {"title": title, "imageinfo": [{"mime": mime, "thumburl": thumb, "url": thumb}]}


def test_candidate_queries_priority():
    qs = candidate_queries(
        title="Wet Leg'in Festival Performansı",
        category="Festival",
        artist="Wet Leg",
        image_search="Wet Leg live",
    )
    assert qs == ["music festival crowd", "Wet Leg live", "Wet Leg", "Wet Leg", "Festival", "music"]


def test_candidate_queries_minimal():
    assert candidate_queries() == ["music"]


def test_normalize_and_clamp():
    assert normalize_query("Arktik Maymunlar konseri") == "Arctic Monkeys"
    assert normalize_query("Taylor Swift Eras Tour") == "Taylor Swift"
    assert normalize_query("new Boygenius record") == "boygenius"
    assert len(clamp_query("x " * 200)) == 120


def test_skips_logo_ticket_and_svg():
    http = FakeCommons(
        hits={"Radiohead": [{"pageid": 1}, {"pageid": 2}, {"pageid": 3}, {"pageid": 4}]},
        pages={
            "1": _page("File:Radiohead logo.jpg"),
            "2": _page("File:Radiohead ticket 1997.png"),
            "3": _page("File:Radiohead.svg", mime="image/svg+xml"),
            "4": _page("File:Radiohead live.jpg", thumb="https://upload.test/rh.jpg"),
        },
    )
    assert CommonsImageResolver(http=http).fetch_image_url("Radiohead") == "https://upload.test/rh.jpg"


def test_rejects_non_https_urls():
    http = FakeCommons(
        hits={"Bon Iver": [{"pageid": 7}]},
        pages={"7": _page("File:Bon Iver.jpg", thumb="http://upload.test/bi.jpg")},
    )
    assert CommonsImageResolver(http=http).fetch_image_url("Bon Iver") is None


def test_original_url_used_without_thumbnail():
    page = {"title": "File:Big Thief live.jpg", "imageinfo": [{"mime": "image/jpeg", "url": "https://upload.test/bt-full.jpg"}]}
    http = FakeCommons(hits={"Big Thief": [{"pageid": 5}]}, pages={"5": page})
    assert CommonsImageResolver(http=http).fetch_image_url("Big Thief") == "https://upload.test/bt-full.jpg"


def test_pick_falls_through_failures_to_next_query():
    http = FakeCommons(
        hits={"Haber": [{"pageid": 9}]},
        pages={"9": _page("File:Stage.jpg", thumb="https://upload.test/stage.jpg")},
        fail={"Big Thief"},
    )
    url = CommonsImageResolver(http=http).pick(title="Big Thief'in Yeni Albümü", category="Haber")
    assert url == "https://upload.test/stage.jpg"
    assert http.searches == ["Big Thief", "Haber"]


def test_pick_returns_none_when_exhausted():
    http = FakeCommons()
    assert CommonsImageResolver(http=http).pick(title="Hiçbir Şey") is None
    assert http.searches == ["Hiçbir Şey", "music"]


def test_needs_replacement():
    assert needs_replacement(None)
    assert needs_replacement("https://images.unsplash.com/photo-1")
    assert needs_replacement("https://upload.test/band_logo.png")
    assert not needs_replacement("https://upload.wikimedia.org/x/Stage.jpg")
