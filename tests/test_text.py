from datetime import datetime, timedelta, timezone

import pytest

from bendinledim.text import (
    artist_key,
    collapse_ws,
    estimate_read_time,
    extract_query_from_title,
    image_key,
    slugify,
    time_ago,
    title_subject,
)

# headline -> subject chunk
SUBJECTS = [
    ("Taylor Swift'in İndie Dönüşü", "Taylor Swift"),
    ("Phoebe Bridgers’ın Yeni Projesi", "Phoebe Bridgers"),
    ("Fontaines D.C.'nin Üçüncü Albümü", "Fontaines D.C."),
    ("Glastonbury'den Notlar", "Glastonbury"),
    ("Arctic Monkeys' The Car Reissue", "Arctic Monkeys"),
    ("Primavera Sound 2024: Tam Kadro", "Primavera Sound 2024"),
    ("Wet Leg - Moisturizer İncelemesi", "Wet Leg"),
    ("AB: kısa", "AB: kısa"),
    ("Sessizlik", "Sessizlik"),
    ("", ""),
]


@pytest.mark.parametrize("title,expected", SUBJECTS)
def test_title_subject(title, expected):
    assert title_subject(title) == expected


ARTIST_KEYS = [
    ("Taylor Swift'in İndie Dönüşü", "taylor swift"),
    ("Yeni albümde Billie Eilish sürprizi", "billie eilish"),
    ("Arktik Maymunlar yeniden sahnede", "arctic monkeys"),
    ("boygenius: The Record", "boygenius"),
    ("Big Thief'in Yeni Şarkısı", "big thief"),
    ("Haftanın Listesi: 10 Şarkı", "haftanın listesi"),
    ("   ", ""),
    ("", ""),
]


@pytest.mark.parametrize("title,expected", ARTIST_KEYS)
def test_artist_key(title, expected):
    assert artist_key(title) == expected


def test_extract_query_falls_back_to_music():
    assert extract_query_from_title("") == "music"
    assert extract_query_from_title("Big Thief'in Konseri") == "Big Thief"


def test_image_key_strips_query_and_fragment():
    assert image_key("https://x.test/a.jpg?w=10#top") == "https://x.test/a.jpg"
    assert image_key(None) == ""
    assert image_key("  ") == ""


def test_slugify_transliterates_turkish():
    assert slugify("Şarkı Söyleyen Güneş") == "sarki-soyleyen-gunes"
    assert slugify("Taylor Swift'in İndie Dönüşü!") == "taylor-swift-in-indie-donusu"


def test_read_time_and_whitespace():
    assert estimate_read_time("x" * 2500) == 3
    assert estimate_read_time("") == 5
    assert collapse_ws("  a \n\n b\t c ") == "a b c"


@pytest.mark.parametrize(
    "delta,expected",
    [
        (timedelta(seconds=30), "az önce"),
        (timedelta(minutes=5), "5 dakika önce"),
        (timedelta(hours=3), "3 saat önce"),
        (timedelta(days=2), "2 gün önce"),
        (timedelta(days=15), "2 hafta önce"),
        (timedelta(days=65), "2 ay önce"),
        (timedelta(days=800), "2 yıl önce"),
    ],
)
def test_time_ago(delta, expected):
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert time_ago(now - delta, now=now) == expected
