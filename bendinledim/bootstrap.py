"""Default taxonomy the site expects to exist on a fresh database."""
import logging

log = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Haber", "name_en": "News", "slug": "haber", "color": "#d97706"},
    {"name": "Tur", "name_en": "Tour", "slug": "tur", "color": "#dc2626"},
    {"name": "İnceleme", "name_en": "Review", "slug": "inceleme", "color": "#7c3aed"},
    {"name": "Röportaj", "name_en": "Interview", "slug": "roportaj", "color": "#059669"},
    {"name": "Ekipman", "name_en": "Gear", "slug": "ekipman", "color": "#2563eb"},
    {"name": "Derinlemesine", "name_en": "Deep Dive", "slug": "derinlemesine", "color": "#d946ef"},
]

DEFAULT_TAGS = [
    {"name": "Vinil", "slug": "vinil"},
    {"name": "Festival", "slug": "festival"},
    {"name": "Analog", "slug": "analog"},
    {"name": "Neo-Soul", "slug": "neo-soul"},
    {"name": "Stüdyo", "slug": "studyo"},
    {"name": "Pedalboard", "slug": "pedalboard"},
    {"name": "Canlı Performans", "slug": "canli-performans"},
    {"name": "Türkçe Müzik", "slug": "turkce-muzik"},
]


def bootstrap_defaults(repository):
    """Upsert the default categories and tags; safe to run repeatedly."""
    categories = [
        repository.upsert_category(c["slug"], c["name"], c["color"], c["name_en"])
        for c in DEFAULT_CATEGORIES
    ]
    tags = [repository.upsert_tag(t["slug"], t["name"]) for t in DEFAULT_TAGS]
    log.info("bootstrap: %d categories, %d tags", len(categories), len(tags))
    return categories, tags
