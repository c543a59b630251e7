import asyncio

import httpx

from bendinledim.rss import RSSAggregator, parse_items

FEED_A = """<?xml version="1.0"?>
<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>A</title>
    <item>
      <title>Older &lt;b&gt;story&lt;/b&gt;</title>
      <link>https://a.test/older</link>
      <description>&lt;p&gt;Old news&lt;/p&gt;</description>
      <pubDate>Mon, 01 Jan 2024 10:00:00 GMT</pubDate>
      <media:content url="https://a.test/older.jpg" medium="image" />
    </item>
    <item>
      <title>Newest story</title>
      <link>https://a.test/newest</link>
      <description>Fresh &lt;img src="https://a.test/inline.jpg"&gt; news</description>
      <pubDate>Wed, 03 Jan 2024 10:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>"""

FEED_B = """<?xml version="1.0"?>
<rss version="2.0">
  <channel>
    <title>B</title>
    <item>
      <title>Middle story</title>
      <link>https://b.test/middle</link>
      <description>""" + "x" * 400 + """</description>
      <pubDate>Tue, 02 Jan 2024 10:00:00 GMT</pubDate>
      <enclosure url="https://b.test/middle.jpg" type="image/jpeg" length="1" />
    </item>
  </channel>
</rss>"""

FEEDS = [
    {"name": "Alpha", "url": "https://a.test/feed"},
    {"name": "Beta", "url": "https://b.test/feed"},
    {"name": "Broken", "url": "https://broken.test/feed"},
]


def _transport():
    def handler(request):
        if request.url.host == "a.test":
            return httpx.Response(200, text=FEED_A)
        if request.url.host == "b.test":
            return httpx.Response(200, text=FEED_B)
        return httpx.Response(503, text="unavailable")
    return httpx.MockTransport(handler)


def test_parse_items_strips_markup_and_finds_images():
    items = parse_items(FEED_A, "Alpha")
    assert [i.title for i in items] == ["Older story", "Newest story"]
    assert items[0].description == "Old news"
    assert items[0].imageUrl == "https://a.test/older.jpg"
    assert items[1].imageUrl == "https://a.test/inline.jpg"
    assert items[0].source == "Alpha"


def test_aggregate_merges_sorts_and_skips_failed_feeds():
    items = RSSAggregator(feeds=FEEDS, transport=_transport()).aggregate()
    assert [i.title for i in items] == ["Newest story", "Middle story", "Older story"]
    middle = items[1]
    assert len(middle.description) == 300
    assert middle.imageUrl == "https://b.test/middle.jpg"
    assert "published_ts" not in middle.to_dict()


def test_aggregate_filters_by_source_name():
    items = RSSAggregator(feeds=FEEDS, transport=_transport()).aggregate("beta")
    assert [i.source for i in items] == ["Beta"]
    assert RSSAggregator(feeds=FEEDS, transport=_transport()).aggregate("nope") == []


def test_slow_feeds_are_dropped_after_budget():
    async def handler(request):
        if request.url.host == "b.test":
            await asyncio.sleep(5)
        return httpx.Response(200, text=FEED_A)

    agg = RSSAggregator(feeds=FEEDS[:2], timeout=0.2, transport=httpx.MockTransport(handler))
    items = agg.aggregate()
    assert {i.source for i in items} == {"Alpha"}


def test_feed_with_invalid_url_does_not_sink_the_listing():
    feeds = [FEEDS[0], {"name": "Typo", "url": "https://exa mple.test:notaport/feed"}]
    items = RSSAggregator(feeds=feeds, transport=_transport()).aggregate()
    assert {i.source for i in items} == {"Alpha"}


def test_unexpected_error_in_one_feed_is_contained(monkeypatch):
    import bendinledim.rss as rss_module

    real_parse = rss_module.parse_items

    def parse(xml, source_name):
        if source_name == "Beta":
            raise ValueError("bad markup")
        return real_parse(xml, source_name)

    monkeypatch.setattr(rss_module, "parse_items", parse)
    items = RSSAggregator(feeds=FEEDS, transport=_transport()).aggregate()
    assert {i.source for i in items} == {"Alpha"}
