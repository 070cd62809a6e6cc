from rss_bsky.dedup import ItemMerger, merge_item
from rss_bsky.normalizer import to_feed_item

from conftest import make_entry, make_feed, utc


def test_merge_item_inserts_new_guid():
    items = {}
    feed = make_feed(title="World News", language="en")
    item = to_feed_item(make_entry())
    kept = merge_item(items, item, feed)
    assert kept is item
    assert items == {"x": item}
    assert item.categories == {"world", "news"}


def test_merge_item_keeps_first_scalars_and_unions_metadata():
    items = {}
    first = to_feed_item(make_entry(title="Hi", link="https://a", pub_date="2024-01-01T09:30:00Z"))
    second = to_feed_item(make_entry(title="Hi2", link="https://b", pub_date="2024-01-01T09:45:00Z",
                                     content="other", media="https://img.example/b.png"))
    merge_item(items, first, make_feed(title="Feed A", language="en"))
    kept = merge_item(items, second, make_feed(title="Tech News", language="nb"))

    assert kept is first
    assert len(items) == 1
    assert kept.title == "Hi"
    assert kept.link == "https://a"
    assert kept.pub_date == utc(2024, 1, 1, 9, 30)
    assert kept.content == ""
    assert kept.media_url is None
    assert kept.languages == {"en", "nb"}
    assert kept.categories == {"feed", "a", "tech", "news"}


def test_same_guid_twice_in_one_feed_is_harmless():
    feed = make_feed(make_entry(), make_entry(title="Again"), title="Tech", language="en")
    merger = ItemMerger()
    assert merger.add_feed(feed) == 2
    assert len(merger) == 1
    item = merger.get("x")
    assert item.title == "Hi"
    assert item.languages == {"en"}
    assert item.categories == {"tech"}


def test_invalid_entries_never_reach_the_map(window):
    feed_a = make_feed(
        make_entry(guid=""),
        make_entry(guid="no-title", title=""),
        make_entry(guid="no-link", link=None),
        make_entry(guid="ok"),
    )
    feed_b = make_feed(make_entry(guid="no-title", title="Now it has one"), title="B")
    merger = ItemMerger(window)
    merger.add_feed(feed_a)
    merger.add_feed(feed_b)
    assert sorted(i.guid for i in merger) == ["no-title", "ok"]
    # The valid listing from feed B is the first one the merger saw.
    assert merger.get("no-title").title == "Now it has one"
    assert merger.get("no-title").categories == {"b"}


def test_window_filter_runs_before_merge(window):
    too_old = make_entry(guid="x", title="Old", pub_date="2024-01-01T08:00:00Z")
    fresh = make_entry(guid="x", title="Fresh", pub_date="2024-01-01T09:10:00Z")
    merger = ItemMerger(window)
    merger.add_feed(make_feed(too_old, title="Old Feed"))
    merger.add_feed(make_feed(fresh, title="New Feed"))
    item = merger.get("x")
    assert item.title == "Fresh"
    assert item.categories == {"new", "feed"}


def test_items_without_pub_date_are_dropped(window):
    merger = ItemMerger(window)
    assert merger.add_feed(make_feed(make_entry(pub_date=None))) == 0
    assert len(merger) == 0
