import logging

import pytest

from rss_bsky.validator import is_valid_entry

from conftest import make_entry


def test_complete_entry_is_valid():
    assert is_valid_entry(make_entry())


@pytest.mark.parametrize("field", ["guid", "title", "link"])
@pytest.mark.parametrize("value", [None, "", "   "])
def test_missing_required_field_is_rejected(field, value):
    entry = make_entry()
    entry[field] = value
    assert not is_valid_entry(entry)


def test_optional_fields_may_be_missing():
    assert is_valid_entry({"guid": "g", "title": "t", "link": "https://a.example"})


def test_unparseable_link_is_rejected():
    assert not is_valid_entry(make_entry(link="not a url"))


def test_rejection_is_logged_as_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="rss_bsky.validator"):
        is_valid_entry(make_entry(guid=""))
    assert "Invalid item (missing guid)" in caplog.text
