"""Tests for mention extraction from webhook payloads."""

import pytest

from mention_service.core.normalizers import extract_mention, iter_mention_events
from mention_service.models.mention import MentionEvent
from tests.fakes import mention_payload


def test_single_mention_yields_one_event():
    events = list(iter_mention_events(mention_payload(("M1", "C1"))))

    assert events == [MentionEvent(media_id="M1", comment_id="C1")]


def test_events_keep_entry_and_change_order():
    payload = {
        "entry": [
            {"changes": [
                {"field": "mentions", "value": {"media_id": "M1", "comment_id": "C1"}},
                {"field": "mentions", "value": {"media_id": "M1", "comment_id": "C2"}},
            ]},
            {"changes": [
                {"field": "mentions", "value": {"media_id": "M2", "comment_id": "C3"}},
            ]},
        ]
    }

    events = list(iter_mention_events(payload))

    assert [(e.media_id, e.comment_id) for e in events] == [
        ("M1", "C1"), ("M1", "C2"), ("M2", "C3")
    ]


def test_non_mention_fields_are_ignored():
    payload = {
        "entry": [{"changes": [
            {"field": "mentions", "value": {"media_id": "M1", "comment_id": "C1"}},
            {"field": "comments", "value": {"media_id": "M1", "comment_id": "C9", "text": "hi"}},
        ]}]
    }

    events = list(iter_mention_events(payload))

    assert len(events) == 1
    assert events[0].comment_id == "C1"


@pytest.mark.parametrize(
    "value",
    [
        {"media_id": "M1"},
        {"comment_id": "C1"},
        {"media_id": "", "comment_id": "C1"},
        {"media_id": "M1", "comment_id": "   "},
        {"media_id": None, "comment_id": "C1"},
        {"media_id": True, "comment_id": "C1"},
        {"media_id": {"id": "M1"}, "comment_id": "C1"},
    ],
)
def test_mentions_missing_an_id_are_skipped(value):
    assert extract_mention({"field": "mentions", "value": value}) is None


def test_numeric_ids_are_accepted_as_strings():
    event = extract_mention({"field": "mentions", "value": {"media_id": 17, "comment_id": 42}})

    assert event == MentionEvent(media_id="17", comment_id="42")


@pytest.mark.parametrize(
    "payload",
    [
        None,
        "not a dict",
        [],
        {},
        {"entry": None},
        {"entry": "oops"},
        {"entry": [None, 3, "x"]},
        {"entry": [{}]},
        {"entry": [{"changes": None}]},
        {"entry": [{"changes": [None, {"field": "mentions"}, {"field": "mentions", "value": []}]}]},
    ],
)
def test_malformed_payloads_yield_nothing(payload):
    assert list(iter_mention_events(payload)) == []


def test_malformed_siblings_do_not_hide_valid_mentions():
    payload = {
        "entry": [
            "garbage",
            {"changes": [{"field": "mentions", "value": "garbage"}]},
            {"changes": [{"field": "mentions", "value": {"media_id": "M1", "comment_id": "C1"}}]},
        ]
    }

    assert [e.comment_id for e in iter_mention_events(payload)] == ["C1"]
