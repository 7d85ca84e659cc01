import base64
import json
import logging
import re
from datetime import datetime, timedelta, timezone

import pytest

from src.hill import codec
from src.hill.errors import DecodeError, DomainRangeError
from src.hill.models import PALETTE, Item


def _token(payload) -> str:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


def _record(**overrides):
    record = {
        "id": "a1",
        "title": "Ship it",
        "progress": 0.5,
        "color": PALETTE[0],
        "lastUpdated": "2024-05-06T09:00:00+00:00",
    }
    record.update(overrides)
    return record


@pytest.fixture
def items():
    tz = timezone(timedelta(hours=2))
    return [
        Item("a1", "Design the API", 0.0, PALETTE[0], datetime(2024, 5, 6, 9, 0, tzinfo=tz)),
        Item("b2", "Café menu ✓", 0.123456789, PALETTE[1], datetime(2024, 5, 7, 17, 45, 12, 345678, tzinfo=tz)),
        Item("c3", "Launch", 1.0, PALETTE[5], datetime(2024, 5, 8, 0, 0, tzinfo=timezone.utc)),
    ]


def test_round_trip(items):
    decoded = codec.decode(codec.encode(items))
    assert decoded == items
    for before, after in zip(items, decoded):
        assert after.last_updated.utcoffset() == before.last_updated.utcoffset()


def test_token_is_url_safe(items):
    token = codec.encode(items * 3)
    assert re.fullmatch(r"[A-Za-z0-9_=-]+", token)


def test_empty_collection_encodes_to_empty_string():
    assert codec.encode([]) == ""
    assert codec.decode("") == []
    assert codec.decode("   ") == []


def test_invalid_base64_returns_empty(caplog):
    with caplog.at_level(logging.WARNING, logger="src.hill.codec"):
        assert codec.decode("not-valid-base64!!") == []
    assert "malformed state token" in caplog.text


def test_missing_padding_accepted(items):
    token = codec.encode(items[:1]).rstrip("=")
    assert codec.decode(token) == items[:1]


@pytest.mark.parametrize("token", [
    _token("this is not json"),
    _token('[{"id": "a1"'),
    _token({"id": "a1"}),
    _token([42]),
    _token([_record(id="")]),
    _token([_record(title=None)]),
    _token([_record(progress="0.5")]),
    _token([_record(progress=True)]),
    _token([_record(color="red")]),
    _token([_record(lastUpdated="yesterday")]),
    _token([_record(), _record()]),
    base64.urlsafe_b64encode(b"\xff\xfe\x00").decode("ascii"),
    _token("[" * 100000),
    _token(json.dumps([_record()]).replace("0.5", "1" * 5001)),
    _token([_record(progress=10 ** 400)]),
])
def test_malformed_tokens_decode_to_nothing(token):
    assert codec.decode(token) == []
    with pytest.raises(DecodeError):
        codec.decode_strict(token)


@pytest.mark.parametrize("record", [
    _record(progress=1.01),
    _record(progress=-0.1),
    _record(color=0xFF123456),
])
def test_out_of_domain_values_reject_whole_token(record):
    token = _token([_record(id="ok"), record])
    assert codec.decode(token) == []
    with pytest.raises(DomainRangeError):
        codec.decode_strict(token)


def test_legacy_position_key():
    record = _record(lastUpdated="2024-05-06T09:00:00.000")
    record["position"] = record.pop("progress")
    [item] = codec.decode(_token([record]))
    assert item.progress == 0.5
    assert item.last_updated == datetime(2024, 5, 6, 9, 0)


def test_integer_progress_accepted():
    [item] = codec.decode_strict(_token([_record(progress=1)]))
    assert item.progress == 1.0
    assert isinstance(item.progress, float)


def test_non_string_token_is_rejected():
    assert codec.decode(None) == []
    assert codec.decode(5) == []
    with pytest.raises(DecodeError):
        codec.decode_strict(5)


def test_huge_integer_progress_is_out_of_domain():
    with pytest.raises(DomainRangeError):
        codec.decode_strict(_token([_record(progress=10 ** 400)]))
