import json

import pytest

from trip_planner.agents.parsing import (
    DecodeFailure,
    TripDecoded,
    TripDecodeFailure,
    decode_conversational_reply,
    decode_generated_trip,
    strip_code_fence,
)

from conftest import make_trip_payload


def test_decode_valid_trip():
    result = decode_generated_trip(json.dumps(make_trip_payload(days=3)))
    assert isinstance(result, TripDecoded)
    assert result.ok
    assert [d.day for d in result.trip.itinerary.days] == [1, 2, 3]
    assert result.trip.itinerary.summary.highlights == ["Food", "Wine"]


def test_decode_strips_code_fence():
    raw = "```json\n" + json.dumps(make_trip_payload()) + "\n```"
    assert decode_generated_trip(raw).ok


def test_strip_code_fence_plain_text_untouched():
    assert strip_code_fence('  {"a": 1} ') == '{"a": 1}'


def test_decode_malformed_json():
    result = decode_generated_trip("{not json")
    assert isinstance(result, TripDecodeFailure)
    assert "malformed JSON" in result.reason
    assert result.raw == "{not json"


def test_decode_non_object():
    result = decode_generated_trip("[1, 2]")
    assert not result.ok
    assert "expected a JSON object" in result.reason


def test_decode_missing_fields():
    payload = make_trip_payload()
    del payload["destination"]
    payload["title"] = ""
    result = decode_generated_trip(json.dumps(payload))
    assert not result.ok
    assert result.reason == "missing required fields: title, destination"


def test_decode_invalid_shape():
    payload = make_trip_payload()
    payload["itinerary"]["days"][0]["activities"][0]["cost"] = -1
    result = decode_generated_trip(json.dumps(payload))
    assert not result.ok
    assert result.reason.startswith("invalid itinerary:")


def test_decode_empty_text():
    assert not decode_generated_trip("").ok


def test_decode_conversational_reply():
    reply = decode_conversational_reply(json.dumps({
        "response": "Sounds fun!",
        "shouldGenerateItinerary": True,
        "fullTripDescription": "Family week in Rome",
    }))
    assert reply.should_generate_itinerary
    assert reply.full_trip_description == "Family week in Rome"


def test_decode_conversational_reply_missing_response():
    with pytest.raises(DecodeFailure):
        decode_conversational_reply(json.dumps({"shouldGenerateItinerary": False}))


def test_decode_keeps_backticks_inside_strings():
    payload = make_trip_payload()
    payload["itinerary"]["days"][0]["activities"][0]["description"] = "Menu has ```secret``` dishes"

    result = decode_generated_trip(json.dumps(payload))

    assert result.ok
    assert result.trip.itinerary.days[0].activities[0].description == "Menu has ```secret``` dishes"


def test_decode_fenced_reply_with_backticks_inside_strings():
    payload = make_trip_payload()
    payload["title"] = "Code ``` camp"
    raw = "```json\n" + json.dumps(payload) + "\n```"

    result = decode_generated_trip(raw)

    assert result.ok
    assert result.trip.title == "Code ``` camp"


def test_strip_code_fence_single_line():
    assert strip_code_fence('```json{"a": 1}```') == '{"a": 1}'
