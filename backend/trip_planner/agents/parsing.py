"""Decoding of model JSON replies into validated schemas"""
import json
from dataclasses import dataclass
from typing import Any, Dict, Union

from pydantic import ValidationError

from trip_planner.models.schemas import ConversationalReply, GeneratedTrip


REQUIRED_TRIP_FIELDS = ("title", "destination", "duration", "itinerary")


class DecodeFailure(ValueError):
    """A model reply could not be decoded"""


@dataclass(frozen=True)
class TripDecoded:
    trip: GeneratedTrip
    ok: bool = True


@dataclass(frozen=True)
class TripDecodeFailure:
    reason: str
    raw: str = ""
    ok: bool = False


TripDecodeResult = Union[TripDecoded, TripDecodeFailure]


def strip_code_fence(content: str) -> str:
    """Remove a Markdown code fence wrapping the whole text, if any"""
    content = content.strip()
    if not content.startswith("```"):
        return content
    body = content[3:]
    if body[:4].lower() == "json":
        body = body[4:]
    body = body.rstrip()
    if body.endswith("```"):
        body = body[:-3]
    return body.strip()


def summarize_validation_error(exc: ValidationError, limit: int = 3) -> str:
    parts = []
    for err in exc.errors()[:limit]:
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def load_json_object(raw: str) -> Dict[str, Any]:
    """Parse a reply into a JSON object or raise DecodeFailure"""
    text = (raw or "").strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        if not text.startswith("```"):
            raise DecodeFailure(f"malformed JSON ({e.msg})") from e
        try:
            data = json.loads(strip_code_fence(text))
        except json.JSONDecodeError as fenced_error:
            raise DecodeFailure(f"malformed JSON ({fenced_error.msg})") from fenced_error
    if not isinstance(data, dict):
        raise DecodeFailure(f"expected a JSON object, got {type(data).__name__}")
    return data


def decode_generated_trip(raw: str) -> TripDecodeResult:
    """Decode an itinerary reply. Never raises."""
    try:
        data = load_json_object(raw)
    except DecodeFailure as e:
        return TripDecodeFailure(reason=str(e), raw=raw or "")

    missing = [name for name in REQUIRED_TRIP_FIELDS if not data.get(name)]
    if missing:
        return TripDecodeFailure(
            reason=f"missing required fields: {', '.join(missing)}",
            raw=raw,
        )

    try:
        trip = GeneratedTrip.model_validate(data)
    except ValidationError as e:
        return TripDecodeFailure(reason=f"invalid itinerary: {summarize_validation_error(e)}", raw=raw)

    return TripDecoded(trip=trip)


def decode_conversational_reply(raw: str) -> ConversationalReply:
    """Decode a conversational reply or raise DecodeFailure"""
    data = load_json_object(raw)
    try:
        return ConversationalReply.model_validate(data)
    except ValidationError as e:
        raise DecodeFailure(f"invalid conversational reply: {summarize_validation_error(e)}") from e
