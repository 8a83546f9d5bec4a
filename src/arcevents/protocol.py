"""Payload encoding/decoding for arcevents.

A payload is a small dict keyed by single letters:
  t kind, c code, k key, b button, d detail/direction,
  x/y movement, r radians, f force, g gesture tag

Channel messages are JSON objects with a "topic" and a "data" field.
"""

import json
import logging
from enum import Enum

from .events import DefaultEventBuilder
from .kinds import EventKind, Topic, UnknownKindError, kind_to_name, name_to_kind

logger = logging.getLogger(__name__)

GESTURE_BUMP = "bump"


class ProtocolError(ValueError):
    pass


# ── Encoding ──────────────────────────────────────────────────────

def _resolve_kind(kind):
    if isinstance(kind, str):
        return name_to_kind(kind)
    if isinstance(kind, EventKind):
        return kind
    if isinstance(kind, int) and not isinstance(kind, bool):
        try:
            return EventKind(kind)
        except ValueError:
            pass
    # unregistered kinds are sent as given
    return kind


def create_payload(event, kind=None):
    """Convert an event to a minimal payload.

    Returns None for a mousemove without movement, there is nothing to send.
    """
    kind = _resolve_kind(event.type if kind is None else kind)
    payload = {"t": kind}

    if kind == EventKind.MOUSEMOVE:
        if event.movement_x == 0 and event.movement_y == 0:
            logger.debug("suppressed zero-motion mousemove")
            return None
        payload["x"] = event.movement_x
        payload["y"] = event.movement_y
    elif kind in (EventKind.MOUSEDOWN, EventKind.MOUSEUP, EventKind.CLICK):
        payload["b"] = event.button
        if event.detail:
            payload["d"] = event.detail
    elif kind in (EventKind.KEYDOWN, EventKind.KEYUP):
        payload["c"] = event.code
        payload["k"] = event.key
    elif kind == EventKind.STICKMOVE:
        payload["r"] = event.detail["radians"]
        payload["f"] = event.detail["force"]
    elif kind == EventKind.DEVICEBUMP:
        payload["g"] = GESTURE_BUMP
        payload["d"] = event.detail["direction"]
    else:
        detail = getattr(event, "detail", None)
        if detail is not None:
            payload["d"] = detail
        logger.debug("passing through custom event %r", kind)

    return payload


# ── Decoding ──────────────────────────────────────────────────────

class Strategy(Enum):
    KEYBOARD = "keyboard"
    POINTER = "pointer"
    STICK = "stick"
    FALLBACK = "fallback"


_STRATEGIES = {
    "keydown": Strategy.KEYBOARD,
    "keyup": Strategy.KEYBOARD,
    "mousemove": Strategy.POINTER,
    "mousedown": Strategy.POINTER,
    "mouseup": Strategy.POINTER,
    "click": Strategy.POINTER,
    "stickmove": Strategy.STICK,
}


def strategy_for(name: str) -> Strategy:
    return _STRATEGIES.get(name, Strategy.FALLBACK)


def payload_name(payload: dict) -> str:
    """Event name of a payload, custom names are carried verbatim."""
    if "t" not in payload:
        raise UnknownKindError(None)
    kind = payload["t"]
    if isinstance(kind, str):
        return kind
    return kind_to_name(kind)


def parse_payload(payload: dict, builder=None):
    """Rebuild an event from a payload.

    Raises UnknownKindError for an ordinate that has no event kind. Missing
    optional fields fall back to defaults.
    """
    if builder is None:
        builder = DefaultEventBuilder()
    name = payload_name(payload)
    strategy = strategy_for(name)

    if strategy is Strategy.KEYBOARD:
        return builder.keyboard_event(
            name, code=payload.get("c", ""), key=payload.get("k", ""))
    if strategy is Strategy.POINTER:
        return builder.mouse_event(
            name,
            button=payload.get("b", 0),
            detail=payload.get("d", 0),
            movement_x=payload.get("x", 0),
            movement_y=payload.get("y", 0),
        )
    if strategy is Strategy.STICK:
        return builder.stick_event(
            name, radians=payload.get("r"), force=payload.get("f"))

    if name == "devicebump":
        detail = {"direction": payload.get("d")}
    else:
        detail = payload.get("d")
    return builder.custom_event(name, detail=detail)


# ── Wire ──────────────────────────────────────────────────────────

def dumps_payload(payload: dict) -> str:
    return json.dumps(payload, separators=(",", ":"))


def _loads_object(text):
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ProtocolError(f"expected a JSON object, got {type(data).__name__}")
    return data


def loads_payload(text) -> dict:
    return _loads_object(text)


def topic_message(topic: Topic, data=None) -> str:
    return json.dumps({"topic": Topic(topic).value, "data": data},
                      separators=(",", ":"))


def parse_message(text):
    """Split a channel message into its (Topic, data) pair."""
    message = _loads_object(text)
    if "topic" not in message:
        raise ProtocolError("message has no topic")
    try:
        topic = Topic(message["topic"])
    except ValueError:
        raise ProtocolError(f"unknown topic {message['topic']!r}") from None
    return topic, message.get("data")
