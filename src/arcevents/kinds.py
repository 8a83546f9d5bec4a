"""Event kinds and channel topics.

Kinds are sent as their ordinate since numbers take less bandwidth than
strings. Names are open-ended (any UI event name may be forwarded), ordinates
are not: an ordinate with no entry here cannot be turned back into an event.
"""

from enum import Enum, IntEnum


class EventKind(IntEnum):
    KEYDOWN = 0
    KEYUP = 1
    MOUSEMOVE = 2
    CLICK = 3
    MOUSEDOWN = 4
    MOUSEUP = 5
    STICKMOVE = 6
    DEVICEBUMP = 7


class Topic(str, Enum):
    STATUS = "status"
    DATA = "data"
    ADD_EVENT_LISTENER = "add_el"
    REMOVE_EVENT_LISTENER = "remove_el"


class UnknownKindError(ValueError):
    def __init__(self, ordinate):
        self.ordinate = ordinate
        super().__init__(f"EventKind has no value for the ordinate {ordinate!r}")


def name_to_kind(name: str):
    """Resolve an event name to its kind, or return the name unchanged."""
    key = name.upper()
    if key in EventKind.__members__:
        return EventKind[key]
    return name


def kind_to_name(ordinate) -> str:
    """Resolve an ordinate to its lowercase event name.

    Raises UnknownKindError when no kind has this ordinate.
    """
    if not isinstance(ordinate, bool):
        for kind in EventKind:
            if kind.value == ordinate:
                return kind.name.lower()
    raise UnknownKindError(ordinate)


def is_registered(kind) -> bool:
    return isinstance(kind, EventKind)


ALL_EVENT_NAMES = [kind.name.lower() for kind in EventKind]
