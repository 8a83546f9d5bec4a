"""Native event-like values and the builder used to reconstruct them.

The shapes follow the DOM events the wire format was designed around, with
snake_case attribute names.
"""

from dataclasses import dataclass
from typing import Any, Optional, Protocol


@dataclass(frozen=True)
class KeyboardEvent:
    type: str
    code: str = ""
    key: str = ""


@dataclass(frozen=True)
class MouseEvent:
    type: str
    button: int = 0
    detail: int = 0
    movement_x: int = 0
    movement_y: int = 0


@dataclass(frozen=True)
class CustomEvent:
    type: str
    detail: Any = None


class EventBuilder(Protocol):
    """Builds one event per reconstruction strategy."""

    def keyboard_event(self, name: str, code: str, key: str): ...

    def mouse_event(self, name: str, button: int, detail: int,
                    movement_x: int, movement_y: int): ...

    def stick_event(self, name: str, radians: Optional[float],
                    force: Optional[float]): ...

    def custom_event(self, name: str, detail: Any): ...


class DefaultEventBuilder:
    def keyboard_event(self, name, code, key):
        return KeyboardEvent(name, code=code, key=key)

    def mouse_event(self, name, button, detail, movement_x, movement_y):
        return MouseEvent(name, button=button, detail=detail,
                          movement_x=movement_x, movement_y=movement_y)

    def stick_event(self, name, radians, force):
        return CustomEvent(name, detail={"radians": radians, "force": force})

    def custom_event(self, name, detail):
        return CustomEvent(name, detail=detail)
