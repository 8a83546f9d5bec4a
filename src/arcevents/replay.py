"""Replays reconstructed events through pynput controllers."""

import logging
import math
import sys

from .keymap import fields_to_key, index_to_button

logger = logging.getLogger(__name__)

MOUSEEVENTF_MOVE = 0x0001


def _x11_rel_mover():
    import ctypes
    import ctypes.util
    path = ctypes.util.find_library('X11')
    if not path:
        return None
    x11 = ctypes.cdll.LoadLibrary(path)
    x11.XOpenDisplay.argtypes = [ctypes.c_char_p]
    x11.XOpenDisplay.restype = ctypes.c_void_p
    x11.XFlush.argtypes = [ctypes.c_void_p]
    x11.XWarpPointer.argtypes = [ctypes.c_void_p, ctypes.c_ulong, ctypes.c_ulong,
                                 ctypes.c_int, ctypes.c_int, ctypes.c_uint,
                                 ctypes.c_uint, ctypes.c_int, ctypes.c_int]
    display = x11.XOpenDisplay(None)
    if not display:
        return None

    def move(dx, dy):
        # no source or destination window: offsets the pointer from where it is
        x11.XWarpPointer(display, 0, 0, 0, 0, 0, 0, int(dx), int(dy))
        x11.XFlush(display)

    return move


def _win32_rel_mover():
    import ctypes
    try:
        ctypes.windll.shcore.SetProcessDpiAwareness(2)
    except OSError as e:
        logger.debug("could not set DPI awareness: %s", e)
    user32 = ctypes.windll.user32

    def move(dx, dy):
        user32.mouse_event(MOUSEEVENTF_MOVE, int(dx), int(dy), 0, 0)

    return move


_REL_MOVERS = {
    'linux': _x11_rel_mover,
    'win32': _win32_rel_mover,
}


def make_rel_mover(platform: str = sys.platform):
    """Native relative pointer move, or None to fall back to pynput.

    pynput's mouse.move() reads the position back before moving, which drifts
    under DPI scaling on Windows and lags on X11.
    """
    factory = _REL_MOVERS.get(platform)
    if factory is None:
        return None
    try:
        return factory()
    except OSError as e:
        logger.debug("no native relative mover on %s: %s", platform, e)
        return None


def _number(value):
    return (isinstance(value, (int, float)) and not isinstance(value, bool)
            and math.isfinite(value))


class Replayer:
    """Applies events built by protocol.parse_payload to the local input.

    stick_speed is the pointer distance, in pixels, of a full-force stick sample.
    Events whose fields have the wrong type are skipped.
    """

    def __init__(self, mouse, keyboard, stick_speed: float = 8.0, rel_move=None):
        self._mouse = mouse
        self._keyboard = keyboard
        self.stick_speed = stick_speed
        self._rel_move = rel_move

    @classmethod
    def local(cls, stick_speed: float = 8.0):
        from pynput.keyboard import Controller as KeyboardController
        from pynput.mouse import Controller as MouseController
        return cls(MouseController(), KeyboardController(),
                   stick_speed=stick_speed, rel_move=make_rel_mover())

    def _move(self, dx, dy):
        if not (_number(dx) and _number(dy)):
            logger.debug("skipping move by (%r, %r)", dx, dy)
            return
        if self._rel_move:
            self._rel_move(dx, dy)
        else:
            self._mouse.move(dx, dy)

    def replay(self, event):
        t = event.type
        if t in ("keydown", "keyup"):
            key = fields_to_key(event.code, event.key)
            if key is None:
                logger.debug("cannot type code=%r key=%r", event.code, event.key)
                return
            if t == "keydown":
                self._keyboard.press(key)
            else:
                self._keyboard.release(key)
        elif t == "mousemove":
            self._move(event.movement_x, event.movement_y)
        elif t in ("mousedown", "mouseup", "click"):
            btn = index_to_button(event.button)
            if btn is None:
                logger.debug("unsupported button %r", event.button)
                return
            if t == "mousedown":
                self._mouse.press(btn)
            elif t == "mouseup":
                self._mouse.release(btn)
            else:
                count = event.detail if _number(event.detail) else 1
                self._mouse.click(btn, max(1, int(count)))
        elif t == "stickmove":
            radians, force = event.detail["radians"], event.detail["force"]
            if not (_number(radians) and _number(force)) or not force:
                return
            distance = force * self.stick_speed
            self._move(round(math.cos(radians) * distance),
                       round(math.sin(radians) * distance))
        elif t == "wheel":
            detail = event.detail
            if not isinstance(detail, dict):
                logger.debug("skipping wheel with detail %r", detail)
                return
            self._scroll(detail.get("dx", 0), detail.get("dy", 0))
        else:
            logger.info("ignoring %s event (detail=%r)", t, getattr(event, "detail", None))

    def _scroll(self, dx, dy):
        if _number(dx) and _number(dy):
            self._mouse.scroll(dx, dy)
        else:
            logger.debug("skipping scroll by (%r, %r)", dx, dy)
