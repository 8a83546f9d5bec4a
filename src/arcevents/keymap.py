"""Conversion between pynput keys/buttons and DOM-style code/key/button fields."""

from pynput.keyboard import Key, KeyCode
from pynput.mouse import Button


# ── Keys ──────────────────────────────────────────────────────────

# pynput Key name -> (code, key)
_SPECIAL = {
    "alt": ("AltLeft", "Alt"),
    "alt_l": ("AltLeft", "Alt"),
    "alt_r": ("AltRight", "Alt"),
    "alt_gr": ("AltRight", "AltGraph"),
    "backspace": ("Backspace", "Backspace"),
    "caps_lock": ("CapsLock", "CapsLock"),
    "cmd": ("MetaLeft", "Meta"),
    "cmd_l": ("MetaLeft", "Meta"),
    "cmd_r": ("MetaRight", "Meta"),
    "ctrl": ("ControlLeft", "Control"),
    "ctrl_l": ("ControlLeft", "Control"),
    "ctrl_r": ("ControlRight", "Control"),
    "delete": ("Delete", "Delete"),
    "down": ("ArrowDown", "ArrowDown"),
    "end": ("End", "End"),
    "enter": ("Enter", "Enter"),
    "esc": ("Escape", "Escape"),
    "home": ("Home", "Home"),
    "left": ("ArrowLeft", "ArrowLeft"),
    "page_down": ("PageDown", "PageDown"),
    "page_up": ("PageUp", "PageUp"),
    "right": ("ArrowRight", "ArrowRight"),
    "shift": ("ShiftLeft", "Shift"),
    "shift_l": ("ShiftLeft", "Shift"),
    "shift_r": ("ShiftRight", "Shift"),
    "space": ("Space", " "),
    "tab": ("Tab", "Tab"),
    "up": ("ArrowUp", "ArrowUp"),
    "insert": ("Insert", "Insert"),
    "menu": ("ContextMenu", "ContextMenu"),
    "num_lock": ("NumLock", "NumLock"),
    "pause": ("Pause", "Pause"),
    "print_screen": ("PrintScreen", "PrintScreen"),
    "scroll_lock": ("ScrollLock", "ScrollLock"),
}
_SPECIAL.update({f"f{n}": (f"F{n}", f"F{n}") for n in range(1, 21)})

# code -> pynput Key name, sided names win over the generic ones
_SPECIAL_BY_CODE = {}
for _name, (_code, _) in _SPECIAL.items():
    _SPECIAL_BY_CODE.setdefault(_code, _name)
for _name in ("alt_l", "cmd_l", "ctrl_l", "shift_l"):
    _SPECIAL_BY_CODE[_SPECIAL[_name][0]] = _name

# DOM key value -> pynput Key name, for payloads without a known code
_SPECIAL_BY_KEY = {}
for _name, (_, _value) in _SPECIAL.items():
    _SPECIAL_BY_KEY.setdefault(_value, _name)

_PUNCTUATION = {
    "-": "Minus", "=": "Equal", "[": "BracketLeft", "]": "BracketRight",
    "\\": "Backslash", ";": "Semicolon", "'": "Quote", "`": "Backquote",
    ",": "Comma", ".": "Period", "/": "Slash", " ": "Space",
}

_VK_PREFIX = "Vk"


def _char_code(char: str) -> str:
    if len(char) == 1 and char.isascii():
        if char.isalpha():
            return f"Key{char.upper()}"
        if char.isdigit():
            return f"Digit{char}"
    return _PUNCTUATION.get(char, "")


def _special_key(name):
    try:
        return Key[name]
    except KeyError:
        return None


def key_to_fields(key):
    """Return the (code, key) pair describing a pynput key."""
    if isinstance(key, Key):
        return _SPECIAL.get(key.name, (key.name, key.name))
    if isinstance(key, KeyCode):
        if key.char is not None:
            return _char_code(key.char), key.char
        return f"{_VK_PREFIX}{key.vk}", "Unidentified"
    text = str(key)
    return _char_code(text), text


def fields_to_key(code: str, key: str):
    """Rebuild a pynput key from code/key fields, or None if it can't be typed."""
    if not isinstance(code, str):
        code = ""
    if not isinstance(key, str):
        key = ""
    if code in _SPECIAL_BY_CODE:
        return _special_key(_SPECIAL_BY_CODE[code])
    if code.startswith(_VK_PREFIX) and code[len(_VK_PREFIX):].isdigit():
        return KeyCode.from_vk(int(code[len(_VK_PREFIX):]))
    if len(key) == 1:
        return KeyCode.from_char(key)
    if key in _SPECIAL_BY_KEY:
        return _special_key(_SPECIAL_BY_KEY[key])
    return None


# ── Buttons ───────────────────────────────────────────────────────

_BUTTONS = {0: "left", 1: "middle", 2: "right"}


def button_to_index(button):
    for index, name in _BUTTONS.items():
        if button.name == name:
            return index
    return None


def index_to_button(index):
    if not isinstance(index, int) or isinstance(index, bool):
        return None
    name = _BUTTONS.get(index)
    return Button[name] if name is not None else None
