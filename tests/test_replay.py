"""Tests for arcevents.replay: controllers are mocked."""

import math
from unittest.mock import MagicMock

import pytest

pytest.importorskip("pynput.keyboard", exc_type=ImportError)

from pynput.keyboard import Key, KeyCode  # noqa: E402
from pynput.mouse import Button  # noqa: E402

from arcevents.protocol import parse_payload  # noqa: E402
from arcevents import replay  # noqa: E402
from arcevents.replay import Replayer, make_rel_mover  # noqa: E402


@pytest.fixture
def replayer():
    return Replayer(MagicMock(), MagicMock(), stick_speed=10.0)


class TestKeyboard:
    def test_keydown_presses(self, replayer):
        replayer.replay(parse_payload({"t": 0, "c": "KeyA", "k": "a"}))
        replayer._keyboard.press.assert_called_once_with(KeyCode.from_char("a"))

    def test_keyup_releases_special(self, replayer):
        replayer.replay(parse_payload({"t": 1, "c": "Escape", "k": "Escape"}))
        replayer._keyboard.release.assert_called_once_with(Key.esc)

    def test_untypeable_key_is_skipped(self, replayer):
        replayer.replay(parse_payload({"t": 0}))
        replayer._keyboard.press.assert_not_called()


class TestMouse:
    def test_move_uses_controller(self, replayer):
        replayer.replay(parse_payload({"t": 2, "x": 5, "y": -3}))
        replayer._mouse.move.assert_called_once_with(5, -3)

    def test_move_prefers_relative_mover(self):
        rel_move = MagicMock()
        mouse = MagicMock()
        Replayer(mouse, MagicMock(), rel_move=rel_move).replay(parse_payload({"t": 2, "x": 1, "y": 2}))
        rel_move.assert_called_once_with(1, 2)
        mouse.move.assert_not_called()

    def test_press_and_release(self, replayer):
        replayer.replay(parse_payload({"t": 4, "b": 2}))
        replayer.replay(parse_payload({"t": 5, "b": 2}))
        replayer._mouse.press.assert_called_once_with(Button.right)
        replayer._mouse.release.assert_called_once_with(Button.right)

    def test_click_uses_detail_as_count(self, replayer):
        replayer.replay(parse_payload({"t": 3, "b": 0, "d": 2}))
        replayer._mouse.click.assert_called_once_with(Button.left, 2)

    def test_click_without_detail_clicks_once(self, replayer):
        replayer.replay(parse_payload({"t": 3, "b": 0}))
        replayer._mouse.click.assert_called_once_with(Button.left, 1)

    def test_unknown_button_is_skipped(self, replayer):
        replayer.replay(parse_payload({"t": 4, "b": 9}))
        replayer._mouse.press.assert_not_called()

    def test_wheel_scrolls(self, replayer):
        replayer.replay(parse_payload({"t": "wheel", "d": {"dx": 0, "dy": -2}}))
        replayer._mouse.scroll.assert_called_once_with(0, -2)


class TestStick:
    def test_moves_along_angle(self, replayer):
        replayer.replay(parse_payload({"t": 6, "r": math.pi / 2, "f": 0.5}))
        replayer._mouse.move.assert_called_once_with(0, 5)

    def test_zero_force_does_not_move(self, replayer):
        replayer.replay(parse_payload({"t": 6, "r": 1.0, "f": 0}))
        replayer._mouse.move.assert_not_called()

    def test_missing_fields_do_not_move(self, replayer):
        replayer.replay(parse_payload({"t": 6}))
        replayer._mouse.move.assert_not_called()


class TestIgnored:
    def test_devicebump_and_custom_events_are_ignored(self, replayer):
        replayer.replay(parse_payload({"t": 7, "g": "bump", "d": "left"}))
        replayer.replay(parse_payload({"t": "foo"}))
        assert replayer._mouse.method_calls == []
        assert replayer._keyboard.method_calls == []


class TestMalformedEvents:
    @pytest.mark.parametrize("payload", [
        {"t": 0, "c": None, "k": None},
        {"t": 2, "x": None, "y": 1},
        {"t": 2, "x": "5", "y": 1},
        {"t": 4, "b": [1]},
        {"t": 6, "r": "north", "f": 1},
        {"t": 6, "r": float("nan"), "f": 1},
        {"t": "wheel", "d": [1]},
        {"t": "wheel", "d": {"dx": "up", "dy": 1}},
    ])
    def test_skipped_without_input(self, replayer, payload):
        replayer.replay(parse_payload(payload))
        assert replayer._mouse.method_calls == []
        assert replayer._keyboard.method_calls == []

    def test_null_code_falls_back_to_key(self, replayer):
        replayer.replay(parse_payload({"t": 0, "c": None, "k": "a"}))
        replayer._keyboard.press.assert_called_once_with(KeyCode.from_char("a"))

    @pytest.mark.parametrize("detail", [None, "2", float("inf")])
    def test_click_with_bad_detail_clicks_once(self, replayer, detail):
        replayer.replay(parse_payload({"t": 3, "b": 0, "d": detail}))
        replayer._mouse.click.assert_called_once_with(Button.left, 1)


class TestRelativeMover:
    def test_unsupported_platform(self):
        assert make_rel_mover("darwin") is None

    def test_loader_error_falls_back(self, monkeypatch):
        def broken():
            raise OSError("libX11.so: cannot open shared object file")

        monkeypatch.setitem(replay._REL_MOVERS, "linux", broken)
        assert make_rel_mover("linux") is None

    def test_linux_without_x11(self, monkeypatch):
        monkeypatch.setattr("ctypes.util.find_library", lambda name: None)
        assert make_rel_mover("linux") is None

    def test_platform_factory_is_used(self, monkeypatch):
        mover = MagicMock()
        monkeypatch.setitem(replay._REL_MOVERS, "win32", lambda: mover)
        assert make_rel_mover("win32") is mover
