"""Tests for arcevents.server: the connection handler with a fake websocket."""

import asyncio
import json
from unittest.mock import MagicMock

from arcevents.events import KeyboardEvent, MouseEvent
from arcevents.kinds import Topic
from arcevents.protocol import topic_message
from arcevents.server import _dispatch, _make_handler
from arcevents.utils import VERSION


class FakeWebSocket:
    remote_address = ("127.0.0.1", 50000)

    def __init__(self, incoming):
        self.sent = []
        self._incoming = list(incoming)

    async def send(self, message):
        self.sent.append(json.loads(message))

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._incoming:
            raise StopAsyncIteration
        return self._incoming.pop(0)


def _run_handler(incoming, kinds=("keydown", "wheel")):
    replayer = MagicMock()
    ws = FakeWebSocket(incoming)
    asyncio.run(_make_handler(replayer, kinds)(ws))
    return replayer, ws


class TestHandler:
    def test_greets_with_status_and_subscriptions(self):
        _, ws = _run_handler([])
        assert ws.sent == [
            {"topic": "status", "data": {"state": "ready", "version": VERSION}},
            {"topic": "add_el", "data": "keydown"},
            {"topic": "add_el", "data": "wheel"},
        ]

    def test_replays_decoded_events(self):
        replayer, _ = _run_handler([
            topic_message(Topic.DATA, {"t": 0, "c": "KeyA", "k": "a"}),
            topic_message(Topic.DATA, {"t": 2, "x": 5, "y": -3}),
        ])
        events = [c.args[0] for c in replayer.replay.call_args_list]
        assert events == [
            KeyboardEvent("keydown", code="KeyA", key="a"),
            MouseEvent("mousemove", movement_x=5, movement_y=-3),
        ]

    def test_survives_corrupt_messages(self, capsys):
        replayer, _ = _run_handler([
            "not json",
            topic_message(Topic.DATA, {"t": 999}),
            topic_message(Topic.DATA, {"t": 1, "c": "KeyA", "k": "a"}),
        ])
        assert replayer.replay.call_count == 1
        out = capsys.readouterr().out
        assert out.count("dropped corrupt message") == 2
        assert "client disconnected" in out


class TestDispatch:
    def test_non_data_topics_are_ignored(self):
        replayer = MagicMock()
        _dispatch(topic_message(Topic.ADD_EVENT_LISTENER, "keydown"), replayer)
        replayer.replay.assert_not_called()

    def test_data_without_payload_is_dropped(self, capsys):
        replayer = MagicMock()
        _dispatch(topic_message(Topic.DATA), replayer)
        replayer.replay.assert_not_called()
        assert "no payload" in capsys.readouterr().out

    def test_replay_failure_does_not_end_connection(self, capsys):
        replayer = MagicMock()
        replayer.replay.side_effect = [AttributeError("'NoneType' object has no attribute 'startswith'"), None]
        ws = FakeWebSocket([
            topic_message(Topic.DATA, {"t": 0, "c": None, "k": "a"}),
            topic_message(Topic.DATA, {"t": 0, "c": "KeyB", "k": "b"}),
        ])
        asyncio.run(_make_handler(replayer, ())(ws))
        assert replayer.replay.call_args_list[-1].args[0] == KeyboardEvent("keydown", code="KeyB", key="b")
        assert "could not be replayed" in capsys.readouterr().out
