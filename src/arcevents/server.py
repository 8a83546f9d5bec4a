"""arcevents receiver: decodes events from WebSocket and replays them locally."""

import asyncio
import logging

import websockets

from .kinds import Topic, UnknownKindError
from .protocol import ProtocolError, parse_message, parse_payload, topic_message
from .utils import VERSION

logger = logging.getLogger(__name__)


def _make_handler(replayer, kinds):

    async def handler(websocket):
        print(f"client connected: {websocket.remote_address}")
        try:
            await websocket.send(topic_message(Topic.STATUS,
                                               {"state": "ready", "version": VERSION}))
            for name in kinds:
                await websocket.send(topic_message(Topic.ADD_EVENT_LISTENER, name))
            async for message in websocket:
                _dispatch(message, replayer)
        except websockets.ConnectionClosed:
            pass
        finally:
            print(f"client disconnected: {websocket.remote_address}")
    return handler


def _dispatch(message, replayer):
    try:
        topic, data = parse_message(message)
        if topic is not Topic.DATA:
            logger.debug("ignoring %s message from client", topic.value)
            return
        if not isinstance(data, dict):
            raise ProtocolError("data message carries no payload")
        event = parse_payload(data)
    except (ProtocolError, UnknownKindError) as e:
        print(f"dropped corrupt message: {e}")
        return
    try:
        replayer.replay(event)
    except (TypeError, ValueError, AttributeError, KeyError) as e:
        print(f"dropped {event.type} event that could not be replayed: {e!r}")


async def _serve(host: str, port: int, replayer, kinds):
    handler = _make_handler(replayer, kinds)
    async with websockets.serve(handler, host, port):
        print(f"arcevents server listening on {host}:{port}")
        await asyncio.Future()  # run forever


def run_server(host: str = "0.0.0.0", port: int = 8765, kinds=(),
               stick_speed: float = 8.0):
    from .replay import Replayer
    replayer = Replayer.local(stick_speed=stick_speed)
    try:
        asyncio.run(_serve(host, port, replayer, kinds))
    except KeyboardInterrupt:
        print('goodbye')
