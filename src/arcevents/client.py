"""arcevents sender: captures mouse/keyboard events and forwards them over WebSocket."""

import asyncio
import contextlib
import logging

import websockets
from pynput.keyboard import Key, Listener as KeyboardListener
from pynput.mouse import Listener as MouseListener

from .events import CustomEvent, KeyboardEvent, MouseEvent
from .keymap import button_to_index, key_to_fields
from .kinds import Topic
from .protocol import ProtocolError, create_payload, parse_message, topic_message

logger = logging.getLogger(__name__)

WHEEL = "wheel"


class EventBridge:
    """Bridges pynput listener threads to an asyncio queue.

    Only events whose name the receiver subscribed to are forwarded.
    Ctrl+Esc stops the sender.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue,
                 suppress: bool = False):
        self._loop = loop
        self._queue = queue
        self._suppress = suppress
        self._ctrl_pressed = False
        self._ctrl_key = None
        self._last_mouse_pos = None
        self.subscriptions = set()

    def subscribe(self, name: str):
        self.subscriptions.add(name)

    def unsubscribe(self, name: str):
        self.subscriptions.discard(name)

    def _put(self, data):
        self._loop.call_soon_threadsafe(self._queue.put_nowait, data)

    def forward(self, event):
        if event.type not in self.subscriptions:
            return
        payload = create_payload(event)
        if payload is None:
            return
        self._put(topic_message(Topic.DATA, payload))

    # mouse callbacks
    def on_move(self, x, y):
        if self._last_mouse_pos is not None:
            lx, ly = self._last_mouse_pos
            self.forward(MouseEvent("mousemove", movement_x=x - lx, movement_y=y - ly))
        # When suppress=True the cursor is frozen; each callback reports
        # frozen_pos + this_event's_raw_delta.  Keep _last pinned to the
        # frozen position so we always subtract it, yielding the true delta.
        if self._last_mouse_pos is None or not self._suppress:
            self._last_mouse_pos = (x, y)

    def on_click(self, x, y, button, pressed):
        if not self._suppress:
            self._last_mouse_pos = (x, y)
        index = button_to_index(button)
        if index is None:
            logger.debug("not forwarding unmapped button %s", button)
            return
        self.forward(MouseEvent("mousedown" if pressed else "mouseup", button=index))

    def on_scroll(self, x, y, dx, dy):
        if not self._suppress:
            self._last_mouse_pos = (x, y)
        self.forward(CustomEvent(WHEEL, detail={"dx": dx, "dy": dy}))

    # keyboard callbacks
    def on_press(self, key):
        if key in (Key.ctrl_l, Key.ctrl_r):
            self._ctrl_pressed = True
            self._ctrl_key = key
        elif self._ctrl_pressed and key == Key.esc:
            # release Ctrl on the receiver before stopping
            code, value = key_to_fields(self._ctrl_key)
            self.forward(KeyboardEvent("keyup", code=code, key=value))
            self._put(None)  # sentinel: stop send loop
            return False  # stop keyboard listener
        code, value = key_to_fields(key)
        self.forward(KeyboardEvent("keydown", code=code, key=value))

    def on_release(self, key):
        if key in (Key.ctrl_l, Key.ctrl_r):
            self._ctrl_pressed = False
        code, value = key_to_fields(key)
        self.forward(KeyboardEvent("keyup", code=code, key=value))


def handle_control(bridge: EventBridge, message: str):
    """Apply one receiver message to the bridge."""
    try:
        topic, data = parse_message(message)
    except ProtocolError as e:
        print(f"ignoring message from server: {e}")
        return
    if topic in (Topic.ADD_EVENT_LISTENER, Topic.REMOVE_EVENT_LISTENER) and not isinstance(data, str):
        print(f"ignoring {topic.value} message from server: event name {data!r} is not a string")
        return
    if topic is Topic.ADD_EVENT_LISTENER:
        bridge.subscribe(data)
    elif topic is Topic.REMOVE_EVENT_LISTENER:
        bridge.unsubscribe(data)
    elif topic is Topic.STATUS:
        print(f"server status: {data}")
    else:
        logger.debug("unexpected %s message from server", topic.value)


async def _receive(ws, bridge: EventBridge):
    try:
        async for message in ws:
            handle_control(bridge, message)
    except websockets.ConnectionClosed:
        pass


async def _stop_task(task: asyncio.Task):
    """Cancel task and wait for it, re-raising anything it failed with."""
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


async def _send(host: str, port: int, suppress: bool):
    uri = f"ws://{host}:{port}"
    queue: asyncio.Queue = asyncio.Queue()
    loop = asyncio.get_running_loop()
    bridge = EventBridge(loop, queue, suppress=suppress)

    ml = MouseListener(
        on_move=bridge.on_move,
        on_click=bridge.on_click,
        on_scroll=bridge.on_scroll,
        suppress=suppress,
    )
    kl = KeyboardListener(
        on_press=bridge.on_press,
        on_release=bridge.on_release,
        suppress=suppress,
    )
    ml.start()
    kl.start()

    print(f"connecting to {uri} ...")
    try:
        async with websockets.connect(uri) as ws:
            mode = "suppress ON" if suppress else "suppress off"
            print(f"connected, ACTIVE ({mode}, Ctrl+Esc to stop)")
            receiver = asyncio.create_task(_receive(ws, bridge))
            try:
                while True:
                    message = await queue.get()
                    if message is None:
                        break
                    await ws.send(message)
            finally:
                await _stop_task(receiver)
    finally:
        ml.stop()
        kl.stop()
        print("stopped")


def run_client(host: str = "localhost", port: int = 8765, suppress: bool = False):
    asyncio.run(_send(host, port, suppress))
