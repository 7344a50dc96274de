"""ZeroMQ request/response transport.

The client side is a DEALER socket connected to the driver's endpoint; the
driver side is a ROUTER socket. Every event is acknowledged on receipt, and
answered with a reply unless the sender asked for none.

    - Client / Server classes
    - client(endpoint) cache helper
"""

from __future__ import annotations

import atexit
import concurrent.futures
import logging
import queue
import threading
from typing import Dict, Optional, Tuple

import zmq

from ... import errors
from ...protocol import descriptor
from ...protocol.event import AppleEvent
from ..base import Transport, TransportConnectionError, TransportPortError, TransportTimeout
from .framing import ACK, REP, from_event_frames, from_response_frames, to_event_frames, to_response_frames


log = logging.getLogger(__name__)

zmq_context = zmq.Context()


class Client(Transport):
    """Issue events via a ZeroMQ DEALER socket and receive responses.

    All socket operations happen on one background thread; callers hand
    their events over through a queue and an inproc signal socket.
    """

    ack_timeout = 0.5

    def __init__(self, endpoint: str, ack_timeout: Optional[float] = None):
        self.endpoint = endpoint

        if ack_timeout is not None:
            self.ack_timeout = ack_timeout

        identity = f"request.Client.{id(self)}".encode()

        self.socket = zmq_context.socket(zmq.DEALER)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.identity = identity

        try:
            self.socket.connect(endpoint)
        except zmq.ZMQError as exc:
            self.socket.close()
            raise TransportConnectionError(f"cannot connect to {endpoint}: {exc}") from exc

        self._outbox = queue.SimpleQueue()

        internal = f"inproc://request.Client:signal:{id(self)}"
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)
        self._signal_lock = threading.Lock()

        self.shutdown = False
        self._pending: Dict[bytes, AppleEvent] = {}
        self._thread = threading.Thread(target=self.run, daemon=True)
        self._thread.start()

    def _handle_incoming(self, parts: Tuple[bytes, ...]) -> None:
        try:
            event_id, kind, reply, error = from_response_frames(parts)
        except Exception:
            log.exception("discarding malformed response from %s", self.endpoint)
            return

        pending = self._pending.get(event_id)
        if pending is None:
            # The caller gave up waiting.
            return

        if kind == ACK:
            pending._complete_ack()
            if not pending.reply:
                self._pending.pop(event_id, None)
            return

        pending._complete(reply, error)
        self._pending.pop(event_id, None)

    def _handle_outgoing(self) -> None:
        # Clear one signal and send one event.
        self._signal_rx.recv(flags=zmq.NOBLOCK)

        try:
            event: AppleEvent = self._outbox.get(block=False)
        except queue.Empty:
            return

        self.socket.send_multipart(to_event_frames(event))

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)
        poller.register(self._signal_rx, zmq.POLLIN)

        while not self.shutdown:
            for active, _flag in poller.poll(1000):
                if active == self._signal_rx:
                    self._handle_outgoing()
                elif active == self.socket:
                    parts = tuple(self.socket.recv_multipart())
                    self._handle_incoming(parts)

        self.socket.close()
        self._signal_rx.close()

    def send(self, event: AppleEvent, ack_timeout: Optional[float] = None) -> None:
        if ack_timeout is None:
            ack_timeout = self.ack_timeout

        if self.shutdown:
            raise TransportConnectionError(f"client for {self.endpoint} is closed")

        self._pending[event.id] = event
        self._outbox.put(event)

        with self._signal_lock:
            self._signal_tx.send(b"")

        if not event.wait_ack(ack_timeout):
            self._pending.pop(event.id, None)
            raise TransportTimeout(
                f"{event.event_class}/{event.event_id} @ {self.endpoint}: no ACK in {ack_timeout:.2f} sec"
            )

    def forget(self, event: AppleEvent) -> None:
        """Stop tracking an event whose caller stopped waiting for it."""
        self._pending.pop(event.id, None)

    def close(self) -> None:
        if self.shutdown:
            return

        self.shutdown = True

        with self._signal_lock:
            self._signal_tx.send(b"")
            self._signal_tx.close()

        self._thread.join(timeout=2)


class Server:
    """Receive events via a ZeroMQ ROUTER socket and respond to them.

    Subclasses implement req_handler(); this is the driver side of the
    transport, used to stand up a driver in-process.
    """

    worker_count = 8

    def __init__(self, endpoint: str):
        self.endpoint = endpoint

        self.socket = zmq_context.socket(zmq.ROUTER)
        self.socket.setsockopt(zmq.LINGER, 0)

        try:
            self.socket.bind(endpoint)
        except zmq.ZMQError as exc:
            self.socket.close()
            raise TransportPortError(f"cannot bind {endpoint}: {exc}") from exc

        self._responses = queue.SimpleQueue()

        internal = f"inproc://request.Server:signal:{id(self)}"
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)
        self._signal_lock = threading.Lock()

        self.shutdown = False
        self.workers = concurrent.futures.ThreadPoolExecutor(max_workers=self.worker_count)
        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()

    # --- request handling hooks ---
    def req_handler(self, event: AppleEvent) -> Optional[descriptor.RecordDescriptor]:
        """Override in subclasses.

        Return the reply record, or None for an empty reply. Raising a
        TabletDriverError reports that error back to the sender.
        """

        raise errors.RemoteError(
            f"event {event.event_class}/{event.event_id} not handled",
            code=errors.ERR_AE_EVENT_FAILED,
        )

    def send(self, prefix: Tuple[bytes, ...], frames: Tuple[bytes, ...]) -> None:
        self._responses.put(prefix + frames)

        with self._signal_lock:
            self._signal_tx.send(b"")

    # --- internal ---
    def _rep_outgoing(self) -> None:
        self._signal_rx.recv(flags=zmq.NOBLOCK)

        try:
            frames = self._responses.get(block=False)
        except queue.Empty:
            return

        self.socket.send_multipart(frames)

    def _req_incoming(self, parts: Tuple[bytes, ...]) -> None:
        # ROUTER sockets prepend the sender's identity.
        prefix = parts[:1]
        parts = parts[1:]

        try:
            event = from_event_frames(parts)
        except Exception as exc:
            if len(parts) > 1:
                error = errors.to_remote(exc)
                self.send(prefix, to_response_frames(parts[1], REP, error=error))
            log.warning("rejected malformed event: %s", exc)
            return

        self.send(prefix, to_response_frames(event.id, ACK))

        reply = None
        error = None

        try:
            reply = self.req_handler(event)
        except errors.TabletDriverError as exc:
            error = errors.to_remote(exc)
        except Exception as exc:
            log.exception("handler failed for %r", event)
            error = errors.to_remote(exc)
            error["code"] = errors.ERR_AE_EVENT_FAILED

        if not event.reply:
            return

        if reply is None and error is None:
            reply = descriptor.RecordDescriptor()

        self.send(prefix, to_response_frames(event.id, REP, reply=reply, error=error))

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)
        poller.register(self._signal_rx, zmq.POLLIN)

        while not self.shutdown:
            for active, _flag in poller.poll(1000):
                if active == self._signal_rx:
                    self._rep_outgoing()
                elif active == self.socket:
                    parts = tuple(self.socket.recv_multipart())
                    self.workers.submit(self._req_incoming, parts)

        self.socket.close()
        self._signal_rx.close()

    def close(self) -> None:
        if self.shutdown:
            return

        self.shutdown = True
        self.workers.shutdown(wait=True)

        with self._signal_lock:
            self._signal_tx.send(b"")
            self._signal_tx.close()

        self.thread.join(timeout=2)


# --- convenience helpers ---

_client_cache: Dict[str, Client] = {}
_client_lock = threading.Lock()


def client(endpoint: str, ack_timeout: Optional[float] = None) -> Client:
    """Return the cached Client for endpoint, creating it if necessary."""

    with _client_lock:
        c = _client_cache.get(endpoint)
        if c is None or c.shutdown:
            c = Client(endpoint, ack_timeout)
            _client_cache[endpoint] = c
        return c


def _cleanup() -> None:
    with _client_lock:
        clients = list(_client_cache.values())
        _client_cache.clear()

    for c in clients:
        c.close()

    zmq_context.destroy(linger=0)


atexit.register(_cleanup)
