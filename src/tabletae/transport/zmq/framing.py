"""ZMQ multipart framing for driver events.

Request (DEALER -> ROUTER)
    (ROUTER identity...), version, id, b'EVT', header_json, target, params

Response (ROUTER -> DEALER)
    (ROUTER identity...), version, id, b'ACK' | b'REP', error_json, reply

The header carries the event class/ID, priority, reply mode and timeout;
the target, parameters and reply are flattened descriptors. An empty error
frame means success, an empty reply frame means no reply record.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ... import errors
from ... import json
from ...protocol import descriptor
from ...protocol.event import AppleEvent, version
from ..base import TransportError


EVT = b'EVT'
ACK = b'ACK'
REP = b'REP'


def to_event_frames(event: AppleEvent) -> Tuple[bytes, ...]:
    """Encode an AppleEvent as request multipart frames."""

    header = dict()
    header['class'] = event.event_class
    header['id'] = event.event_id
    header['priority'] = event.priority
    header['reply'] = bool(event.reply)
    header['timeout'] = event.timeout

    return (
        version,
        event.id,
        EVT,
        json.dumps(header),
        event.target.flatten(),
        event.params.flatten(),
    )


def from_event_frames(parts: Sequence[bytes]) -> AppleEvent:
    """Decode request frames, without any routing prefix, to an AppleEvent.

    A TransportError is raised for a protocol version mismatch or a frame
    layout this module does not understand; malformed descriptors raise
    EncodingError.
    """

    if len(parts) != 6:
        raise TransportError(f"expected 6 request frames, got {len(parts)}")

    their_version, event_id, kind, header, target, params = parts

    if their_version != version:
        raise TransportError(
            f"message is protocol {their_version!r}, recipient expects {version!r}"
        )

    if kind != EVT:
        raise TransportError(f"unexpected request kind {kind!r}")

    header = json.loads(header)
    params = descriptor.unflatten(params)

    if isinstance(params, descriptor.RecordDescriptor):
        pass
    else:
        raise errors.EncodingError("event parameters must be a record")

    event = AppleEvent(
        header['class'],
        header['id'],
        descriptor.unflatten(target),
        params=dict(params.items()),
        reply=header.get('reply', True),
        id=bytes(event_id),
    )
    event.priority = header.get('priority', event.priority)
    event.timeout = header.get('timeout', event.timeout)
    return event


def to_response_frames(event_id: bytes, kind: bytes, reply=None, error: Optional[dict] = None) -> Tuple[bytes, ...]:
    """Encode an ACK or REP for the event identified by event_id."""

    error_bytes = json.dumps(error) if error else b""
    reply_bytes = reply.flatten() if reply is not None else b""
    return (version, event_id, kind, error_bytes, reply_bytes)


def from_response_frames(parts: Sequence[bytes]):
    """Decode response frames into (event_id, kind, reply, error).

    A version mismatch is represented as an error dictionary rather than
    raised, so that it can be handed back to the waiting caller.
    """

    if len(parts) != 5:
        raise TransportError(f"expected 5 response frames, got {len(parts)}")

    their_version, event_id, kind, error_bytes, reply_bytes = parts

    if their_version != version:
        error = {
            "type": "TransportError",
            "code": errors.ERR_AE_EVENT_FAILED,
            "text": f"message is protocol {their_version!r}, recipient expects {version!r}",
        }
        return event_id, REP, None, error

    error = json.loads(error_bytes) if error_bytes else None
    reply = descriptor.unflatten(reply_bytes) if reply_bytes else None
    return event_id, kind, reply, error
