import pytest

import tabletae
from tabletae.protocol import descriptor
from tabletae.protocol import fields
from tabletae.protocol import routing
from tabletae.protocol.event import AppleEvent
from tabletae.transport.zmq import framing


def make_event():

    target = descriptor.Descriptor(fields.TYPE_APPL_SIGNATURE, b'WaCM')
    event = AppleEvent(fields.SUITE_CORE, fields.EVENT_GET_DATA, target)
    event.set_param(fields.KEY_DIRECT_OBJECT, routing.routing_table_for_tablet(1))
    event.set_param(fields.KEY_REQUESTED_TYPE, descriptor.encode_type(fields.TYPE_UTF8_TEXT))
    event.priority = fields.HIGH_PRIORITY
    event.timeout = 1.5
    return event


def test_event_frames():

    event = make_event()
    frames = framing.to_event_frames(event)

    assert len(frames) == 6
    assert frames[2] == framing.EVT

    decoded = framing.from_event_frames(frames)

    assert decoded.id == event.id
    assert decoded.event_class == fields.SUITE_CORE
    assert decoded.event_id == fields.EVENT_GET_DATA
    assert decoded.target == event.target
    assert decoded.params == event.params
    assert decoded.priority == fields.HIGH_PRIORITY
    assert decoded.timeout == 1.5
    assert decoded.reply == True


def test_event_ids():

    first = make_event()
    second = make_event()

    assert first.id != second.id
    assert isinstance(first.id, bytes)


def test_version_mismatch():

    frames = list(framing.to_event_frames(make_event()))
    frames[0] = b'z'

    with pytest.raises(tabletae.TransportError):
        framing.from_event_frames(frames)

    with pytest.raises(tabletae.TransportError):
        framing.from_event_frames(frames[1:])

    response = framing.to_response_frames(b'00000001', framing.REP)
    response = (b'z',) + response[1:]

    event_id, kind, reply, error = framing.from_response_frames(response)

    assert event_id == b'00000001'
    assert kind == framing.REP
    assert reply is None
    assert error['type'] == 'TransportError'


def test_response_frames():

    reply = descriptor.RecordDescriptor({fields.KEY_DIRECT_OBJECT: descriptor.encode_uint32(1001)})
    error = tabletae.errors.to_remote(tabletae.InvalidIndexError('no tablet 3'))

    frames = framing.to_response_frames(b'00000002', framing.REP, reply=reply)
    assert framing.from_response_frames(frames) == (b'00000002', framing.REP, reply, None)

    frames = framing.to_response_frames(b'00000003', framing.REP, error=error)
    event_id, kind, decoded, decoded_error = framing.from_response_frames(frames)

    assert decoded is None
    assert decoded_error == error

    frames = framing.to_response_frames(b'00000004', framing.ACK)
    assert framing.from_response_frames(frames) == (b'00000004', framing.ACK, None, None)


def test_event_params():

    event = make_event()

    with pytest.raises(tabletae.EncodingError):
        event.set_param(fields.KEY_DATA, 'not a descriptor')

    with pytest.raises(tabletae.EncodingError):
        AppleEvent(fields.SUITE_CORE, fields.EVENT_GET_DATA, 'WaCM')

    assert event.param(fields.KEY_DATA) is None
    assert event.poll() == False

    event._complete(None)
    assert event.poll() == True
    assert event.wait(0) == True


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
