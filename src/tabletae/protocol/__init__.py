from . import fields
from . import descriptor
from . import routing
from . import event

from .fields import ControlType
from .descriptor import Descriptor, ListDescriptor, RecordDescriptor, ObjectSpecifier
from .event import AppleEvent


"""
tabletae Protocol Layer
=======================

This package defines the transport-agnostic protocol used to talk to the
tablet driver: the typed descriptors every value travels as, the object
specifier chains that address entities in the driver, and the request
envelope.

The protocol layer MUST NOT depend on any transport implementation.

---------------------------------------------------------------------

Layer Overview
--------------

Driver operations (tabletae.driver)
    create/destroy contexts, get/set attributes, counts

    │
    ▼
Routing Tables (routing.py)
    Object specifier chains for driver, tablet, transducer,
    context, control and function

    │
    ▼
Request Envelope (event.py)
    AppleEvent: target, event class/ID, parameter record,
    locally unique id, ACK/reply synchronization

    │
    ▼
Descriptor Codec (descriptor.py)
    Immutable typed records and their flattened wire form

    │
    ▼
Field Vocabulary (fields.py)
    Canonical four-character codes and enumerations

---------------------------------------------------------------------

Below the Protocol Layer
------------------------

Session (tabletae.transport.session)
    Resolves the target, applies priority and timeout, and
    implements send / send_expecting_reply / post

Framing and transport (tabletae.transport.zmq)
    Moves events and replies as ZeroMQ multipart messages

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
