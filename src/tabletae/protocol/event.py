""" The request envelope sent to the driver process. An :class:`AppleEvent`
    names its target, an event class/ID pair, and a record of parameters
    keyed by four-character keyword. The same instance is used on the client
    side to wait for the acknowledgement and the reply.
"""

import itertools
import threading

from .. import errors
from . import descriptor
from . import fields


# This is the version of the on-the-wire protocol implemented here,
# identified by a single byte.

version = b'a'


class AppleEvent:
    """ A single request for the driver. *target* is the application
        signature descriptor of the receiving process; *event_class* and
        *event_id* are four-character codes; *params* is an optional mapping
        of keyword to :class:`Descriptor`. If *reply* is False the sender
        does not expect a reply, only the transport acknowledgement.

        The *id* is normally left as None, and a locally unique one is
        generated so that responses can be tied back to this request.

        :ivar reply_record: The reply from the driver, once it arrives.
        :ivar error: The error dictionary reported by the driver, if any.
    """

    def __init__(self, event_class, event_id, target, params=None, reply=True, id=None):

        descriptor._tag(event_class)
        descriptor._tag(event_id)

        if isinstance(target, descriptor.Descriptor):
            pass
        else:
            raise errors.EncodingError('the event target must be a descriptor')

        if id is None:
            id = _id_next()

        self.id = id
        self.event_class = event_class
        self.event_id = event_id
        self.target = target
        self.reply = reply

        self.priority = fields.NORMAL_PRIORITY
        self.timeout = fields.DEFAULT_TIMEOUT

        self._params = dict()

        if params:
            for keyword, value in params.items():
                self.set_param(keyword, value)

        self.reply_record = None
        self.error = None

        self.ack_event = threading.Event()
        self.rep_event = threading.Event()


    def __repr__(self):
        return "AppleEvent(%r, %r, id=%r, params=%r)" % (self.event_class, self.event_id, self.id, self._params)


    @property
    def params(self):
        """ The parameters as an immutable :class:`RecordDescriptor`. """

        return descriptor.RecordDescriptor(self._params)


    def param(self, keyword):
        """ Return the parameter stored under *keyword*, or None. """

        return self._params.get(keyword)


    def set_param(self, keyword, value):
        """ Store the :class:`Descriptor` *value* under *keyword*. """

        descriptor._tag(keyword)

        if isinstance(value, descriptor.Descriptor):
            pass
        else:
            raise errors.EncodingError('event parameters must be descriptors, not ' + repr(value))

        self._params[keyword] = value


    def _complete_ack(self):
        """ The event has been acknowledged; signal any callers blocking via
            :func:`wait_ack` to proceed.
        """

        self.ack_event.set()


    def _complete(self, reply_record, error=None):
        """ Locally store the reply and signal any callers blocking via
            :func:`wait` to proceed.
        """

        self.reply_record = reply_record
        self.error = error
        self.ack_event.set()
        self.rep_event.set()


    def poll(self):
        """ Return True if the reply has arrived, otherwise False. """

        return self.rep_event.is_set()


    def wait_ack(self, timeout):
        """ Block until the event has been acknowledged. Returns True if it
            was, False if *timeout* expired first. If the *timeout* is None
            it will block indefinitely.
        """

        return self.ack_event.wait(timeout)


    def wait(self, timeout):
        """ Block until the reply arrives or *timeout* expires. Returns True
            if the reply arrived.
        """

        return self.rep_event.wait(timeout)


# end of class AppleEvent



_id_min = 0
_id_max = 0xFFFFFFFF
_id_lock = threading.Lock()
_id_ticker = itertools.count(_id_min)


def _id_next():
    """ Return the next event identification number, as bytes. """

    global _id_ticker
    _id_lock.acquire()
    id = next(_id_ticker)

    if id >= _id_max:
        _id_ticker = itertools.count(_id_min)

        if id > _id_max:
            id = next(_id_ticker)

    _id_lock.release()

    id = '%08x' % (id)
    id = id.encode()
    return id


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
