""" The send primitives every driver operation funnels through. Each one is
    a single, blocking, timeout-bounded attempt; nothing here retries.

    The event's target is an application signature descriptor; the
    endpoint for that signature comes from :mod:`tabletae.config`, and the
    cached transport client for that endpoint is used to deliver the event.
"""

import time

from .. import config
from .. import errors
from ..protocol import descriptor
from ..protocol import fields
from . import base
from .zmq import request


_transport_errors = dict()

for _class in (base.TransportError, base.TransportTimeout, base.TransportConnectionError, base.TransportPortError):
    _transport_errors[_class.__name__] = _class

del _class


def resolve_timeout(timeout):
    """ Return the number of seconds to wait for a reply, or None to wait
        forever. None, zero and negative values mean the configured default;
        the :data:`NO_TIMEOUT` sentinel is passed through as "forever".
    """

    if timeout == fields.NO_TIMEOUT:
        return None

    if timeout is None or timeout <= 0:
        return config.get().timeout

    return float(timeout)



def connect(target):
    """ Return the transport for the application signature descriptor
        *target*. A :class:`TransportConnectionError` is raised if the
        configuration has no route to that signature.
    """

    if isinstance(target, descriptor.Descriptor) and target.type == fields.TYPE_APPL_SIGNATURE:
        pass
    else:
        raise base.TransportConnectionError('cannot route to target ' + repr(target))

    signature = target.data.decode('latin-1')
    configuration = config.get()
    endpoint = configuration.lookup(signature)

    if endpoint is None:
        raise base.TransportConnectionError('no endpoint configured for %r' % (signature))

    return request.client(endpoint, configuration.ack_timeout)



def remote_exception(error):
    """ Rebuild the exception for an *error* dictionary carried by a reply.
    """

    try:
        exception_class = _transport_errors[error.get('type')]
    except KeyError:
        return errors.from_remote(error)

    code = error.get('code', errors.ERR_AE_EVENT_FAILED)
    return exception_class(error.get('text', ''), code=code, remote=True)



def _deliver(event, priority, timeout, reply):
    """ Hand *event* to the transport. Returns the transport, the resolved
        wait in seconds and the monotonic deadline for the reply; the last
        two are None when there is no bound.
    """

    wait = resolve_timeout(timeout)

    event.priority = priority
    event.reply = reply

    transport = connect(event.target)
    ack_timeout = config.get().ack_timeout

    if wait is None:
        event.timeout = fields.NO_TIMEOUT
        deadline = None
    else:
        event.timeout = wait
        deadline = time.monotonic() + wait
        ack_timeout = min(ack_timeout, wait)

    transport.send(event, ack_timeout)

    return transport, wait, deadline



def _await(event, priority, timeout):

    transport, wait, deadline = _deliver(event, priority, timeout, True)

    if deadline is None:
        remaining = None
    else:
        remaining = max(deadline - time.monotonic(), 0)

    if event.wait(remaining):
        return

    transport.forget(event)
    raise base.TransportTimeout('%s/%s: no reply in %.2f sec' % (event.event_class, event.event_id, wait))



def send(event, priority=fields.NORMAL_PRIORITY, timeout=fields.DEFAULT_TIMEOUT):
    """ Send *event* and wait for the driver to handle it. Returns the
        status code: :data:`errors.NO_ERR` on success, otherwise the
        driver's (negative) error code. Transport failures, including
        timeouts, are raised as :class:`TransportError`.
    """

    _await(event, priority, timeout)

    error = event.error

    if error is None:
        return errors.NO_ERR

    if error.get('type') in _transport_errors:
        raise remote_exception(error)

    code = error.get('code')

    if isinstance(code, int) and code != errors.NO_ERR:
        return code

    return errors.ERR_AE_EVENT_FAILED



def send_expecting_reply(event, priority=fields.NORMAL_PRIORITY, timeout=fields.DEFAULT_TIMEOUT):
    """ Send *event* and return the driver's reply as a
        :class:`RecordDescriptor`. A rejection by the driver is raised as
        the corresponding :class:`TabletDriverError`, flagged as remote.
    """

    _await(event, priority, timeout)

    if event.error is not None:
        raise remote_exception(event.error)

    reply = event.reply_record

    if reply is None:
        return descriptor.RecordDescriptor()

    if isinstance(reply, descriptor.RecordDescriptor):
        return reply

    raise errors.TypeMismatchError('expected a reply record, got %r' % (reply.type))



def post(event, priority=fields.NORMAL_PRIORITY):
    """ Send *event* without waiting for a reply. Returns once the
        transport has acknowledged delivery.
    """

    _deliver(event, priority, fields.DEFAULT_TIMEOUT, False)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
