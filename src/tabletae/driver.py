""" Access to the tablet driver.

    To set values in the driver, create a "context" to represent your
    application and its customized values. Contexts are tied both to your
    application and to a specific tablet; contexts take the place of tablets
    in the object hierarchy.

    Values can be retrieved directly without creating a context. However,
    if your application does create a context, it should retrieve values
    through the context instead of by querying the tablet directly (see the
    "raw" versus context-based builders in :mod:`tabletae.protocol.routing`).

    Every operation here is a single blocking request; the only state that
    outlives a call is the context handle, which belongs to the caller.
"""

import logging

from . import config
from . import errors
from .protocol import descriptor
from .protocol import fields
from .protocol import routing
from .protocol.event import AppleEvent
from .transport import session


log = logging.getLogger(__name__)

priority = fields.HIGH_PRIORITY


def driver_target():
    """ Return the application signature descriptor that identifies the
        driver process as the target of every event sent from here.
    """

    signature = config.get().signature
    return descriptor.Descriptor(fields.TYPE_APPL_SIGNATURE, signature.encode('latin-1'))



def _event(event_class, event_id):
    return AppleEvent(event_class, event_id, driver_target())



def _direct_object(reply):

    found = reply.descriptor_for_keyword(fields.KEY_DIRECT_OBJECT)

    if found is None:
        raise errors.TypeMismatchError('the reply does not carry a direct object')

    return found



def _attribute_specifier(attribute, routing_table):
    """ Address the property *attribute* of the object at *routing_table*.
    """

    key = descriptor.encode_type(attribute)
    return descriptor.ObjectSpecifier(fields.FORM_PROPERTY_ID, fields.FORM_PROPERTY_ID, key, routing_table)



def create_context_for_tablet(tablet, context_type=fields.CONTEXT_BLANK, timeout=None):
    """ Ask the driver to create a context for the 1-based *tablet* index.
        A context is an application-specific sandbox in which the
        application may customize tablet properties; *context_type* says how
        it is initialized, and must be :data:`CONTEXT_BLANK` or
        :data:`CONTEXT_DEFAULT`. The nonzero context handle is returned.

        An invalid index raises :class:`InvalidIndexError`, and an unknown
        context type :class:`EncodingError`, before anything is sent; any
        failure after that point, including a timeout, raises
        :class:`ContextCreationError`.
    """

    if isinstance(context_type, str) and context_type in fields.CONTEXT_TYPES:
        pass
    else:
        raise errors.EncodingError('unknown context type: ' + repr(context_type))

    event = _event(fields.SUITE_CORE, fields.EVENT_CREATE_ELEMENT)
    event.set_param(fields.KEY_OBJECT_CLASS, descriptor.encode_type(fields.CLASS_CONTEXT))
    event.set_param(fields.KEY_INSERT_HERE, routing.routing_table_for_tablet(tablet))
    event.set_param(fields.KEY_CONTEXT_TYPE, descriptor.encode_type(context_type))

    try:
        reply = session.send_expecting_reply(event, priority, timeout)
        context = descriptor.decode_uint32(_direct_object(reply))
    except errors.TabletDriverError as exception:
        raise errors.ContextCreationError('cannot create a context for tablet %d: %s' % (tablet, exception)) from exception

    if context == 0:
        raise errors.ContextCreationError('the driver returned a null context for tablet %d' % (tablet))

    return context



def destroy_context(context, timeout=None):
    """ Delete a context created by :func:`create_context_for_tablet`. An
        application must destroy the contexts it creates when it is done
        with them, or upon termination. Destroying a context twice is an
        error, reported by the driver as :class:`InvalidContextError`.
    """

    event = _event(fields.SUITE_CORE, fields.EVENT_DELETE)
    event.set_param(fields.KEY_DIRECT_OBJECT, routing.routing_table_for_context(context))

    session.send_expecting_reply(event, priority, timeout)



def data_for_attribute(attribute, data_type, routing_table, timeout=None):
    """ Query the driver for *attribute* of the object addressed by
        *routing_table*, which is the result of one of the builders in
        :mod:`tabletae.protocol.routing`. *data_type* is the type code the
        value should be returned as. The value is returned as a
        :class:`Descriptor`.
    """

    event = _event(fields.SUITE_CORE, fields.EVENT_GET_DATA)
    event.set_param(fields.KEY_DIRECT_OBJECT, _attribute_specifier(attribute, routing_table))
    event.set_param(fields.KEY_REQUESTED_TYPE, descriptor.encode_type(data_type))

    reply = session.send_expecting_reply(event, priority, timeout)
    return _direct_object(reply)



def set_bytes(data, size, data_type, attribute, routing_table, timeout=None):
    """ Set *attribute* of the object addressed by *routing_table* to the
        first *size* bytes of *data*, tagged as *data_type*. Returns True if
        the driver accepted the value and False if it refused it.

        Bad input raises :class:`EncodingError` before anything is sent;
        transport failures are raised as usual.
    """

    payload = descriptor.encode_bytes(data, size, data_type)

    event = _event(fields.SUITE_CORE, fields.EVENT_SET_DATA)
    event.set_param(fields.KEY_DIRECT_OBJECT, _attribute_specifier(attribute, routing_table))
    event.set_param(fields.KEY_REQUESTED_TYPE, descriptor.encode_type(data_type))
    event.set_param(fields.KEY_DATA, payload)

    status = session.send(event, priority, timeout)
    return status == errors.NO_ERR



def _count(object_class, routing_table, timeout):

    event = _event(fields.SUITE_CORE, fields.EVENT_COUNT_ELEMENTS)
    event.set_param(fields.KEY_OBJECT_CLASS, descriptor.encode_type(object_class))
    event.set_param(fields.KEY_DIRECT_OBJECT, routing_table)

    reply = session.send_expecting_reply(event, priority, timeout)
    return descriptor.decode_uint32(_direct_object(reply))



def tablet_count(timeout=None):
    """ Return the number of tablets known to the driver. """

    return _count(fields.CLASS_TABLET, routing.routing_table_for_driver(), timeout)



def transducer_count_for_tablet(tablet, timeout=None):
    """ Return the number of transducers on the 1-based *tablet*. """

    return _count(fields.CLASS_TRANSDUCER, routing.routing_table_for_tablet(tablet), timeout)



def control_count_of_context(context, control_type, timeout=None):
    """ Return the number of controls of kind *control_type* on the tablet
        behind *context*.
    """

    object_class = routing.desc_type_from_control_type(control_type)
    routing_table = routing.routing_table_for_context(context)

    return _count(object_class, routing_table, timeout)



def function_count_of_control(control, context, control_type, timeout=None):
    """ Return the number of functions of the 1-based *control* of kind
        *control_type* within *context*.
    """

    routing_table = routing.routing_table_for_control(context, control, control_type)
    return _count(fields.CLASS_CONTROL_FUNCTION, routing_table, timeout)



def resend_last_tablet_event(event_type):
    """ Ask the driver to resend its last tablet event of *event_type*
        (:data:`EVENT_PROXIMITY` or :data:`EVENT_POINTER`). This is a
        best-effort signal: nothing is returned and failures are ignored.
    """

    try:
        event = _event(fields.SUITE_WACOM, fields.EVENT_SEND_TABLET_EVENT)
        event.set_param(fields.KEY_DIRECT_OBJECT, routing.routing_table_for_driver())
        event.set_param(fields.KEY_DATA, descriptor.encode_enum(event_type))
        session.post(event, priority)
    except errors.TabletDriverError as exception:
        log.debug('resend of %r tablet event failed: %s', event_type, exception)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
