""" Routing tables: object specifier chains that direct a request to one
    entity within the driver's object hierarchy::

        driver
          tablet[i]
            transducer[j]
          context[c]
            touch strip / touch ring / express key [i]
              function[j]

    Each builder returns a freshly built chain, nesting the result of the
    builder one level up as its container. Nothing here is cached.

    The "raw" tablet and transducer tables address the global tablet
    objects; changing an attribute through them affects every application.
    Settings should normally go through a context created with
    :func:`tabletae.driver.create_context_for_tablet`.
"""

from .. import errors
from . import descriptor
from . import fields
from .fields import ControlType


_control_classes = dict()
_control_classes[ControlType.TOUCH_STRIP] = fields.CLASS_TOUCH_STRIP
_control_classes[ControlType.TOUCH_RING] = fields.CLASS_TOUCH_RING
_control_classes[ControlType.EXPRESS_KEY] = fields.CLASS_EXPRESS_KEY


def validate_index(index, what='index'):
    """ Return *index* if it is a valid 1-based index, otherwise raise
        :class:`InvalidIndexError`. Zero is reserved as the invalid index.
    """

    if isinstance(index, bool) or not isinstance(index, int):
        raise errors.InvalidIndexError('%s must be an integer, not %r' % (what, index))

    if index == fields.INVALID_INDEX:
        raise errors.InvalidIndexError('%s 0 is invalid, indices are 1-based' % (what))

    if index < 0 or index > fields.UINT32_MAX:
        raise errors.InvalidIndexError('%s out of range: %d' % (what, index))

    return index



def validate_context(context):
    """ Return *context* if it is a plausible context handle, otherwise
        raise :class:`InvalidContextError`. Whether the driver still knows
        about the handle is only established by sending a request.
    """

    if isinstance(context, bool) or not isinstance(context, int):
        raise errors.InvalidContextError('context handles are integers, not ' + repr(context))

    if context == 0 or context < 0 or context > fields.UINT32_MAX:
        raise errors.InvalidContextError('invalid context handle: ' + repr(context))

    return context



def desc_type_from_control_type(control_type):
    """ Translate a :class:`ControlType` into the object class used to
        address that kind of control. Any value outside the enumeration
        raises :class:`UnknownControlTypeError`.
    """

    if isinstance(control_type, bool):
        raise errors.UnknownControlTypeError('unknown control type: ' + repr(control_type))

    try:
        control_type = ControlType(control_type)
    except ValueError:
        raise errors.UnknownControlTypeError('unknown control type: ' + repr(control_type))

    return _control_classes[control_type]



def _indexed(object_class, index, container, what):
    index = validate_index(index, what)
    key = descriptor.encode_uint32(index)
    return descriptor.ObjectSpecifier(object_class, fields.FORM_ABSOLUTE_POSITION, key, container)



def routing_table_for_driver():
    """ The driver itself, the first and only object of its class at the
        root of the hierarchy.
    """

    key = descriptor.encode_uint32(1)
    return descriptor.ObjectSpecifier(fields.CLASS_DRIVER, fields.FORM_ABSOLUTE_POSITION, key)



def routing_table_for_tablet(tablet):
    """ The global object for the 1-based *tablet* index. You should almost
        never set attributes through this table, but some attributes can
        only be read this way.
    """

    return _indexed(fields.CLASS_TABLET, tablet, routing_table_for_driver(), 'tablet index')



def routing_table_for_transducer(tablet, transducer):
    container = routing_table_for_tablet(tablet)
    return _indexed(fields.CLASS_TRANSDUCER, transducer, container, 'transducer index')



def routing_table_for_context(context):
    """ A context created by
        :func:`tabletae.driver.create_context_for_tablet`. The handle is an
        opaque token, so it is keyed by unique ID rather than by position.
    """

    context = validate_context(context)
    key = descriptor.encode_uint32(context)
    container = routing_table_for_driver()

    return descriptor.ObjectSpecifier(fields.CLASS_CONTEXT, fields.FORM_UNIQUE_ID, key, container)



def routing_table_for_control(context, control, control_type):
    """ The 1-based *control* of kind *control_type* within *context*. """

    object_class = desc_type_from_control_type(control_type)
    container = routing_table_for_context(context)

    return _indexed(object_class, control, container, 'control index')



def routing_table_for_function(context, control, control_type, function):
    """ The 1-based *function* of a control within *context*. """

    container = routing_table_for_control(context, control, control_type)
    return _indexed(fields.CLASS_CONTROL_FUNCTION, function, container, 'function index')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
