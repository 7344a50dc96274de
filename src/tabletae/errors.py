""" Exception classes for tabletae. Every exception raised by this package
    is a :class:`TabletDriverError`; the precondition failures detected
    before anything is sent are also :class:`ValueError` instances.

    Errors raised by the driver process travel back across the transport
    as a small dictionary, see :func:`to_remote` and :func:`from_remote`.
"""

# OSErr-style status codes. Zero is success, everything else is negative.

NO_ERR = 0
PARAM_ERR = -50
ERR_AE_COERCION_FAIL = -1700
ERR_AE_DESC_NOT_FOUND = -1701
ERR_AE_WRONG_DATA_TYPE = -1703
ERR_AE_BAD_KEY_FORM = -1723
ERR_AE_TIMEOUT = -1712
ERR_AE_NO_SUCH_OBJECT = -1728
ERR_AE_EVENT_FAILED = -10000


class TabletDriverError(Exception):
    """ Base class for all tabletae errors. The *code* is the status code
        associated with the failure; *remote* is True if the error was
        reported by the driver process rather than detected locally.
    """

    code = ERR_AE_EVENT_FAILED

    def __init__(self, *args, code=None, remote=False):
        Exception.__init__(self, *args)

        if code is not None:
            self.code = code

        self.remote = remote


class InvalidIndexError(TabletDriverError, ValueError):
    """ An index of zero, or outside the UInt32 range, was used on a 1-based
        accessor.
    """

    code = ERR_AE_NO_SUCH_OBJECT


class InvalidContextError(TabletDriverError, ValueError):
    """ A context handle is zero, or no longer known to the driver. """

    code = ERR_AE_NO_SUCH_OBJECT


class InvalidKeyFormError(TabletDriverError, ValueError):
    code = ERR_AE_BAD_KEY_FORM


class UnknownControlTypeError(TabletDriverError, ValueError):
    code = PARAM_ERR


class TypeMismatchError(TabletDriverError, ValueError):
    """ A descriptor's type tag does not match the type being decoded. """

    code = ERR_AE_WRONG_DATA_TYPE


class EncodingError(TabletDriverError, ValueError):
    """ Malformed input to the descriptor codec, including malformed
        flattened descriptors read off the wire.
    """

    code = PARAM_ERR


class ContextCreationError(TabletDriverError):
    """ The driver did not hand back a usable context handle. """


class RemoteError(TabletDriverError):
    """ The driver rejected a request with an error this package does not
        have a dedicated class for.
    """


def to_remote(exception):
    """ Describe *exception* as a dictionary suitable for JSON encoding and
        inclusion in a response.
    """

    error = dict()
    error['type'] = type(exception).__name__
    error['code'] = getattr(exception, 'code', ERR_AE_EVENT_FAILED)
    error['text'] = str(exception)
    return error


def from_remote(error):
    """ Rebuild the exception described by the *error* dictionary received
        from the driver process. The returned exception is flagged as remote;
        unknown types become :class:`RemoteError` instances.
    """

    name = error.get('type')
    code = error.get('code', ERR_AE_EVENT_FAILED)
    text = error.get('text', '')

    try:
        exception_class = _remote_classes[name]
    except KeyError:
        exception_class = RemoteError
        text = '%s: %s' % (name, text)

    return exception_class(text, code=code, remote=True)


_remote_classes = dict()

for _class in (InvalidIndexError, InvalidContextError, InvalidKeyFormError,
               UnknownControlTypeError, TypeMismatchError, EncodingError,
               ContextCreationError, RemoteError):
    _remote_classes[_class.__name__] = _class

del _class


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
