"""Protocol constants.

Four-character codes are kept here as strings, in one place, to avoid
stringly-typed drift between the codec, the routing builder and the driver
operations.
"""

import enum


# Descriptor type tags

TYPE_NULL = 'null'
TYPE_UINT32 = 'magn'
TYPE_SINT32 = 'long'
TYPE_BOOLEAN = 'bool'
TYPE_TYPE = 'type'
TYPE_ENUMERATED = 'enum'
TYPE_UTF8_TEXT = 'utf8'
TYPE_LIST = 'list'
TYPE_RECORD = 'reco'
TYPE_OBJECT_SPECIFIER = 'obj '
TYPE_APPL_SIGNATURE = 'sign'

# Keywords

KEY_DESIRED_CLASS = 'want'
KEY_KEY_FORM = 'form'
KEY_KEY_DATA = 'seld'
KEY_CONTAINER = 'from'

KEY_DIRECT_OBJECT = '----'
KEY_OBJECT_CLASS = 'kocl'
KEY_INSERT_HERE = 'insh'
KEY_REQUESTED_TYPE = 'rtyp'
KEY_DATA = 'data'
KEY_CONTEXT_TYPE = 'for '

# Object specifier key forms

FORM_ABSOLUTE_POSITION = 'indx'
FORM_NAME = 'name'
FORM_PROPERTY_ID = 'prop'
FORM_UNIQUE_ID = 'ID  '

KEY_FORMS = frozenset((FORM_ABSOLUTE_POSITION, FORM_NAME, FORM_PROPERTY_ID, FORM_UNIQUE_ID))

# Object classes in the driver hierarchy

CLASS_DRIVER = 'WDrv'
CLASS_TABLET = 'WTbt'
CLASS_TRANSDUCER = 'WTrn'
CLASS_CONTEXT = 'CNTX'
CLASS_TOUCH_STRIP = 'WTSt'
CLASS_TOUCH_RING = 'WTRg'
CLASS_EXPRESS_KEY = 'WExK'
CLASS_CONTROL_FUNCTION = 'WCFn'

# Event classes and IDs

SUITE_CORE = 'core'
EVENT_CREATE_ELEMENT = 'crel'
EVENT_DELETE = 'delo'
EVENT_GET_DATA = 'getd'
EVENT_SET_DATA = 'setd'
EVENT_COUNT_ELEMENTS = 'cnte'

SUITE_WACOM = 'Wtab'
EVENT_SEND_TABLET_EVENT = 'SnTE'

# Tablet event types accepted by resend_last_tablet_event()

EVENT_PROXIMITY = 'Prox'
EVENT_POINTER = 'Pntr'

# Context flavors for create_context_for_tablet()

CONTEXT_BLANK = 'Blnk'
CONTEXT_DEFAULT = 'Dflt'

CONTEXT_TYPES = frozenset((CONTEXT_BLANK, CONTEXT_DEFAULT))

# Delivery

NORMAL_PRIORITY = 0
HIGH_PRIORITY = 1

DEFAULT_TIMEOUT = -1
NO_TIMEOUT = -2

# All indices are 1-based.

INVALID_INDEX = 0
UINT32_MAX = 0xFFFFFFFF


class ControlType(enum.IntEnum):
    """ The closed set of physical control kinds on a tablet. """

    TOUCH_STRIP = 0
    TOUCH_RING = 1
    EXPRESS_KEY = 2


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
