""" Python client for the tablet driver's event interface. This includes the
    descriptor codec, the routing tables that address objects within the
    driver, the transport that carries requests to the driver process, and
    the high-level operations built on top of them.
"""

# Utility components.

from . import errors
from . import json

# Submodules used by multiple other components.

from . import config
from . import protocol
from . import transport
home = config.directory

# Primary public-facing interfaces.

from . import driver

from .errors import (
    TabletDriverError,
    InvalidIndexError,
    InvalidContextError,
    InvalidKeyFormError,
    UnknownControlTypeError,
    TypeMismatchError,
    EncodingError,
    ContextCreationError,
    RemoteError,
)

from .transport import TransportError, TransportTimeout

from .protocol.fields import ControlType
from .protocol.routing import (
    desc_type_from_control_type,
    routing_table_for_driver,
    routing_table_for_tablet,
    routing_table_for_transducer,
    routing_table_for_context,
    routing_table_for_control,
    routing_table_for_function,
)

from .driver import (
    create_context_for_tablet,
    destroy_context,
    data_for_attribute,
    set_bytes,
    tablet_count,
    transducer_count_for_tablet,
    control_count_of_context,
    function_count_of_control,
    resend_last_tablet_event,
)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
