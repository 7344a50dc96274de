"""Transport interface.

This is the (small) contract that transport implementations follow. It
lives outside :mod:`tabletae.protocol` so the protocol remains
transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .. import errors
from ..protocol.event import AppleEvent


# Transport agnostic exceptions

class TransportError(errors.TabletDriverError):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """An event did not receive a timely acknowledgement or reply."""

    code = errors.ERR_AE_TIMEOUT


class TransportConnectionError(TransportError):
    """There is no route to the target, or the connection failed."""


class TransportPortError(TransportError):
    """The requested endpoint could not be bound."""


class Transport(ABC):
    """Minimal contract for a request transport."""

    @abstractmethod
    def send(self, event: AppleEvent, ack_timeout: Optional[float] = None) -> None:
        """Hand the event to the remote side.

        Returns once the remote side has acknowledged receipt; the reply,
        if one is expected, is delivered later via the event itself.
        Raises TransportTimeout if no acknowledgement arrives within
        ack_timeout seconds, or the transport default if that is None.
        """

    @abstractmethod
    def forget(self, event: AppleEvent) -> None:
        """Stop tracking an event whose caller stopped waiting for it.

        A reply that arrives afterwards is discarded.
        """

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection/socket."""
