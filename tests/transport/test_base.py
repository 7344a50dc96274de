import pytest

from tabletae.transport import base
from tabletae.transport.zmq import request


def test_contract():

    class Incomplete(base.Transport):

        def send(self, event, ack_timeout=None):
            pass

        def close(self):
            pass

    with pytest.raises(TypeError):
        Incomplete()

    for name in ('send', 'forget', 'close'):
        assert name in base.Transport.__abstractmethods__
        assert callable(getattr(request.Client, name))

    assert request.Client.__abstractmethods__ == frozenset()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
