import pytest

import tabletae
from tabletae import config
from tabletae.protocol import descriptor
from tabletae.protocol import fields
from tabletae.transport import session


def test_defaults():

    configuration = config.Configuration()

    assert configuration.signature == 'WaCM'
    assert configuration.timeout == 60
    assert configuration.lookup('WaCM') == configuration.endpoint
    assert configuration.lookup('nope') is None


def test_validation():

    with pytest.raises(ValueError):
        config.Configuration(signature='WaC')

    with pytest.raises(ValueError):
        config.Configuration(timeout=0)

    with pytest.raises(ValueError):
        config.Configuration(no_such_value=True)


def test_read_only():

    configuration = config.Configuration(timeout=5)

    with pytest.raises(AttributeError):
        configuration.timeout = 10

    assert configuration.timeout == 5


def test_load(tmp_path):

    path = tmp_path / config.filename
    path.write_bytes(b'{"timeout": 12.5, "endpoints": {"Tst1": "tcp://localhost:9999"}}')

    configuration = config.load(str(path))

    assert configuration.timeout == 12.5
    assert configuration.lookup('Tst1') == 'tcp://localhost:9999'
    assert configuration.lookup('WaCM') == config.defaults['endpoint']


def test_load_missing(tmp_path):

    configuration = config.load(str(tmp_path / 'missing.json'))
    assert configuration.timeout == config.defaults['timeout']


def test_load_not_a_dictionary(tmp_path):

    path = tmp_path / config.filename
    path.write_bytes(b'[1, 2, 3]')

    with pytest.raises(ValueError):
        config.load(str(path))


def test_resolve_timeout():

    config.configure(timeout=7)

    try:
        assert session.resolve_timeout(None) == 7
        assert session.resolve_timeout(0) == 7
        assert session.resolve_timeout(fields.DEFAULT_TIMEOUT) == 7
        assert session.resolve_timeout(-30) == 7
        assert session.resolve_timeout(fields.NO_TIMEOUT) is None
        assert session.resolve_timeout(0.25) == 0.25
    finally:
        config.configure()


def test_no_route():

    target = descriptor.Descriptor(fields.TYPE_APPL_SIGNATURE, b'Nope')

    with pytest.raises(tabletae.transport.TransportConnectionError):
        session.connect(target)

    with pytest.raises(tabletae.transport.TransportConnectionError):
        session.connect(descriptor.encode_text('WaCM'))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
