""" Process-wide configuration for talking to the tablet driver. The
    configuration is loaded once, on first use, from ``driver.json`` in the
    :func:`directory`; applications that want different values call
    :func:`configure` at startup, before issuing any requests. Nothing in
    tabletae modifies the configuration after that point.
"""

import os
import threading

from . import json


defaults = dict()
defaults['signature'] = 'WaCM'
defaults['endpoint'] = 'tcp://localhost:10211'
defaults['endpoints'] = dict()
defaults['timeout'] = 60.0
defaults['ack_timeout'] = 0.5

filename = 'driver.json'

_config = None
_config_lock = threading.Lock()


class Configuration:
    """ Read-only collection of configuration values. The *signature* is
        the four-character application signature of the driver process, and
        *endpoint* is the ZeroMQ endpoint where that driver listens;
        *endpoints* maps any additional signatures to their endpoints.
        *timeout* is the default time, in seconds, to wait for a reply, and
        *ack_timeout* is the time to wait for a transport acknowledgement.
    """

    def __init__(self, **values):

        unknown = set(values) - set(defaults)
        if unknown:
            raise ValueError('unknown configuration values: ' + ', '.join(sorted(unknown)))

        merged = dict(defaults)
        merged.update(values)

        signature = str(merged['signature'])
        if len(signature) != 4:
            raise ValueError('the driver signature must be four characters: ' + repr(signature))

        timeout = float(merged['timeout'])
        if timeout <= 0:
            raise ValueError('the default timeout must be positive')

        endpoints = dict(merged['endpoints'])
        endpoints[signature] = str(merged['endpoint'])

        object.__setattr__(self, 'signature', signature)
        object.__setattr__(self, 'endpoint', str(merged['endpoint']))
        object.__setattr__(self, 'endpoints', endpoints)
        object.__setattr__(self, 'timeout', timeout)
        object.__setattr__(self, 'ack_timeout', float(merged['ack_timeout']))


    def __setattr__(self, name, value):
        raise AttributeError('configuration values are read-only')


    def __repr__(self):
        return 'Configuration(signature=%r, endpoint=%r, timeout=%r)' % (self.signature, self.endpoint, self.timeout)


    def lookup(self, signature):
        """ Return the endpoint for the application *signature*, or None if
            there is no route to it.
        """

        return self.endpoints.get(signature)


# end of class Configuration



def configure(**values):
    """ Replace the process-wide configuration with one built from the
        defaults and the supplied *values*. Intended to be called once, at
        startup. The new :class:`Configuration` is returned.
    """

    global _config

    config = Configuration(**values)

    _config_lock.acquire()
    _config = config
    _config_lock.release()

    return config



def directory(default=None):
    """ Return the directory location where configuration files are found.
        This defaults to ``$HOME/.tabletae``, but can be overridden by
        calling this method with a valid path, or by setting the
        ``TABLETAE_HOME`` environment variable. Changes to the environment
        variable are ignored unless made prior to the first invocation of
        this method.
    """

    if default is not None:
        default = str(default)
        default = os.path.expandvars(default)

        if os.path.isabs(default):
            pass
        else:
            raise ValueError('the default directory must be an absolute path')

        os.environ['TABLETAE_HOME'] = default
        directory.found = default


    found = directory.found

    if found is not None:
        return found

    try:
        found = os.environ['TABLETAE_HOME']
    except KeyError:
        pass
    else:
        directory.found = found
        return found

    try:
        home = os.environ['HOME']
    except KeyError:
        raise RuntimeError('TABLETAE_HOME and HOME environment variables not set, cannot determine configuration directory')

    found = os.path.join(home, '.tabletae')

    directory.found = found
    return found

directory.found = None



def get():
    """ Return the process-wide :class:`Configuration`, loading it from
        disk the first time it is requested.
    """

    global _config

    config = _config

    if config is not None:
        return config

    _config_lock.acquire()

    try:
        config = _config
        if config is None:
            config = load()
            _config = config
    finally:
        _config_lock.release()

    return config



def load(path=None):
    """ Build a :class:`Configuration` from the JSON file at *path*, or
        ``driver.json`` in the :func:`directory` if no *path* is given.
        A missing file is not an error; the defaults are used instead.
    """

    if path is None:
        path = os.path.join(directory(), filename)

    try:
        with open(path, 'rb') as handle:
            raw = handle.read()
    except FileNotFoundError:
        return Configuration()

    values = json.loads(raw)

    if isinstance(values, dict):
        pass
    else:
        raise ValueError('the contents of %s must be a JSON object' % (path))

    return Configuration(**values)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
