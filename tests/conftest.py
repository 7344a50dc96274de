import itertools
import pytest
import threading
import time

import tabletae
from tabletae import errors
from tabletae.protocol import descriptor
from tabletae.protocol import fields
from tabletae.protocol.descriptor import ObjectSpecifier, RecordDescriptor
from tabletae.transport.zmq import request


endpoint = 'inproc://tabletae.unittest.driver'


class FakeDriver(request.Server):
    """ A stand-in for the tablet driver process: two tablets, contexts that
        can be created and destroyed, and a handful of attributes.
    """

    def __init__(self, endpoint):
        self.lock = threading.Lock()
        self.reset()
        request.Server.__init__(self, endpoint)


    def reset(self):
        self.events = list()
        self.delay = 0
        self.tablets = {1: 2, 2: 1}             # index -> transducer count
        self.contexts = dict()
        self.controls = {fields.CLASS_TOUCH_STRIP: 2, fields.CLASS_TOUCH_RING: 1, fields.CLASS_EXPRESS_KEY: 8}
        self.functions = 4
        self.attributes = dict()
        self.read_only = set(('pnam',))
        self.handles = itertools.count(1000)


    def wait_for(self, count, timeout=2):
        """ Block until *count* events have been handled. """

        expiration = time.time() + timeout
        while time.time() < expiration:
            if len(self.events) >= count:
                return True
            time.sleep(0.01)

        return False


    def req_handler(self, event):

        if self.delay:
            time.sleep(self.delay)

        with self.lock:
            self.events.append(event)
            return self.dispatch(event)


    def dispatch(self, event):

        kind = (event.event_class, event.event_id)

        if kind == (fields.SUITE_CORE, fields.EVENT_CREATE_ELEMENT):
            tablet = self.resolve(event.param(fields.KEY_INSERT_HERE))
            handle = next(self.handles)
            self.contexts[handle] = tablet
            return self.reply(descriptor.encode_uint32(handle))

        if kind == (fields.SUITE_CORE, fields.EVENT_DELETE):
            specifier = event.param(fields.KEY_DIRECT_OBJECT)
            self.resolve(specifier)
            del self.contexts[descriptor.decode_uint32(specifier.key_data)]
            return None

        if kind == (fields.SUITE_CORE, fields.EVENT_GET_DATA):
            specifier = event.param(fields.KEY_DIRECT_OBJECT)
            self.resolve(specifier.container)
            attribute = descriptor.decode_type(specifier.key_data)

            if attribute == 'pnam':
                return self.reply(descriptor.encode_text('Tablet'))

            try:
                value = self.attributes[(specifier.container, attribute)]
            except KeyError:
                raise errors.RemoteError('no such property: ' + attribute, code=errors.ERR_AE_NO_SUCH_OBJECT)

            return self.reply(value)

        if kind == (fields.SUITE_CORE, fields.EVENT_SET_DATA):
            specifier = event.param(fields.KEY_DIRECT_OBJECT)
            self.resolve(specifier.container)
            attribute = descriptor.decode_type(specifier.key_data)

            if attribute in self.read_only:
                raise errors.RemoteError('read-only property: ' + attribute, code=-10003)

            self.attributes[(specifier.container, attribute)] = event.param(fields.KEY_DATA)
            return None

        if kind == (fields.SUITE_CORE, fields.EVENT_COUNT_ELEMENTS):
            counted = descriptor.decode_type(event.param(fields.KEY_OBJECT_CLASS))
            container = event.param(fields.KEY_DIRECT_OBJECT)
            return self.reply(descriptor.encode_uint32(self.count(counted, container)))

        if kind == (fields.SUITE_WACOM, fields.EVENT_SEND_TABLET_EVENT):
            return None

        raise errors.RemoteError('event not handled', code=-1708)


    def count(self, counted, container):

        self.resolve(container)
        container_class = container.object_class

        if counted == fields.CLASS_TABLET and container_class == fields.CLASS_DRIVER:
            return len(self.tablets)

        if counted == fields.CLASS_TRANSDUCER and container_class == fields.CLASS_TABLET:
            return self.tablets[descriptor.decode_uint32(container.key_data)]

        if container_class == fields.CLASS_CONTEXT:
            return self.controls[counted]

        if counted == fields.CLASS_CONTROL_FUNCTION:
            return self.functions

        raise errors.RemoteError('cannot count %s in %s' % (counted, container_class))


    def resolve(self, specifier):
        """ Walk the chain from the root down, checking that every object
            along the way exists. Returns the tablet index, if any.
        """

        assert isinstance(specifier, ObjectSpecifier)

        tablet = None

        for link in reversed(list(specifier.chain())):
            object_class = link.object_class
            key = descriptor.decode_uint32(link.key_data)

            if object_class == fields.CLASS_TABLET:
                if key not in self.tablets:
                    raise errors.InvalidIndexError('no tablet %d' % (key))
                tablet = key

            elif object_class == fields.CLASS_CONTEXT:
                try:
                    tablet = self.contexts[key]
                except KeyError:
                    raise errors.InvalidContextError('no context %d' % (key))

        return tablet


    def reply(self, value):
        return RecordDescriptor({fields.KEY_DIRECT_OBJECT: value})


# end of class FakeDriver



@pytest.fixture(scope="session")
def driver_server():

    server = FakeDriver(endpoint)

    yield server

    server.close()


@pytest.fixture
def fake_driver(driver_server):

    driver_server.reset()
    tabletae.config.configure(endpoint=endpoint, timeout=2.0)

    yield driver_server

    tabletae.config.configure()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
