""" Self-describing typed records ("descriptors"), the unit of data
    exchanged with the tablet driver. Every request parameter and every reply
    value is a descriptor; routing tables are chains of object specifiers,
    which are themselves descriptors.

    Descriptors are immutable once built. Two descriptors are equal if their
    flattened (wire) representations are equal, regardless of whether they
    are the same instance.

    The flattened representation is big-endian throughout::

        atomic:   type(4) length(4) data(length)
        list:     'list'  length(4) count(4) item...
        record:   type(4) length(4) count(4) (keyword(4) item)...

    where each item is itself a flattened descriptor.
"""

import struct

from .. import errors
from . import fields


_header = struct.Struct('>4sI')
_count = struct.Struct('>I')
_uint32 = struct.Struct('>I')
_sint32 = struct.Struct('>i')

# Deepest nesting of composite descriptors accepted by unflatten().
max_depth = 64

_composite = frozenset((fields.TYPE_LIST, fields.TYPE_RECORD, fields.TYPE_OBJECT_SPECIFIER))


def _tag(code):
    """ Return the four bytes on the wire for the four-character *code*.
    """

    try:
        raw = code.encode('latin-1')
    except (AttributeError, UnicodeEncodeError):
        raise errors.EncodingError('invalid four-character code: ' + repr(code))

    if len(raw) != 4:
        raise errors.EncodingError('invalid four-character code: ' + repr(code))

    return raw


class Descriptor:
    """ An atomic descriptor: a four-character *type* tag and the raw bytes
        of its *data*. The composite descriptors (:class:`ListDescriptor`,
        :class:`RecordDescriptor` and :class:`ObjectSpecifier`) subclass
        this class and generate their data from their contents.
    """

    __slots__ = ('_type', '_data')

    def __init__(self, type, data=b''):

        _tag(type)

        if type in _composite and self.__class__ is Descriptor:
            raise errors.EncodingError('%r is a composite type, build it from its contents' % (type))

        data = bytes(data)

        if type == fields.TYPE_NULL and data:
            raise errors.EncodingError('a null descriptor cannot carry data')

        object.__setattr__(self, '_type', type)
        object.__setattr__(self, '_data', data)


    def __setattr__(self, name, value):
        raise AttributeError('descriptors are immutable')


    def __eq__(self, other):
        if isinstance(other, Descriptor):
            return self.flatten() == other.flatten()
        return NotImplemented


    def __hash__(self):
        return hash(self.flatten())


    def __repr__(self):
        return '<Descriptor %r %s>' % (self._type, self._data.hex())


    @property
    def type(self):
        return self._type


    @property
    def data(self):
        return self._payload()


    @property
    def is_null(self):
        return self._type == fields.TYPE_NULL


    def _payload(self):
        return self._data


    def flatten(self):
        """ Return the wire representation of this descriptor as bytes.
        """

        payload = self._payload()
        return _header.pack(_tag(self._type), len(payload)) + payload


# end of class Descriptor



class ListDescriptor(Descriptor):
    """ An ordered sequence of descriptors. """

    __slots__ = ('_items',)

    def __init__(self, items=()):

        items = tuple(items)

        for item in items:
            if isinstance(item, Descriptor):
                pass
            else:
                raise errors.EncodingError('list items must be descriptors, not ' + repr(item))

        Descriptor.__init__(self, fields.TYPE_LIST)
        object.__setattr__(self, '_items', items)


    def __getitem__(self, index):
        return self._items[index]


    def __iter__(self):
        return iter(self._items)


    def __len__(self):
        return len(self._items)


    def __repr__(self):
        return 'ListDescriptor(%r)' % (list(self._items),)


    def _payload(self):
        parts = [_count.pack(len(self._items))]

        for item in self._items:
            parts.append(item.flatten())

        return b''.join(parts)


# end of class ListDescriptor



class RecordDescriptor(Descriptor):
    """ An ordered mapping of four-character keywords to descriptors. The
        *items* can be a dictionary or a sequence of (keyword, descriptor)
        pairs; a keyword may only appear once.
    """

    __slots__ = ('_items',)

    record_type = fields.TYPE_RECORD

    def __init__(self, items=()):

        if isinstance(items, dict):
            items = items.items()

        pairs = list()
        seen = set()

        for keyword, item in items:
            _tag(keyword)

            if keyword in seen:
                raise errors.EncodingError('duplicate keyword in record: ' + repr(keyword))

            if isinstance(item, Descriptor):
                pass
            else:
                raise errors.EncodingError('record values must be descriptors, not ' + repr(item))

            seen.add(keyword)
            pairs.append((keyword, item))

        Descriptor.__init__(self, self.record_type)
        object.__setattr__(self, '_items', tuple(pairs))


    def __contains__(self, keyword):
        return self.descriptor_for_keyword(keyword) is not None


    def __getitem__(self, keyword):
        found = self.descriptor_for_keyword(keyword)

        if found is None:
            raise KeyError(keyword)

        return found


    def __len__(self):
        return len(self._items)


    def __repr__(self):
        return 'RecordDescriptor(%r)' % (dict(self._items),)


    def _payload(self):
        parts = [_count.pack(len(self._items))]

        for keyword, item in self._items:
            parts.append(_tag(keyword))
            parts.append(item.flatten())

        return b''.join(parts)


    def descriptor_for_keyword(self, keyword):
        """ Return the descriptor stored under *keyword*, or None if there
            is no such keyword in this record.
        """

        for key, item in self._items:
            if key == keyword:
                return item

        return None


    def items(self):
        return self._items


    def keys(self):
        return tuple(key for key, item in self._items)


    def with_descriptor(self, keyword, descriptor):
        """ Return a new record with *descriptor* stored under *keyword*,
            replacing any existing value for that keyword. This record is
            not modified.
        """

        items = [(key, item) for key, item in self._items if key != keyword]
        items.append((keyword, descriptor))
        return RecordDescriptor(items)


# end of class RecordDescriptor



class ObjectSpecifier(RecordDescriptor):
    """ A four-field record addressing "the object of class *object_class*
        identified by *key_data* (interpreted according to *key_form*),
        found inside *container*". The *container* is another
        :class:`ObjectSpecifier`, or the null descriptor for the root of
        the driver's object hierarchy.

        Each specifier holds its container by value, so a chain of
        specifiers is a path from a leaf entity up to the root.
    """

    __slots__ = ()

    record_type = fields.TYPE_OBJECT_SPECIFIER

    def __init__(self, object_class, key_form, key_data, container=None):

        if isinstance(key_form, str) and key_form in fields.KEY_FORMS:
            pass
        else:
            raise errors.InvalidKeyFormError('unrecognized key form: ' + repr(key_form))

        if isinstance(key_data, Descriptor):
            pass
        else:
            raise errors.EncodingError('key data must be a descriptor, not ' + repr(key_data))

        if container is None:
            container = null_descriptor()
        elif isinstance(container, ObjectSpecifier):
            pass
        elif isinstance(container, Descriptor) and container.is_null:
            pass
        else:
            raise errors.EncodingError('the container must be an object specifier or the null descriptor')

        items = list()
        items.append((fields.KEY_DESIRED_CLASS, encode_type(object_class)))
        items.append((fields.KEY_KEY_FORM, encode_enum(key_form)))
        items.append((fields.KEY_KEY_DATA, key_data))
        items.append((fields.KEY_CONTAINER, container))

        RecordDescriptor.__init__(self, items)


    def __repr__(self):
        return 'ObjectSpecifier(%r, %r, %r, from=%r)' % (self.object_class, self.key_form, self.key_data, self.container)


    @property
    def object_class(self):
        return decode_type(self[fields.KEY_DESIRED_CLASS])


    @property
    def key_form(self):
        return decode_enum(self[fields.KEY_KEY_FORM])


    @property
    def key_data(self):
        return self[fields.KEY_KEY_DATA]


    @property
    def container(self):
        return self[fields.KEY_CONTAINER]


    def chain(self):
        """ Iterate over this specifier and each of its containers in turn,
            leaf first, stopping before the null root.
        """

        specifier = self

        while isinstance(specifier, ObjectSpecifier):
            yield specifier
            specifier = specifier.container


    def with_descriptor(self, keyword, descriptor):
        raise TypeError('object specifiers have a fixed set of fields')


# end of class ObjectSpecifier



def null_descriptor():
    """ Return a null descriptor, which also stands for the root container
        of the driver's object hierarchy.
    """

    return Descriptor(fields.TYPE_NULL)



def encode_uint32(value):
    """ Return a descriptor for the unsigned 32-bit integer *value*. """

    if isinstance(value, bool) or not isinstance(value, int):
        raise errors.EncodingError('UInt32 values must be integers, not ' + repr(value))

    if value < 0 or value > fields.UINT32_MAX:
        raise errors.EncodingError('value out of UInt32 range: ' + repr(value))

    return Descriptor(fields.TYPE_UINT32, _uint32.pack(value))



def decode_uint32(descriptor):
    """ Return the integer held by a UInt32 *descriptor*. A
        :class:`TypeMismatchError` is raised for any other descriptor type.
    """

    _expect(descriptor, fields.TYPE_UINT32)

    data = descriptor.data
    if len(data) != _uint32.size:
        raise errors.EncodingError('UInt32 descriptor carries %d bytes' % (len(data)))

    return _uint32.unpack(data)[0]



def encode_sint32(value):

    if isinstance(value, bool) or not isinstance(value, int):
        raise errors.EncodingError('SInt32 values must be integers, not ' + repr(value))

    if value < -0x80000000 or value > 0x7FFFFFFF:
        raise errors.EncodingError('value out of SInt32 range: ' + repr(value))

    return Descriptor(fields.TYPE_SINT32, _sint32.pack(value))



def decode_sint32(descriptor):

    _expect(descriptor, fields.TYPE_SINT32)

    data = descriptor.data
    if len(data) != _sint32.size:
        raise errors.EncodingError('SInt32 descriptor carries %d bytes' % (len(data)))

    return _sint32.unpack(data)[0]



def encode_type(code):
    """ Return a type-code descriptor for the four-character *code*. """

    return Descriptor(fields.TYPE_TYPE, _tag(code))



def decode_type(descriptor):
    _expect(descriptor, fields.TYPE_TYPE)
    return _code(descriptor.data)



def encode_enum(code):
    """ Return an enumerated-value descriptor for the four-character *code*.
    """

    return Descriptor(fields.TYPE_ENUMERATED, _tag(code))



def decode_enum(descriptor):
    _expect(descriptor, fields.TYPE_ENUMERATED)
    return _code(descriptor.data)



def encode_text(text):
    return Descriptor(fields.TYPE_UTF8_TEXT, str(text).encode('utf-8'))



def decode_text(descriptor):

    _expect(descriptor, fields.TYPE_UTF8_TEXT)

    try:
        return descriptor.data.decode('utf-8')
    except UnicodeDecodeError as exception:
        raise errors.EncodingError('invalid UTF-8 text: ' + str(exception))



def encode_bytes(buffer, size, type):
    """ Copy the first *size* bytes of *buffer*, which can be any object
        supporting the buffer protocol, into a new descriptor tagged *type*.
        An :class:`EncodingError` is raised if the buffer is None, *size*
        is zero, or *size* exceeds the length of the buffer.
    """

    if buffer is None:
        raise errors.EncodingError('cannot encode from a null buffer')

    if isinstance(size, bool) or not isinstance(size, int):
        raise errors.EncodingError('the size must be an integer, not ' + repr(size))

    if size <= 0:
        raise errors.EncodingError('cannot encode a buffer of size %d' % (size))

    try:
        raw = memoryview(buffer).tobytes()
    except TypeError:
        raise errors.EncodingError('cannot encode from ' + repr(buffer))

    if size > len(raw):
        raise errors.EncodingError('size %d exceeds the %d-byte buffer' % (size, len(raw)))

    return Descriptor(type, raw[:size])



def encode_object_specifier(object_class, key, key_form, container=None):
    """ Return an :class:`ObjectSpecifier` for the object of class
        *object_class* identified by the *key* descriptor, interpreted
        according to *key_form*, inside *container*. The container defaults
        to the null descriptor, meaning the root of the hierarchy.
    """

    return ObjectSpecifier(object_class, key_form, key, container)



def flatten(descriptor):
    return descriptor.flatten()



def unflatten(data):
    """ Rebuild a descriptor from its wire representation. Malformed input,
        including trailing bytes, raises :class:`EncodingError`.
    """

    if not data:
        raise errors.EncodingError('cannot unflatten an empty buffer')

    view = memoryview(data)
    descriptor, end = _read(view, 0, 0)

    if end != len(view):
        raise errors.EncodingError('%d trailing bytes after descriptor' % (len(view) - end))

    return descriptor



def _code(raw):
    if len(raw) != 4:
        raise errors.EncodingError('four-character code carries %d bytes' % (len(raw)))
    return raw.decode('latin-1')



def _expect(descriptor, type):

    if isinstance(descriptor, Descriptor):
        pass
    else:
        raise errors.TypeMismatchError('expected a %r descriptor, got %r' % (type, descriptor))

    if descriptor.type != type:
        raise errors.TypeMismatchError('expected a %r descriptor, got %r' % (type, descriptor.type))



def _read(view, offset, depth):
    """ Read one flattened descriptor from *view* starting at *offset*,
        nested *depth* levels deep. Returns the descriptor and the offset
        just past it.
    """

    if depth > max_depth:
        raise errors.EncodingError('descriptors nested more than %d deep' % (max_depth))

    start = offset + _header.size

    if start > len(view):
        raise errors.EncodingError('truncated descriptor header at offset %d' % (offset))

    raw_type, length = _header.unpack_from(view, offset)
    type = raw_type.decode('latin-1')

    end = start + length

    if end > len(view):
        raise errors.EncodingError('descriptor at offset %d overruns the buffer' % (offset))

    payload = view[start:end]

    if type == fields.TYPE_LIST:
        descriptor = ListDescriptor(_read_items(payload, depth + 1, keyed=False))
    elif type == fields.TYPE_RECORD:
        descriptor = RecordDescriptor(_read_items(payload, depth + 1, keyed=True))
    elif type == fields.TYPE_OBJECT_SPECIFIER:
        descriptor = _read_specifier(_read_items(payload, depth + 1, keyed=True))
    else:
        descriptor = Descriptor(type, payload)

    return descriptor, end



def _read_items(payload, depth, keyed):

    if len(payload) < _count.size:
        raise errors.EncodingError('truncated item count')

    count = _count.unpack_from(payload, 0)[0]
    offset = _count.size
    items = list()

    for number in range(count):
        if keyed:
            if offset + 4 > len(payload):
                raise errors.EncodingError('truncated keyword')
            keyword = _code(payload[offset:offset + 4].tobytes())
            offset += 4

        item, offset = _read(payload, offset, depth)

        if keyed:
            items.append((keyword, item))
        else:
            items.append(item)

    if offset != len(payload):
        raise errors.EncodingError('%d unexpected bytes after the last item' % (len(payload) - offset))

    return items



def _read_specifier(items):

    record = dict(items)

    expected = set((fields.KEY_DESIRED_CLASS, fields.KEY_KEY_FORM, fields.KEY_KEY_DATA, fields.KEY_CONTAINER))

    if len(items) != len(expected) or set(record) != expected:
        raise errors.EncodingError('object specifier fields are ' + repr(sorted(record)))

    try:
        object_class = decode_type(record[fields.KEY_DESIRED_CLASS])
        key_form = decode_enum(record[fields.KEY_KEY_FORM])
    except errors.TypeMismatchError as exception:
        raise errors.EncodingError('malformed object specifier: ' + str(exception))

    return ObjectSpecifier(object_class, key_form, record[fields.KEY_KEY_DATA], record[fields.KEY_CONTAINER])


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
