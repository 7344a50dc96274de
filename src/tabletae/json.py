""" JSON encoding for the transport headers and error reports carried
    alongside flattened descriptors. Encoding always produces bytes, so the
    result can go directly into a multipart frame.
"""

import msgspec


_encoder = msgspec.json.Encoder()
_decoder = msgspec.json.Decoder()


def dumps(value):
    return _encoder.encode(value)



def loads(data):
    """ Decode the JSON *data*, which may be bytes or str. Malformed input
        raises :class:`ValueError`.
    """

    try:
        return _decoder.decode(data)
    except msgspec.DecodeError as exception:
        raise ValueError('malformed JSON: ' + str(exception)) from exception


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
