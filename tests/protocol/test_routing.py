import pytest

import tabletae
from tabletae.protocol import descriptor
from tabletae.protocol import fields
from tabletae.protocol import routing


def test_driver():

    first = routing.routing_table_for_driver()
    second = routing.routing_table_for_driver()

    assert first is not second
    assert first == second
    assert first.object_class == fields.CLASS_DRIVER
    assert first.key_form == fields.FORM_ABSOLUTE_POSITION
    assert descriptor.decode_uint32(first.key_data) == 1
    assert first.container.is_null


def test_function_chain():

    table = routing.routing_table_for_function(1001, 2, tabletae.ControlType.TOUCH_RING, 3)
    links = list(table.chain())

    classes = [link.object_class for link in links]
    assert classes == [fields.CLASS_CONTROL_FUNCTION, fields.CLASS_TOUCH_RING, fields.CLASS_CONTEXT, fields.CLASS_DRIVER]

    keys = [descriptor.decode_uint32(link.key_data) for link in links]
    assert keys == [3, 2, 1001, 1]

    forms = [link.key_form for link in links]
    assert forms == [fields.FORM_ABSOLUTE_POSITION, fields.FORM_ABSOLUTE_POSITION, fields.FORM_UNIQUE_ID, fields.FORM_ABSOLUTE_POSITION]

    assert links[-1].container.is_null


def test_transducer_chain():

    table = routing.routing_table_for_transducer(2, 1)

    assert table.object_class == fields.CLASS_TRANSDUCER
    assert table.container == routing.routing_table_for_tablet(2)
    assert table.container.container == routing.routing_table_for_driver()


def test_keys_survive_the_wire():

    for index in (1, 2, 255, fields.UINT32_MAX):
        table = routing.routing_table_for_tablet(index)
        restored = descriptor.unflatten(table.flatten())
        assert descriptor.decode_uint32(restored.key_data) == index
        assert restored == table


def test_zero_index():

    with pytest.raises(tabletae.InvalidIndexError):
        routing.routing_table_for_tablet(0)

    with pytest.raises(tabletae.InvalidIndexError):
        routing.routing_table_for_transducer(0, 1)

    with pytest.raises(tabletae.InvalidIndexError):
        routing.routing_table_for_transducer(1, 0)

    with pytest.raises(tabletae.InvalidIndexError):
        routing.routing_table_for_control(1001, 0, tabletae.ControlType.EXPRESS_KEY)

    with pytest.raises(tabletae.InvalidIndexError):
        routing.routing_table_for_function(1001, 1, tabletae.ControlType.EXPRESS_KEY, 0)


def test_bad_index():

    for bad in (-1, fields.UINT32_MAX + 1, 1.0, '1', None, True):
        with pytest.raises(tabletae.InvalidIndexError):
            routing.routing_table_for_tablet(bad)

    # Precondition failures are ValueErrors too.
    with pytest.raises(ValueError):
        routing.routing_table_for_tablet(0)


def test_bad_context():

    for bad in (0, -5, fields.UINT32_MAX + 1, '1001', None, False):
        with pytest.raises(tabletae.InvalidContextError):
            routing.routing_table_for_context(bad)

    with pytest.raises(tabletae.InvalidContextError):
        routing.routing_table_for_control(0, 1, tabletae.ControlType.TOUCH_STRIP)


def test_control_types():

    classes = set()

    for control_type in tabletae.ControlType:
        classes.add(routing.desc_type_from_control_type(control_type))

    assert len(classes) == len(tabletae.ControlType)

    assert routing.desc_type_from_control_type(0) == fields.CLASS_TOUCH_STRIP
    assert routing.desc_type_from_control_type(1) == fields.CLASS_TOUCH_RING
    assert routing.desc_type_from_control_type(2) == fields.CLASS_EXPRESS_KEY

    table = routing.routing_table_for_control(1001, 4, tabletae.ControlType.EXPRESS_KEY)
    assert table.object_class == fields.CLASS_EXPRESS_KEY


def test_unknown_control_type():

    for bad in (3, -1, 'ring', None, True):
        with pytest.raises(tabletae.UnknownControlTypeError):
            routing.desc_type_from_control_type(bad)

    with pytest.raises(tabletae.UnknownControlTypeError):
        routing.routing_table_for_function(1001, 1, 7, 1)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
