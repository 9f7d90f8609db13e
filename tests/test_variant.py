import dbus
import pytest

from mprisctl.core.errors import EmptyReplyError, NotVariantError, UnsupportedTypeError
from mprisctl.dbuslayer.names import ValueKind
from mprisctl.dbuslayer.variant import (
    ArgumentCursor,
    DecodedValue,
    MessageArgumentCursor,
    decode_top_level,
)

from conftest import StubReply


def _decode(*args):
    return decode_top_level(StubReply(args))


class ScriptedCursor(ArgumentCursor):
    """Cursor over ``(tag, payload, element_tag)`` triples.

    For containers the payload is the list of child triples.
    """

    def __init__(self, items):
        self._items = items
        self._pos = 0

    def current_tag(self):
        if self._pos >= len(self._items):
            return None
        return self._items[self._pos][0]

    def element_tag(self):
        return self._items[self._pos][2]

    def read_scalar(self):
        return self._items[self._pos][1]

    def enter_container(self):
        return ScriptedCursor(self._items[self._pos][1])

    def advance(self):
        self._pos += 1
        return self._pos < len(self._items)


def test_boolean_variant():
    assert _decode(dbus.Boolean(True, variant_level=1)) == DecodedValue(ValueKind.BOOLEAN, True)


@pytest.mark.parametrize("value, kind", [
    (dbus.Int32(-3, variant_level=1), ValueKind.INT32),
    (dbus.Int64(2 ** 40, variant_level=1), ValueKind.INT64),
    (dbus.UInt32(7, variant_level=1), ValueKind.UINT32),
    (dbus.UInt64(2 ** 63, variant_level=1), ValueKind.UINT64),
    (dbus.Double(0.5, variant_level=1), ValueKind.DOUBLE),
    (dbus.String("Playing", variant_level=1), ValueKind.TEXT),
    (dbus.ObjectPath("/org/mpris/track/1", variant_level=1), ValueKind.OBJECT_PATH),
])
def test_scalar_variants(value, kind):
    decoded = _decode(value)
    assert decoded.kind is kind
    assert decoded.value == value
    assert type(decoded.value) in (bool, int, float, str)


def test_nested_variant_is_unwrapped():
    assert _decode(dbus.Int32(5, variant_level=2)) == DecodedValue(ValueKind.INT32, 5)


def test_dictionary_of_variants():
    reply = dbus.Dictionary(
        {"xesam:album": dbus.String("X", variant_level=1)}, signature="sv", variant_level=1
    )

    decoded = _decode(reply)

    assert decoded.kind is ValueKind.DICTIONARY
    assert decoded.value == {"xesam:album": DecodedValue(ValueKind.TEXT, "X")}


def test_empty_dictionary():
    decoded = _decode(dbus.Dictionary({}, signature="sv", variant_level=1))
    assert decoded == DecodedValue(ValueKind.DICTIONARY, {})


def test_array_of_text_inside_dictionary():
    reply = dbus.Dictionary(
        {"xesam:artist": dbus.Array(["A", "B"], signature="s", variant_level=1)},
        signature="sv",
        variant_level=1,
    )

    artists = _decode(reply).value["xesam:artist"]

    assert artists.kind is ValueKind.ARRAY
    assert artists.value == (
        DecodedValue(ValueKind.TEXT, "A"),
        DecodedValue(ValueKind.TEXT, "B"),
    )


def test_object_path_keys_are_accepted():
    reply = dbus.Dictionary(
        {dbus.ObjectPath("/a"): dbus.Int32(1, variant_level=1)}, signature="ov", variant_level=1
    )
    assert _decode(reply).to_python() == {"/a": 1}


def test_bare_string_array_is_decoded_directly():
    decoded = _decode(dbus.Array(["org.freedesktop.DBus", ":1.4"], signature="s"))

    assert decoded.kind is ValueKind.ARRAY
    assert decoded.to_python() == ["org.freedesktop.DBus", ":1.4"]


def test_empty_reply():
    with pytest.raises(EmptyReplyError):
        _decode()


def test_first_argument_must_be_a_variant():
    with pytest.raises(NotVariantError) as excinfo:
        _decode(dbus.Int32(3))
    assert excinfo.value.tag == "i"


def test_bare_array_of_integers_is_not_accepted():
    with pytest.raises(NotVariantError):
        _decode(dbus.Array([1, 2], signature="i"))


@pytest.mark.parametrize("value, tag", [
    (dbus.Byte(3, variant_level=1), "y"),
    (dbus.Struct((1, 2), signature="ii", variant_level=1), "("),
    (dbus.Array([dbus.Byte(1)], signature="y", variant_level=1), "ay"),
    (dbus.Dictionary({dbus.Int32(1): dbus.Int32(2, variant_level=1)}, signature="iv",
                     variant_level=1), "{i"),
])
def test_unsupported_types_fail(value, tag):
    with pytest.raises(UnsupportedTypeError) as excinfo:
        _decode(value)
    assert excinfo.value.tag == tag


def test_unsupported_type_nested_in_dictionary():
    reply = dbus.Dictionary(
        {"x:raw": dbus.Byte(1, variant_level=1)}, signature="sv", variant_level=1
    )
    with pytest.raises(UnsupportedTypeError):
        _decode(reply)


def test_message_cursor_walks_arguments():
    cursor = MessageArgumentCursor.from_values([dbus.String("a"), dbus.Int32(1)])

    assert cursor.current_tag() == "s"
    assert cursor.advance()
    assert cursor.current_tag() == "i"
    assert not cursor.advance()
    assert cursor.current_tag() is None


def test_scripted_cursor():
    cursor = ScriptedCursor([
        ("v", [
            ("a", [
                ("{", [("s", "xesam:title", None), ("v", [("s", "Song", None)], None)], None),
            ], "{"),
        ], None),
    ])

    decoded = decode_top_level(cursor)

    assert decoded == DecodedValue(ValueKind.DICTIONARY, {
        "xesam:title": DecodedValue(ValueKind.TEXT, "Song"),
    })


def test_to_python_strips_kinds():
    decoded = DecodedValue(ValueKind.DICTIONARY, {
        "a": DecodedValue(ValueKind.ARRAY, (DecodedValue(ValueKind.TEXT, "x"),)),
        "b": DecodedValue(ValueKind.DOUBLE, 1.5),
    })
    assert decoded.to_python() == {"a": ["x"], "b": 1.5}


def test_dictionary_values_must_be_variants():
    reply = dbus.Dictionary({"k": dbus.String("v")}, signature="ss", variant_level=1)

    with pytest.raises(UnsupportedTypeError) as excinfo:
        _decode(reply)

    assert excinfo.value.tag == "{ss"
