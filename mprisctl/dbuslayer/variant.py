"""Recursive decoding of type-tagged reply arguments.

Replies to ``Properties.Get`` carry one variant whose content may be a
scalar, an array, or an ``a{sv}`` dictionary whose values are variants
again.  Decoding walks an :class:`ArgumentCursor` so the algorithm does not
depend on how the arguments were obtained:

* :class:`MessageArgumentCursor` reads the values dbus-python produces from
  ``message.get_args_list()``, where a variant shows up as the inner value
  with a non-zero ``variant_level``.
* Tests can script any other cursor with the same five methods.

Supported leaves are ``b i x u t d s o``; arrays of any supported element and
arrays of dict entries with string keys and variant values.  Anything else raises
``UnsupportedTypeError`` instead of being skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import dbus

from mprisctl.core.constants import (
    TYPE_ARRAY,
    TYPE_BOOLEAN,
    TYPE_BYTE,
    TYPE_DICT_ENTRY,
    TYPE_DOUBLE,
    TYPE_INT16,
    TYPE_INT32,
    TYPE_INT64,
    TYPE_INVALID,
    TYPE_OBJECT_PATH,
    TYPE_SIGNATURE,
    TYPE_STRING,
    TYPE_STRUCT,
    TYPE_UINT16,
    TYPE_UINT32,
    TYPE_UINT64,
    TYPE_VARIANT,
)
from mprisctl.core.errors import EmptyReplyError, NotVariantError, UnsupportedTypeError
from mprisctl.dbuslayer.names import ValueKind

__all__ = [
    "DecodedValue",
    "ArgumentCursor",
    "MessageArgumentCursor",
    "decode_value",
    "decode_top_level",
]


@dataclass(frozen=True)
class DecodedValue:
    """One decoded reply value.

    ``value`` holds a ``bool``/``int``/``float``/``str`` for leaves, a tuple
    of ``DecodedValue`` for ``ARRAY`` and a ``dict`` of ``str`` to
    ``DecodedValue`` for ``DICTIONARY``.
    """

    kind: ValueKind
    value: Any

    def to_python(self) -> Any:
        """Strip the kind tags, recursively."""
        if self.kind is ValueKind.ARRAY:
            return [item.to_python() for item in self.value]
        if self.kind is ValueKind.DICTIONARY:
            return {key: item.to_python() for key, item in self.value.items()}
        return self.value


class ArgumentCursor:
    """Read position inside a sequence of type-tagged arguments.

    ``current_tag`` returns the D-Bus type code at the cursor, or None when
    the cursor is past the last argument.  ``element_tag`` is only meaningful
    on arrays and returns the element type code (``{`` for dictionaries).
    """

    def current_tag(self) -> Optional[str]:
        raise NotImplementedError

    def element_tag(self) -> str:
        raise NotImplementedError

    def read_scalar(self) -> Any:
        raise NotImplementedError

    def enter_container(self) -> "ArgumentCursor":
        raise NotImplementedError

    def advance(self) -> bool:
        """Move to the next argument; return False when none is left."""
        raise NotImplementedError


class _DictEntry:
    __slots__ = ("key", "value")

    def __init__(self, key, value):
        self.key = key
        self.value = value


# Order matters for the plain Python fallbacks: bool before int
_TYPE_TAGS = (
    (dbus.Boolean, TYPE_BOOLEAN),
    (dbus.Byte, TYPE_BYTE),
    (dbus.Int16, TYPE_INT16),
    (dbus.UInt16, TYPE_UINT16),
    (dbus.Int32, TYPE_INT32),
    (dbus.UInt32, TYPE_UINT32),
    (dbus.Int64, TYPE_INT64),
    (dbus.UInt64, TYPE_UINT64),
    (dbus.Double, TYPE_DOUBLE),
    (dbus.ObjectPath, TYPE_OBJECT_PATH),
    (dbus.Signature, TYPE_SIGNATURE),
    (dbus.String, TYPE_STRING),
    (dbus.Struct, TYPE_STRUCT),
    (dbus.Dictionary, TYPE_ARRAY),
    (dbus.Array, TYPE_ARRAY),
    (_DictEntry, TYPE_DICT_ENTRY),
    (bool, TYPE_BOOLEAN),
    (int, TYPE_INT32),
    (float, TYPE_DOUBLE),
    (str, TYPE_STRING),
    (dict, TYPE_ARRAY),
    (list, TYPE_ARRAY),
    (tuple, TYPE_STRUCT),
)


def _tag_of(value: Any) -> str:
    for cls, tag in _TYPE_TAGS:
        if isinstance(value, cls):
            return tag
    return type(value).__name__


def _variant_level(value: Any) -> int:
    return int(getattr(value, "variant_level", 0) or 0)


class MessageArgumentCursor(ArgumentCursor):
    """Cursor over the values returned by ``message.get_args_list()``.

    Each position remembers how many variant wrappers are still unopened;
    entering a variant peels one of them off.
    """

    def __init__(self, items: List[Tuple[Any, int]]):
        self._items = items
        self._pos = 0

    @classmethod
    def from_values(cls, values) -> "MessageArgumentCursor":
        return cls([(value, _variant_level(value)) for value in values])

    @classmethod
    def from_message(cls, message) -> "MessageArgumentCursor":
        return cls.from_values(message.get_args_list())

    def _current(self) -> Tuple[Any, int]:
        if self._pos >= len(self._items):
            raise IndexError("cursor is past the last argument")
        return self._items[self._pos]

    def current_tag(self) -> Optional[str]:
        if self._pos >= len(self._items):
            return None
        value, pending = self._items[self._pos]
        if pending > 0:
            return TYPE_VARIANT
        return _tag_of(value)

    def element_tag(self) -> str:
        value, pending = self._current()
        if pending > 0 or _tag_of(value) != TYPE_ARRAY:
            raise ValueError("element_tag() is only valid on arrays")
        if isinstance(value, dict):
            return TYPE_DICT_ENTRY
        signature = getattr(value, "signature", None)
        if signature:
            return str(signature)[0]
        if len(value):
            first = value[0]
            return TYPE_VARIANT if _variant_level(first) else _tag_of(first)
        return TYPE_INVALID

    def read_scalar(self) -> Any:
        value, _ = self._current()
        return value

    def enter_container(self) -> "MessageArgumentCursor":
        value, pending = self._current()
        if pending > 0:
            return MessageArgumentCursor([(value, pending - 1)])
        if isinstance(value, _DictEntry):
            return MessageArgumentCursor.from_values((value.key, value.value))
        if isinstance(value, dict):
            return MessageArgumentCursor([(_DictEntry(k, v), 0) for k, v in value.items()])
        if isinstance(value, (list, tuple)):
            return MessageArgumentCursor.from_values(value)
        raise ValueError(f"cannot enter non-container type '{_tag_of(value)}'")

    def advance(self) -> bool:
        self._pos += 1
        return self._pos < len(self._items)


_LEAVES = {
    TYPE_BOOLEAN: (ValueKind.BOOLEAN, bool),
    TYPE_INT32: (ValueKind.INT32, int),
    TYPE_INT64: (ValueKind.INT64, int),
    TYPE_UINT32: (ValueKind.UINT32, int),
    TYPE_UINT64: (ValueKind.UINT64, int),
    TYPE_DOUBLE: (ValueKind.DOUBLE, float),
    TYPE_STRING: (ValueKind.TEXT, str),
    TYPE_OBJECT_PATH: (ValueKind.OBJECT_PATH, str),
}

_ARRAY_ELEMENTS = set(_LEAVES) | {TYPE_VARIANT, TYPE_ARRAY, TYPE_DICT_ENTRY, TYPE_INVALID}


def _decode_array(cursor: ArgumentCursor) -> DecodedValue:
    items = []
    while cursor.current_tag() is not None:
        items.append(decode_value(cursor))
        cursor.advance()
    return DecodedValue(ValueKind.ARRAY, tuple(items))


def _decode_dictionary(cursor: ArgumentCursor) -> DecodedValue:
    entries: Dict[str, DecodedValue] = {}
    while cursor.current_tag() is not None:
        entry = cursor.enter_container()
        key_tag = entry.current_tag()
        if key_tag not in (TYPE_STRING, TYPE_OBJECT_PATH):
            raise UnsupportedTypeError(f"{TYPE_DICT_ENTRY}{key_tag}")
        key = str(entry.read_scalar())
        if not entry.advance():
            raise UnsupportedTypeError(f"{TYPE_DICT_ENTRY}{key_tag}")
        value_tag = entry.current_tag()
        if value_tag != TYPE_VARIANT:
            raise UnsupportedTypeError(f"{TYPE_DICT_ENTRY}{key_tag}{value_tag}")
        entries[key] = decode_value(entry)
        cursor.advance()
    return DecodedValue(ValueKind.DICTIONARY, entries)


def decode_value(cursor: ArgumentCursor) -> DecodedValue:
    """Decode the argument at *cursor*, descending into containers.

    The cursor is not advanced past the decoded argument.
    """
    tag = cursor.current_tag()
    if tag in _LEAVES:
        kind, convert = _LEAVES[tag]
        return DecodedValue(kind, convert(cursor.read_scalar()))
    if tag == TYPE_VARIANT:
        return decode_value(cursor.enter_container())
    if tag == TYPE_ARRAY:
        element = cursor.element_tag()
        if element not in _ARRAY_ELEMENTS:
            raise UnsupportedTypeError(TYPE_ARRAY + element)
        if element == TYPE_DICT_ENTRY:
            return _decode_dictionary(cursor.enter_container())
        return _decode_array(cursor.enter_container())
    raise UnsupportedTypeError(tag if tag is not None else TYPE_INVALID)


def decode_top_level(reply) -> DecodedValue:
    """Decode the first argument of a reply.

    *reply* is either a message offering ``get_args_list()`` or an
    :class:`ArgumentCursor`.  The first argument must be a variant, except
    for an array of strings (the ``ListNames`` reply) which is decoded
    directly.

    Raises
    ------
    EmptyReplyError
        If the reply has no arguments
    NotVariantError
        If the first argument is neither a variant nor an array of strings
    UnsupportedTypeError
        If a type outside the supported set is found at any depth
    """
    cursor = reply if isinstance(reply, ArgumentCursor) else MessageArgumentCursor.from_message(reply)
    tag = cursor.current_tag()
    if tag is None:
        raise EmptyReplyError()
    if tag != TYPE_VARIANT:
        if tag == TYPE_ARRAY and cursor.element_tag() == TYPE_STRING:
            return _decode_array(cursor.enter_container())
        raise NotVariantError(tag)
    return decode_value(cursor.enter_container())
