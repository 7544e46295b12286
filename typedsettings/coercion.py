"""
Value coercion protocol: converting document nodes to the static kinds settings hold.

A Kind pairs a coerce function (node -> value, raising CoercionError) with a render function (value -> text).
New destination kinds are added by building another Kind; the loader never needs to know about them.

Numeric conversions mirror fixed-width 64-bit integers without range checks: floats are truncated toward zero and
sign changes keep the bit pattern, e.g. -1 stored in an unsigned setting reads as 2**64 - 1.
"""

import copy
import math
import typing
from typing import Any
from typing import Callable
from typing import Generic
from typing import Protocol
from typing import TypeVar
from typing import runtime_checkable

from pydantic import BaseModel

from typedsettings.document import DocType
from typedsettings.document import doc_type
from typedsettings.document import type_name
from typedsettings.exceptions import CoercionError
from typedsettings.exceptions import TypeMismatchError

T = TypeVar("T")

_BITS = 64
_MASK = (1 << _BITS) - 1
_SIGN = 1 << (_BITS - 1)

OBJECT_PLACEHOLDER = "<object>"


@runtime_checkable
class SelfPopulating(Protocol):
    """A type that knows how to build itself from an object node."""

    @classmethod
    def from_document(cls, node: dict[str, Any]) -> "SelfPopulating":
        "Build an instance from the given object node."


class Kind(Generic[T]):
    """
    A destination kind for settings.

    name: Used in diagnostics ("cannot assign string to integer setting").
    coerce: Converts a document node to T or raises CoercionError.
    render: Converts a T to human-readable text.
    element: For array kinds, the kind of the elements.
    """

    def __init__(
        self,
        name: str,
        coerce: Callable[[Any], T],
        render: Callable[[T], str] = str,
        element: "Kind | None" = None,
    ) -> None:
        self.name = name
        self.coerce = coerce
        self.render = render
        self.element = element

    def __call__(self, node: Any) -> T:
        return self.coerce(node)

    def __repr__(self) -> str:
        return f"Kind({self.name!r})"


def to_int64(value: int) -> int:
    "Reinterpret an integer as a signed 64-bit value."
    value &= _MASK
    return value - (1 << _BITS) if value & _SIGN else value


def to_uint64(value: int) -> int:
    "Reinterpret an integer as an unsigned 64-bit value."
    return value & _MASK


def _numeric(node: Any, destination: str) -> int | float:
    "Internal: Read a boolean or numeric node as a Python number."
    tp = doc_type(node)
    if tp is DocType.BOOLEAN:
        return 1 if node else 0
    if tp.is_number:
        return node
    raise TypeMismatchError(type_name(node), destination)


def _truncate(value: int | float) -> int:
    "Internal: Truncate a number toward zero."
    if isinstance(value, float):
        if not math.isfinite(value):
            raise CoercionError(f"cannot truncate {value} to an integer")
        return int(value)
    return value


def coerce_bool(node: Any) -> bool:
    "Booleans as-is, numbers by comparison with zero."
    tp = doc_type(node)
    if tp is DocType.BOOLEAN:
        return node
    if tp.is_number:
        return node != 0
    raise TypeMismatchError(type_name(node), "boolean")


def coerce_int(node: Any) -> int:
    "Booleans and numbers, narrowed to a signed 64-bit integer."
    return to_int64(_truncate(_numeric(node, "integer")))


def coerce_unsigned(node: Any) -> int:
    "Booleans and numbers, narrowed to an unsigned 64-bit integer."
    return to_uint64(_truncate(_numeric(node, "unsigned")))


def coerce_float(node: Any) -> float:
    "Booleans and numbers, widened to float."
    value = _numeric(node, "float")
    try:
        return float(value)
    except OverflowError as exc:
        raise CoercionError(f"{value} is too large for a float") from exc


def coerce_str(node: Any) -> str:
    "Strings only; numbers are not turned into text."
    if doc_type(node) is DocType.STRING:
        return node
    raise TypeMismatchError(type_name(node), "string")


def render_bool(value: bool) -> str:
    "True or False."
    return "True" if value else "False"


def render_float(value: float) -> str:
    "Fixed six decimals, independent of the locale."
    return f"{value:f}"


def render_object(value: object) -> str:
    "The object's own text, if its class defines any."
    cls = type(value)
    if cls.__str__ is object.__str__ and cls.__repr__ is object.__repr__:
        return OBJECT_PLACEHOLDER
    return str(value)


BOOLEAN: Kind[bool] = Kind("boolean", coerce_bool, render_bool)
INTEGER: Kind[int] = Kind("integer", coerce_int)
UNSIGNED: Kind[int] = Kind("unsigned", coerce_unsigned)
FLOAT: Kind[float] = Kind("float", coerce_float, render_float)
STRING: Kind[str] = Kind("string", coerce_str)


def array_of(element: Kind[T]) -> Kind[list[T]]:
    """
    Build the kind of homogeneous arrays of the given element kind.

    Coercion converts every element with the element kind. The first element that fails aborts the whole
    conversion with a CoercionError naming its index; nothing is returned for a partially converted array.
    """

    def coerce(node: Any) -> list[T]:
        if doc_type(node) is not DocType.ARRAY:
            raise TypeMismatchError(type_name(node), f"array of {element.name}")
        result: list[T] = []
        for index, item in enumerate(node):
            try:
                result.append(element.coerce(item))
            except CoercionError as exc:
                raise CoercionError(f"element {index}: {exc}") from exc
        return result

    def render(values: list[T]) -> str:
        return "\n".join(element.render(v) for v in values)

    return Kind(f"array of {element.name}", coerce, render, element=element)


def _binder(cls: type) -> Callable[[dict[str, Any]], Any]:
    "Internal: Find how instances of cls are populated from an object node."
    if cls is dict:
        return copy.deepcopy
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        return cls.model_validate
    if isinstance(cls, type) and issubclass(cls, SelfPopulating):
        return cls.from_document
    raise TypeError(f"{cls!r} cannot be populated from a document (not a pydantic model, dict or SelfPopulating)")


def object_of(cls: type[T]) -> Kind[T]:
    """
    Build the kind of structured objects of type cls.

    cls may be a pydantic model (bound with model_validate), a class with a from_document classmethod, or dict (the
    node is deep-copied). Any exception raised while binding (validation errors, or e.g. an IndexError from a
    from_document method reading a malformed node) is reported as CoercionError.
    """
    bind = _binder(cls)
    name = getattr(cls, "__name__", repr(cls))

    def coerce(node: Any) -> T:
        if doc_type(node) is not DocType.OBJECT:
            raise TypeMismatchError(type_name(node), f"object ({name})")
        try:
            return bind(node)
        except CoercionError:
            raise
        except Exception as exc:  # pylint: disable=W0718
            raise CoercionError(f"cannot bind object to {name}: {exc}") from exc

    return Kind(f"object ({name})", coerce, render_object)


def kind_for(tp: Any) -> Kind:
    """
    Map a Python type annotation to a Kind.

    bool, int, float and str map to the scalar kinds (int is signed; use UNSIGNED explicitly for unsigned settings),
    list[X] to an array of X, and anything else to an object kind. A Kind is returned unchanged.
    """
    if isinstance(tp, Kind):
        return tp
    scalars: dict[Any, Kind] = {bool: BOOLEAN, int: INTEGER, float: FLOAT, str: STRING}
    if tp in scalars:
        return scalars[tp]
    if typing.get_origin(tp) is list:
        args = typing.get_args(tp)
        if len(args) != 1:
            raise TypeError(f"Array setting type {tp!r} needs exactly one element type")
        return array_of(kind_for(args[0]))
    return object_of(tp)
