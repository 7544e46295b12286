"""Typed settings and the registry they enroll in."""

import weakref
from pathlib import Path
from types import TracebackType
from typing import Any
from typing import Generic
from typing import Iterable
from typing import Iterator
from typing import TypeVar

from typedsettings.coercion import BOOLEAN
from typedsettings.coercion import FLOAT
from typedsettings.coercion import INTEGER
from typedsettings.coercion import STRING
from typedsettings.coercion import UNSIGNED
from typedsettings.coercion import Kind
from typedsettings.coercion import array_of
from typedsettings.coercion import kind_for
from typedsettings.coercion import object_of
from typedsettings.logger import SETTINGS_LOGGER

T = TypeVar("T")

log = SETTINGS_LOGGER.getChild(__name__)


class Setting(Generic[T]):
    """
    A single named, typed setting.

    key: Top-level document key this setting is loaded from. Uniqueness is a convention, not enforced.
    kind: Destination kind; decides how document nodes are coerced and how the value is rendered.
    value: Initial value.
    console_ok: Whether SettingsRegistry.set_from_console() may change this setting.
    registry: The registry to enroll in. Default: the process-wide REGISTRY.

    The setting registers itself as the last step of construction and stays registered until release() is called or
    the object is garbage collected. Using it as a context manager releases it on exit.

    The registry only holds weak references, so the caller must keep the setting referenced (typically as a
    module-level name). An instance that nothing refers to is unregistered at once and never receives loaded values.
    """

    def __init__(
        self,
        key: str,
        kind: Kind[T],
        value: T,
        *,
        console_ok: bool = False,
        registry: "SettingsRegistry | None" = None,
    ) -> None:
        self._key = key
        self.kind = kind
        self.value = value
        self.console_ok = console_ok
        self.registry = registry if registry is not None else REGISTRY
        self.registry.register(self)

    @property
    def key(self) -> str:
        "The setting's document key."
        return self._key

    @property
    def registered(self) -> bool:
        "Whether the setting is still enrolled in its registry."
        return self in self.registry

    def get(self) -> T:
        "Return the setting's value (the object itself, so containers may be changed in place)."
        return self.value

    def set(self, value: T) -> None:
        "Replace the setting's value."
        self.value = value

    def assign(self, node: Any) -> None:
        """
        Set the value from a document node, coerced according to this setting's kind.

        Raises CoercionError (or its subclass TypeMismatchError) if the node cannot be converted; the current value is
        left untouched in that case.
        """
        self.value = self.kind.coerce(node)

    def to_string(self) -> str:
        "Render the current value as text."
        return self.kind.render(self.value)

    def dump(self) -> str:
        "Render a 'key: value' line."
        return f"{self.key}: {self.to_string()}"

    def release(self) -> None:
        "Deregister from the registry. Further calls do nothing."
        self.registry.deregister(self)

    def __enter__(self) -> "Setting[T]":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key!r}, {self.value!r})"


class BoolSetting(Setting[bool]):
    """A boolean setting."""

    def __init__(self, key: str, value: bool, **kwargs: Any) -> None:
        super().__init__(key, BOOLEAN, value, **kwargs)

    def __bool__(self) -> bool:
        return self.value


class IntSetting(Setting[int]):
    """A signed integer setting."""

    def __init__(self, key: str, value: int, **kwargs: Any) -> None:
        super().__init__(key, INTEGER, value, **kwargs)

    def __int__(self) -> int:
        return self.value


class UnsignedSetting(Setting[int]):
    """An unsigned integer setting."""

    def __init__(self, key: str, value: int, **kwargs: Any) -> None:
        super().__init__(key, UNSIGNED, value, **kwargs)

    def __int__(self) -> int:
        return self.value


class FloatSetting(Setting[float]):
    """A floating point setting."""

    def __init__(self, key: str, value: float, **kwargs: Any) -> None:
        super().__init__(key, FLOAT, value, **kwargs)

    def __float__(self) -> float:
        return self.value


class StringSetting(Setting[str]):
    """A string setting."""

    def __init__(self, key: str, value: str, **kwargs: Any) -> None:
        super().__init__(key, STRING, value, **kwargs)


class ArraySetting(Setting[list[T]]):
    """
    A homogeneous list setting.

    element: Kind of the list elements, e.g. STRING.
    init: Initial contents (copied).

    Assigning a document array is all-or-nothing: if any element fails to convert, the previous contents stay.
    """

    def __init__(self, key: str, element: Kind[T], init: Iterable[T] = (), **kwargs: Any) -> None:
        super().__init__(key, array_of(element), list(init), **kwargs)

    def set(self, value: Iterable[T]) -> None:  # type: ignore[override]
        self.value = list(value)

    def dump(self) -> str:
        assert self.kind.element is not None
        lines = [f"{self.key}:"]
        lines.extend(f"\t{self.kind.element.render(v)}" for v in self.value)
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.value)

    def __iter__(self) -> Iterator[T]:
        return iter(self.value)

    def __getitem__(self, index: int) -> T:
        return self.value[index]


class ObjectSetting(Setting[T]):
    """
    A structured setting bound from a document object.

    cls: A pydantic model, a class with a from_document() classmethod, or dict.
    default: Initial value. Default: cls() (so cls must be default-constructible if no default is given).
    """

    def __init__(self, key: str, cls: type[T], default: T | None = None, **kwargs: Any) -> None:
        super().__init__(key, object_of(cls), cls() if default is None else default, **kwargs)


class SettingsRegistry:
    """
    The live, ordered collection of settings.

    Only weak references are held: the registry never keeps a setting alive, and a garbage collected setting drops
    out of it on its own. Registration order is preserved and used by load and dump. Keys are not checked for
    duplicates; all settings with a key receive that key's value.

    file_name: Default document path for load_settings().
    """

    def __init__(self) -> None:
        self._refs: list[weakref.ref[Setting]] = []
        self.file_name: str | Path | None = None

    def _drop(self, ref: "weakref.ref[Setting]") -> None:
        "Internal: weakref callback for collected settings."
        try:
            self._refs.remove(ref)
        except ValueError:
            pass

    def register(self, s: Setting) -> None:
        "Append a setting."
        self._refs.append(weakref.ref(s, self._drop))

    def deregister(self, s: Setting) -> None:
        "Remove the first entry referring to the given setting, if any."
        for i, ref in enumerate(self._refs):
            if ref() is s:
                del self._refs[i]
                return

    def all(self) -> list[Setting]:
        "The live settings in registration order."
        result = []
        for ref in self._refs:
            s = ref()
            if s is not None:
                result.append(s)
        return result

    def __iter__(self) -> Iterator[Setting]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self.all())

    def __contains__(self, s: object) -> bool:
        return any(ref() is s for ref in self._refs)

    def find(self, key: str) -> list[Setting]:
        "All settings registered under the given key."
        return [s for s in self if s.key == key]

    def set_from_console(self, key: str, value: Any) -> Setting | None:
        """
        Change a console-enabled setting at runtime.

        value is treated like a document node, so it is coerced the same way as a loaded value (e.g. 1 turns a
        boolean setting on). Only the first console-enabled setting with the key is changed.

        Returns the changed setting, or None if no console-enabled setting has the key.
        Raises CoercionError if the value does not fit the setting.
        """
        for s in self:
            if s.console_ok and s.key == key:
                s.assign(value)
                log.info(f"Console set {s.key} to {s.to_string()!r}")
                return s
        return None

    def clear(self) -> None:
        "Forget all registrations."
        self._refs.clear()

    @property
    def values(self) -> dict[str, object]:
        "Return a dict of all settings' keys and values (later duplicates win)."
        return {s.key: s.value for s in self}


REGISTRY = SettingsRegistry()


def setting(
    key: str,
    type: Any,  # pylint: disable=W0622
    *,
    default: Any = None,
    console_ok: bool = False,
    registry: SettingsRegistry | None = None,
) -> Setting:
    """
    Declare a setting.

    key: The document key.
    type: bool, int, float, str, list[X], a pydantic model / from_document class / dict, or a Kind.
    default: The initial value. Default: the type's zero value (False, 0, 0.0, "", [] or a default-constructed
             object).
    console_ok: Allow changing the setting through SettingsRegistry.set_from_console().
    registry: The registry to enroll in. Default: the process-wide REGISTRY.

    Keep the returned setting, e.g. "TIMEOUT = setting(\"Timeout\", int)". The registry only holds weak references,
    so a bare setting("Timeout", int) statement is unregistered immediately and never loads anything.
    """
    kind = kind_for(type)
    kwargs: dict[str, Any] = {"console_ok": console_ok, "registry": registry}
    scalars = {
        BOOLEAN: BoolSetting,
        INTEGER: IntSetting,
        UNSIGNED: UnsignedSetting,
        FLOAT: FloatSetting,
        STRING: StringSetting,
    }
    if kind in scalars:
        cls = scalars[kind]
        if default is None:
            default = kind.coerce(False) if kind is not STRING else ""
        return cls(key, default, **kwargs)
    if kind.element is not None:
        return ArraySetting(key, kind.element, default or (), **kwargs)
    if isinstance(type, Kind):
        if default is None:
            raise ValueError(f"Setting {key!r} of custom kind {kind.name} needs a default")
        return Setting(key, kind, default, **kwargs)
    return ObjectSetting(key, type, default, **kwargs)
