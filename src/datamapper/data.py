"""
Dirty-tracking records.

A `Data` instance holds the fields of one persisted row and remembers which of
them were assigned since it was loaded or last saved. The set of changed
names is recorded on assignment, not on comparison: writing a value equal to
the current one still marks the field as changed.

Data knows nothing about mappers or adapters. The only thing it carries
besides its fields is the `table` class attribute, filled in when the class
is registered with a mapper.
"""
from collections.abc import Iterator, Mapping
from typing import Any, Protocol, runtime_checkable

from datamapper.exceptions import ArgumentError

__all__ = ['Data', 'Serializable']


@runtime_checkable
class Serializable(Protocol):
    """Structured values that can hand the mapper a plain mapping."""

    def as_serializable(self) -> Mapping[str, Any]: ...


class Data:
    """Mutable record with changed-field tracking."""

    table: str | None = None

    def __init__(self, values: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        self._fields: dict[str, Any] = dict(values or {}, **kwargs)
        self._changed: set[str] = set()

    def get(self, name: str, default: Any = None) -> Any:
        """Return the value of a field, or `default` if it is not set.
        """
        return self._fields.get(name, default)

    def set(self, *pairs: Any, **values: Any) -> None:
        """Assign one or more fields and mark them changed.

            data.set('name', 'kentaro')
            data.set('name', 'kentaro', 'age', 34)
            data.set(name='kentaro', age=34)

        Raises
            ArgumentError: If positional arguments are not name/value pairs.
        """
        if len(pairs) % 2:
            raise ArgumentError(f'set() takes name/value pairs, got {len(pairs)} positional arguments')
        for name, value in zip(pairs[::2], pairs[1::2]):
            self._assign(name, value)
        for name, value in values.items():
            self._assign(name, value)

    def _assign(self, name: str, value: Any) -> None:
        if not isinstance(name, str):
            raise ArgumentError(f'Field name must be a string, got {type(name).__name__}')
        self._fields[name] = value
        self._changed.add(name)

    def param(self, *args: Any) -> Any:
        """Combined accessor.

        With no arguments returns the field names, with one returns that
        field's value, with name/value pairs assigns them.
        """
        if not args:
            return self.keys()
        if len(args) == 1:
            return self.get(args[0])
        self.set(*args)
        return None

    def keys(self) -> list[str]:
        """Names of all fields."""
        return list(self._fields)

    def is_changed(self) -> bool:
        """True if any field was assigned since the last clean state."""
        return bool(self._changed)

    def changed_keys(self) -> list[str]:
        """Sorted names of changed fields."""
        return sorted(self._changed)

    def changes(self) -> dict[str, Any]:
        """Current values of changed fields."""
        return {name: self._fields[name] for name in self.changed_keys()}

    def discard_changes(self) -> None:
        """Forget which fields changed. Field values are kept."""
        self._changed.clear()

    def as_serializable(self) -> dict[str, Any]:
        """Return the fields as a plain dict."""
        return dict(self._fields)

    def __getitem__(self, name: str) -> Any:
        return self._fields[name]

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Data):
            return NotImplemented
        return self._fields == other._fields

    __hash__ = None

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._fields!r})'
