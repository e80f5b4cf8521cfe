"""Named parameter bindings kept next to a statement's expression tree."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from sqlbrick.errors import InvalidBindingError

#: Scalar types a binding value may have (``None`` is accepted as well).
BINDABLE_TYPES: tuple[type, ...] = (
    str,
    bytes,
    bool,
    int,
    float,
    Decimal,
    datetime,
    date,
    time,
    UUID,
    Enum,
)


class BindingMap:
    """An ordered ``name -> scalar`` map.

    The map is never interpolated into SQL; it travels alongside the rendered
    text (see :class:`~sqlbrick.builder.base.CompiledSQL`) and is handed to the
    driver together with it.
    """

    def __init__(self, mapping: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = {}
        if mapping:
            self.bind(mapping)

    def bind(self, mapping: Mapping[str, Any] | None = None, **values: Any) -> BindingMap:
        """Merge ``mapping`` and keyword ``values`` into the map.

        Later values overwrite earlier ones with the same name.  Validation
        runs over every entry before anything is stored, so a rejected call
        leaves the map unchanged.

        Raises:
            InvalidBindingError: If a name is not a non-empty string or a
                value is not a supported scalar.
        """
        incoming = {**(mapping or {}), **values}
        for name, value in incoming.items():
            _validate(name, value)
        self._values.update(incoming)
        return self

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def remove(self, name: str) -> BindingMap:
        """Drop ``name`` if present; unknown names are ignored."""
        self._values.pop(name, None)
        return self

    def clear(self) -> BindingMap:
        self._values.clear()
        return self

    def as_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the bindings."""
        return dict(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __bool__(self) -> bool:
        return bool(self._values)

    def __repr__(self) -> str:
        return f"BindingMap({self._values!r})"


def _validate(name: Any, value: Any) -> None:
    if not isinstance(name, str) or not name:
        raise InvalidBindingError(f"Invalid binding name {name!r}: must be a non-empty string.", name=name)
    if value is not None and not isinstance(value, BINDABLE_TYPES):
        raise InvalidBindingError(
            f"Invalid binding value for '{name}': {type(value).__name__} is not a scalar.",
            name=name,
        )
