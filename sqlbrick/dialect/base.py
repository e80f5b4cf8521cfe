"""Dialect abstraction: the SQLDialect ABC and the Feature flags.

The Template Method pattern (GoF) is used:
- ``SQLDialect`` implements the shared quoting and LIMIT algorithms.
- ``MySQLDialect``, ``PostgresDialect`` and ``SQLiteDialect`` override the
  dialect-specific steps (quote characters, boolean literals, LIMIT token
  order, parameter placeholder style, feature flags).

Dialects are stateless: one instance may be shared by any number of
expression trees without locking.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

from sqlbrick.errors import InvalidArgumentError, UnsupportedFeatureError


class Feature(str, Enum):
    """Optional capabilities a dialect may advertise."""

    IF_NOT_EXISTS = "if_not_exists"
    IF_EXISTS = "if_exists"
    AUTO_INCREMENT = "auto_increment"
    ON_DUPLICATE_KEY_UPDATE = "on_duplicate_key_update"
    INSERT_IGNORE = "insert_ignore"
    RETURNING = "returning"
    CTE = "cte"
    WINDOW_FUNCTIONS = "window_functions"
    INLINE_INDEX = "inline_index"
    MODIFY_COLUMN = "modify_column"
    ALTER_COLUMN_TYPE = "alter_column_type"
    TRUNCATE = "truncate"
    CASCADE = "cascade"

    def __str__(self) -> str:
        return self.value


class SQLDialect(ABC):
    """Abstract base for backend-specific quoting and syntax rules.

    Subclasses set the class-level quote characters and feature flags and
    implement :attr:`name`; the builder-facing API below stays the
    same for every backend.
    """

    identifier_quote: ClassVar[str] = '"'
    string_quote: ClassVar[str] = "'"
    qualifier_separator: ClassVar[str] = "."
    supported_features: ClassVar[frozenset[Feature]] = frozenset()

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the canonical dialect name (``'mysql'``, ``'postgresql'``, ``'sqlite'``)."""

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def quote_value(self, value: Any) -> str:
        """Return ``value`` as a SQL literal.

        Args:
            value: ``None``, a bool, a number, a date/time or anything
                stringifiable.

        Returns:
            ``NULL``, a boolean literal, a raw number, or a quoted string.

        Raises:
            InvalidArgumentError: For NaN or infinite floats and decimals.
        """
        if value is None:
            return "NULL"
        if isinstance(value, bool):
            return self.boolean_literal(value)
        if isinstance(value, int):
            return str(value)
        if isinstance(value, (float, Decimal)):
            if not math.isfinite(value):
                raise InvalidArgumentError(f"Cannot render non-finite number {value!r}.", argument="value")
            return repr(value) if isinstance(value, float) else str(value)
        if isinstance(value, (datetime, date, time)):
            return self.quote_string(value.isoformat())
        if isinstance(value, Enum):
            return self.quote_value(value.value)
        return self.quote_string(str(value))

    def quote_string(self, text: str) -> str:
        """Escape and bracket a string literal."""
        quote = self.string_quote
        return f"{quote}{self.escape_string(text)}{quote}"

    def escape_string(self, text: str) -> str:
        quote = self.string_quote
        return text.replace(quote, quote + quote)

    def boolean_literal(self, value: bool) -> str:
        return "1" if value else "0"

    def param_placeholder(self, name: str) -> str:
        """Return the placeholder for a named binding (``:name`` by default)."""
        return f":{name}"

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    def quote_identifier(self, identifier: str) -> str:
        """Return a quoted, possibly qualified identifier.

        Identifiers that already contain the quote character are returned
        unchanged, which makes quoting idempotent.  Qualified names
        (``schema.table.column``) have each part quoted; a ``*`` part is
        left bare.
        """
        quote = self.identifier_quote
        if quote in identifier:
            return identifier
        return self.qualifier_separator.join(
            part if part == "*" else f"{quote}{part}{quote}"
            for part in identifier.split(self.qualifier_separator)
        )

    # ------------------------------------------------------------------
    # Clauses
    # ------------------------------------------------------------------

    def limit_clause(self, limit: int, offset: int | None = None) -> str:
        """Return the full ``LIMIT`` clause for this dialect."""
        if offset is not None:
            return f"LIMIT {limit} OFFSET {offset}"
        return f"LIMIT {limit}"

    def if_not_exists_clause(self) -> str:
        return "IF NOT EXISTS"

    def if_exists_clause(self) -> str:
        return "IF EXISTS"

    # ------------------------------------------------------------------
    # Features
    # ------------------------------------------------------------------

    def supports(self, feature: Feature | str) -> bool:
        """Return ``True`` if ``feature`` (a flag or its value) is supported."""
        try:
            return Feature(feature) in self.supported_features
        except ValueError:
            return False

    def require(self, feature: Feature | str) -> None:
        """Raise :class:`UnsupportedFeatureError` unless ``feature`` is supported."""
        if not self.supports(feature):
            raise UnsupportedFeatureError(str(feature), self.name)

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}>"
