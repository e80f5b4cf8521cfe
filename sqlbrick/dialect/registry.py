"""Dialect registry (Open/Closed Principle).

``DialectFactory``
    Central registry for :class:`~sqlbrick.dialect.base.SQLDialect`
    implementations.  Register a new dialect once; managers and configs
    look it up by name.

Usage::

    from sqlbrick.dialect.registry import DialectFactory

    @DialectFactory.register("mariadb")
    class MariaDBDialect(MySQLDialect):
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import ClassVar

from sqlbrick.dialect.base import SQLDialect
from sqlbrick.errors import ConfigurationError

logger = logging.getLogger(__name__)


class DialectFactory:
    """Registry mapping dialect names to :class:`SQLDialect` classes.

    Example::

        @DialectFactory.register("mariadb")
        class MariaDBDialect(MySQLDialect):
            ...

        dialect = DialectFactory.create("mariadb")
    """

    _dialects: ClassVar[dict[str, type[SQLDialect]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[SQLDialect]], type[SQLDialect]]:
        """Decorator that registers a dialect class under ``name``.

        Args:
            name: The dialect name (e.g. ``"postgresql"``).

        Returns:
            A decorator that registers and returns the dialect class.
        """

        def decorator(dialect_cls: type[SQLDialect]) -> type[SQLDialect]:
            cls.register_class(name, dialect_cls)
            return dialect_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, dialect_cls: type[SQLDialect]) -> None:
        """Register a dialect class without using the decorator form.

        Args:
            name: The dialect name (case-insensitive).
            dialect_cls: The :class:`SQLDialect` subclass to register.
        """
        cls._dialects[name.lower()] = dialect_cls

    @classmethod
    def create(cls, name: str) -> SQLDialect:
        """Instantiate the dialect registered for ``name``.

        Args:
            name: The dialect name (case-insensitive).

        Returns:
            A fresh :class:`SQLDialect` instance.

        Raises:
            ConfigurationError: If no dialect is registered for ``name``.
        """
        dialect_cls = cls._dialects.get(name.lower())
        if dialect_cls is None:
            raise ConfigurationError(
                f"Unsupported dialect: '{name}'. Registered dialects: {cls.registered_targets()}."
            )
        logger.debug("Creating %s for '%s'", dialect_cls.__name__, name)
        return dialect_cls()

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name.lower() in cls._dialects

    @classmethod
    def registered_targets(cls) -> list[str]:
        """Return the sorted list of registered dialect names."""
        return sorted(cls._dialects)
