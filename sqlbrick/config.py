"""Pydantic configuration model for :class:`~sqlbrick.manager.DbalManager`.

Build a config directly or from a plain mapping (e.g. parsed settings)::

    config = DbalConfig.model_validate({"dialect": "postgresql"})
    manager = DbalManager.from_config(config)
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sqlbrick.dialect.base import SQLDialect
from sqlbrick.dialect.registry import DialectFactory


class DbalConfig(BaseModel):
    """Connection-independent settings for building statements.

    Attributes:
        dialect: Registered dialect name (case-insensitive), e.g. ``"mysql"``,
            ``"postgresql"`` / ``"postgres"`` / ``"pgsql"`` or ``"sqlite"``.
        strict_features: Raise :class:`~sqlbrick.errors.UnsupportedFeatureError`
            when a clause needs a feature the dialect lacks.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    dialect: str = Field(default="mysql", description="Registered dialect name.")
    strict_features: bool = True

    @field_validator("dialect")
    @classmethod
    def _known_dialect(cls, value: str) -> str:
        name = value.strip().lower()
        if not DialectFactory.is_registered(name):
            raise ValueError(
                f"Unknown dialect '{value}'. Registered dialects: {DialectFactory.registered_targets()}."
            )
        return name

    def create_dialect(self) -> SQLDialect:
        return DialectFactory.create(self.dialect)
