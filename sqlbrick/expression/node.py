"""Generic expression tree node.

An :class:`Expression` holds ordered children (nodes or scalars), a join
separator, an optional wrap pair, a semantic type tag and two decorator
chains.  Rendering is depth-first:

1. every child is rendered (nodes recurse, scalars pass through the item
   decorators or are stringified);
2. empty child output is dropped and the rest joined with the separator;
3. the wrap pair is applied;
4. whole-node decorators run in registration order.

Rendering never mutates the tree, so a node can be rendered any number of
times with identical output.

Decorators are plain ``str -> str`` callables or a :class:`DialectRule`.
Dialect rules are resolved at render time by subclasses bound to a dialect
(see :class:`~sqlbrick.expression.sql.SqlExpression`); the bare node has no
dialect and refuses to render them.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol, Union, runtime_checkable

from sqlbrick.errors import ConfigurationError, InvalidArgumentError


class ExpressionType(str, Enum):
    """Semantic tag of a node.  Descriptive only; it never changes rendering."""

    NONE = ""
    PIPE = "pipe"
    SECTION = "section"
    LIST = "list"
    GROUP = "group"
    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    VALUE = "value"
    OPERATOR = "operator"
    ALIAS = "alias"
    CONDITION = "condition"


class DialectRule(str, Enum):
    """Decorators whose behaviour comes from the dialect at render time."""

    IDENTIFIER = "identifier"
    VALUE = "value"
    PARAM = "param"


@runtime_checkable
class SupportsExpression(Protocol):
    """Anything that can hand out an expression tree (e.g. a statement builder)."""

    def as_expression(self) -> Expression: ...


Decorator = Union[Callable[[Any], str], DialectRule]


class Expression:
    """A node of the query AST.

    Args:
        *items: Initial children; ``None`` items are skipped.
    """

    def __init__(self, *items: Any) -> None:
        self._children: list[Any] = []
        self._separator: Any = " "
        self._wrap: tuple[str, str] | None = None
        self._type: ExpressionType = ExpressionType.NONE
        self._decorators: list[Decorator] = []
        self._item_decorators: list[Decorator] = []
        self.push(*items)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def children(self) -> tuple[Any, ...]:
        return tuple(self._children)

    @property
    def expression_type(self) -> ExpressionType:
        return self._type

    @property
    def separator(self) -> Any:
        return self._separator

    @property
    def wrapper(self) -> tuple[str, str] | None:
        return self._wrap

    def is_empty(self) -> bool:
        return not self._children

    # ------------------------------------------------------------------
    # Build-phase mutation (all return self for chaining)
    # ------------------------------------------------------------------

    def push(self, *items: Any) -> Expression:
        """Append children, skipping ``None``."""
        self._children.extend(item for item in items if item is not None)
        return self

    append = push

    def unshift(self, *items: Any) -> Expression:
        """Prepend children (in the given order), skipping ``None``."""
        self._children[:0] = [item for item in items if item is not None]
        return self

    def join(self, separator: Any) -> Expression:
        """Set the separator placed between this node's own children."""
        self._separator = separator
        return self

    def wrap(self, prefix: str, suffix: str | None = None) -> Expression:
        """Set the delimiter pair around the joined body."""
        self._wrap = (prefix, prefix if suffix is None else suffix)
        return self

    def type(self, tag: ExpressionType | str) -> Expression:
        """Stamp the semantic tag."""
        try:
            self._type = ExpressionType(tag)
        except ValueError as exc:
            raise InvalidArgumentError(f"Unknown expression type: {tag!r}", argument="tag") from exc
        return self

    def decorate(self, decorator: Decorator) -> Expression:
        """Register a transform of this node's final output."""
        self._decorators.append(decorator)
        return self

    def decorate_item(self, decorator: Decorator) -> Expression:
        """Register a transform applied to each scalar child before joining.

        The first item decorator receives the raw child value so that
        ``None``, booleans and numbers can be told apart from strings.
        Node children render themselves and are not item-decorated.
        """
        self._item_decorators.append(decorator)
        return self

    def reset(self) -> Expression:
        """Drop all children, keeping the render rules."""
        self._children.clear()
        return self

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def _spawn(self) -> Expression:
        """Return a rule-less, child-less node of the same kind and binding."""
        return self.__class__()

    def prototype(self) -> Expression:
        """Return an empty copy sharing render rules but no children.

        Decorator lists are copied, so decorating the copy leaves the
        origin untouched.
        """
        clone = self._spawn()
        clone._separator = self._separator
        clone._wrap = self._wrap
        clone._type = self._type
        clone._decorators = list(self._decorators)
        clone._item_decorators = list(self._item_decorators)
        return clone

    def as_expression(self) -> Expression:
        return self

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _apply(self, decorator: Decorator, value: Any) -> str:
        if isinstance(decorator, DialectRule):
            raise ConfigurationError(
                f"Cannot apply {decorator.value} quoting: no dialect is bound to this expression."
            )
        return decorator(value)

    def _render_child(self, child: Any) -> str:
        if isinstance(child, Expression):
            return child.render()
        if isinstance(child, SupportsExpression):
            return child.as_expression().render()
        if self._item_decorators:
            text: Any = child
            for decorator in self._item_decorators:
                text = self._apply(decorator, text)
            return str(text)
        return _stringify(child)

    def render(self) -> str:
        parts = [text for text in map(self._render_child, self._children) if text]
        body = self._render_separator().join(parts)
        if self._wrap is not None:
            body = f"{self._wrap[0]}{body}{self._wrap[1]}"
        for decorator in self._decorators:
            body = self._apply(decorator, body)
        return body

    def _render_separator(self) -> str:
        if isinstance(self._separator, Expression):
            return self._separator.render()
        return str(self._separator)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        tag = self._type.value or "expression"
        return f"<{self.__class__.__name__} {tag} children={len(self._children)}>"


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)
