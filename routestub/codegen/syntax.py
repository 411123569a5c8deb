"""Typed declaration tree consumed by the route-contract pipeline.

Handler declarations are read into these nodes once (see ``reader.py``), so
every later stage is a plain match over wrapper names, generic argument counts
and binding pattern shapes instead of poking at raw syntax.
"""

import ast
import dataclasses


@dataclasses.dataclass(frozen=True)
class NamedType:
    """A (possibly dotted, possibly generic) named type such as ``Json[User]``."""

    path: tuple[str, ...]
    args: tuple['TypeNode', ...] = ()
    text: str = ''

    @property
    def name(self) -> str:
        return self.path[-1]


@dataclasses.dataclass(frozen=True)
class TupleType:
    """``tuple[A, B]`` / ``Tuple[A, B]``."""

    elems: tuple['TypeNode', ...]
    text: str = ''


@dataclasses.dataclass(frozen=True)
class ForwardRef:
    """A quoted annotation; one level of indirection around ``inner``."""

    inner: 'TypeNode'
    text: str = ''


@dataclasses.dataclass(frozen=True)
class OpaqueType:
    """A type only known by its shape, e.g. a union ``A | B``."""

    text: str


TypeNode = NamedType | TupleType | ForwardRef | OpaqueType


def annotation_ast(node: TypeNode) -> ast.expr:
    """Build a fresh annotation expression for ``node``."""
    return ast.parse(node.text, mode='eval').body


@dataclasses.dataclass(frozen=True)
class IdentPattern:
    name: str


@dataclasses.dataclass(frozen=True)
class TuplePattern:
    elems: tuple['Pattern', ...]


@dataclasses.dataclass(frozen=True)
class DestructurePattern:
    """``Bind(...)`` metadata: the wrapper value unpacked into names."""

    elems: tuple['Pattern', ...]


@dataclasses.dataclass(frozen=True)
class UnsupportedPattern:
    """Anything that is not a name, e.g. ``*args`` or ``Bind(1)`` entries."""

    text: str


Pattern = IdentPattern | TuplePattern | DestructurePattern | UnsupportedPattern


@dataclasses.dataclass(frozen=True)
class Parameter:
    pattern: Pattern
    type: TypeNode | None
    node: ast.AST | None = dataclasses.field(default=None, compare=False, repr=False)


@dataclasses.dataclass(frozen=True)
class HandlerDecl:
    """One handler: its name, parameters in declaration order and return type."""

    name: str
    params: tuple[Parameter, ...]
    returns: TypeNode | None
    docstring: str | None = None
    node: ast.FunctionDef | ast.AsyncFunctionDef | None = dataclasses.field(
        default=None, compare=False, repr=False
    )
