"""Classify handler parameters and return types into request roles.

Every parameter gets exactly one ``ParameterRole``. The role is decided by the
outer name of the (forward-reference unwrapped) type and by the shape of the
binding pattern; nothing is inspected at runtime.
"""

import dataclasses
import logging
from typing import Literal

from routestub.codegen.syntax import (
    DestructurePattern,
    ForwardRef,
    IdentPattern,
    NamedType,
    Parameter,
    Pattern,
    TuplePattern,
    TupleType,
    TypeNode,
)
from routestub.exceptions import HandlerSignatureError

logger = logging.getLogger(__name__)

JSON_WRAPPER = 'Json'
QUERY_WRAPPER = 'Query'
PATH_WRAPPER = 'Path'
TEXT_TYPES = frozenset({'str', 'LiteralString'})


@dataclasses.dataclass(frozen=True)
class JsonBody:
    name: str
    inner_type: TypeNode


@dataclasses.dataclass(frozen=True)
class QueryParams:
    name: str
    inner_type: TypeNode


@dataclasses.dataclass(frozen=True)
class PathCapture:
    bindings: tuple[tuple[str, TypeNode], ...]


@dataclasses.dataclass(frozen=True)
class TextBody:
    name: str


@dataclasses.dataclass(frozen=True)
class Ignored:
    pass


ParameterRole = JsonBody | QueryParams | PathCapture | TextBody | Ignored


@dataclasses.dataclass(frozen=True)
class TypeShape:
    """What a declared type says about where its value comes from."""

    kind: Literal['json', 'query', 'path', 'text', 'opaque']
    inner: TypeNode | None = None
    elems: tuple[TypeNode, ...] = ()


@dataclasses.dataclass(frozen=True)
class JsonReturn:
    inner: TypeNode


@dataclasses.dataclass(frozen=True)
class OpaqueReturn:
    declared: TypeNode


ReturnShape = JsonReturn | OpaqueReturn


def classify_type(
    type_node: TypeNode | None, node=None, handler: str | None = None
) -> TypeShape:
    """Inspect a declared type's wrapper.

    Raises:
        HandlerSignatureError: If a ``Path`` wrapper holds something other than
            a tuple or a plain named type.
    """
    if isinstance(type_node, ForwardRef):
        type_node = type_node.inner

    if not isinstance(type_node, NamedType):
        return TypeShape('opaque')

    if len(type_node.args) == 1:
        inner = type_node.args[0]
        if type_node.name == JSON_WRAPPER:
            return TypeShape('json', inner)
        if type_node.name == QUERY_WRAPPER:
            return TypeShape('query', inner)
        if type_node.name == PATH_WRAPPER:
            if isinstance(inner, TupleType):
                return TypeShape('path', inner, inner.elems)
            if isinstance(inner, NamedType):
                return TypeShape('path', inner, (inner,))
            raise HandlerSignatureError(
                'Path arguments must be tuples or plain types', node, handler
            )

    if type_node.name in TEXT_TYPES:
        return TypeShape('text')

    return TypeShape('opaque')


def classify_return(
    type_node: TypeNode, node=None, handler: str | None = None
) -> ReturnShape:
    shape = classify_type(type_node, node, handler)
    if shape.kind == 'json':
        return JsonReturn(shape.inner)
    return OpaqueReturn(type_node)


def _binding_names(pattern: Pattern, node, handler: str | None) -> list[str]:
    if isinstance(pattern, IdentPattern):
        return [pattern.name]

    if isinstance(pattern, DestructurePattern):
        elems = pattern.elems
        # Bind(('a', 'b')) is the same as Bind('a', 'b')
        if len(elems) == 1 and isinstance(elems[0], TuplePattern):
            elems = elems[0].elems
        names = []
        for elem in elems:
            if not isinstance(elem, IdentPattern):
                raise HandlerSignatureError(
                    'Expected destructuring pattern to contain only identifiers',
                    node,
                    handler,
                )
            names.append(elem.name)
        return names

    raise HandlerSignatureError(
        'Expected plain identifier or destructuring for argument name', node, handler
    )


def _single(names: list[str], node, handler: str | None) -> str:
    if len(names) != 1:
        raise HandlerSignatureError(
            'Expected single name, found destructured tuple', node, handler
        )
    return names[0]


def classify_parameter(param: Parameter, handler: str | None = None) -> ParameterRole:
    """Classify one declared parameter.

    The binding pattern is resolved before the type is looked at, so a bad
    pattern is an error even on a parameter that would be ignored.

    Raises:
        HandlerSignatureError: On unsupported or non-identifier patterns, on a
            path-capture arity mismatch, or when a single-valued role is bound
            to several names.
    """
    names = _binding_names(param.pattern, param.node, handler)
    shape = classify_type(param.type, param.node, handler)

    match shape.kind:
        case 'json':
            return JsonBody(_single(names, param.node, handler), shape.inner)
        case 'query':
            return QueryParams(_single(names, param.node, handler), shape.inner)
        case 'path':
            if len(names) != len(shape.elems):
                raise HandlerSignatureError(
                    f'Path tuples must be destructured: {len(shape.elems)} '
                    f'captured segment(s) but {len(names)} name(s) bound',
                    param.node,
                    handler,
                )
            return PathCapture(tuple(zip(names, shape.elems)))
        case 'text':
            return TextBody(_single(names, param.node, handler))

    logger.info(
        "Parameter '%s' of handler '%s' is not request-derived; "
        'treating it as server-only state',
        ', '.join(names),
        handler,
    )
    return Ignored()
