"""Pick how a stub decodes the response and what it returns."""

import ast
import dataclasses
from typing import Literal

from routestub.codegen.ast_utils import _attr, _await, _call, _name
from routestub.codegen.roles import JsonReturn, ReturnShape, classify_type
from routestub.codegen.route import RouteMetadata
from routestub.codegen.syntax import ForwardRef, NamedType, TypeNode, annotation_ast

TEXT_RETURN = NamedType(('str',), text='str')


def _unquoted(type_node: TypeNode) -> TypeNode:
    # the decoder needs the type object itself, not its name
    while isinstance(type_node, ForwardRef):
        type_node = type_node.inner
    return type_node


@dataclasses.dataclass(frozen=True)
class ResponseDecoder:
    strategy: Literal['json', 'text']
    return_type: TypeNode

    @property
    def return_annotation(self) -> ast.expr:
        return annotation_ast(self.return_type)

    def decode_expr(self, response: str = 'response') -> ast.expr:
        """``await response.json(T)`` or ``await response.text()``."""
        if self.strategy == 'json':
            return _await(
                _call(_attr(response, 'json'), [annotation_ast(self.return_type)])
            )
        return _await(_call(_attr(_name(response), 'text')))


def select_decoder(metadata: RouteMetadata, return_shape: ReturnShape) -> ResponseDecoder:
    """Choose the decoder, in priority order.

    1. An explicit ``returns`` override is always decoded as JSON; a
       ``Json[T]`` override returns ``T``.
    2. A ``Json[T]`` handler return is decoded as JSON into ``T``.
    3. Anything else is decoded as text.
    """
    override = metadata.return_override
    if override is not None:
        shape = classify_type(override)
        if shape.kind == 'json':
            return ResponseDecoder('json', _unquoted(shape.inner))
        return ResponseDecoder('json', _unquoted(override))

    if isinstance(return_shape, JsonReturn):
        return ResponseDecoder('json', _unquoted(return_shape.inner))

    return ResponseDecoder('text', TEXT_RETURN)
