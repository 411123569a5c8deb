"""Fold classified parameters into the client stub's signature."""

import ast
import dataclasses
import logging

from routestub.codegen.ast_utils import _argument, _name
from routestub.codegen.roles import (
    Ignored,
    JsonBody,
    ParameterRole,
    PathCapture,
    QueryParams,
    ReturnShape,
    TextBody,
    classify_parameter,
    classify_return,
)
from routestub.codegen.syntax import HandlerDecl, TypeNode, annotation_ast
from routestub.exceptions import HandlerSignatureError

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class StubSignature:
    """Named request slots of one handler plus its classified return."""

    name: str
    return_shape: ReturnShape
    path_captures: list[tuple[str, TypeNode]] = dataclasses.field(default_factory=list)
    query: tuple[str, TypeNode] | None = None
    text_body: str | None = None
    json_body: tuple[str, TypeNode] | None = None

    def stub_arguments(self) -> list[ast.arg]:
        """Build the stub's parameter list.

        Order is fixed: path captures, query, text body, JSON body.
        """
        args = [
            _argument(name, annotation_ast(type_node))
            for name, type_node in self.path_captures
        ]
        if self.query is not None:
            name, type_node = self.query
            args.append(_argument(name, annotation_ast(type_node)))
        if self.text_body is not None:
            args.append(_argument(self.text_body, _name('str')))
        if self.json_body is not None:
            name, type_node = self.json_body
            args.append(_argument(name, annotation_ast(type_node)))
        return args


def fold_roles(
    name: str, roles: list[ParameterRole], return_shape: ReturnShape
) -> StubSignature:
    """Fold roles in declaration order; later JSON/query/text roles win."""
    signature = StubSignature(name=name, return_shape=return_shape)

    for role in roles:
        match role:
            case JsonBody(name=binding, inner_type=inner):
                signature.json_body = (binding, inner)
            case QueryParams(name=binding, inner_type=inner):
                signature.query = (binding, inner)
            case PathCapture(bindings=bindings):
                signature.path_captures.extend(bindings)
            case TextBody(name=binding):
                signature.text_body = binding
            case Ignored():
                pass

    # a request has exactly one body
    if signature.text_body is not None and signature.json_body is not None:
        logger.debug(
            "Handler '%s' has both a JSON and a text body; dropping text body '%s'",
            name,
            signature.text_body,
        )
        signature.text_body = None

    return signature


def synthesize(handler: HandlerDecl) -> StubSignature:
    """Classify every parameter of ``handler`` and fold the result.

    Raises:
        HandlerSignatureError: If a parameter cannot be classified or the
            handler declares no return type.
    """
    roles = [classify_parameter(param, handler.name) for param in handler.params]

    if handler.returns is None:
        raise HandlerSignatureError(
            'Rpc handlers must declare a return type', handler.node, handler.name
        )
    return_shape = classify_return(handler.returns, handler.node, handler.name)

    return fold_roles(handler.name, roles, return_shape)
