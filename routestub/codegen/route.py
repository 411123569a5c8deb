"""Parse the ``rpc`` decorator's option list into route metadata."""

import ast
import dataclasses

from routestub.codegen.ast_utils import _dotted_name
from routestub.codegen.reader import read_type
from routestub.codegen.syntax import TypeNode
from routestub.exceptions import RouteOptionError

HTTP_METHODS = ('get', 'post', 'put', 'delete', 'patch')
RETURNS_OPTION = 'returns'

_TYPE_EXPRESSIONS = (ast.Name, ast.Attribute, ast.Subscript, ast.Constant, ast.BinOp)


@dataclasses.dataclass(frozen=True)
class RouteMetadata:
    method: str
    path_template: str
    return_override: TypeNode | None = None


def _option_name(option: ast.expr) -> str:
    if not isinstance(option, ast.Call):
        raise RouteOptionError(
            f"Expected option of the form name(value), found '{ast.unparse(option)}'",
            option,
        )
    path = _dotted_name(option.func)
    if path is None:
        raise RouteOptionError(
            f"Expected option name, found '{ast.unparse(option.func)}'", option
        )
    return path[-1]


def _option_value(option: ast.Call, name: str) -> ast.expr:
    if len(option.args) != 1 or option.keywords:
        raise RouteOptionError(
            f"Option '{name}' takes exactly one value", option, option=name
        )
    return option.args[0]


def parse_route_options(
    options: list[ast.expr], anchor: ast.AST | None = None
) -> RouteMetadata:
    """Fold the option list into a ``RouteMetadata``.

    The first method option and the first ``returns`` option win; later
    duplicates are ignored. Options are checked in order, so the first bad
    option is the one reported.

    Args:
        options: The option expressions, e.g. ``get('/api/user/:id')``.
        anchor: Node to report a missing method at.

    Raises:
        RouteOptionError: On a missing method, an unknown option or an
            unparseable option value.
    """
    method: str | None = None
    path_template: str | None = None
    return_override: TypeNode | None = None

    for option in options:
        name = _option_name(option)
        if name in HTTP_METHODS:
            value = _option_value(option, name)
            if not (isinstance(value, ast.Constant) and isinstance(value.value, str)):
                raise RouteOptionError(
                    f"Option '{name}' expects a string literal route path",
                    value,
                    option=name,
                )
            if method is None:
                method = name.upper()
                path_template = value.value
        elif name == RETURNS_OPTION:
            value = _option_value(option, name)
            if not isinstance(value, _TYPE_EXPRESSIONS) or (
                isinstance(value, ast.Constant)
                and not isinstance(value.value, str | None)
            ):
                raise RouteOptionError(
                    f"Option '{name}' expects a type, found '{ast.unparse(value)}'",
                    value,
                    option=name,
                )
            if return_override is None:
                return_override = read_type(value)
        else:
            raise RouteOptionError(f"Unexpected option '{name}'", option, option=name)

    if method is None:
        raise RouteOptionError('Missing method', anchor)

    return RouteMetadata(
        method=method, path_template=path_template, return_override=return_override
    )


def parse_decorator(decorator: ast.expr) -> RouteMetadata:
    """Parse a bare or called ``rpc`` decorator."""
    if not isinstance(decorator, ast.Call):
        return parse_route_options([], decorator)
    if decorator.keywords:
        kw = decorator.keywords[0]
        raise RouteOptionError(
            f"Unexpected option '{kw.arg or '**'}'", kw, option=kw.arg
        )
    return parse_route_options(decorator.args, decorator)
