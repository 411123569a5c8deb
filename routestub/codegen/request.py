"""Compile the route template and request slots into request expressions.

The request target becomes an f-string: each ``:name`` segment of the route
template is re-emitted as a reference to the variable ``name``. The compiler
does not check that such a variable exists; each placeholder is assumed to
match the path-capture binding at the same position (see ``placeholder_join``).
"""

import ast
import dataclasses
import itertools
import keyword

from routestub.codegen.ast_utils import _call, _name
from routestub.codegen.signature import StubSignature
from routestub.exceptions import HandlerSignatureError, RouteOptionError

ENCODE_JSON = 'encode_json'
ENCODE_QUERY = 'encode_query'
JSON_CONTENT_TYPE = 'application/json'


@dataclasses.dataclass
class RequestTemplate:
    target: ast.expr
    body: ast.expr | None
    placeholders: list[str]
    content_type: str | None = None
    runtime_names: set[str] = dataclasses.field(default_factory=set)


def route_placeholders(path_template: str) -> list[str]:
    """Placeholder names of ``path_template``, left to right."""
    return [
        segment[1:] for segment in path_template.split('/') if segment.startswith(':')
    ]


def placeholder_join(
    path_template: str, signature: StubSignature
) -> list[tuple[str | None, str | None]]:
    """Pair route placeholders with path-capture bindings by position."""
    bindings = [name for name, _ in signature.path_captures]
    return list(itertools.zip_longest(route_placeholders(path_template), bindings))


def check_placeholders(path_template: str, signature: StubSignature, node=None) -> None:
    """Raise if any placeholder differs from the binding at its position."""
    for placeholder, binding in placeholder_join(path_template, signature):
        if placeholder == binding:
            continue
        if placeholder is None:
            message = f"Path binding '{binding}' has no route placeholder"
        elif binding is None:
            message = f"Route placeholder ':{placeholder}' has no path binding"
        else:
            message = (
                f"Route placeholder ':{placeholder}' does not match path binding "
                f"'{binding}'"
            )
        raise HandlerSignatureError(message, node, signature.name)


def compile_target(
    path_template: str, signature: StubSignature, node=None
) -> tuple[ast.expr, list[str], set[str]]:
    """Build the request target expression.

    Returns:
        A tuple of (target, placeholders, runtime_names). ``target`` is a plain
        string constant when nothing needs to be interpolated.

    Raises:
        RouteOptionError: If a placeholder is not a valid identifier.
    """
    values: list[ast.expr] = []
    placeholders: list[str] = []
    runtime_names: set[str] = set()
    literal = ''

    def flush() -> None:
        nonlocal literal
        if literal:
            values.append(ast.Constant(value=literal))
            literal = ''

    for index, segment in enumerate(path_template.split('/')):
        if index:
            literal += '/'
        if segment.startswith(':'):
            flush()
            placeholder = segment[1:]
            if not placeholder.isidentifier() or keyword.iskeyword(placeholder):
                raise RouteOptionError(
                    f"Route placeholder '{segment}' is not a valid identifier", node
                )
            placeholders.append(placeholder)
            values.append(ast.FormattedValue(value=_name(placeholder), conversion=-1))
        else:
            literal += segment

    if signature.query is not None:
        literal += '?'
        flush()
        query_name, _ = signature.query
        values.append(
            ast.FormattedValue(
                value=_call(_name(ENCODE_QUERY), [_name(query_name)]),
                conversion=-1,
            )
        )
        runtime_names.add(ENCODE_QUERY)

    if not any(isinstance(value, ast.FormattedValue) for value in values):
        return ast.Constant(value=path_template), placeholders, runtime_names

    flush()
    return ast.JoinedStr(values=values), placeholders, runtime_names


def compile_body(
    signature: StubSignature,
) -> tuple[ast.expr | None, str | None, set[str]]:
    """Build the outgoing body expression, JSON taking precedence over text.

    Returns:
        A tuple of (body, content_type, runtime_names). content_type is None
        when the transport's text default applies.
    """
    if signature.json_body is not None:
        name, _ = signature.json_body
        return (
            _call(_name(ENCODE_JSON), [_name(name)]),
            JSON_CONTENT_TYPE,
            {ENCODE_JSON},
        )
    if signature.text_body is not None:
        return _call(_name('str'), [_name(signature.text_body)]), None, set()
    return None, None, set()


def compile_request(
    path_template: str,
    signature: StubSignature,
    strict_placeholders: bool = False,
    node=None,
) -> RequestTemplate:
    """Compile target and body for one handler.

    Args:
        path_template: The route template, e.g. ``/api/user/:id``.
        signature: The synthesized stub signature.
        strict_placeholders: Reject placeholders that do not match the path
            bindings positionally instead of emitting them as written.
        node: Node to report a placeholder mismatch at.
    """
    if strict_placeholders:
        check_placeholders(path_template, signature, node)

    target, placeholders, runtime_names = compile_target(path_template, signature, node)
    body, content_type, body_names = compile_body(signature)
    runtime_names.update(body_names)

    return RequestTemplate(
        target=target,
        body=body,
        placeholders=placeholders,
        content_type=content_type,
        runtime_names=runtime_names,
    )
