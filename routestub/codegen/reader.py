"""Read Python handler declarations into the typed declaration tree.

The standard library parser produces the generic syntax tree; this module maps
the parts the pipeline cares about (annotations, binding patterns, the return
type and the ``rpc`` decorator) onto ``syntax`` nodes.
"""

import ast
import keyword

from routestub.codegen.ast_utils import _dotted_name
from routestub.codegen.syntax import (
    DestructurePattern,
    ForwardRef,
    HandlerDecl,
    IdentPattern,
    NamedType,
    OpaqueType,
    Parameter,
    Pattern,
    TuplePattern,
    TupleType,
    TypeNode,
    UnsupportedPattern,
)
from routestub.exceptions import HandlerSignatureError

TUPLE_NAMES = frozenset({'tuple', 'Tuple'})
ANNOTATED_NAME = 'Annotated'
BIND_NAME = 'Bind'

HandlerNode = ast.FunctionDef | ast.AsyncFunctionDef


def read_type(expr: ast.expr, handler: str | None = None) -> TypeNode:
    """Convert an annotation expression into a ``TypeNode``.

    Quoted annotations become a ``ForwardRef`` around the parsed inner type.
    Shapes that are not named types or tuples (unions, literals, call
    expressions) are kept as ``OpaqueType``.

    Raises:
        HandlerSignatureError: If a quoted annotation is not valid Python.
    """
    text = ast.unparse(expr)

    if isinstance(expr, ast.Constant):
        if expr.value is None:
            return NamedType(('None',), text='None')
        if isinstance(expr.value, str):
            try:
                inner = ast.parse(expr.value.strip(), mode='eval').body
            except SyntaxError as exc:
                raise HandlerSignatureError(
                    f'Unparseable forward reference {expr.value!r}', expr, handler
                ) from exc
            return ForwardRef(read_type(inner, handler), text=text)
        return OpaqueType(text)

    path = _dotted_name(expr)
    if path is not None:
        return NamedType(path, text=text)

    if isinstance(expr, ast.Subscript):
        path = _dotted_name(expr.value)
        if path is not None:
            if isinstance(expr.slice, ast.Tuple):
                elts = expr.slice.elts
            else:
                elts = [expr.slice]
            args = tuple(read_type(elt, handler) for elt in elts)
            if path[-1] in TUPLE_NAMES:
                return TupleType(args, text=text)
            return NamedType(path, args, text=text)

    return OpaqueType(text)


def _read_bind_element(expr: ast.expr) -> Pattern:
    if isinstance(expr, ast.Constant) and isinstance(expr.value, str):
        if expr.value.isidentifier() and not keyword.iskeyword(expr.value):
            return IdentPattern(expr.value)
    if isinstance(expr, ast.Tuple | ast.List):
        return TuplePattern(tuple(_read_bind_element(elt) for elt in expr.elts))
    return UnsupportedPattern(ast.unparse(expr))


def _read_bind(call: ast.Call) -> DestructurePattern:
    elems = [_read_bind_element(arg) for arg in call.args]
    elems.extend(UnsupportedPattern(ast.unparse(kw)) for kw in call.keywords)
    return DestructurePattern(tuple(elems))


def _is_annotated(expr: ast.expr) -> bool:
    if not isinstance(expr, ast.Subscript):
        return False
    path = _dotted_name(expr.value)
    return (
        path is not None
        and path[-1] == ANNOTATED_NAME
        and isinstance(expr.slice, ast.Tuple)
        and len(expr.slice.elts) >= 2
    )


def _find_bind(metadata: list[ast.expr]) -> ast.Call | None:
    for item in metadata:
        if isinstance(item, ast.Call):
            path = _dotted_name(item.func)
            if path is not None and path[-1] == BIND_NAME:
                return item
    return None


def read_parameter(
    arg: ast.arg, star: str = '', handler: str | None = None
) -> Parameter:
    """Read one parameter's binding pattern and declared type.

    Args:
        arg: The parameter node.
        star: ``'*'`` or ``'**'`` for variadic parameters.
        handler: Name of the handler, used in error messages.
    """
    annotation = arg.annotation
    pattern: Pattern = IdentPattern(arg.arg)

    if annotation is not None and _is_annotated(annotation):
        type_expr, *metadata = annotation.slice.elts
        bind = _find_bind(metadata)
        if bind is not None:
            pattern = _read_bind(bind)
        annotation = type_expr

    if star:
        pattern = UnsupportedPattern(f'{star}{arg.arg}')

    type_node = read_type(annotation, handler) if annotation is not None else None
    return Parameter(pattern=pattern, type=type_node, node=arg)


def read_handler(node: HandlerNode) -> HandlerDecl:
    """Read a function definition into a ``HandlerDecl``."""
    args = node.args
    params = [read_parameter(arg, handler=node.name) for arg in [*args.posonlyargs, *args.args]]
    if args.vararg is not None:
        params.append(read_parameter(args.vararg, '*', node.name))
    params.extend(read_parameter(arg, handler=node.name) for arg in args.kwonlyargs)
    if args.kwarg is not None:
        params.append(read_parameter(args.kwarg, '**', node.name))

    returns = read_type(node.returns, node.name) if node.returns is not None else None

    return HandlerDecl(
        name=node.name,
        params=tuple(params),
        returns=returns,
        docstring=ast.get_docstring(node),
        node=node,
    )


def find_decorator(node: HandlerNode, decorator: str = 'rpc') -> ast.expr | None:
    """Return the ``rpc`` decorator of ``node``, called or bare, if present."""
    for item in node.decorator_list:
        target = item.func if isinstance(item, ast.Call) else item
        path = _dotted_name(target)
        if path is not None and path[-1] == decorator:
            return item
    return None
