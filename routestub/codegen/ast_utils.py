"""AST helpers for building generated code.

Small constructors for the handful of node shapes the emitter produces, so
the pipeline modules read as the code they generate.
"""

import ast
from collections.abc import Iterable

__all__ = [
    '_name',
    '_attr',
    '_call',
    '_await',
    '_argument',
    '_assign',
    '_import',
    '_async_func',
    '_gate',
    '_docstring',
    '_dotted_name',
]


def _name(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def _attr(value: str | ast.expr, attr: str) -> ast.Attribute:
    return ast.Attribute(
        value=_name(value) if isinstance(value, str) else value,
        attr=attr,
        ctx=ast.Load(),
    )


def _call(
    func: ast.expr,
    args: list[ast.expr] | None = None,
    keywords: list[ast.keyword] | None = None,
) -> ast.Call:
    return ast.Call(
        func=func,
        args=args or [],
        keywords=keywords or [],
    )


def _await(value: ast.expr) -> ast.Await:
    return ast.Await(value=value)


def _argument(name: str, value: ast.expr | None = None) -> ast.arg:
    return ast.arg(
        arg=name,
        annotation=value,
    )


def _assign(target: ast.expr, value: ast.expr) -> ast.Assign:
    # Ensure target has Store context
    if isinstance(target, ast.Name):
        target = ast.Name(id=target.id, ctx=ast.Store())
    return ast.Assign(
        targets=[target],
        value=value,
    )


def _import(module: str, names: Iterable[str]) -> ast.ImportFrom:
    return ast.ImportFrom(
        module=module,
        names=[ast.alias(name=name) for name in sorted(names)],
        level=0,
    )


def _async_func(
    name: str,
    args: list[ast.arg],
    body: list[ast.stmt],
    returns: ast.expr | None = None,
) -> ast.AsyncFunctionDef:
    return ast.AsyncFunctionDef(
        name=name,
        args=ast.arguments(
            posonlyargs=[],
            args=args,
            kwonlyargs=[],
            kw_defaults=[],
            defaults=[],
        ),
        body=body,
        decorator_list=[],
        returns=returns,
        type_params=[],
    )


def _gate(
    condition: str, body: list[ast.stmt], orelse: list[ast.stmt] | None = None
) -> ast.If:
    # if <condition>: ... else: ...
    return ast.If(test=_name(condition), body=body, orelse=orelse or [])


def _docstring(text: str) -> ast.Expr:
    return ast.Expr(value=ast.Constant(value=text))


def _dotted_name(node: ast.expr) -> tuple[str, ...] | None:
    """Return the dotted name of a ``Name``/``Attribute`` chain, or None."""
    if isinstance(node, ast.Name):
        return (node.id,)
    if isinstance(node, ast.Attribute):
        prefix = _dotted_name(node.value)
        if prefix is None:
            return None
        return (*prefix, node.attr)
    return None
