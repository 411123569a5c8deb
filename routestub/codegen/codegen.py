"""Expand ``rpc``-decorated handlers into gated handlers and client stubs.

``expand_handler`` runs the whole pipeline for one declaration: route options
and parameter roles feed the signature, which feeds the request compiler and
the decoder selector, which feed the emitter. ``transform_module`` applies it
to every top-level handler of a module, and ``Codegen`` does that for every
module of a configured source tree.
"""

import ast
import logging
import os
import py_compile

from upath import UPath

from routestub.codegen.emitter import DEFAULT_STUB_PREFIX, EmittedHandler, emit_handler
from routestub.codegen.import_collector import ImportCollector
from routestub.codegen.reader import HandlerNode, find_decorator, read_handler
from routestub.codegen.request import compile_request
from routestub.codegen.response import select_decoder
from routestub.codegen.route import parse_decorator
from routestub.codegen.signature import synthesize
from routestub.codegen.utils import iter_sources, render_module, write_mod
from routestub.config import DocumentConfig
from routestub.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    DeclarationError,
    HandlerSignatureError,
    OutputError,
    RouteOptionError,
)

logger = logging.getLogger(__name__)

DEFAULT_DECORATOR = 'rpc'
DEFAULT_RUNTIME_MODULE = 'routestub.runtime'


def expand_handler(
    node: HandlerNode,
    decorator: ast.expr,
    stub_prefix: str = DEFAULT_STUB_PREFIX,
    strict_placeholders: bool = False,
) -> EmittedHandler:
    """Run the pipeline for one decorated handler.

    Args:
        node: The handler definition.
        decorator: Its ``rpc`` decorator expression.
        stub_prefix: Prefix for the generated stub's name.
        strict_placeholders: Reject route placeholders that do not match the
            path bindings.

    Raises:
        DeclarationError: If the options or the signature cannot be compiled.
    """
    handler = read_handler(node)
    signature = synthesize(handler)
    metadata = parse_decorator(decorator)
    request = compile_request(
        metadata.path_template, signature, strict_placeholders, node
    )
    decoder = select_decoder(metadata, signature.return_shape)

    logger.debug(
        "Expanding handler '%s' (%s %s, %s decode)",
        handler.name,
        metadata.method,
        metadata.path_template,
        decoder.strategy,
    )

    return emit_handler(handler, decorator, metadata, signature, request, decoder, stub_prefix)


def _import_position(body: list[ast.stmt]) -> int:
    # after the module docstring and any __future__ imports
    position = 0
    if (
        body
        and isinstance(body[0], ast.Expr)
        and isinstance(body[0].value, ast.Constant)
        and isinstance(body[0].value.value, str)
    ):
        position = 1
    while (
        position < len(body)
        and isinstance(body[position], ast.ImportFrom)
        and body[position].module == '__future__'
    ):
        position += 1
    return position


def transform_module(
    module: ast.Module,
    decorator: str = DEFAULT_DECORATOR,
    stub_prefix: str = DEFAULT_STUB_PREFIX,
    strict_placeholders: bool = False,
    runtime_module: str = DEFAULT_RUNTIME_MODULE,
) -> tuple[ast.Module, list[str]]:
    """Expand every top-level ``rpc`` handler of ``module``.

    Returns:
        A tuple of (module, stub_names). The module is a new node; statements
        other than handlers are carried over unchanged.
    """
    body: list[ast.stmt] = []
    stub_names: list[str] = []
    collector = ImportCollector()

    for stmt in module.body:
        if isinstance(stmt, ast.FunctionDef | ast.AsyncFunctionDef):
            found = find_decorator(stmt, decorator)
            if found is not None:
                emitted = expand_handler(stmt, found, stub_prefix, strict_placeholders)
                body.extend(emitted.statements)
                stub_names.append(emitted.stub_name)
                collector.add_imports({runtime_module: emitted.runtime_names})
                continue
        body.append(stmt)

    collector.discard_existing(module)
    position = _import_position(body)
    body[position:position] = collector.to_ast()

    return ast.Module(body=body, type_ignores=module.type_ignores), stub_names


def transform_source(
    source: str,
    filename: str = '<unknown>',
    decorator: str = DEFAULT_DECORATOR,
    stub_prefix: str = DEFAULT_STUB_PREFIX,
    strict_placeholders: bool = False,
    runtime_module: str = DEFAULT_RUNTIME_MODULE,
) -> str:
    """Parse, transform and render one module's source text."""
    module = ast.parse(source, filename=filename)
    transformed, _ = transform_module(
        module, decorator, stub_prefix, strict_placeholders, runtime_module
    )
    return render_module(transformed)


def generate_rpc(
    options: str,
    declaration: str,
    stub_prefix: str = DEFAULT_STUB_PREFIX,
    strict_placeholders: bool = False,
) -> str:
    """Expand a single declaration as if decorated with ``@rpc(<options>)``.

    Example:
        >>> print(generate_rpc("get('/api/ping')", "async def ping() -> str: ..."))

    Raises:
        RouteOptionError: If ``options`` is not a valid option list.
        HandlerSignatureError: If ``declaration`` is not a single function or
            its signature cannot be compiled.
    """
    try:
        decorator = ast.parse(f'{DEFAULT_DECORATOR}({options})', mode='eval').body
    except SyntaxError as exc:
        raise RouteOptionError(f'Unparseable options {options!r}') from exc

    module = ast.parse(declaration)
    if len(module.body) != 1 or not isinstance(
        module.body[0], ast.FunctionDef | ast.AsyncFunctionDef
    ):
        raise HandlerSignatureError('Expected a single function declaration')

    node = module.body[0]
    node.decorator_list.insert(0, decorator)
    emitted = expand_handler(node, decorator, stub_prefix, strict_placeholders)
    return render_module(ast.Module(body=emitted.statements, type_ignores=[]))


class Codegen:
    """Generate the gated modules for one configured document."""

    def __init__(self, config: DocumentConfig):
        self.config = config

    def _transform(self, path: UPath, source: str) -> str:
        module = ast.parse(source, filename=str(path))
        transformed, stub_names = transform_module(
            module,
            decorator=self.config.decorator,
            stub_prefix=self.config.stub_prefix,
            strict_placeholders=self.config.strict_placeholders,
            runtime_module=self.config.runtime_module,
        )
        if not stub_names:
            logger.debug('No rpc handlers in %s, copying as is', path)
            return source

        logger.debug('Generated %s in %s', ', '.join(stub_names), path)
        return render_module(transformed)

    def generate(self) -> list[UPath]:
        """Transform every source module and write it under the output directory.

        Returns:
            The paths that were written.

        Raises:
            ConfigurationError: If the source does not exist.
            CodeGenerationError: If a module fails to parse or expand.
            OutputError: If the output cannot be written.
        """
        source = UPath(self.config.source)
        if not source.exists():
            raise ConfigurationError(
                f"Source '{self.config.source}' does not exist", field='source'
            )

        directory = UPath(self.config.output)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputError(str(directory), exc) from exc

        if not os.access(str(directory), os.W_OK):
            raise OutputError(str(directory))

        written: list[UPath] = []
        for path, relative in iter_sources(source):
            try:
                content = self._transform(path, path.read_text(encoding='utf-8'))
            except (DeclarationError, SyntaxError) as exc:
                raise CodeGenerationError(
                    'Failed to expand rpc handlers', context=str(path), cause=exc
                ) from exc

            target = directory / relative
            try:
                write_mod(content, target)
            except (OSError, py_compile.PyCompileError) as exc:
                raise OutputError(str(target), exc) from exc
            logger.debug('Wrote %s', target)
            written.append(target)

        return written
