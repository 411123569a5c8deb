"""
Dual-target emission of a handler and its client stub.

The handler is kept as written (minus the ``rpc`` decorator) behind the
server gate. The stub is emitted twice behind the client platform gate: once
over the browser fetch transport and once over httpx for client code running
anywhere else. Both copies share one signature, one request expression and one
decoder.

Generated shape::

    if SERVER_TARGET:
        async def get_user(id: Path[int]) -> Json[User]: ...
    if CLIENT_PLATFORM:
        async def call_get_user(id: int) -> User:
            response = await FetchRequest('GET', f'/api/user/{id}').send()
            return await response.json(User)
    else:
        async def call_get_user(id: int) -> User:
            response = await HttpxRequest('GET', f'/api/user/{id}').send()
            return await response.json(User)
"""

import ast
import copy
import dataclasses

from routestub.codegen.ast_utils import (
    _assign,
    _async_func,
    _attr,
    _await,
    _call,
    _docstring,
    _gate,
    _name,
)
from routestub.codegen.request import RequestTemplate
from routestub.codegen.response import ResponseDecoder
from routestub.codegen.route import RouteMetadata
from routestub.codegen.signature import StubSignature
from routestub.codegen.syntax import HandlerDecl

SERVER_TARGET = 'SERVER_TARGET'
CLIENT_PLATFORM = 'CLIENT_PLATFORM'
FETCH_TRANSPORT = 'FetchRequest'
HTTPX_TRANSPORT = 'HttpxRequest'
DEFAULT_STUB_PREFIX = 'call_'


@dataclasses.dataclass
class EmittedHandler:
    statements: list[ast.stmt]
    stub_name: str
    runtime_names: set[str] = dataclasses.field(default_factory=set)


def server_body(handler: HandlerDecl, decorator: ast.expr) -> ast.If:
    """Gate a copy of the handler, without ``decorator``, to the server."""
    index = handler.node.decorator_list.index(decorator)
    node = copy.deepcopy(handler.node)
    del node.decorator_list[index]
    return _gate(SERVER_TARGET, [node])


def stub_body(
    transport: str,
    metadata: RouteMetadata,
    request: RequestTemplate,
    decoder: ResponseDecoder,
    docstring: str | None = None,
) -> list[ast.stmt]:
    """Build ``response = await <transport>(...)[.body(...)].send()`` + decode."""
    chain: ast.expr = _call(
        _name(transport),
        [ast.Constant(value=metadata.method), copy.deepcopy(request.target)],
    )
    if request.body is not None:
        body_args = [copy.deepcopy(request.body)]
        if request.content_type is not None:
            body_args.append(ast.Constant(value=request.content_type))
        chain = _call(_attr(chain, 'body'), body_args)

    body: list[ast.stmt] = [
        _assign(_name('response'), _await(_call(_attr(chain, 'send')))),
        ast.Return(value=decoder.decode_expr('response')),
    ]
    if docstring:
        body.insert(0, _docstring(docstring))
    return body


def client_stub(
    name: str,
    transport: str,
    metadata: RouteMetadata,
    signature: StubSignature,
    request: RequestTemplate,
    decoder: ResponseDecoder,
    docstring: str | None = None,
) -> ast.AsyncFunctionDef:
    return _async_func(
        name=name,
        args=signature.stub_arguments(),
        body=stub_body(transport, metadata, request, decoder, docstring),
        returns=decoder.return_annotation,
    )


def emit_handler(
    handler: HandlerDecl,
    decorator: ast.expr,
    metadata: RouteMetadata,
    signature: StubSignature,
    request: RequestTemplate,
    decoder: ResponseDecoder,
    stub_prefix: str = DEFAULT_STUB_PREFIX,
) -> EmittedHandler:
    """Assemble the gated handler and both gated stub bodies.

    Args:
        handler: The handler declaration; its ``node`` is emitted verbatim.
        decorator: The ``rpc`` decorator to strip from the server copy.
        metadata: Parsed route options.
        signature: The synthesized stub signature.
        request: Compiled request target and body.
        decoder: Selected response decoder.
        stub_prefix: Prefix distinguishing the stub from the handler.

    Returns:
        The statements to splice in place of the handler, the stub's name and
        the runtime names the statements reference.
    """
    stub_name = f'{stub_prefix}{handler.name}'

    def stub(transport: str) -> ast.AsyncFunctionDef:
        return client_stub(
            stub_name, transport, metadata, signature, request, decoder, handler.docstring
        )

    statements = [
        server_body(handler, decorator),
        _gate(CLIENT_PLATFORM, [stub(FETCH_TRANSPORT)], [stub(HTTPX_TRANSPORT)]),
    ]
    runtime_names = {
        SERVER_TARGET,
        CLIENT_PLATFORM,
        FETCH_TRANSPORT,
        HTTPX_TRANSPORT,
        *request.runtime_names,
    }

    return EmittedHandler(
        statements=statements, stub_name=stub_name, runtime_names=runtime_names
    )
