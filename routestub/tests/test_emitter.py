"""Tests for dual-target emission."""

import ast

from routestub.codegen.emitter import emit_handler, server_body
from routestub.codegen.reader import find_decorator, read_handler
from routestub.codegen.request import compile_request
from routestub.codegen.response import select_decoder
from routestub.codegen.route import parse_decorator
from routestub.codegen.signature import synthesize

HANDLER = '''
@cache
@rpc(post('/api/users'))
async def create_user(user: Json[NewUser]) -> Json[User]:
    """Create a user."""
    return await save(user)
'''


def _emit(source: str = HANDLER, stub_prefix: str = 'call_'):
    node = ast.parse(source).body[0]
    decorator = find_decorator(node)
    handler = read_handler(node)
    signature = synthesize(handler)
    metadata = parse_decorator(decorator)
    request = compile_request(metadata.path_template, signature)
    decoder = select_decoder(metadata, signature.return_shape)
    return node, emit_handler(
        handler, decorator, metadata, signature, request, decoder, stub_prefix
    )


class TestServerBody:
    """Tests for the server-gated handler copy."""

    def test_only_rpc_decorator_is_removed(self):
        node = ast.parse(HANDLER).body[0]

        gate = server_body(read_handler(node), find_decorator(node))

        assert ast.unparse(gate.test) == 'SERVER_TARGET'
        assert [ast.unparse(d) for d in gate.body[0].decorator_list] == ['cache']
        assert len(node.decorator_list) == 2


class TestEmitHandler:
    """Tests for emit_handler()."""

    def test_statements(self):
        _, emitted = _emit()
        server, client = emitted.statements

        assert ast.unparse(server.test) == 'SERVER_TARGET'
        assert ast.unparse(client.test) == 'CLIENT_PLATFORM'
        assert client.body[0].name == client.orelse[0].name == 'call_create_user'

    def test_stub_bodies_differ_only_in_transport(self):
        _, emitted = _emit()
        _, client = emitted.statements

        fetch = ast.unparse(client.body[0])
        httpx = ast.unparse(client.orelse[0])

        assert fetch.replace('FetchRequest', 'HttpxRequest') == httpx
        assert (
            "await FetchRequest('POST', '/api/users')"
            ".body(encode_json(user), 'application/json').send()" in fetch
        )

    def test_docstring_first(self):
        _, emitted = _emit()
        stub = emitted.statements[1].body[0]

        assert ast.get_docstring(stub) == 'Create a user.'

    def test_runtime_names(self):
        _, emitted = _emit()

        assert emitted.runtime_names == {
            'SERVER_TARGET',
            'CLIENT_PLATFORM',
            'FetchRequest',
            'HttpxRequest',
            'encode_json',
        }

    def test_stub_prefix(self):
        _, emitted = _emit(stub_prefix='remote_')

        assert emitted.stub_name == 'remote_create_user'
