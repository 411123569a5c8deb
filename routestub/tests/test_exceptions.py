"""Tests for the routestub exception hierarchy."""

import ast

import pytest

from routestub.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    DeclarationError,
    HandlerSignatureError,
    OutputError,
    RouteOptionError,
    RouteStubError,
    RpcError,
)


class TestRouteStubError:
    """Tests for the base RouteStubError exception."""

    def test_basic_message(self):
        error = RouteStubError('Something went wrong')

        assert error.message == 'Something went wrong'
        assert str(error) == 'Something went wrong'

    @pytest.mark.parametrize(
        'error',
        [
            DeclarationError('x'),
            RouteOptionError('x'),
            HandlerSignatureError('x'),
            CodeGenerationError('x'),
            ConfigurationError('x'),
            OutputError('x'),
            RpcError('transport', 'x'),
        ],
    )
    def test_hierarchy(self, error):
        assert isinstance(error, RouteStubError)


class TestDeclarationError:
    """Tests for declaration errors and their positions."""

    def test_without_node(self):
        error = DeclarationError('Missing method')

        assert error.lineno is None
        assert str(error) == 'Missing method'

    def test_position_from_node(self):
        node = ast.parse('\n\nrpc(head("/"))', mode='eval').body

        error = RouteOptionError("Unexpected option 'head'", node, option='head')

        assert error.lineno == 3
        assert error.col_offset == 0
        assert str(error) == "Unexpected option 'head' (line 3, column 0)"
        assert error.option == 'head'
        assert isinstance(error, DeclarationError)

    def test_handler_name(self):
        error = HandlerSignatureError(
            'Rpc handlers must declare a return type', handler='ping'
        )

        assert str(error) == "Rpc handlers must declare a return type in handler 'ping'"
        assert error.handler == 'ping'


class TestFileErrors:
    """Tests for generation, configuration and output errors."""

    def test_code_generation_error(self):
        cause = HandlerSignatureError('bad')
        error = CodeGenerationError('Failed', context='handlers/users.py', cause=cause)

        assert str(error) == 'Failed (while generating handlers/users.py): bad'
        assert error.cause is cause

    def test_configuration_error(self):
        error = ConfigurationError('Invalid value', config_path='routestub.yaml', field='output')

        assert str(error) == "Invalid value in 'routestub.yaml' (field: output)"

    def test_output_error(self):
        error = OutputError('/out/users.py', PermissionError('denied'))

        assert str(error) == "Failed to write output to '/out/users.py': denied"


class TestRpcError:
    """Tests for RpcError."""

    def test_status_error(self):
        error = RpcError('status', 'GET /api/user/1 returned 404', status_code=404)

        assert error.kind == 'status'
        assert error.status_code == 404
        assert str(error) == 'status error: GET /api/user/1 returned 404'

    def test_cause_is_included(self):
        cause = ValueError('boom')
        error = RpcError('decode', 'response is not valid', cause=cause)

        assert error.cause is cause
        assert str(error).endswith(': boom')
