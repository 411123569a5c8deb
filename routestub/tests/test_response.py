"""Tests for response decoder selection."""

import ast

from routestub.codegen.reader import read_type
from routestub.codegen.roles import classify_return
from routestub.codegen.response import select_decoder
from routestub.codegen.route import RouteMetadata


def _type(source: str):
    return read_type(ast.parse(source, mode='eval').body)


def _select(returns: str, override: str | None = None):
    metadata = RouteMetadata(
        'GET', '/api/x', _type(override) if override is not None else None
    )
    return select_decoder(metadata, classify_return(_type(returns)))


class TestSelectDecoder:
    """Tests for select_decoder()."""

    def test_text_fallback(self):
        decoder = _select('str')

        assert decoder.strategy == 'text'
        assert ast.unparse(decoder.return_annotation) == 'str'
        assert ast.unparse(decoder.decode_expr()) == 'await response.text()'

    def test_opaque_return_decodes_text(self):
        decoder = _select('Response')

        assert decoder.strategy == 'text'
        assert ast.unparse(decoder.return_annotation) == 'str'

    def test_json_return(self):
        decoder = _select('Json[User]')

        assert decoder.strategy == 'json'
        assert ast.unparse(decoder.return_annotation) == 'User'
        assert ast.unparse(decoder.decode_expr()) == 'await response.json(User)'

    def test_override_beats_json_return(self):
        decoder = _select('Json[User]', override='Admin')

        assert ast.unparse(decoder.return_annotation) == 'Admin'

    def test_override_on_opaque_return(self):
        decoder = _select('Response', override='list[User]')

        assert decoder.strategy == 'json'
        assert ast.unparse(decoder.decode_expr()) == 'await response.json(list[User])'

    def test_json_override_is_unwrapped(self):
        decoder = _select('Response', override='Json[User]')

        assert ast.unparse(decoder.return_annotation) == 'User'

    def test_quoted_types_are_unquoted(self):
        decoder = _select("'Json[User]'")
        override = _select('Response', override="'Admin'")

        assert ast.unparse(decoder.decode_expr()) == 'await response.json(User)'
        assert ast.unparse(override.return_annotation) == 'Admin'

    def test_custom_response_name(self):
        decoder = _select('str')

        assert ast.unparse(decoder.decode_expr('resp')) == 'await resp.text()'
