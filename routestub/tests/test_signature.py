"""Tests for stub signature synthesis."""

import ast

import pytest

from routestub.codegen.reader import read_handler
from routestub.codegen.roles import JsonReturn, OpaqueReturn
from routestub.codegen.signature import synthesize
from routestub.exceptions import HandlerSignatureError


def _synthesize(source: str):
    return synthesize(read_handler(ast.parse(source).body[0]))


def _stub_args(signature) -> list[str]:
    return [
        f'{arg.arg}: {ast.unparse(arg.annotation)}'
        for arg in signature.stub_arguments()
    ]


class TestSynthesize:
    """Tests for synthesize()."""

    def test_no_parameters(self):
        signature = _synthesize('async def ping() -> str: ...')

        assert signature.name == 'ping'
        assert signature.stub_arguments() == []
        assert isinstance(signature.return_shape, OpaqueReturn)

    def test_json_return(self):
        signature = _synthesize('async def get_user() -> Json[User]: ...')

        assert isinstance(signature.return_shape, JsonReturn)
        assert signature.return_shape.inner.name == 'User'

    def test_argument_order(self):
        signature = _synthesize(
            'async def update(body: Json[Patch], db: Database, note: str, '
            "q: Query[Options], ids: Annotated[Path[tuple[str, int]], Bind('team', 'id')]) "
            '-> str: ...'
        )

        # JSON replaces the text body
        assert _stub_args(signature) == [
            'team: str',
            'id: int',
            'q: Options',
            'body: Patch',
        ]

    def test_text_body(self):
        signature = _synthesize(
            'async def echo(id: Path[int], message: LiteralString) -> str: ...'
        )

        assert _stub_args(signature) == ['id: int', 'message: str']

    def test_path_captures_accumulate(self):
        signature = _synthesize(
            'async def f(team: Path[str], id: Path[int]) -> str: ...'
        )

        assert _stub_args(signature) == ['team: str', 'id: int']

    def test_later_json_body_wins(self):
        signature = _synthesize(
            'async def f(a: Json[First], b: Json[Second]) -> str: ...'
        )

        assert _stub_args(signature) == ['b: Second']

    def test_later_query_wins(self):
        signature = _synthesize(
            'async def f(a: Query[First], b: Query[Second]) -> str: ...'
        )

        assert signature.query[0] == 'b'

    def test_forward_ref_body_is_unwrapped(self):
        signature = _synthesize("async def f(user: 'Json[User]') -> str: ...")

        assert _stub_args(signature) == ['user: User']

    def test_missing_return_type(self):
        with pytest.raises(
            HandlerSignatureError, match='Rpc handlers must declare a return type'
        ):
            _synthesize('async def ping(): ...')

    def test_parameter_errors_come_first(self):
        with pytest.raises(HandlerSignatureError, match='plain identifier'):
            _synthesize('async def ping(*args): ...')
