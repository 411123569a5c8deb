"""JSON and query-string encoding used by generated stubs."""

from typing import Any

import httpx
from pydantic import PydanticUserError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json, to_jsonable_python

from routestub.exceptions import RpcError


def encode_json(value: Any) -> str:
    """Serialize ``value`` (models, dataclasses, plain data) to JSON text."""
    try:
        return to_json(value).decode()
    except PydanticSerializationError as exc:
        raise RpcError('encode', 'value is not JSON serializable', cause=exc) from exc


def _flatten_query(key: str, value: Any, items: list[tuple[str, Any]]) -> None:
    # nested mappings become key[sub]=value, lists repeat the key
    if value is None:
        return
    if isinstance(value, dict):
        for sub, item in value.items():
            _flatten_query(f'{key}[{sub}]', item, items)
    elif isinstance(value, list):
        for item in value:
            if isinstance(item, dict | list):
                raise RpcError(
                    'encode', f"query field '{key}' must be a list of scalars"
                )
            if item is not None:
                items.append((key, item))
    else:
        items.append((key, value))


def encode_query(value: Any) -> str:
    """Serialize a structured value into a query string.

    Nested mappings are flattened as ``inner[field]=value`` and lists of
    scalars repeat their key. Fields set to None are left out.
    """
    try:
        data = to_jsonable_python(value)
    except PydanticSerializationError as exc:
        raise RpcError('encode', 'query is not serializable', cause=exc) from exc

    if not isinstance(data, dict):
        raise RpcError(
            'encode', f'query must serialize to a mapping, not {type(data).__name__}'
        )

    items: list[tuple[str, Any]] = []
    for key, item in data.items():
        _flatten_query(str(key), item, items)

    return str(httpx.QueryParams(items))


def decode_json(text: str, model: Any) -> Any:
    """Validate JSON ``text`` into ``model``."""
    try:
        return TypeAdapter(model).validate_json(text)
    except ValidationError as exc:
        raise RpcError('decode', f'response is not a valid {model!r}', cause=exc) from exc
    except PydanticUserError as exc:
        raise RpcError('decode', f'cannot decode into {model!r}', cause=exc) from exc
