"""
Markers used in handler declarations.

They let a handler module import and run before it is expanded; the code
generator reads them syntactically and never calls them.

Example:
    >>> from routestub.runtime import Bind, Json, Path, get, rpc
    >>>
    >>> @rpc(get('/api/teams/:team/users/:id'))
    ... async def team_user(
    ...     ids: Annotated[Path[tuple[str, int]], Bind('team', 'id')],
    ... ) -> Json[User]: ...
"""

import dataclasses
from typing import Any, Callable, Generic, TypeVar

T = TypeVar('T')
F = TypeVar('F', bound=Callable[..., Any])


class Json(Generic[T]):
    """A JSON request body, or a JSON response when used as return type."""


class Query(Generic[T]):
    """A structured value sent as the query string."""


class Path(Generic[T]):
    """Captured path segments: a single type or a tuple of types."""


@dataclasses.dataclass(frozen=True)
class RouteOption:
    name: str
    value: Any


@dataclasses.dataclass(frozen=True, init=False)
class Bind:
    """Names bound to the elements of a tuple path capture."""

    names: tuple[str, ...]

    def __init__(self, *names: str | tuple[str, ...]):
        if len(names) == 1 and isinstance(names[0], tuple):
            names = names[0]
        object.__setattr__(self, 'names', tuple(names))


def rpc(*options: RouteOption) -> Callable[[F], F]:
    """Mark a handler for expansion; returns the handler unchanged."""

    def decorator(func: F) -> F:
        func.__rpc_options__ = options
        return func

    return decorator


def get(path: str) -> RouteOption:
    return RouteOption('get', path)


def post(path: str) -> RouteOption:
    return RouteOption('post', path)


def put(path: str) -> RouteOption:
    return RouteOption('put', path)


def delete(path: str) -> RouteOption:
    return RouteOption('delete', path)


def patch(path: str) -> RouteOption:
    return RouteOption('patch', path)


def returns(type_: Any) -> RouteOption:
    """Override the type the stub decodes the response into."""
    return RouteOption('returns', type_)
