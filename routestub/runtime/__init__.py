"""Names imported by handler modules and by the code generated from them."""

from routestub.exceptions import RpcError
from routestub.runtime.codec import decode_json, encode_json, encode_query
from routestub.runtime.markers import (
    Bind,
    Json,
    Path,
    Query,
    RouteOption,
    delete,
    get,
    patch,
    post,
    put,
    returns,
    rpc,
)
from routestub.runtime.settings import (
    CLIENT_PLATFORM,
    SERVER_TARGET,
    RuntimeSettings,
    settings,
)
from routestub.runtime.transport import FetchRequest, HttpxRequest

__all__ = [
    # Gates
    'CLIENT_PLATFORM',
    'SERVER_TARGET',
    'RuntimeSettings',
    'settings',
    # Transports
    'FetchRequest',
    'HttpxRequest',
    'RpcError',
    # Codecs
    'decode_json',
    'encode_json',
    'encode_query',
    # Declarations
    'Bind',
    'Json',
    'Path',
    'Query',
    'RouteOption',
    'rpc',
    'get',
    'post',
    'put',
    'delete',
    'patch',
    'returns',
]
