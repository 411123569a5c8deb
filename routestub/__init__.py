"""RouteStub - Expand async route handlers into typed client call stubs.

Each handler decorated with ``rpc`` is rewritten into two platform-gated
halves: the handler itself, compiled only for the server, and a client stub
with the same route contract that performs the HTTP request and decodes the
response.

Quick Start:
    >>> from routestub import Codegen, DocumentConfig
    >>>
    >>> config = DocumentConfig(source='./handlers', output='./generated')
    >>> Codegen(config).generate()

CLI Usage:
    $ routestub generate --config routestub.yaml
    $ routestub preview ./handlers/users.py
"""

from routestub._version import version as __version__
from routestub.codegen import Codegen, generate_rpc, transform_source
from routestub.config import CodegenConfig, DocumentConfig, get_config
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

__all__ = [
    '__version__',
    # Main entry points
    'Codegen',
    'generate_rpc',
    'transform_source',
    # Configuration
    'CodegenConfig',
    'DocumentConfig',
    'get_config',
    # Exceptions
    'RouteStubError',
    'DeclarationError',
    'RouteOptionError',
    'HandlerSignatureError',
    'CodeGenerationError',
    'ConfigurationError',
    'OutputError',
    'RpcError',
]
