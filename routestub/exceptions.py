"""Custom exceptions for routestub.

This module defines the exception hierarchy used by the route-contract
compiler and by the runtime that generated client stubs call into.
"""

import ast
from typing import Literal


class RouteStubError(Exception):
    """Base exception for all routestub errors.

    All exceptions raised by routestub inherit from this class, making it easy
    to catch every routestub-related error with a single except clause.

    Example:
        try:
            codegen.generate()
        except RouteStubError as e:
            print(f"routestub error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class DeclarationError(RouteStubError):
    """A handler declaration or its ``rpc`` options cannot be compiled.

    Declaration errors are fatal for the handler they are raised for and carry
    the position of the offending node so they can be reported at the
    decorator's call site.

    Attributes:
        lineno: Line of the offending node, if known.
        col_offset: Column of the offending node, if known.
    """

    def __init__(self, message: str, node: ast.AST | None = None):
        self.lineno = getattr(node, 'lineno', None)
        self.col_offset = getattr(node, 'col_offset', None)
        full_message = message
        if self.lineno is not None:
            full_message = f'{message} (line {self.lineno}, column {self.col_offset})'
        super().__init__(full_message)


class RouteOptionError(DeclarationError):
    """The ``rpc`` option list is invalid.

    Raised for a missing method option, an unknown option name or an option
    whose value cannot be parsed.

    Attributes:
        option: The name of the offending option, if there is one.
    """

    def __init__(
        self, message: str, node: ast.AST | None = None, option: str | None = None
    ):
        self.option = option
        super().__init__(message, node)


class HandlerSignatureError(DeclarationError):
    """A handler signature cannot be turned into a client stub.

    Attributes:
        handler: The name of the handler being compiled.
    """

    def __init__(
        self, message: str, node: ast.AST | None = None, handler: str | None = None
    ):
        self.handler = handler
        if handler:
            message = f"{message} in handler '{handler}'"
        super().__init__(message, node)


class CodeGenerationError(RouteStubError):
    """Error while generating a module.

    Attributes:
        context: Additional context about what was being generated.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self, message: str, context: str | None = None, cause: Exception | None = None
    ):
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f'{message} (while generating {context})'
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class ConfigurationError(RouteStubError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class OutputError(RouteStubError):
    """Error writing generated output.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


RpcErrorKind = Literal['transport', 'status', 'decode', 'encode']


class RpcError(RouteStubError):
    """The single error type surfaced by generated client stubs.

    Wraps whatever went wrong while performing the call: the transport failed,
    the server answered with an error status, the request value could not be
    encoded or the response could not be decoded.

    Attributes:
        kind: Which stage of the call failed.
        status_code: HTTP status of the response, when one was received.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        kind: RpcErrorKind,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        self.kind = kind
        self.status_code = status_code
        self.cause = cause
        full_message = f'{kind} error: {message}'
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)
