"""Runtime settings and platform gates read by generated modules."""

import sys

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RuntimeSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='ROUTESTUB_')

    client: bool = Field(
        True,
        description='Build the client side on the client platform. Turn off to keep '
        'handlers available there as well.',
    )

    base_url: str = Field(
        '', description='Base URL prepended by the httpx transport to request targets.'
    )

    timeout: float | None = Field(
        5.0, description='Timeout in seconds for the httpx transport.'
    )

    raise_for_status: bool = Field(
        True, description='Turn non-2xx responses into RpcError.'
    )


settings = RuntimeSettings()

# Pyodide reports itself as emscripten
CLIENT_PLATFORM = sys.platform == 'emscripten'
SERVER_TARGET = not CLIENT_PLATFORM or not settings.client
