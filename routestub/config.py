import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings

from routestub.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['routestub.yaml', 'routestub.yml']


class DocumentConfig(BaseModel):
    """Represents a single source tree of handler modules to be processed."""

    source: str = Field(
        ..., description='Path to a handler module or a directory of handler modules.'
    )

    output: str = Field(..., description='Output directory for the generated code.')

    stub_prefix: str = Field(
        'call_', description='Prefix of the generated client stub names.'
    )

    decorator: str = Field(
        'rpc', description='Name of the decorator marking handlers to expand.'
    )

    runtime_module: str = Field(
        'routestub.runtime',
        description='Module the generated code imports transports and gates from.',
    )

    strict_placeholders: bool = Field(
        False,
        description='Fail when a route placeholder does not match the path binding at its position.',
    )


class CodegenConfig(BaseSettings):
    documents: list[DocumentConfig] = Field(
        ..., description='List of handler sources to process.'
    )


def load_yaml(path: str | Path) -> dict:
    try:
        return yaml.load(Path(path).read_text(), Loader=yaml.FullLoader)
    except yaml.YAMLError as e:
        raise ConfigurationError(f'Invalid YAML: {e}', config_path=str(path)) from e


def _validate(data: dict, config_path: str | Path) -> CodegenConfig:
    try:
        return CodegenConfig.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        field = '.'.join(str(part) for part in error['loc']) or None
        raise ConfigurationError(
            error['msg'], config_path=str(config_path), field=field
        ) from e


def get_config(path: str | None = None) -> CodegenConfig:
    """Load configuration from a file, the working directory or pyproject.toml.

    Raises:
        ConfigurationError: If no configuration can be found or it is invalid.
    """
    if path:
        if not Path(path).exists():
            raise ConfigurationError('Configuration file not found', config_path=path)
        return _validate(load_yaml(path), path)

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        path = Path(cwd) / filename
        if path.exists():
            return _validate(load_yaml(path), path)

    path = Path(cwd) / 'pyproject.toml'

    if path.exists():
        import tomllib

        pyproject = tomllib.loads(path.read_text())
        tools = pyproject.get('tool', {})

        if 'routestub' in tools:
            return _validate(tools['routestub'], path)

    raise ConfigurationError('Configuration not found', config_path=cwd)
