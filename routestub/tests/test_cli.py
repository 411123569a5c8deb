"""Test CLI functionality."""

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from routestub.cli import app
from routestub.config import CodegenConfig, DocumentConfig
from routestub.exceptions import CodeGenerationError, ConfigurationError


@pytest.fixture
def runner():
    """Fixture providing CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_config():
    """Fixture providing sample configuration."""
    return CodegenConfig(
        documents=[DocumentConfig(source='./handlers', output='./generated')]
    )


class TestGenerateCommand:
    """Test the generate command."""

    @patch('routestub.cli.get_config')
    @patch('routestub.cli.Codegen')
    def test_generate_without_config_file(
        self, mock_codegen_class, mock_get_config, runner, sample_config
    ):
        """Test generate command without specifying config file."""
        mock_get_config.return_value = sample_config
        mock_codegen_instance = MagicMock()
        mock_codegen_instance.generate.return_value = ['generated/users.py']
        mock_codegen_class.return_value = mock_codegen_instance

        result = runner.invoke(app, ['generate'])

        assert result.exit_code == 0
        mock_get_config.assert_called_once_with(None)
        mock_codegen_class.assert_called_once_with(sample_config.documents[0])
        mock_codegen_instance.generate.assert_called_once()
        assert 'generated/users.py' in result.stdout
        assert 'Successfully generated code' in result.stdout

    @patch('routestub.cli.get_config')
    @patch('routestub.cli.Codegen')
    def test_generate_with_short_config_option(
        self, mock_codegen_class, mock_get_config, runner, sample_config
    ):
        """Test generate command with short config option."""
        mock_get_config.return_value = sample_config
        mock_codegen_class.return_value.generate.return_value = []

        result = runner.invoke(app, ['generate', '-c', 'routestub.yaml', '-v'])

        assert result.exit_code == 0
        mock_get_config.assert_called_once_with('routestub.yaml')

    @patch('routestub.cli.get_config')
    def test_generate_config_error(self, mock_get_config, runner):
        """Test generate command when no configuration exists."""
        mock_get_config.side_effect = ConfigurationError('Configuration not found')

        result = runner.invoke(app, ['generate'])

        assert result.exit_code == 1
        assert 'Configuration not found' in result.stdout

    @patch('routestub.cli.get_config')
    @patch('routestub.cli.Codegen')
    def test_generate_codegen_error(
        self, mock_codegen_class, mock_get_config, runner, sample_config
    ):
        """Test generate command when a handler fails to expand."""
        mock_get_config.return_value = sample_config
        mock_codegen_class.return_value.generate.side_effect = CodeGenerationError(
            'Failed to expand rpc handlers'
        )

        result = runner.invoke(app, ['generate'])

        assert result.exit_code == 1
        assert 'Failed to expand rpc handlers' in result.stdout

    def test_generate_end_to_end(self, runner, tmp_path, monkeypatch):
        """Test generate command against a real source tree."""
        (tmp_path / 'handlers').mkdir()
        (tmp_path / 'handlers' / 'ping.py').write_text(
            "@rpc(get('/api/ping'))\nasync def ping() -> str: ...\n"
        )
        (tmp_path / 'routestub.yaml').write_text(
            'documents:\n  - source: handlers\n    output: generated\n'
        )
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ['generate'])

        assert result.exit_code == 0
        assert 'call_ping' in (tmp_path / 'generated' / 'ping.py').read_text()


class TestPreviewCommand:
    """Test the preview command."""

    def test_preview(self, runner, tmp_path):
        source = tmp_path / 'ping.py'
        source.write_text("@rpc(get('/api/ping'))\nasync def ping() -> str: ...\n")

        result = runner.invoke(app, ['preview', str(source), '--stub-prefix', 'fetch_'])

        assert result.exit_code == 0
        assert 'async def fetch_ping() -> str:' in result.stdout

    def test_preview_missing_file(self, runner, tmp_path):
        result = runner.invoke(app, ['preview', str(tmp_path / 'missing.py')])

        assert result.exit_code == 1
        assert 'is not a file' in ' '.join(result.stdout.split())

    def test_preview_declaration_error(self, runner, tmp_path):
        source = tmp_path / 'ping.py'
        source.write_text("@rpc(returns(str))\nasync def ping() -> str: ...\n")

        result = runner.invoke(app, ['preview', str(source)])

        assert result.exit_code == 1
        assert 'Missing method' in result.stdout


class TestVersionCommand:
    """Test the version command."""

    def test_version(self, runner):
        result = runner.invoke(app, ['version'])

        assert result.exit_code == 0
        assert 'routestub version: 0.1.0' in result.stdout
