import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from upath import UPath

from routestub.codegen import Codegen, transform_source
from routestub.config import get_config
from routestub.exceptions import RouteStubError

console = Console()
app = typer.Typer(
    name='routestub',
    help='Expand rpc route handlers into server handlers and client call stubs',
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def generate(
    config: Annotated[
        str | None,
        typer.Option('--config', '-c', help='Path to configuration file (YAML)'),
    ] = None,
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Log every expanded handler')
    ] = False,
) -> None:
    """Generate gated modules for every configured source.

    If no config file is specified, routestub.yaml / routestub.yml in the
    current directory or the [tool.routestub] table of pyproject.toml is used.

    Examples:
        routestub generate
        routestub generate --config routestub.yaml -v
    """
    _configure_logging(verbose)

    try:
        codegen_config = get_config(config)

        for document_config in codegen_config.documents:
            with Progress(
                SpinnerColumn(),
                TextColumn('[progress.description]{task.description}'),
                console=console,
            ) as progress:
                task = progress.add_task(
                    f'Expanding {document_config.source} into {document_config.output}...',
                    total=None,
                )

                written = Codegen(document_config).generate()

                progress.update(
                    task, description=f'Expanded {document_config.source}'
                )

            console.print('[dim]Generated files:[/dim]')
            for path in written:
                console.print(f'  - {path}')

        console.print('[green]Successfully generated code[/green]')

    except RouteStubError as e:
        console.print(f'[red]Error:[/red] {e}')
        raise typer.Exit(1)


@app.command()
def preview(
    source: Annotated[str, typer.Argument(help='Handler module to expand')],
    stub_prefix: Annotated[
        str, typer.Option('--stub-prefix', help='Prefix of generated stub names')
    ] = 'call_',
) -> None:
    """Print the expansion of a single handler module without writing it."""
    path = UPath(source)
    if not path.is_file():
        console.print(f'[red]Error:[/red] {source} is not a file')
        raise typer.Exit(1)

    try:
        output = transform_source(
            path.read_text(encoding='utf-8'), filename=source, stub_prefix=stub_prefix
        )
    except (RouteStubError, SyntaxError) as e:
        console.print(f'[red]Error:[/red] {e}')
        raise typer.Exit(1)

    typer.echo(output, nl=False)


@app.command()
def version() -> None:
    """Show the version of routestub."""
    from routestub._version import version

    console.print(f'routestub version: {version}')


if __name__ == '__main__':
    app()
