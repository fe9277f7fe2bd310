"""CLI interface for quire."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from quire.config import QuireConfig, load_config, merge_cli_overrides
from quire.errors import ConfigurationError, QuireError
from quire.site.builder import SiteBuilder
from quire.site.index import build_index

app = typer.Typer(
    name="quire",
    help="Build a static blog from Markdown posts with front matter.",
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from quire import __version__

        console.print(f"quire {__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    logger = logging.getLogger("quire")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=err_console, show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """quire - static blog builder."""
    pass


ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to a .quire.toml file."),
]
SourceOption = Annotated[
    Optional[Path],
    typer.Option("--source", "-s", help="Directory of source posts. Defaults to ./_posts"),
]
OutputOption = Annotated[
    Optional[Path],
    typer.Option("--output", "-o", help="Output directory. Defaults to ./_site"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Log every document loaded and page written."),
]


def _resolve_config(
    config_path: Path | None,
    source: Path | None,
    output: Path | None = None,
    workers: int | None = None,
    drafts: bool | None = None,
) -> QuireConfig:
    try:
        config = load_config(config_path)
        return merge_cli_overrides(
            config,
            source_dir=source,
            output_dir=output,
            workers=workers,
            include_drafts=drafts,
        )
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise _fail(ConfigurationError(f"invalid configuration: {problems}", path=config_path)) from exc


def _fail(exc: QuireError) -> typer.Exit:
    if exc.path is None and exc.slug is None:
        err_console.print(f"[red]Error:[/red] {escape(exc.message)}", soft_wrap=True)
        return typer.Exit(1)
    err_console.print(f"[red]Error:[/red] {escape(exc.document)}", soft_wrap=True)
    err_console.print(f"  {exc.message}", markup=False, highlight=False, soft_wrap=True)
    return typer.Exit(1)


@app.command()
def build(
    config_path: ConfigOption = None,
    source: SourceOption = None,
    output: OutputOption = None,
    workers: Annotated[
        Optional[int],
        typer.Option("--workers", "-w", min=1, help="Parse documents with N threads."),
    ] = None,
    drafts: Annotated[
        Optional[bool],
        typer.Option("--drafts/--no-drafts", help="Include posts marked published: false."),
    ] = None,
    verbose: VerboseOption = False,
) -> None:
    """Build the site. Exits non-zero on the first failing document."""
    _setup_logging(verbose)
    config = _resolve_config(config_path, source, output, workers, drafts)

    try:
        result = SiteBuilder(config).build()
    except QuireError as exc:
        raise _fail(exc) from exc
    except OSError as exc:
        path = exc.filename or config.output_path
        raise _fail(QuireError(f"cannot write output: {exc.strerror or exc}", path=path)) from exc

    console.print(
        f"[green]Built {result.post_count} post(s), {len(result.pages)} page(s)[/green]"
        f" -> {result.output_dir}"
    )


@app.command()
def check(
    config_path: ConfigOption = None,
    source: SourceOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Validate every post and render the site without writing it."""
    _setup_logging(verbose)
    config = _resolve_config(config_path, source)

    try:
        result = SiteBuilder(config).check()
    except QuireError as exc:
        raise _fail(exc) from exc

    console.print(f"[green]OK:[/green] {result.post_count} post(s), {len(result.pages)} page(s)")


@app.command(name="list")
def list_posts(
    config_path: ConfigOption = None,
    source: SourceOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Print the post listing, newest first."""
    _setup_logging(verbose)
    config = _resolve_config(config_path, source)

    try:
        store = SiteBuilder(config).load()
    except QuireError as exc:
        raise _fail(exc) from exc

    if not len(store):
        console.print("[yellow]No posts found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=config.site.title)
    table.add_column("Date")
    table.add_column("Title")
    table.add_column("Permalink")
    for entry in build_index(store):
        table.add_row(entry.date.isoformat(), entry.title, entry.permalink)
    console.print(table)


if __name__ == "__main__":
    app()
