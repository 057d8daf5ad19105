"""CLI interface for Doclink.

Command-line tool for inspecting documentation pages and checking
alias cross-references.
"""

import json
import logging
import sys
from pathlib import Path

import click

from doclink.config import Config
from doclink.core.checker import check_store
from doclink.core.errors import DoclinkError
from doclink.core.related import RelatedLinker
from doclink.core.resolver import AliasResolver, LinkPolicy
from doclink.core.store import DocumentStore, StoreLoader


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover doclink.toml)",
)
@click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Documentation source directory (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    source_dir: Path | None,
    verbose: bool,
) -> None:
    """Doclink - documentation pages with alias cross-references."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    ctx.obj = config.with_overrides(source_dir=source_dir)


@cli.command("list")
@click.option("--tag", default=None, help="Only show documents with this tag")
@click.pass_obj
def list_documents(config: Config, tag: str | None) -> None:
    """List loaded documents."""
    store = _load_store(config)
    documents = store.by_tag(tag) if tag else store.all()
    for doc in documents:
        click.echo(f"{doc.alias}\t{doc.path}\t{doc.title}")


@cli.command()
@click.argument("alias")
@click.pass_obj
def show(config: Config, alias: str) -> None:
    """Show a document record with its related documents."""
    store = _load_store(config)
    try:
        doc = store.get(alias)
    except DoclinkError as e:
        raise click.ClickException(str(e)) from e

    related = RelatedLinker(store).related_of(doc)
    record = {
        **doc.to_dict(),
        "related_documents": {
            "further": [{"alias": d.alias, "path": d.path} for d in related.further],
            "more": [{"alias": d.alias, "path": d.path} for d in related.more],
        },
    }
    click.echo(json.dumps(record, indent=2, ensure_ascii=False))
    for warning in related.warnings:
        click.echo(f"Warning: {warning}", err=True)


@cli.command()
@click.argument("token")
@click.pass_obj
def resolve(config: Config, token: str) -> None:
    """Resolve an alias reference such as !alias-<id>#<fragment>."""
    resolver = AliasResolver(_load_store(config))
    try:
        click.echo(resolver.resolve(token))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="TOKEN") from e
    except DoclinkError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.option(
    "--policy",
    type=click.Choice([p.value for p in LinkPolicy]),
    default=None,
    help="Fail on broken references or only warn (overrides config)",
)
@click.pass_obj
def check(config: Config, policy: str | None) -> None:
    """Check every alias reference in the documentation."""
    if policy is not None:
        config = config.with_overrides(policy=LinkPolicy(policy))

    store = _load_store(config)
    report = check_store(store)

    for issue in report.issues:
        click.echo(f"Warning: {issue}", err=True)

    click.echo(
        f"Checked {report.documents_checked} documents, "
        f"{len(report.issues)} broken references",
    )

    if not report.ok and config.links.policy is LinkPolicy.ERROR:
        sys.exit(1)


@cli.command()
@click.option("--host", default=None, help="Host to bind to (overrides config)")
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: enabled)",
)
@click.pass_obj
def serve(
    config: Config,
    host: str | None,
    port: int | None,
    live_reload: bool | None,
) -> None:
    """Start the documentation API server."""
    from doclink.server import run_server

    config = config.with_overrides(
        host=host,
        port=port,
        live_reload_enabled=live_reload,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Source directory: {config.docs.source_dir}")
    click.echo(f"Link policy: {config.links.policy}")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")

    try:
        run_server(config)
    except DoclinkError as e:
        raise click.ClickException(str(e)) from e


def _load_store(config: Config) -> DocumentStore:
    try:
        return StoreLoader(config.docs.source_dir).load()
    except DoclinkError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    cli()
