import logging
import time
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from evbind.abi_events import extract_event_descriptors, read_abi_items
from evbind.core.config import GenerationConfig, load_manifest
from evbind.errors import EvbindError
from evbind.generation.bindings import BindingOptions
from evbind.orchestration import generate_all

console = Console()


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
def cli(log_level: str) -> None:
    """evbind: typed event bindings generated from contract ABIs."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@cli.command("generate")
@click.argument("manifest_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--out", "out_dir", type=click.Path(file_okay=False, path_type=Path), default=Path("./src"), show_default=True)
@click.option("--fail-fast/--no-fail-fast", default=False, show_default=True, help="Abort on the first unreadable ABI")
@click.option("--runtime-module", default=BindingOptions.runtime_module, show_default=True)
@click.option("--networks-module", default=BindingOptions.networks_module, show_default=True)
@click.option("--no-schema-sql", is_flag=True, help="Do not write schema.sql when postgres is enabled")
def generate_cmd(
    manifest_path: Path,
    out_dir: Path,
    fail_fast: bool,
    runtime_module: str,
    networks_module: str,
    no_schema_sql: bool,
) -> None:
    """Generate bindings and handlers for every contract in MANIFEST_PATH."""
    t0 = time.time()
    config = GenerationConfig(out_dir=out_dir, fail_fast=fail_fast, write_schema_sql=not no_schema_sql)
    options = BindingOptions(runtime_module=runtime_module, networks_module=networks_module)

    try:
        manifest = load_manifest(manifest_path)
        output = generate_all(manifest, config, options)
    except EvbindError as e:
        raise click.ClickException(str(e)) from e

    stats = output.stats
    for name, reason in stats.failed.items():
        console.print(f"[red]failed[/] {name}: {reason}")

    elapsed = time.time() - t0
    console.print(f"[bold]done[/]: {output.root_dir} • {elapsed:.2f}s")
    console.print(
        f"[bold]summary[/]: "
        f"[green]contracts[/]={len(stats.generated)}  "
        f"[red]failed[/]={len(stats.failed)}  "
        f"events={stats.events}"
    )
    if not stats.ok:
        raise SystemExit(1)


@cli.command("topics")
@click.argument("abi_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--event", "events", multiple=True, help="Event name; repeat to include several")
def topics_cmd(abi_path: Path, events: tuple[str, ...]) -> None:
    """Print the canonical signature and topic id of each event in ABI_PATH."""
    try:
        items = read_abi_items(abi_path, list(events) or None)
    except EvbindError as e:
        raise click.ClickException(str(e)) from e

    table = Table("event", "signature", "topic id")
    for descriptor in extract_event_descriptors(items):
        table.add_row(descriptor.name, descriptor.full_signature, descriptor.topic_id)
    console.print(table)


if __name__ == "__main__":
    cli()
