"""CLI: messenger types | messenger check-id"""

from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from connect_messenger.config import MessengerConfig, save_config
from connect_messenger.errors import IdentifierSyntaxError, RegistrationError
from connect_messenger.identifiers import validate_identifier

console = Console()


def _get_messenger(ctx: click.Context):
    from connect_messenger.cli.main import _get_messenger
    return _get_messenger(ctx)


def _load_config(ctx: click.Context):
    from connect_messenger.cli.main import _load_config
    return _load_config(ctx)


def _build_messenger(cfg: MessengerConfig):
    from connect_messenger.cli.main import _build_messenger
    return _build_messenger(cfg)


@click.command("types")
@click.option("--add", "add_path", default=None, metavar="MODULE:CLASS",
              help="Register an extra message class in the config file")
@click.pass_context
def types_cmd(ctx: click.Context, add_path: Optional[str]):
    """List registered message types."""
    if add_path:
        cfg = _load_config(ctx)
        candidate = cfg.model_copy(update={"message_types": [*cfg.message_types, add_path]})
        try:
            # Same build as every other command, so nothing unusable is saved.
            _build_messenger(candidate)
        except RegistrationError as e:
            console.print(f"[red]Cannot register {escape(add_path)} ({e.code}): {escape(str(e))}[/red]")
            ctx.exit(1)
        if add_path not in cfg.message_types:
            cfg.message_types.append(add_path)
        path = save_config(cfg, ctx.obj.get("config_path"))
        console.print(f"[green]Added {add_path}[/green] [dim]({path})[/dim]")

    messenger = _get_messenger(ctx)
    table = Table(title=f"Message types ({len(messenger.registry)})")
    table.add_column("Type", style="bold")
    table.add_column("Class")
    for type_name, message_class in sorted(messenger.registry.types().items()):
        table.add_row(type_name, f"{message_class.__module__}.{message_class.__qualname__}")
    console.print(table)


@click.command("check-id")
@click.argument("identifier")
@click.pass_context
def check_id_cmd(ctx: click.Context, identifier: str):
    """Check that IDENTIFIER is a valid type or domain identifier."""
    try:
        validate_identifier(identifier)
    except IdentifierSyntaxError as e:
        console.print(f"[red]{escape(str(e))}[/red] [dim]({e.error.name})[/dim]")
        ctx.exit(1)
    console.print(f"[green]{identifier} is valid[/green]")
