"""
connect-messenger CLI: `messenger` command.

Commands:
  messenger types                 List registered message types
  messenger check-id <id>         Check identifier syntax
  messenger decode [FILE]         Decode a message envelope
  messenger encode <type> ...     Build and encode one message
"""

import logging
from typing import Optional

try:
    import click
    from rich.console import Console
    from rich.markup import escape
except ImportError:
    raise SystemExit("CLI requires extras: pip install connect-messenger[cli]")

from connect_messenger.config import MessengerConfig, load_config
from connect_messenger.errors import RegistrationError
from connect_messenger.messenger import Messenger, MessengerBuilder
from connect_messenger.models import CommandMessage, HeartbeatMessage, StatusMessage

console = Console()

# The CLI always understands every shipped message type.
SHIPPED_TYPES = (StatusMessage, HeartbeatMessage, CommandMessage)


def _load_config(ctx: click.Context) -> MessengerConfig:
    return load_config(ctx.obj.get("config_path"))


def _build_messenger(cfg: MessengerConfig) -> Messenger:
    builder = MessengerBuilder.from_config(cfg)
    for message_class in SHIPPED_TYPES:
        builder.register(message_class)
    return builder.build()


def _get_messenger(ctx: click.Context) -> Messenger:
    try:
        return _build_messenger(_load_config(ctx))
    except RegistrationError as e:
        console.print(f"[red]Configuration error ({e.code}): {escape(str(e))}[/red]")
        raise SystemExit(1)


@click.group()
@click.version_option("0.1.0")
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False),
              help="Config file (default: ~/.connect-messenger/config.json)")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], verbose: bool):
    """Encode and decode typed JSON messages."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# Register subcommands from separate modules
from connect_messenger.cli.codec import decode_cmd, encode  # noqa: E402
from connect_messenger.cli.registry import check_id_cmd, types_cmd  # noqa: E402

main.add_command(types_cmd)
main.add_command(check_id_cmd)
main.add_command(decode_cmd)
main.add_command(encode)


if __name__ == "__main__":
    main()
