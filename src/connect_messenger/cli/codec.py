"""CLI: messenger decode | messenger encode status|heartbeat|command"""

import json
import uuid
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from connect_messenger.errors import InvalidMessageError, MessageParseError, ValidationError
from connect_messenger.identifiers import parse_id
from connect_messenger.models import Command, CommandMessage, HeartbeatMessage, Message, Status, StatusMessage

console = Console()


def _get_messenger(ctx: click.Context):
    from connect_messenger.cli.main import _get_messenger
    return _get_messenger(ctx)


def _parse_subject_id(_ctx, _param, value: Optional[str]) -> Optional[uuid.UUID]:
    if value is None:
        return None
    subject_id = parse_id(value)
    if subject_id is None:
        raise click.BadParameter(f"not a UUID, hex or base64 id: {value}")
    return subject_id


def _emit(ctx: click.Context, message: Message) -> None:
    messenger = _get_messenger(ctx)
    try:
        click.echo(messenger.encode([message]))
    except ValidationError as e:
        for _, failure in e.failures:
            console.print(f"[red]Invalid {failure.message_type} message: {escape(str(failure))}[/red]")
        ctx.exit(1)


@click.command("decode")
@click.argument("source", type=click.File("r"), default="-")
@click.option("--json-output", "--json", is_flag=True, help="Print decoded messages as JSON")
@click.pass_context
def decode_cmd(ctx: click.Context, source, json_output: bool):
    """Decode a message envelope from FILE (or stdin)."""
    messenger = _get_messenger(ctx)
    try:
        messages = messenger.decode(source.read())
    except MessageParseError as e:
        console.print(f"[red]Parse error ({e.code}): {escape(str(e))}[/red]")
        ctx.exit(1)

    if json_output:
        click.echo(json.dumps([messenger.to_wire(m) for m in messages], indent=2))
        return

    table = Table(title=f"Messages ({len(messages)})")
    table.add_column("#", justify="right")
    table.add_column("Type", style="bold")
    table.add_column("Fields")
    table.add_column("Valid")
    for index, message in enumerate(messages):
        fields = ", ".join(f"{k}={v}" for k, v in message.model_dump(mode="json").items())
        try:
            message.validate()
            valid = "[green]yes[/green]"
        except InvalidMessageError as e:
            valid = f"[red]{escape(str(e))}[/red]"
        table.add_row(str(index), message.type, escape(fields), valid)
    console.print(table)


@click.group()
def encode():
    """Build one message and print its envelope."""


@encode.command("status")
@click.option("--id", "subject_id", default=None, callback=_parse_subject_id, help="Subject id")
@click.option("--status", type=click.Choice([s.name for s in Status], case_sensitive=False), default=None)
@click.pass_context
def encode_status(ctx: click.Context, subject_id: Optional[uuid.UUID], status: Optional[str]):
    """Encode a status message."""
    _emit(ctx, StatusMessage(subject_id=subject_id, status=status))


@encode.command("heartbeat")
@click.option("--payload", default=None)
@click.pass_context
def encode_heartbeat(ctx: click.Context, payload: Optional[str]):
    """Encode a heartbeat message."""
    _emit(ctx, HeartbeatMessage(payload=payload))


@encode.command("command")
@click.option("--id", "subject_id", default=None, callback=_parse_subject_id, help="Subject id")
@click.option("--command", type=click.Choice([c.name for c in Command], case_sensitive=False), default=None)
@click.pass_context
def encode_command(ctx: click.Context, subject_id: Optional[uuid.UUID], command: Optional[str]):
    """Encode a command message."""
    _emit(ctx, CommandMessage(subject_id=subject_id, command=command))
