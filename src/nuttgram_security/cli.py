"""Command line tools for exercising the secure display channel."""

from __future__ import annotations

import json
import logging
import sys

import click

from .audit import AuditError, verify_log
from .channel import BinaryMessenger, MethodResult, Outcome
from .engine import configure_engine
from .policy import SecurityPolicy, policy
from .surfaces import InMemorySurface


def _describe(result: MethodResult) -> str:
    if result.outcome is Outcome.SUCCESS:
        return f"success: {json.dumps(result.value)}"
    if result.outcome is Outcome.ERROR:
        return f"error [{result.code}]: {result.message}"
    return "not implemented"


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Secure display channel tools."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("method")
@click.option("--secure/--no-secure", default=None, help="Value of the 'secure' argument.")
@click.option("--raw-args", default=None, help="Call arguments as a JSON document.")
@click.option("--initial-secure", is_flag=True, help="Start with capture prevention enabled.")
def invoke(method: str, secure: bool | None, raw_args: str | None, initial_secure: bool) -> None:
    """Send METHOD through an in-memory channel and print the outcome."""

    if raw_args is not None and secure is not None:
        raise click.UsageError("--raw-args and --secure/--no-secure are mutually exclusive")
    if raw_args is not None:
        try:
            arguments = json.loads(raw_args)
        except json.JSONDecodeError as exc:
            raise click.BadParameter(str(exc), param_hint="--raw-args") from exc
    elif secure is not None:
        arguments = {"secure": secure}
    else:
        arguments = None

    surface = InMemorySurface(secure=initial_secure)
    channel, _toggle = configure_engine(
        BinaryMessenger(),
        surface,
        policy=SecurityPolicy(channel_name=policy.channel_name),
    )
    result = channel.invoke_method(method, arguments)
    click.echo(_describe(result))
    click.echo(f"secure: {'enabled' if surface.is_secure else 'disabled'}")


@cli.command("verify-audit")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
def verify_audit(paths: tuple[str, ...]) -> None:
    """Verify signatures and chain hashes of audit entries."""

    failed = 0
    for path in paths:
        try:
            ok = verify_log(path)
        except AuditError as exc:
            click.echo(f"{path}: unreadable ({exc})", err=True)
            failed += 1
            continue
        click.echo(f"{path}: {'ok' if ok else 'INVALID'}")
        if not ok:
            failed += 1
    if failed:
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
