"""Command-line entry point: run the bot or inspect its state."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.table import Table

from . import __version__
from .config import settings
from .errors import ConfigError, StorageFailure
from .state.subscriptions import Document, get_subscription_store

console = Console()
logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.cfg.log_level, logging.INFO),
        format="%(asctime)s  %(name)s  %(levelname)s  %(message)s",
    )


def _validated() -> bool:
    try:
        settings.cfg.validate()
    except ConfigError as exc:
        console.print("[bold red]Configuration error[/bold red]")
        for problem in exc.problems:
            console.print(f"  - {problem}")
        return False
    return True


async def _run_bot() -> None:
    from .messaging.bot import RelayBot

    bot = RelayBot(settings.cfg, get_subscription_store())
    async with bot:
        await bot.start(settings.cfg.bot_token)


def cmd_run(args: argparse.Namespace) -> int:
    if not _validated():
        return 2
    _configure_logging()
    logger.info("Starting relay v%s, document at %s", __version__, settings.cfg.db_path)
    try:
        asyncio.run(_run_bot())
    except KeyboardInterrupt:
        pass
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    ok = _validated()
    table = Table(title="Resolved settings")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key, value in settings.cfg.summary().items():
        table.add_row(key, value or "[dim]-[/dim]")
    console.print(table)
    return 0 if ok else 2


def render_subscriptions(doc: Document, user: str | None = None) -> Table:
    table = Table(title="Subscriptions")
    table.add_column("User", style="bold")
    table.add_column("Channels")
    for user_id, record in sorted(doc.items()):
        if user is not None and user_id != user:
            continue
        channels = ", ".join(str(cid) for cid in record.subscribed)
        table.add_row(user_id, channels or "[dim](none)[/dim]")
    return table


def cmd_subscriptions(args: argparse.Namespace) -> int:
    if settings.cfg.db_path is None:
        console.print("[bold red]DB_PATH is not set[/bold red]")
        return 2
    try:
        doc = asyncio.run(get_subscription_store().read())
    except StorageFailure as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        return 1
    console.print(render_subscriptions(doc, args.user))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="relay",
        description="Relay monitored Discord channels to subscribers' DMs.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="connect to Discord and start relaying")
    run.set_defaults(func=cmd_run)

    check = sub.add_parser("check", help="validate configuration")
    check.set_defaults(func=cmd_check)

    subs = sub.add_parser("subscriptions", help="show the subscription document")
    subs.add_argument("--user", help="only show this user id")
    subs.set_defaults(func=cmd_subscriptions)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
