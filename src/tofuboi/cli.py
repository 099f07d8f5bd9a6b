"""Click-based CLI for tofuboi.

Defines the top-level command group, the ``run`` subcommand with all
bot-configuration flags, and ``fetch`` which prints a transcript chunked
exactly as the bot would send it. Precedence: CLI flag > env var > .env >
default. ``apply_args_to_env()`` sets os.environ for explicitly provided flags
so Config reads the overridden values.
"""

import asyncio
import os
from pathlib import Path

import click

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_MESSAGE_RULE = "-" * 40


def _validate_positive_int(
    _ctx: click.Context, _param: click.Parameter, value: int | None
) -> int | None:
    if value is not None and value <= 0:
        raise click.BadParameter("must be positive")
    return value


class _DefaultToRun(click.Group):
    """Click group that runs the ``run`` command when invoked without a subcommand."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        # If the first arg is not a known command and not --help/--version,
        # prepend "run" so flags like -v go to the run command.
        if args and args[0] not in self.commands and not args[0].startswith("--"):
            args = ["run", *args]
        return super().parse_args(ctx, args)


@click.group(
    cls=_DefaultToRun,
    invoke_without_command=True,
    help="Telegram bot that sends YouTube transcripts in message-sized chunks.",
)
@click.version_option(package_name="tofuboi", prog_name="tofuboi")
@click.pass_context
def cli(ctx: click.Context) -> None:
    if ctx.invoked_subcommand is None:
        ctx.invoke(run_cmd)


# --- run command -----------------------------------------------------------

# Mapping: click option name → environment variable name
_FLAG_TO_ENV: list[tuple[str, str]] = [
    ("config_dir", "TOFUBOI_DIR"),
    ("allowed_users", "ALLOWED_USERS"),
    ("budget", "TOFUBOI_MESSAGE_BUDGET"),
    ("default_lang", "TOFUBOI_DEFAULT_LANG"),
    ("fallback_langs", "TOFUBOI_FALLBACK_LANGS"),
]


def apply_args_to_env(**kwargs: object) -> None:
    """Set environment variables from explicitly provided CLI flags.

    Call BEFORE Config instantiation to ensure CLI flags take precedence.
    Only sets env vars for flags that were explicitly provided (not None).
    """
    verbose = kwargs.get("verbose", False)
    log_level = kwargs.get("log_level")

    if verbose:
        os.environ["TOFUBOI_LOG_LEVEL"] = "DEBUG"
    elif log_level is not None:
        os.environ["TOFUBOI_LOG_LEVEL"] = str(log_level).upper()

    for attr, env_var in _FLAG_TO_ENV:
        value = kwargs.get(attr)
        if value is None:
            continue
        if isinstance(value, Path):
            os.environ[env_var] = str(value.expanduser().resolve())
        else:
            os.environ[env_var] = str(value)


@cli.command("run")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level.",
)
@click.option(
    "--config-dir",
    type=click.Path(path_type=Path),
    default=None,
    envvar="TOFUBOI_DIR",
    help="Config directory (default: ~/.tofuboi).",
)
@click.option(
    "--allowed-users",
    default=None,
    envvar="ALLOWED_USERS",
    help="Comma-separated Telegram user IDs (default: everyone).",
)
@click.option(
    "--budget",
    type=int,
    default=None,
    callback=_validate_positive_int,
    envvar="TOFUBOI_MESSAGE_BUDGET",
    help="Maximum bytes per outgoing message (default: 4096).",
)
@click.option(
    "--default-lang",
    default=None,
    envvar="TOFUBOI_DEFAULT_LANG",
    help="Transcript language when none is given (default: en).",
)
@click.option(
    "--fallback-langs",
    default=None,
    envvar="TOFUBOI_FALLBACK_LANGS",
    help="Comma-separated fallback preference (default: en,zh-HK,zh-TW).",
)
def run_cmd(**kwargs: object) -> None:
    """Start the bot with optional overrides."""
    apply_args_to_env(**kwargs)

    from .main import run_bot

    run_bot()


# --- fetch command ---------------------------------------------------------


@cli.command("fetch")
@click.argument("video")
@click.option("--lang", default="en", show_default=True, help="Transcript language.")
@click.option(
    "--budget",
    type=int,
    default=4096,
    show_default=True,
    callback=_validate_positive_int,
    envvar="TOFUBOI_MESSAGE_BUDGET",
    help="Maximum bytes per message.",
)
@click.option(
    "--fallback-langs",
    default=None,
    envvar="TOFUBOI_FALLBACK_LANGS",
    help="Comma-separated fallback preference (default: en,zh-HK,zh-TW).",
)
def fetch_cmd(video: str, lang: str, budget: int, fallback_langs: str | None) -> None:
    """Print a transcript split into bot-sized messages."""
    from .chunker import deliver_fragments
    from .errors import BudgetTooSmall, TranscriptError
    from .language import DEFAULT_PREFERRED_LANGUAGES
    from .transcript import decode_fragment, fetch_with_fallback
    from .utils import parse_csv

    preferred = tuple(parse_csv(fallback_langs or "")) or DEFAULT_PREFERRED_LANGUAGES

    async def _echo(message: str) -> None:
        click.echo(message)
        click.echo(_MESSAGE_RULE)

    async def _run() -> int:
        entries, notice = await fetch_with_fallback(video, lang, preferred)
        if notice:
            click.echo(notice, err=True)
        fragments = (decode_fragment(entry.text) for entry in entries)
        return await deliver_fragments(fragments, _echo, budget)

    try:
        sent = asyncio.run(_run())
    except TranscriptError as e:
        raise click.ClickException(f"Error fetching transcript: {e}") from e
    except BudgetTooSmall as e:
        raise click.ClickException(f"Error processing transcript: {e}") from e

    if sent == 0:
        raise click.ClickException("Transcript could not be retrieved or is empty.")
    click.echo(f"{sent} message(s)", err=True)
