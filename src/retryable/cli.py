"""CLI interface for retryable"""

import logging
import signal
import threading
from pathlib import Path
from typing import Optional, Tuple

import click
import yaml

from retryable.application.retryable import Retryable, retry
from retryable.domain.config import RetryPolicy
from retryable.domain.models.stats import Stats
from retryable.infrastructure.command import CommandOperation
from retryable.infrastructure.config.config_manager import ConfigManager, ConfigurationError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def _load_config(ctx: click.Context) -> ConfigManager:
    verbose = ctx.obj.get("verbose", False)
    try:
        return ConfigManager(config_path=ctx.obj.get("config_path"))
    except ConfigurationError as e:
        _die(str(e), verbose=verbose, exc=e)


def _effective_policy(
    policy: RetryPolicy,
    max_attempts: Optional[int],
    delay: Optional[float],
    timeout: Optional[float],
) -> RetryPolicy:
    """Apply CLI overrides on top of the configured policy"""
    overrides = {
        "max_attempts": max_attempts,
        "delay": delay,
        "timeout": timeout,
    }
    values = policy.model_dump()
    values.update({k: v for k, v in overrides.items() if v is not None})
    return RetryPolicy(**values)


def _output_stats(stats: Stats) -> None:
    """Output run statistics to console"""
    click.echo("\n" + "=" * 80)
    click.echo("Run Statistics")
    click.echo("=" * 80)
    click.echo(f"Attempts: {stats.attempts}")
    click.echo(f"Retries: {stats.retry_count}")
    click.echo(f"Timeouts: {stats.timeout_count}")
    click.echo(f"Elapsed: {stats.elapsed:.3f}s")
    if stats.is_successful:
        click.echo("\nRun succeeded!")
    else:
        click.echo(f"\nERROR: {stats.error}", err=True)


def _install_interrupt_handler(retryable: Retryable):
    """Route Ctrl-C to cancellation while the run is in progress

    Returns:
        Previous handler, or None if no handler was installed
    """
    if threading.current_thread() is not threading.main_thread():
        return None

    def _handler(signum, frame):
        click.echo("Interrupted, cancelling...", err=True)
        retryable.cancel()

    return signal.signal(signal.SIGINT, _handler)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .retryable.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """retryable - run a command until it succeeds"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.option("--max-attempts", "-n", type=int, help="Total attempts, including the first. Overrides config.")
@click.option("--delay", "-d", type=float, help="Seconds to wait after a failed attempt. Overrides config.")
@click.option("--timeout", "-t", type=float, help="Per-attempt timeout in seconds (0 = none). Overrides config.")
@click.option("--cancel-after", type=float, help="Cancel the whole run after this many seconds")
@click.option("--shell/--no-shell", default=None, help="Run the command through the system shell. Overrides config.")
@click.pass_context
def run(
    ctx,
    command: Tuple[str, ...],
    max_attempts: Optional[int],
    delay: Optional[float],
    timeout: Optional[float],
    cancel_after: Optional[float],
    shell: Optional[bool],
):
    """Run COMMAND, retrying it on failure.

    COMMAND: Command and arguments (put them after -- if they start with a dash)
    """
    verbose = ctx.obj.get("verbose", False)
    config_manager = _load_config(ctx)

    try:
        policy = _effective_policy(
            config_manager.get_retry_policy(), max_attempts, delay, timeout
        )
    except ValueError as e:
        _die(f"Invalid retry options: {e}", verbose=verbose, exc=e)

    use_shell = shell if shell is not None else config_manager.get_command_config().shell
    operation = CommandOperation(command, shell=use_shell)
    retryable = retry(operation).with_policy(policy)

    logger.info(
        f"Running '{operation.command_line}' (max_attempts={policy.max_attempts}, "
        f"delay={policy.delay:g}s, timeout={policy.timeout:g}s)"
    )

    timer = None
    if cancel_after is not None:
        timer = threading.Timer(cancel_after, retryable.cancel)
        timer.daemon = True
        timer.start()

    previous_handler = _install_interrupt_handler(retryable)
    try:
        stats = retryable.run()
    finally:
        if timer is not None:
            timer.cancel()
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)

    _output_stats(stats)
    if not stats.is_successful:
        ctx.exit(1)


@cli.command(name="show-config")
@click.argument("key", required=False)
@click.pass_context
def show_config(ctx, key: Optional[str]):
    """Print the effective configuration as YAML.

    KEY: Optional dotted key to print a single value (e.g. retry.delay)
    """
    config_manager = _load_config(ctx)
    if key is None:
        value = config_manager.config.model_dump()
    else:
        value = config_manager.get(key)
        if value is None:
            _die(f"Unknown configuration key: {key}")
    if isinstance(value, dict):
        click.echo(yaml.safe_dump(value, sort_keys=False).rstrip())
    else:
        click.echo(value)


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
