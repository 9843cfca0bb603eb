"""CLI interface for retrykit"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import click

from retrykit.application.retry_executor import RetryExecutor
from retrykit.domain.backoff import delay_schedule
from retrykit.domain.errors import ConfigurationError, OperationError, RetryError
from retrykit.infrastructure.config.config_manager import ConfigManager

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
    for logger_name in logging.Logger.manager.loggerDict:
        logging.getLogger(logger_name).setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def _load_config(ctx: click.Context) -> ConfigManager:
    try:
        return ConfigManager(config_path=ctx.obj.get("config_path"))
    except ConfigurationError as e:
        _die(str(e), verbose=ctx.obj.get("verbose", False), exc=e)


def _create_executor(config_manager: ConfigManager, no_sleep: bool = False) -> RetryExecutor:
    """Create executor from config

    Args:
        config_manager: Configuration manager
        no_sleep: Skip inter-attempt delays (dry run of the schedule)

    Returns:
        RetryExecutor instance
    """

    async def _skip(_seconds: float) -> None:
        return None

    return RetryExecutor(
        config_manager.get_retry_policy(),
        classifier=config_manager.build_classifier(),
        sleep=_skip if no_sleep else None,
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .retrykit.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """retrykit - bounded retries with exponential backoff"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.option("--no-jitter", is_flag=True, help="Show the deterministic schedule")
@click.pass_context
def schedule(ctx, no_jitter: bool):
    """Print the delay before each retry."""
    policy = _load_config(ctx).get_retry_policy()
    if no_jitter:
        policy = policy.merge({"jitter": False})

    delays = delay_schedule(policy)
    if not delays:
        click.echo("No retries (max_attempts=1)")
        return
    for attempt, delay in enumerate(delays, start=2):
        click.echo(f"attempt {attempt}: wait {delay}ms")
    click.echo(f"Total wait: {sum(delays)}ms")


@cli.command()
@click.argument("message", type=str)
@click.option("--code", type=str, help="Machine-readable error code (e.g. ECONNRESET)")
@click.pass_context
def classify(ctx, message: str, code: Optional[str]):
    """Check whether an error would be retried.

    MESSAGE: Error message to classify
    """
    config_manager = _load_config(ctx)
    executor = _create_executor(config_manager)
    retryable = executor.is_retryable(OperationError(message, code=code))
    click.echo("retryable" if retryable else "non-retryable")


@cli.command()
@click.pass_context
def info(ctx):
    """Show configuration and usage."""
    executor = _create_executor(_load_config(ctx))
    click.echo(executor.whoami())
    click.echo(executor.help_text())


@cli.command()
@click.option("--failures", type=click.IntRange(min=0), default=2, show_default=True,
              help="Number of failures before the operation succeeds")
@click.option("--message", type=str, default="Temporary failure", show_default=True,
              help="Error message raised by each failure")
@click.option("--code", type=str, help="Error code attached to each failure")
@click.option("--no-sleep", is_flag=True, help="Skip inter-attempt delays")
@click.option("--json", "as_json", is_flag=True, help="Print stats as JSON")
@click.pass_context
def simulate(ctx, failures: int, message: str, code: Optional[str], no_sleep: bool, as_json: bool):
    """Run a flaky operation through the executor."""
    verbose = ctx.obj.get("verbose", False)
    executor = _create_executor(_load_config(ctx), no_sleep=no_sleep)
    calls = {"n": 0}

    async def flaky_operation() -> str:
        calls["n"] += 1
        if calls["n"] <= failures:
            raise OperationError(f"{message} (call {calls['n']})", code=code)
        return "ok"

    try:
        outcome = asyncio.run(executor.execute(flaky_operation))
        click.echo(
            f"Succeeded after {outcome.attempts_used} attempt(s) "
            f"in {outcome.elapsed_ms:.0f}ms ({len(outcome.errors_seen)} error(s))"
        )
    except RetryError as e:
        _die(str(e), verbose=verbose, exc=e)
    finally:
        if as_json:
            click.echo(json.dumps(executor.to_serializable(), indent=2))
        else:
            stats = executor.get_stats()
            click.echo(
                f"Stats: {stats.total_operations} operation(s), {stats.total_retries} retries, "
                f"success rate {stats.success_rate * 100:.1f}%"
            )


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
