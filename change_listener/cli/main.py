"""CLI entrypoint for change-listener — typer app with `listen` and `publish` commands."""

import asyncio
import sys
from pathlib import Path

import structlog
import typer
from pydantic import ValidationError
from rich.console import Console

from change_listener.broker.infrastructure.google_pubsub import GooglePubSubConnection
from change_listener.broker.infrastructure.observer import StructlogBrokerObserver
from change_listener.changes.application.publisher import ChangePublisher
from change_listener.changes.domain.kind import ChangeKind
from change_listener.changes.domain.record import RECORD_TYPES, ChangeRecord
from change_listener.changes.infrastructure.protobuf_codec import ProtobufChangeCodec
from change_listener.cli.output.change_sink import ChangeSink, write_change
from change_listener.config.domain.config import AppConfig
from change_listener.config.infrastructure.observer import StructlogConfigObserver
from change_listener.config.infrastructure.yaml_loader import YamlConfigLoader
from change_listener.core.errors import ChangeListenerError
from change_listener.feed.infrastructure.observer import StructlogFeedObserver
from change_listener.listener.application.listener import ChangeListener
from change_listener.listener.infrastructure.observer import StructlogListenerObserver
from change_listener.listener.infrastructure.registry import create_listener

app = typer.Typer(add_completion=False)


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        # Logs go to stderr so stdout carries only change lines.
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _load_config(config_path: Path) -> AppConfig:
    loader = YamlConfigLoader(observer=StructlogConfigObserver())
    try:
        return loader.load(path=config_path)
    except ChangeListenerError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1) from exc


async def _listen(config: AppConfig, sinks: list[ChangeSink]) -> None:
    """Run one supervised listener per sink until interrupted."""
    connection = GooglePubSubConnection.connect(
        config=config.broker, observer=StructlogBrokerObserver()
    )
    listeners: list[ChangeListener] = []
    failure: ChangeListenerError | None = None
    try:
        for sink in sinks:
            listeners.append(
                await create_listener(
                    sink.kind,
                    connection=connection,
                    controller_id=config.listener.controller_id,
                    session_timeout_seconds=config.listener.session_timeout_seconds,
                    callback=write_change,
                    context=sink,
                    observer=StructlogListenerObserver(),
                    feed_observer=StructlogFeedObserver(),
                    channel_capacity=config.listener.channel_capacity,
                    resubscribe_backoff_seconds=(
                        config.listener.resubscribe_backoff_seconds
                    ),
                )
            )
        async with asyncio.TaskGroup() as tg:
            for listener in listeners:
                tg.create_task(listener.run())
    except* ChangeListenerError as eg:
        # Raised outside the handler so the caller sees a plain error, not a group.
        failure = eg.exceptions[0]
    finally:
        for listener in listeners:
            await listener.close()
        await connection.close()
    if failure is not None:
        raise failure


async def _publish(config: AppConfig, record: ChangeRecord) -> str:
    connection = GooglePubSubConnection.connect(
        config=config.broker, observer=StructlogBrokerObserver()
    )
    try:
        publisher = ChangePublisher(
            connection=connection,
            codec=ProtobufChangeCodec(),
            controller_id=config.listener.controller_id,
        )
        return await publisher.publish(record)
    finally:
        await connection.close()


@app.command()
def listen(
    config_path: Path = typer.Argument(..., help="Path to listener config YAML"),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Listen for network and member changes and print each one to stdout."""
    try:
        _configure_structlog(log_format=log_format)
        config = _load_config(config_path=config_path)

        console = Console() if log_format == "console" else None
        sinks = [
            ChangeSink(kind=kind, stream=sys.stdout, console=console)
            for kind in config.kinds
        ]
        try:
            asyncio.run(_listen(config=config, sinks=sinks))
        except KeyboardInterrupt:
            pass
        total = sum(sink.count for sink in sinks)
        typer.echo(f"Listener stopped after {total} change(s).", err=True)

    except typer.Exit:
        raise
    except ChangeListenerError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)


@app.command()
def publish(
    config_path: Path = typer.Argument(..., help="Path to listener config YAML"),
    change_file: Path = typer.Argument(..., help="Path to a JSON change record"),
    kind: ChangeKind = typer.Option(..., "--kind", help="Change kind of the record"),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Publish one change record on its kind's topic."""
    try:
        _configure_structlog(log_format=log_format)
        config = _load_config(config_path=config_path)
        try:
            record = RECORD_TYPES[kind].model_validate_json(
                change_file.read_text(encoding="utf-8")
            )
        except (OSError, ValidationError) as exc:
            typer.echo(f"Failed to read change record from {change_file}: {exc}")
            raise typer.Exit(code=1) from exc

        message_id = asyncio.run(_publish(config=config, record=record))
        typer.echo(message_id)

    except typer.Exit:
        raise
    except KeyboardInterrupt:
        typer.echo("Publish interrupted.")
        sys.exit(1)
    except ChangeListenerError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)


if __name__ == "__main__":
    app()
