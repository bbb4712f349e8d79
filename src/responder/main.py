from __future__ import annotations

import sys
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import ValidationError

from . import __version__
from .cluster import ClusterClient
from .config import OptOutSettings, ResponderConfig
from .constants import ExitCode
from .errors import ClientError, CollectionError, ConfigError
from .logging import ResponderLogger
from .telemetry import collect_telemetry, send_telemetry


class RunState(str, Enum):
    START = "start"
    OPTED_OUT = "opted_out"
    CLIENT_FAILED = "client_failed"
    COLLECTING = "collecting"
    COLLECT_FAILED = "collect_failed"
    COLLECTED = "collected"
    SENT = "sent"
    SEND_FAILED = "send_failed"
    DONE = "done"


@dataclass
class RunResult:
    state: RunState
    exit_code: ExitCode


def _opted_out(settings: OptOutSettings, logger: ResponderLogger) -> Optional[RunResult]:
    if settings.telemetry_enabled():
        return None
    logger.info("Telemetry is disabled via DISABLE_TELEMETRY environment variable")
    return RunResult(RunState.OPTED_OUT, ExitCode.SUCCESS)


def run(
    config: ResponderConfig,
    logger: ResponderLogger,
    client_factory: Callable[[ResponderConfig], Any] = ClusterClient.from_config,
    sender: Callable[..., Any] = send_telemetry,
) -> RunResult:
    """
    Run one collection and delivery cycle.

    Returns the last state reached before done. Only client construction and
    collection failures produce a non-zero exit code.
    """
    opted_out = _opted_out(config, logger)
    if opted_out:
        return opted_out

    try:
        cluster = client_factory(config)
    except ClientError as exc:
        logger.error("Error creating Kubernetes client", error=str(exc))
        return RunResult(RunState.CLIENT_FAILED, exc.exit_code)

    try:
        with logger.stage(RunState.COLLECTING.value):
            record = collect_telemetry(cluster, config.system_namespace, logger=logger)
    except CollectionError as exc:
        logger.error("Error collecting telemetry data", error=str(exc))
        return RunResult(RunState.COLLECT_FAILED, exc.exit_code)

    logger.bind(cluster_uuid=record.cluster_uuid)
    logger.info(RunState.COLLECTED.value)

    result = sender(
        record,
        config.telemetry_endpoint,
        max_retries=config.max_retries,
        retry_delay=config.retry_delay_seconds,
        timeout=config.request_timeout_seconds,
        logger=logger,
    )
    if not result.delivered:
        logger.warning(
            "Failed to send telemetry data; this is expected in disconnected environments",
            attempts=result.attempts,
            error=str(result.error),
        )
        return RunResult(RunState.SEND_FAILED, ExitCode.SUCCESS)

    logger.info("Telemetry data sent successfully", attempts=result.attempts)
    return RunResult(RunState.SENT, ExitCode.SUCCESS)


def load_config() -> ResponderConfig:
    try:
        return ResponderConfig()
    except ValidationError as exc:
        raise ConfigError(f"Configuration error: {exc}") from exc


def _finish(logger: ResponderLogger, result: RunResult) -> int:
    logger.info(RunState.DONE.value, final_state=result.state.value, exit_code=int(result.exit_code))
    return int(result.exit_code)


def main(logger: Optional[ResponderLogger] = None) -> int:
    """Main entry point."""
    logger = logger or ResponderLogger(str(uuid.uuid4()))
    logger.info(RunState.START.value, version=__version__)

    # The opt-out is honored even when the rest of the environment is invalid.
    opted_out = _opted_out(OptOutSettings(), logger)
    if opted_out:
        return _finish(logger, opted_out)

    try:
        config = load_config()
    except ConfigError as exc:
        logger.error("Invalid configuration", error=str(exc))
        return int(exc.exit_code)

    return _finish(logger, run(config, logger))


if __name__ == "__main__":
    sys.exit(main())
