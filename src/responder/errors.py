from __future__ import annotations

from .constants import ExitCode


class ResponderError(Exception):
    """Base exception for all responder errors."""

    exit_code: ExitCode = ExitCode.ERROR


class ConfigError(ResponderError):
    """Configuration validation failed."""

    exit_code = ExitCode.ERROR


class ClientError(ResponderError):
    """Cluster credentials could not be loaded or the client could not be built."""

    exit_code = ExitCode.ERROR


class CollectionError(ResponderError):
    """A load-bearing cluster query failed; no trustworthy payload can be built."""

    exit_code = ExitCode.ERROR


class DeliveryError(ResponderError):
    """Telemetry could not be delivered (accepted, not a failure of the run)."""

    exit_code = ExitCode.SUCCESS
