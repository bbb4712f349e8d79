"""Telemetry package for the security responder."""

from .collector import collect_telemetry
from .schemas import assemble_record, build_payload, parse_payload
from .uploader import send_telemetry

__all__ = [
    "collect_telemetry",
    "assemble_record",
    "build_payload",
    "parse_payload",
    "send_telemetry",
]
