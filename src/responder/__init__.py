"""RKE2 security responder: one-shot cluster fingerprint telemetry."""

__version__ = "0.1.0"
