from __future__ import annotations

from typing import Any, Optional

from ..cluster.detector import detect_workloads
from ..cluster.inspector import inspect_cluster
from ..logging import ResponderLogger
from ..models import TelemetryRecord
from .schemas import assemble_record


def collect_telemetry(
    cluster: Any,
    namespace: str,
    logger: Optional[ResponderLogger] = None,
) -> TelemetryRecord:
    """
    Gather cluster metadata into a record.

    Inspector errors propagate as CollectionError. Detector errors are
    absorbed into sentinel labels.
    """
    facts = inspect_cluster(cluster, namespace, logger=logger)
    detection = detect_workloads(cluster, namespace, logger=logger)
    return assemble_record(facts, detection)
