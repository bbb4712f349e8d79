from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence, Tuple

from ..constants import NONE, UNKNOWN
from ..logging import ResponderLogger
from ..models import DetectionResult

# (substrings, label) pairs, checked in order against lowercased workload names.
KeywordTable = Sequence[Tuple[Tuple[str, ...], str]]

CNI_KEYWORDS: KeywordTable = (
    (("canal",), "canal"),
    (("flannel",), "flannel"),
    (("calico",), "calico"),
    (("cilium",), "cilium"),
    (("weave",), "weave"),
)

INGRESS_KEYWORDS: KeywordTable = (
    (("nginx-ingress", "rke2-ingress-nginx"), "rke2-ingress-nginx"),
    (("traefik",), "traefik"),
)


def _name(obj: Any) -> str:
    metadata = getattr(obj, "metadata", None)
    return getattr(metadata, "name", None) or ""


def match_workloads(workloads: Iterable[Any], table: KeywordTable) -> Optional[str]:
    """
    Return the label of the first keyword hit.

    Workloads are scanned in listing order and, for each name, the table in
    its declared order. Other candidates are not reported.
    """
    for workload in workloads:
        name = _name(workload).lower()
        for keywords, label in table:
            if any(keyword in name for keyword in keywords):
                return label
    return None


def detect_cni_plugin(
    cluster: Any,
    namespace: str,
    logger: Optional[ResponderLogger] = None,
) -> str:
    try:
        daemon_sets = cluster.list_daemon_sets(namespace)
    except Exception as exc:
        if logger:
            logger.warning("Failed to detect CNI plugin", error=str(exc))
        return UNKNOWN

    return match_workloads(daemon_sets, CNI_KEYWORDS) or UNKNOWN


def detect_ingress_controller(
    cluster: Any,
    namespace: str,
    logger: Optional[ResponderLogger] = None,
) -> str:
    """Deployments are checked first, then DaemonSets. No controller is a valid answer."""
    try:
        deployments = cluster.list_deployments(namespace)
    except Exception as exc:
        if logger:
            logger.warning("Failed to detect ingress controller", error=str(exc))
        return UNKNOWN

    label = match_workloads(deployments, INGRESS_KEYWORDS)
    if label:
        return label

    try:
        daemon_sets = cluster.list_daemon_sets(namespace)
    except Exception as exc:
        if logger:
            logger.warning("Failed to list DaemonSets for ingress detection", error=str(exc))
        return NONE

    return match_workloads(daemon_sets, INGRESS_KEYWORDS) or NONE


def detect_workloads(
    cluster: Any,
    namespace: str,
    logger: Optional[ResponderLogger] = None,
) -> DetectionResult:
    """Infer CNI plugin and ingress controller. Never raises for API errors."""
    result = DetectionResult(
        cni_plugin=detect_cni_plugin(cluster, namespace, logger),
        ingress_controller=detect_ingress_controller(cluster, namespace, logger),
    )
    if logger:
        logger.info(
            "Workloads detected",
            cni_plugin=result.cni_plugin,
            ingress_controller=result.ingress_controller,
        )
    return result
