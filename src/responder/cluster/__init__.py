"""Cluster inspection for the security responder."""

from .client import ClusterClient
from .detector import (
    CNI_KEYWORDS,
    INGRESS_KEYWORDS,
    detect_cni_plugin,
    detect_ingress_controller,
    detect_workloads,
    match_workloads,
)
from .inspector import classify_node, inspect_cluster, os_image, selinux_status

__all__ = [
    "ClusterClient",
    "CNI_KEYWORDS",
    "INGRESS_KEYWORDS",
    "detect_cni_plugin",
    "detect_ingress_controller",
    "detect_workloads",
    "match_workloads",
    "classify_node",
    "inspect_cluster",
    "os_image",
    "selinux_status",
]
