from __future__ import annotations

from typing import Any, Dict, Optional

from ..constants import UNKNOWN, Labels
from ..errors import CollectionError
from ..logging import ResponderLogger
from ..models import ClusterFacts, NodeRole, SELinuxStatus

CONTROL_PLANE_LABELS = (Labels.CONTROL_PLANE, Labels.MASTER)


def _labels(obj: Any) -> Dict[str, str]:
    metadata = getattr(obj, "metadata", None)
    return dict(getattr(metadata, "labels", None) or {})


def classify_node(node: Any) -> NodeRole:
    """Control plane iff a role label key is present, whatever its value."""
    labels = _labels(node)
    if any(key in labels for key in CONTROL_PLANE_LABELS):
        return NodeRole.CONTROL_PLANE
    return NodeRole.AGENT


def selinux_status(node: Any) -> SELinuxStatus:
    """
    Best-effort SELinux status from node labels.

    The host security module cannot be queried from inside a container, so
    a node without the label reports unknown.
    """
    labels = _labels(node)
    if Labels.SELINUX not in labels:
        return SELinuxStatus.UNKNOWN
    if labels[Labels.SELINUX] == SELinuxStatus.ENABLED.value:
        return SELinuxStatus.ENABLED
    return SELinuxStatus.DISABLED


def os_image(node: Any) -> str:
    status = getattr(node, "status", None)
    node_info = getattr(status, "node_info", None)
    return getattr(node_info, "os_image", None) or UNKNOWN


def inspect_cluster(
    cluster: Any,
    namespace: str,
    logger: Optional[ResponderLogger] = None,
) -> ClusterFacts:
    """
    Reduce live cluster queries to scalar facts.

    Raises CollectionError when the version endpoint, the system namespace
    or the node list cannot be read.
    """
    try:
        version = cluster.server_version()
    except Exception as exc:
        raise CollectionError(f"failed to get server version: {exc}") from exc

    try:
        cluster_uuid = str(cluster.get_namespace(namespace).metadata.uid)
    except Exception as exc:
        raise CollectionError(f"failed to get {namespace} namespace: {exc}") from exc

    try:
        nodes = cluster.list_nodes()
    except Exception as exc:
        raise CollectionError(f"failed to list nodes: {exc}") from exc

    server_count = 0
    agent_count = 0
    for node in nodes:
        if classify_node(node) is NodeRole.CONTROL_PLANE:
            server_count += 1
        else:
            agent_count += 1

    # Heterogeneous node images are rare; the first node stands for the cluster.
    if nodes:
        first_os = os_image(nodes[0])
        first_selinux = selinux_status(nodes[0])
    else:
        first_os = UNKNOWN
        first_selinux = SELinuxStatus.UNKNOWN

    if logger:
        logger.info(
            "Cluster inspected",
            kubernetes_version=version,
            server_nodes=server_count,
            agent_nodes=agent_count,
        )

    return ClusterFacts(
        app_version=version,
        cluster_uuid=cluster_uuid,
        server_node_count=server_count,
        agent_node_count=agent_count,
        os=first_os,
        selinux=first_selinux,
    )
