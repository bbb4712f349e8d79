from __future__ import annotations

from typing import Any, Dict

from ..models import (
    FIELD_KEYS,
    TAG_KEYS,
    ClusterFacts,
    DetectionResult,
    SELinuxStatus,
    TelemetryRecord,
)


def assemble_record(facts: ClusterFacts, detection: DetectionResult) -> TelemetryRecord:
    """Merge inspector facts and detector labels into one record."""
    return TelemetryRecord(
        app_version=facts.app_version,
        kubernetes_version=facts.app_version,
        cluster_uuid=facts.cluster_uuid,
        server_node_count=facts.server_node_count,
        agent_node_count=facts.agent_node_count,
        os=facts.os,
        selinux=facts.selinux,
        cni_plugin=detection.cni_plugin,
        ingress_controller=detection.ingress_controller,
    )


def build_payload(record: TelemetryRecord) -> Dict[str, Any]:
    """
    Build the wire payload.

    {
      "appVersion": "...",
      "extraTagInfo": {"kubernetesVersion": ..., "clusteruuid": ...},
      "extraFieldInfo": {"serverNodeCount": ..., "agentNodeCount": ..., "os": ...,
                         "selinux": ..., "cni-plugin": ..., "ingress-controller": ...}
    }
    """
    return {
        "appVersion": record.app_version,
        "extraTagInfo": record.extra_tag_info(),
        "extraFieldInfo": record.extra_field_info(),
    }


def parse_payload(payload: Dict[str, Any]) -> TelemetryRecord:
    """Rebuild a record from a wire payload. Missing or extra keys raise ValueError."""
    tags = payload.get("extraTagInfo") or {}
    fields = payload.get("extraFieldInfo") or {}
    if set(tags) != set(TAG_KEYS):
        raise ValueError(f"extraTagInfo keys must be {sorted(TAG_KEYS)}, got {sorted(tags)}")
    if set(fields) != set(FIELD_KEYS):
        raise ValueError(f"extraFieldInfo keys must be {sorted(FIELD_KEYS)}, got {sorted(fields)}")
    if "appVersion" not in payload:
        raise ValueError("payload is missing appVersion")

    return TelemetryRecord(
        app_version=str(payload["appVersion"]),
        kubernetes_version=str(tags["kubernetesVersion"]),
        cluster_uuid=str(tags["clusteruuid"]),
        server_node_count=int(fields["serverNodeCount"]),
        agent_node_count=int(fields["agentNodeCount"]),
        os=str(fields["os"]),
        selinux=SELinuxStatus(fields["selinux"]),
        cni_plugin=str(fields["cni-plugin"]),
        ingress_controller=str(fields["ingress-controller"]),
    )
