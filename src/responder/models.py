from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

from .constants import NONE, UNKNOWN
from .errors import DeliveryError

FieldValue = Union[str, int]

TAG_KEYS = ("kubernetesVersion", "clusteruuid")
FIELD_KEYS = (
    "serverNodeCount",
    "agentNodeCount",
    "os",
    "selinux",
    "cni-plugin",
    "ingress-controller",
)


class NodeRole(str, Enum):
    CONTROL_PLANE = "control-plane"
    AGENT = "agent"


class SELinuxStatus(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ClusterFacts:
    app_version: str
    cluster_uuid: str
    server_node_count: int = 0
    agent_node_count: int = 0
    os: str = UNKNOWN
    selinux: SELinuxStatus = SELinuxStatus.UNKNOWN


@dataclass(frozen=True)
class DetectionResult:
    cni_plugin: str = UNKNOWN
    ingress_controller: str = NONE


@dataclass(frozen=True)
class TelemetryRecord:
    """
    One run's cluster fingerprint.

    Every key of the wire schema maps to a typed attribute, so the tag and
    field sets are closed and always fully populated.
    """

    app_version: str
    kubernetes_version: str
    cluster_uuid: str
    server_node_count: int
    agent_node_count: int
    os: str
    selinux: SELinuxStatus
    cni_plugin: str
    ingress_controller: str

    def __post_init__(self) -> None:
        if self.server_node_count < 0 or self.agent_node_count < 0:
            raise ValueError("node counts must be non-negative")
        # Accept plain strings from parsed payloads.
        object.__setattr__(self, "selinux", SELinuxStatus(self.selinux))

    def extra_tag_info(self) -> Dict[str, str]:
        return {
            "kubernetesVersion": self.kubernetes_version,
            "clusteruuid": self.cluster_uuid,
        }

    def extra_field_info(self) -> Dict[str, FieldValue]:
        return {
            "serverNodeCount": self.server_node_count,
            "agentNodeCount": self.agent_node_count,
            "os": self.os,
            "selinux": self.selinux.value,
            "cni-plugin": self.cni_plugin,
            "ingress-controller": self.ingress_controller,
        }


@dataclass(frozen=True)
class DeliveryResult:
    delivered: bool
    attempts: int
    error: Optional[DeliveryError] = None
