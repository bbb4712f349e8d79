from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest


def make_node(name: str, labels: dict | None = None, os_image: str | None = "Ubuntu 22.04.4 LTS"):
    return SimpleNamespace(
        metadata=SimpleNamespace(name=name, labels=labels),
        status=SimpleNamespace(node_info=SimpleNamespace(os_image=os_image)),
    )


def make_workload(name: str):
    return SimpleNamespace(metadata=SimpleNamespace(name=name))


class FakeCluster:
    """In-memory stand-in for ClusterClient that records every call."""

    def __init__(
        self,
        version: str = "v1.30.4+rke2r1",
        namespace_uid: str = "7c1f3a52-0d2e-4a55-9a8c-2f6f7c3c9b10",
        nodes=None,
        daemon_sets=None,
        deployments=None,
        errors: dict | None = None,
    ) -> None:
        self.version = version
        self.namespace_uid = namespace_uid
        self.nodes = list(nodes or [])
        self.daemon_sets = list(daemon_sets or [])
        self.deployments = list(deployments or [])
        self.errors = dict(errors or {})
        self.calls: list[tuple] = []

    def _maybe_raise(self, call: str) -> None:
        if call in self.errors:
            raise self.errors[call]

    def server_version(self) -> str:
        self.calls.append(("server_version",))
        self._maybe_raise("server_version")
        return self.version

    def get_namespace(self, name: str):
        self.calls.append(("get_namespace", name))
        self._maybe_raise("get_namespace")
        return SimpleNamespace(metadata=SimpleNamespace(name=name, uid=self.namespace_uid))

    def list_nodes(self):
        self.calls.append(("list_nodes",))
        self._maybe_raise("list_nodes")
        return list(self.nodes)

    def list_daemon_sets(self, namespace: str):
        self.calls.append(("list_daemon_sets", namespace))
        self._maybe_raise("list_daemon_sets")
        return list(self.daemon_sets)

    def list_deployments(self, namespace: str):
        self.calls.append(("list_deployments", namespace))
        self._maybe_raise("list_deployments")
        return list(self.deployments)


@pytest.fixture
def rke2_cluster() -> FakeCluster:
    return FakeCluster(
        nodes=[
            make_node(
                "server-0",
                labels={
                    "node-role.kubernetes.io/control-plane": "true",
                    "node-role.kubernetes.io/etcd": "true",
                    "security.alpha.kubernetes.io/selinux": "enabled",
                },
                os_image="SUSE Linux Enterprise Server 15 SP5",
            ),
            make_node("agent-0", labels={"kubernetes.io/os": "linux"}),
            make_node("agent-1", labels={}),
        ],
        daemon_sets=[
            make_workload("kube-proxy"),
            make_workload("rke2-canal"),
            make_workload("rke2-ingress-nginx-controller"),
        ],
        deployments=[
            make_workload("rke2-coredns-rke2-coredns"),
            make_workload("rke2-metrics-server"),
        ],
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "DISABLE_TELEMETRY",
        "TELEMETRY_ENDPOINT",
        "KUBECONFIG",
        "RESPONDER_SYSTEM_NAMESPACE",
        "RESPONDER_MAX_RETRIES",
        "RESPONDER_RETRY_DELAY_SECONDS",
        "RESPONDER_REQUEST_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def node_factory():
    return make_node


@pytest.fixture
def workload_factory():
    return make_workload


@pytest.fixture
def cluster_factory():
    return FakeCluster
