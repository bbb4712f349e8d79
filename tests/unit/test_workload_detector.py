from __future__ import annotations

import json

import pytest
from kubernetes.client import ApiException

from responder.cluster.detector import (
    CNI_KEYWORDS,
    INGRESS_KEYWORDS,
    detect_cni_plugin,
    detect_ingress_controller,
    detect_workloads,
    match_workloads,
)
from responder.logging import ResponderLogger


@pytest.mark.parametrize(
    "name, expected",
    [
        ("rke2-canal", "canal"),
        ("kube-flannel-ds", "flannel"),
        ("Calico-Node", "calico"),
        ("CILIUM", "cilium"),
        ("weave-net", "weave"),
    ],
)
def test_cni_keywords_match_case_insensitively(workload_factory, name, expected) -> None:
    assert match_workloads([workload_factory(name)], CNI_KEYWORDS) == expected


def test_table_order_wins_within_one_name(workload_factory) -> None:
    # canal bundles calico and flannel; canal is first in the table.
    assert match_workloads([workload_factory("calico-flannel-canal")], CNI_KEYWORDS) == "canal"


def test_listing_order_wins_across_workloads(workload_factory) -> None:
    workloads = [workload_factory("cilium"), workload_factory("rke2-canal")]
    assert match_workloads(workloads, CNI_KEYWORDS) == "cilium"


def test_ingress_aliases_map_to_one_label(workload_factory) -> None:
    assert match_workloads([workload_factory("nginx-ingress-controller")], INGRESS_KEYWORDS) == "rke2-ingress-nginx"
    assert match_workloads([workload_factory("rke2-ingress-nginx-controller")], INGRESS_KEYWORDS) == "rke2-ingress-nginx"
    assert match_workloads([workload_factory("Traefik")], INGRESS_KEYWORDS) == "traefik"


def test_no_match_returns_none(workload_factory) -> None:
    assert match_workloads([workload_factory("coredns")], CNI_KEYWORDS) is None
    assert match_workloads([], INGRESS_KEYWORDS) is None


def test_cni_without_match_is_unknown(cluster_factory, workload_factory) -> None:
    cluster = cluster_factory(daemon_sets=[workload_factory("kube-proxy")])
    assert detect_cni_plugin(cluster, "kube-system") == "unknown"


def test_ingress_without_match_is_none(cluster_factory, workload_factory) -> None:
    cluster = cluster_factory(
        deployments=[workload_factory("coredns")],
        daemon_sets=[workload_factory("rke2-canal")],
    )
    assert detect_ingress_controller(cluster, "kube-system") == "none"


def test_ingress_checks_deployments_before_daemon_sets(cluster_factory, workload_factory) -> None:
    cluster = cluster_factory(
        deployments=[workload_factory("traefik")],
        daemon_sets=[workload_factory("rke2-ingress-nginx-controller")],
    )

    assert detect_ingress_controller(cluster, "kube-system") == "traefik"
    assert ("list_daemon_sets", "kube-system") not in cluster.calls


def test_ingress_falls_back_to_daemon_sets(rke2_cluster) -> None:
    assert detect_ingress_controller(rke2_cluster, "kube-system") == "rke2-ingress-nginx"


def test_cni_listing_error_degrades_and_logs(cluster_factory, capsys) -> None:
    cluster = cluster_factory(errors={"list_daemon_sets": ApiException(status=500, reason="boom")})

    assert detect_cni_plugin(cluster, "kube-system", logger=ResponderLogger("run-1")) == "unknown"

    payload = json.loads(capsys.readouterr().err.strip().splitlines()[0])
    assert payload["level"] == "warning"
    assert payload["message"] == "Failed to detect CNI plugin"


def test_ingress_deployment_error_degrades_to_unknown(cluster_factory) -> None:
    cluster = cluster_factory(errors={"list_deployments": ConnectionError("reset")})
    assert detect_ingress_controller(cluster, "kube-system") == "unknown"


def test_ingress_daemon_set_error_is_treated_as_no_match(cluster_factory, workload_factory) -> None:
    cluster = cluster_factory(
        deployments=[workload_factory("coredns")],
        errors={"list_daemon_sets": ApiException(status=500)},
    )
    assert detect_ingress_controller(cluster, "kube-system") == "none"


def test_detect_workloads_never_raises_on_api_errors(cluster_factory) -> None:
    cluster = cluster_factory(
        errors={
            "list_daemon_sets": ApiException(status=503),
            "list_deployments": ApiException(status=503),
        }
    )

    result = detect_workloads(cluster, "kube-system")

    assert result.cni_plugin == "unknown"
    assert result.ingress_controller == "unknown"


def test_detect_workloads_on_rke2_defaults(rke2_cluster) -> None:
    result = detect_workloads(rke2_cluster, "kube-system")

    assert result.cni_plugin == "canal"
    assert result.ingress_controller == "rke2-ingress-nginx"
