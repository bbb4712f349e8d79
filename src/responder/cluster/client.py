from __future__ import annotations

from typing import Any, List, Optional, TYPE_CHECKING

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from ..constants import Defaults
from ..errors import ClientError

if TYPE_CHECKING:
    from ..config import ResponderConfig


class ClusterClient:
    """
    Read-only handle to the cluster's control API.

    Only the five lookups a run needs are exposed; there are no write
    methods. Every call carries a request timeout.
    """

    def __init__(
        self,
        api_client: client.ApiClient,
        request_timeout: float = Defaults.REQUEST_TIMEOUT_SECONDS,
    ):
        self.version_api = client.VersionApi(api_client)
        self.core = client.CoreV1Api(api_client)
        self.apps = client.AppsV1Api(api_client)
        self.request_timeout = request_timeout

    @classmethod
    def from_config(cls, responder_config: "ResponderConfig") -> "ClusterClient":
        """
        Build a client from ambient credentials.

        An explicit kubeconfig wins. Otherwise in-cluster service account
        credentials are used, falling back to the default kubeconfig when the
        process is not running inside a pod.
        """
        configuration = client.Configuration()
        kubeconfig: Optional[str] = responder_config.kubeconfig or None
        try:
            if kubeconfig:
                config.load_kube_config(config_file=kubeconfig, client_configuration=configuration)
            else:
                try:
                    config.load_incluster_config(client_configuration=configuration)
                except ConfigException:
                    config.load_kube_config(client_configuration=configuration)
            api_client = client.ApiClient(configuration=configuration)
        except Exception as exc:
            raise ClientError(f"failed to create Kubernetes client: {exc}") from exc

        return cls(api_client, request_timeout=responder_config.request_timeout_seconds)

    def server_version(self) -> str:
        info = self.version_api.get_code(_request_timeout=self.request_timeout)
        return info.git_version

    def get_namespace(self, name: str) -> Any:
        return self.core.read_namespace(name, _request_timeout=self.request_timeout)

    def list_nodes(self) -> List[Any]:
        return self.core.list_node(_request_timeout=self.request_timeout).items

    def list_daemon_sets(self, namespace: str) -> List[Any]:
        return self.apps.list_namespaced_daemon_set(
            namespace, _request_timeout=self.request_timeout
        ).items

    def list_deployments(self, namespace: str) -> List[Any]:
        return self.apps.list_namespaced_deployment(
            namespace, _request_timeout=self.request_timeout
        ).items
