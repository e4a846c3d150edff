"""
Kubernetes Collector - Read pods, pod metrics and PVCs from a live cluster.
"""

from typing import Optional

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError

from kubegreen.connect.base import (
    BaseCollector,
    DataRetrievalError,
    StorageClaim,
    UsageSample,
    WorkloadUnit,
)
from kubegreen.connect.objects import (
    claim_from_pvc,
    claim_references,
    is_live,
    pair_workloads,
)
from kubegreen.log import get_logger

logger = get_logger(__name__)

METRICS_GROUP = "metrics.k8s.io"
METRICS_VERSION = "v1beta1"


def load_api_client(
    kubeconfig: Optional[str] = None,
    context: Optional[str] = None,
) -> client.ApiClient:
    """
    Build an API client from in-cluster config, falling back to kubeconfig.

    An explicit ``kubeconfig`` or ``context`` skips the in-cluster attempt.
    """
    configuration = client.Configuration()
    if kubeconfig is None and context is None:
        try:
            config.load_incluster_config(client_configuration=configuration)
            return client.ApiClient(configuration)
        except ConfigException:
            pass

    config.load_kube_config(
        config_file=kubeconfig,
        context=context,
        client_configuration=configuration,
    )
    return client.ApiClient(configuration)


class KubernetesCollector(BaseCollector):
    """Collects audit snapshots through the Kubernetes API."""

    source_name = "kubernetes"

    def __init__(self, api_client: client.ApiClient, list_limit: int = 100):
        self.api_client = api_client
        self.list_limit = list_limit
        self.core = client.CoreV1Api(api_client)
        self.custom = client.CustomObjectsApi(api_client)

    @classmethod
    def from_settings(cls, settings) -> "KubernetesCollector":
        """Create a collector using the kubeconfig options in ``settings``."""
        try:
            api_client = load_api_client(settings.kubeconfig, settings.kube_context)
        except (ConfigException, OSError) as e:
            raise DataRetrievalError("load cluster config", settings.namespace, str(e)) from e
        return cls(api_client, list_limit=settings.list_limit)

    def _serialize(self, items) -> list[dict]:
        return [self.api_client.sanitize_for_serialization(item) for item in items]

    def _list_all(self, list_fn, namespace: str, operation: str) -> list[dict]:
        """Follow continue tokens until every page of a list call is read."""
        items = []
        kwargs = {"limit": self.list_limit}
        while True:
            try:
                page = list_fn(namespace, **kwargs)
            except (ApiException, HTTPError) as e:
                raise DataRetrievalError(operation, namespace, str(e)) from e
            items.extend(self._serialize(page.items))

            token = getattr(getattr(page, "metadata", None), "_continue", None)
            if not token:
                return items
            kwargs["_continue"] = token

    def _list_pods(self, namespace: str, operation: str) -> list[dict]:
        return self._list_all(self.core.list_namespaced_pod, namespace, operation)

    def _list_pod_metrics(self, namespace: str) -> Optional[list[dict]]:
        try:
            metrics = self.custom.list_namespaced_custom_object(
                group=METRICS_GROUP,
                version=METRICS_VERSION,
                namespace=namespace,
                plural="pods",
            )
        except ApiException as e:
            if e.status == 404:
                # metrics-server not installed
                logger.warning(
                    "Pod metrics unavailable in namespace %s; usage treated as absent",
                    namespace,
                )
                return None
            raise DataRetrievalError("list pod metrics", namespace, str(e)) from e
        except HTTPError as e:
            raise DataRetrievalError("list pod metrics", namespace, str(e)) from e
        return metrics.get("items", [])

    def list_workloads(
        self,
        namespace: str,
    ) -> list[tuple[WorkloadUnit, Optional[UsageSample]]]:
        pods = self._list_pods(namespace, "list workloads")
        metrics_items = self._list_pod_metrics(namespace)
        pairs = pair_workloads(pods, metrics_items)
        logger.debug("Collected %d workloads from namespace %s", len(pairs), namespace)
        return pairs

    def list_storage_claims(self, namespace: str) -> list[StorageClaim]:
        pvcs = self._list_all(
            self.core.list_namespaced_persistent_volume_claim,
            namespace,
            "list storage claims",
        )
        return [claim_from_pvc(pvc) for pvc in pvcs]

    def list_active_claim_references(self, namespace: str) -> set[str]:
        pods = self._list_pods(namespace, "list active claim references")
        active = set()
        for pod in pods:
            if is_live(pod):
                active |= claim_references(pod)
        return active

    def close(self) -> None:
        self.api_client.close()
