"""
Connect Module - Cluster Data Collectors

Pull workload specs, pod metrics and storage claims for one namespace, either
from a live Kubernetes API or from a saved snapshot.
"""

from kubegreen.connect.base import (
    BaseCollector,
    DataRetrievalError,
    ResourceAmounts,
    StorageClaim,
    UsageSample,
    WorkloadUnit,
)
from kubegreen.connect.k8s import KubernetesCollector, load_api_client
from kubegreen.connect.snapshot import SnapshotCollector

__all__ = [
    "BaseCollector",
    "DataRetrievalError",
    "ResourceAmounts",
    "StorageClaim",
    "UsageSample",
    "WorkloadUnit",
    "KubernetesCollector",
    "SnapshotCollector",
    "load_api_client",
]
