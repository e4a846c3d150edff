"""
Snapshot Collector - Serve audit inputs from saved Kubernetes objects.

A snapshot is a JSON document of the form::

    {
        "pods": [...],         # Pod objects (kubectl get pods -o json "items")
        "metrics": [...],      # PodMetrics items, or null if metrics-server is absent
        "pvcs": [...]          # PersistentVolumeClaim objects
    }
"""

import json
from pathlib import Path
from typing import Optional, Union

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


class SnapshotCollector(BaseCollector):
    """Collector backed by an in-memory snapshot."""

    source_name = "snapshot"

    def __init__(
        self,
        pods: Optional[list[dict]] = None,
        metrics: Optional[list[dict]] = None,
        pvcs: Optional[list[dict]] = None,
    ):
        self.pods = pods or []
        self.metrics = metrics
        self.pvcs = pvcs or []

    @classmethod
    def from_dict(cls, data: dict) -> "SnapshotCollector":
        return cls(
            pods=data.get("pods") or [],
            metrics=data.get("metrics"),
            pvcs=data.get("pvcs") or [],
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SnapshotCollector":
        """Load a snapshot from a JSON file."""
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise DataRetrievalError("load snapshot", str(path), str(e)) from e
        if not isinstance(data, dict):
            raise DataRetrievalError("load snapshot", str(path), "snapshot must be a JSON object")
        return cls.from_dict(data)

    @staticmethod
    def _in_namespace(obj: dict, namespace: str) -> bool:
        if not isinstance(obj, dict):
            return False
        metadata = obj.get("metadata")
        obj_ns = metadata.get("namespace") if isinstance(metadata, dict) else None
        return obj_ns is None or obj_ns == namespace

    def _pods(self, namespace: str) -> list[dict]:
        return [p for p in self.pods if self._in_namespace(p, namespace)]

    def list_workloads(
        self,
        namespace: str,
    ) -> list[tuple[WorkloadUnit, Optional[UsageSample]]]:
        metrics = None
        if self.metrics is not None:
            metrics = [m for m in self.metrics if self._in_namespace(m, namespace)]
        return pair_workloads(self._pods(namespace), metrics)

    def list_storage_claims(self, namespace: str) -> list[StorageClaim]:
        return [
            claim_from_pvc(pvc) for pvc in self.pvcs
            if self._in_namespace(pvc, namespace)
        ]

    def list_active_claim_references(self, namespace: str) -> set[str]:
        active = set()
        for pod in self._pods(namespace):
            if is_live(pod):
                active |= claim_references(pod)
        return active


def _demo_pod(name: str, cpu: Optional[str], memory: Optional[str], claims: tuple = ()) -> dict:
    requests = {}
    if cpu is not None:
        requests["cpu"] = cpu
    if memory is not None:
        requests["memory"] = memory
    container = {"name": "app", "image": f"registry.local/{name}:latest"}
    if requests:
        container["resources"] = {"requests": requests}
    return {
        "metadata": {"name": name, "namespace": "simulation"},
        "spec": {
            "containers": [container],
            "volumes": [
                {"name": claim, "persistentVolumeClaim": {"claimName": claim}}
                for claim in claims
            ],
        },
        "status": {"phase": "Running"},
    }


def _demo_metrics(name: str, cpu: str, memory: str) -> dict:
    return {
        "metadata": {"name": name, "namespace": "simulation"},
        "containers": [{"name": "app", "usage": {"cpu": cpu, "memory": memory}}],
    }


def _demo_pvc(name: str, size: str) -> dict:
    return {
        "metadata": {"name": name, "namespace": "simulation"},
        "spec": {"resources": {"requests": {"storage": size}}},
        "status": {"phase": "Bound"},
    }


def demo_collector() -> SnapshotCollector:
    """A small simulated namespace for demo runs."""
    return SnapshotCollector(
        pods=[
            _demo_pod("frontend-7c9d", "500m", "512Mi"),
            _demo_pod("checkout-api-5f2b", "2", "4Gi", claims=("checkout-data",)),
            _demo_pod("batch-worker-1a8e", None, None),
            _demo_pod("cache-redis-0", "250m", "1Gi", claims=("redis-data",)),
            _demo_pod("ml-trainer-9d3c", "4", "16Gi"),
        ],
        metrics=[
            _demo_metrics("frontend-7c9d", "480m", "500Mi"),
            _demo_metrics("checkout-api-5f2b", "300m", "1Gi"),
            _demo_metrics("cache-redis-0", "120m", "900Mi"),
            _demo_metrics("ml-trainer-9d3c", "600m", "3Gi"),
        ],
        pvcs=[
            _demo_pvc("checkout-data", "20Gi"),
            _demo_pvc("redis-data", "5Gi"),
            _demo_pvc("old-postgres-data", "50Gi"),
            _demo_pvc("scratch-tmp", "1Gi"),
        ],
    )
