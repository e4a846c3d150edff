"""
Shared fixtures for the kubegreen test suite.
"""

from typing import Optional

import pytest

from kubegreen.config import AuditSettings
from kubegreen.connect.base import (
    BaseCollector,
    DataRetrievalError,
    ResourceAmounts,
    StorageClaim,
    UsageSample,
    WorkloadUnit,
)

GIB = 1024 ** 3


def make_workload(
    name: str,
    cpu: Optional[float] = None,
    memory: Optional[float] = None,
    claims: tuple = (),
    no_resources: bool = False,
) -> WorkloadUnit:
    requests = None if no_resources else ResourceAmounts(cpu_millicores=cpu, memory_bytes=memory)
    return WorkloadUnit(name=name, requests=requests, claim_names=tuple(claims))


def make_usage(name: str, cpu: Optional[float] = None, memory: Optional[float] = None) -> UsageSample:
    return UsageSample(name=name, usage=ResourceAmounts(cpu_millicores=cpu, memory_bytes=memory))


class StaticCollector(BaseCollector):
    """Collector returning fixed snapshots; any part can be made to fail."""

    source_name = "static"

    def __init__(
        self,
        workloads=None,
        claims=None,
        active=None,
        fail: tuple = (),
    ):
        self.workloads = workloads or []
        self.claims = claims or []
        self.active = active
        self.fail = set(fail)
        self.calls = []
        self.closed = False

    def _check(self, operation: str, namespace: str) -> None:
        self.calls.append((operation, namespace))
        if operation in self.fail:
            raise DataRetrievalError(operation, namespace, "connection refused")

    def list_workloads(self, namespace):
        self._check("workloads", namespace)
        return list(self.workloads)

    def list_storage_claims(self, namespace):
        self._check("claims", namespace)
        return list(self.claims)

    def list_active_claim_references(self, namespace):
        self._check("active", namespace)
        if self.active is not None:
            return set(self.active)
        return {name for w, _ in self.workloads for name in w.claim_names}

    def close(self):
        self.closed = True


@pytest.fixture
def settings():
    return AuditSettings()


@pytest.fixture
def sample_collector():
    """Two workloads from the audit scenarios plus one orphaned claim."""
    return StaticCollector(
        workloads=[
            (make_workload("api-1", cpu=0, memory=0), None),
            (
                make_workload("api-2", cpu=500, memory=GIB, claims=("pvc-a",)),
                make_usage("api-2", cpu=500, memory=GIB),
            ),
        ],
        claims=[
            StorageClaim(name="pvc-a", declared_size="1Gi"),
            StorageClaim(name="pvc-b", declared_size="5Gi"),
        ],
    )
