"""
Base classes for cluster data collectors.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class DataRetrievalError(Exception):
    """A collector call failed or timed out."""

    def __init__(self, operation: str, namespace: str, reason: str):
        self.operation = operation
        self.namespace = namespace
        self.reason = reason
        super().__init__(f"{operation} failed for namespace '{namespace}': {reason}")


@dataclass(frozen=True)
class ResourceAmounts:
    """CPU and memory amounts for a single container.

    ``None`` means the value was not specified, which is distinct from zero.
    """
    cpu_millicores: Optional[float] = None
    memory_bytes: Optional[float] = None


@dataclass(frozen=True)
class WorkloadUnit:
    """A pod, reduced to its primary container's requests and mounted claims."""
    name: str
    requests: Optional[ResourceAmounts] = None  # None: no resources block
    claim_names: tuple[str, ...] = ()

    # Request fields that were present but could not be parsed
    malformed_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class UsageSample:
    """Measured usage of a workload's primary container."""
    name: str
    usage: Optional[ResourceAmounts] = None  # None: no container usage entry
    malformed_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class StorageClaim:
    """A provisioned persistent volume claim."""
    name: str
    declared_size: Optional[str] = None  # e.g. "5Gi", reported as-is


class BaseCollector(ABC):
    """Base class for everything that supplies cluster snapshots to an audit."""

    source_name: str = "base"

    @abstractmethod
    def list_workloads(
        self,
        namespace: str,
    ) -> list[tuple[WorkloadUnit, Optional[UsageSample]]]:
        """List live workloads paired with their usage sample (None if no metrics)."""
        pass

    @abstractmethod
    def list_storage_claims(self, namespace: str) -> list[StorageClaim]:
        """List provisioned storage claims in inventory order."""
        pass

    @abstractmethod
    def list_active_claim_references(self, namespace: str) -> set[str]:
        """Names of claims mounted by live workloads."""
        pass

    def close(self) -> None:
        """Release any client resources."""
        pass
