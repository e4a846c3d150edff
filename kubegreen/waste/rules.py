"""
Waste classification rules and record types.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from kubegreen.config import pricing


class Severity(str, Enum):
    """Waste severity tiers, by total monthly waste cost."""
    OPTIMIZED = "optimized"
    WASTE = "waste"
    HIGH_WASTE = "high_waste"


class WarningKind(str, Enum):
    """Kinds of non-fatal findings raised while estimating."""
    MISSING_CPU_REQUEST = "missing_cpu_request"
    MALFORMED_FIELD = "malformed_field"


@dataclass(frozen=True)
class AuditWarning:
    """A data hygiene issue found on a single workload."""
    kind: WarningKind
    workload: str
    resource: str  # "cpu" or "memory"
    message: str

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "workload": self.workload,
            "resource": self.resource,
            "message": self.message,
        }


def classify_severity(
    total_cost: float,
    waste_threshold: float = pricing.WASTE_THRESHOLD,
    high_waste_threshold: float = pricing.HIGH_WASTE_THRESHOLD,
) -> Severity:
    """Map a monthly waste cost to a tier. Boundary values fall in the lower tier."""
    if total_cost > high_waste_threshold:
        return Severity.HIGH_WASTE
    if total_cost > waste_threshold:
        return Severity.WASTE
    return Severity.OPTIMIZED


def is_significant(
    total_cost: float,
    cpu_request: float,
    ram_request: float,
    threshold: float = pricing.SIGNIFICANCE_THRESHOLD,
) -> bool:
    """Whether a workload is worth listing in a detail report."""
    return total_cost > threshold or cpu_request > 0 or ram_request > 0


@dataclass(frozen=True)
class WasteRecord:
    """Estimated monthly compute waste for one workload."""
    name: str
    cpu_cost_usd: float
    ram_cost_usd: float
    total_cost_usd: float
    severity: Severity

    # Requests the costs were computed from
    effective_cpu_request_millicores: float = 0.0
    ram_request_bytes: float = 0.0

    warnings: tuple[AuditWarning, ...] = ()

    def is_significant(self, threshold: float = pricing.SIGNIFICANCE_THRESHOLD) -> bool:
        return is_significant(
            self.total_cost_usd,
            self.effective_cpu_request_millicores,
            self.ram_request_bytes,
            threshold,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "cpu_cost_usd": round(self.cpu_cost_usd, 4),
            "ram_cost_usd": round(self.ram_cost_usd, 4),
            "total_cost_usd": round(self.total_cost_usd, 4),
            "severity": self.severity.value,
            "effective_cpu_request_millicores": self.effective_cpu_request_millicores,
            "ram_request_bytes": self.ram_request_bytes,
        }


@dataclass(frozen=True)
class OrphanRecord:
    """A storage claim no live workload mounts."""
    name: str
    declared_size: Optional[str]
    estimated_monthly_cost_usd: float

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "declared_size": self.declared_size,
            "estimated_monthly_cost_usd": round(self.estimated_monthly_cost_usd, 2),
        }
