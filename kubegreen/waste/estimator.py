"""
Compute Waste Estimator - Price the gap between requested and used CPU/RAM.
"""

from typing import Optional

from kubegreen.config import AuditSettings, cpu_monthly_cost, ram_monthly_cost
from kubegreen.connect.base import UsageSample, WorkloadUnit
from kubegreen.log import get_logger
from kubegreen.waste.rules import (
    AuditWarning,
    WarningKind,
    WasteRecord,
    classify_severity,
)

logger = get_logger(__name__)


class ComputeWasteEstimator:
    """Estimates monthly compute waste per workload."""

    def __init__(self, settings: Optional[AuditSettings] = None):
        self.settings = settings or AuditSettings()

    def _malformed_warnings(self, name: str, fields: tuple, source: str) -> list[AuditWarning]:
        warnings = []
        for field_name in fields:
            message = f"Pod {name} has an unparseable {field_name} {source}; counted as 0"
            logger.warning(message, extra={"workload": name, "resource": field_name})
            warnings.append(AuditWarning(
                kind=WarningKind.MALFORMED_FIELD,
                workload=name,
                resource=field_name,
                message=message,
            ))
        return warnings

    def estimate(
        self,
        workload: WorkloadUnit,
        usage: Optional[UsageSample] = None,
    ) -> WasteRecord:
        """Compute the WasteRecord for a workload and its usage sample (if any)."""
        settings = self.settings
        name = workload.name

        warnings = self._malformed_warnings(name, workload.malformed_fields, "request")
        if usage is not None:
            warnings.extend(self._malformed_warnings(name, usage.malformed_fields, "usage"))

        requests = workload.requests
        measured = usage.usage if usage is not None else None

        # --- CPU ---
        cpu_request = requests.cpu_millicores if requests is not None else None
        if not cpu_request:
            cpu_request = settings.default_cpu_request_millicores
            message = (
                f"Pod {name} has no CPU request set; "
                f"assuming {cpu_request:g}m"
            )
            logger.warning(message, extra={"workload": name, "resource": "cpu"})
            warnings.append(AuditWarning(
                kind=WarningKind.MISSING_CPU_REQUEST,
                workload=name,
                resource="cpu",
                message=message,
            ))

        cpu_used = (measured.cpu_millicores or 0.0) if measured is not None else 0.0
        cpu_waste = max(0.0, cpu_request - cpu_used)
        cpu_cost = cpu_monthly_cost(
            cpu_waste, settings.cpu_rate_per_core_hour, settings.hours_per_month
        )

        # --- RAM ---
        ram_request = (requests.memory_bytes or 0.0) if requests is not None else 0.0
        ram_used = (measured.memory_bytes or 0.0) if measured is not None else 0.0
        ram_waste = max(0.0, ram_request - ram_used)
        ram_cost = ram_monthly_cost(
            ram_waste, settings.ram_rate_per_gib_hour, settings.hours_per_month
        )

        total = cpu_cost + ram_cost

        return WasteRecord(
            name=name,
            cpu_cost_usd=cpu_cost,
            ram_cost_usd=ram_cost,
            total_cost_usd=total,
            severity=classify_severity(
                total, settings.waste_threshold, settings.high_waste_threshold
            ),
            effective_cpu_request_millicores=cpu_request,
            ram_request_bytes=ram_request,
            warnings=tuple(warnings),
        )

    def estimate_all(
        self,
        pairs: list[tuple[WorkloadUnit, Optional[UsageSample]]],
    ) -> list[WasteRecord]:
        """Estimate every workload, keeping input order."""
        return [self.estimate(workload, usage) for workload, usage in pairs]
