"""
Audit report model.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from kubegreen.config import pricing
from kubegreen.waste.rules import AuditWarning, OrphanRecord, Severity, WasteRecord


@dataclass(frozen=True)
class AuditReport:
    """Result of one audit run over a namespace."""
    namespace: str
    generated_at: datetime
    waste_records: tuple[WasteRecord, ...] = ()
    orphan_records: tuple[OrphanRecord, ...] = ()
    warnings: tuple[AuditWarning, ...] = ()

    # Sub-audit failures, isolated from each other
    compute_error: Optional[str] = None
    storage_error: Optional[str] = None

    significance_threshold: float = field(default=pricing.SIGNIFICANCE_THRESHOLD, repr=False)

    @property
    def cluster_total_usd(self) -> float:
        """Total monthly compute waste. Exact, so independent of record order."""
        return math.fsum(r.total_cost_usd for r in self.waste_records)

    @property
    def orphan_total_usd(self) -> float:
        return math.fsum(r.estimated_monthly_cost_usd for r in self.orphan_records)

    @property
    def significant_records(self) -> list[WasteRecord]:
        return [
            r for r in self.waste_records
            if r.is_significant(self.significance_threshold)
        ]

    @property
    def is_partial(self) -> bool:
        return self.compute_error is not None or self.storage_error is not None

    def by_severity(self) -> dict[Severity, list[WasteRecord]]:
        result = {severity: [] for severity in Severity}
        for record in self.waste_records:
            result[record.severity].append(record)
        return result

    def to_dict(self, include_all: bool = False) -> dict:
        """JSON-ready form. Detail rows are limited to significant records unless ``include_all``."""
        records = self.waste_records if include_all else self.significant_records
        return {
            "namespace": self.namespace,
            "generated_at": self.generated_at.isoformat(),
            "partial": self.is_partial,
            "summary": {
                "workloads_analyzed": len(self.waste_records),
                "workloads_listed": len(records),
                "cluster_total_usd": round(self.cluster_total_usd, 2),
                "orphan_claims": len(self.orphan_records),
                "orphan_total_usd": round(self.orphan_total_usd, 2),
                "by_severity": {
                    severity.value: len(items)
                    for severity, items in self.by_severity().items()
                },
            },
            "compute": [r.to_dict() for r in records],
            "storage": [o.to_dict() for o in self.orphan_records],
            "warnings": [w.to_dict() for w in self.warnings],
            "errors": {
                "compute": self.compute_error,
                "storage": self.storage_error,
            },
        }
