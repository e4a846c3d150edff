"""
Waste Module - Estimate Compute Waste and Find Orphaned Storage

Price the gap between requested and used resources, and flag claims that no
workload mounts.
"""

from kubegreen.waste.estimator import ComputeWasteEstimator
from kubegreen.waste.orphans import (
    ClaimBindingsUnavailable,
    StorageOrphanDetector,
    referenced_claims,
)
from kubegreen.waste.rules import (
    AuditWarning,
    OrphanRecord,
    Severity,
    WarningKind,
    WasteRecord,
    classify_severity,
    is_significant,
)

__all__ = [
    "ComputeWasteEstimator",
    "StorageOrphanDetector",
    "ClaimBindingsUnavailable",
    "referenced_claims",
    "AuditWarning",
    "OrphanRecord",
    "Severity",
    "WarningKind",
    "WasteRecord",
    "classify_severity",
    "is_significant",
]
