"""
kubegreen - Kubernetes Waste Auditor

Find requested-but-unused compute and orphaned storage in a namespace, and
estimate what it costs each month.
"""

__version__ = "0.1.0"

from kubegreen.audit import AuditFailedError, AuditOrchestrator, AuditReport
from kubegreen.config import AuditSettings
from kubegreen.connect import KubernetesCollector, SnapshotCollector
from kubegreen.waste import ComputeWasteEstimator, Severity, StorageOrphanDetector

__all__ = [
    "AuditFailedError",
    "AuditOrchestrator",
    "AuditReport",
    "AuditSettings",
    "KubernetesCollector",
    "SnapshotCollector",
    "ComputeWasteEstimator",
    "StorageOrphanDetector",
    "Severity",
]
