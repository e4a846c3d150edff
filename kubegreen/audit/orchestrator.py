"""
Audit Orchestrator - Run the compute and storage audits for one namespace.
"""

import time
from datetime import datetime, timezone
from typing import Optional

from kubegreen.config import AuditSettings
from kubegreen.connect.base import BaseCollector, DataRetrievalError
from kubegreen.audit.models import AuditReport
from kubegreen.log import get_logger
from kubegreen.waste import (
    ClaimBindingsUnavailable,
    ComputeWasteEstimator,
    StorageOrphanDetector,
)
from kubegreen.waste.rules import OrphanRecord, WasteRecord

logger = get_logger(__name__)


class AuditFailedError(Exception):
    """Both the compute and the storage audit failed."""

    def __init__(self, namespace: str, compute_error: str, storage_error: str):
        self.namespace = namespace
        self.compute_error = compute_error
        self.storage_error = storage_error
        super().__init__(
            f"Audit of namespace '{namespace}' failed: "
            f"compute: {compute_error}; storage: {storage_error}"
        )


class AuditOrchestrator:
    """Composes the compute estimator and the storage detector over a collector."""

    def __init__(
        self,
        collector: BaseCollector,
        settings: Optional[AuditSettings] = None,
    ):
        self.collector = collector
        self.settings = settings or AuditSettings()
        self.estimator = ComputeWasteEstimator(self.settings)
        self.detector = StorageOrphanDetector(self.settings)

    def audit_compute(self, namespace: str) -> list[WasteRecord]:
        """Estimate compute waste for every workload in the namespace."""
        pairs = self.collector.list_workloads(namespace)
        records = self.estimator.estimate_all(pairs)
        logger.info(
            "Compute audit of %s: %d workloads analyzed",
            namespace, len(records), extra={"namespace": namespace},
        )
        return records

    def audit_storage(self, namespace: str) -> list[OrphanRecord]:
        """Find orphaned claims in the namespace."""
        claims = self.collector.list_storage_claims(namespace)

        degraded = self.settings.allow_degraded_storage
        try:
            active = self.collector.list_active_claim_references(namespace)
        except DataRetrievalError as e:
            if not degraded:
                raise
            logger.warning("Claim bindings unavailable (%s); continuing in degraded mode", e)
            active = None

        orphans = self.detector.detect(claims, active, degraded=degraded)
        logger.info(
            "Storage audit of %s: %d claims, %d orphaned",
            namespace, len(claims), len(orphans), extra={"namespace": namespace},
        )
        return orphans

    def run_audit(self, namespace: Optional[str] = None) -> AuditReport:
        """
        Run both sub-audits and assemble the report.

        A failure in one sub-audit is recorded on the report and does not stop
        the other. If both fail, AuditFailedError is raised.
        """
        namespace = namespace or self.settings.namespace
        start = time.perf_counter()

        records: list[WasteRecord] = []
        compute_error = None
        try:
            records = self.audit_compute(namespace)
        except DataRetrievalError as e:
            compute_error = str(e)
            logger.error("Compute audit failed: %s", e, extra={"namespace": namespace})

        orphans: list[OrphanRecord] = []
        storage_error = None
        try:
            orphans = self.audit_storage(namespace)
        except (DataRetrievalError, ClaimBindingsUnavailable) as e:
            storage_error = str(e)
            logger.error("Storage audit failed: %s", e, extra={"namespace": namespace})

        if compute_error is not None and storage_error is not None:
            raise AuditFailedError(namespace, compute_error, storage_error)

        warnings = tuple(w for r in records for w in r.warnings)

        report = AuditReport(
            namespace=namespace,
            generated_at=datetime.now(timezone.utc),
            waste_records=tuple(records),
            orphan_records=tuple(orphans),
            warnings=warnings,
            compute_error=compute_error,
            storage_error=storage_error,
            significance_threshold=self.settings.significance_threshold,
        )

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.info(
            "Audit of %s via %s complete: $%.2f/month compute waste, %d orphaned claims",
            namespace, self.collector.source_name, report.cluster_total_usd, len(orphans),
            extra={
                "namespace": namespace,
                "source": self.collector.source_name,
                "duration_ms": duration_ms,
            },
        )
        return report
