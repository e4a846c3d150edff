"""
Storage Orphan Detector - Find claims that no live workload mounts.
"""

from typing import Iterable, Optional

from kubegreen.config import AuditSettings
from kubegreen.connect.base import StorageClaim, WorkloadUnit
from kubegreen.log import get_logger
from kubegreen.waste.rules import OrphanRecord

logger = get_logger(__name__)


class ClaimBindingsUnavailable(Exception):
    """Pod-to-claim bindings are missing, so orphans can't be told apart."""


def referenced_claims(workloads: Iterable[WorkloadUnit]) -> set[str]:
    """Union of claim names mounted by any workload."""
    active = set()
    for workload in workloads:
        active.update(workload.claim_names)
    return active


class StorageOrphanDetector:
    """Flags provisioned claims that are not referenced by any workload."""

    def __init__(self, settings: Optional[AuditSettings] = None):
        self.settings = settings or AuditSettings()

    def detect(
        self,
        claims: list[StorageClaim],
        active_claims: Optional[set[str]],
        degraded: bool = False,
    ) -> list[OrphanRecord]:
        """
        Return an OrphanRecord for each claim outside ``active_claims``.

        ``active_claims`` of None means the bindings could not be retrieved.
        That raises ClaimBindingsUnavailable unless ``degraded`` is set, in
        which case every claim is reported.
        """
        if active_claims is None:
            if not degraded:
                raise ClaimBindingsUnavailable(
                    "pod volume bindings unavailable; refusing to flag claims as orphaned"
                )
            logger.warning(
                "Pod volume bindings unavailable; flagging all %d claims as orphaned",
                len(claims),
            )
            active_claims = set()

        orphans = []
        seen = set()
        for claim in claims:
            if claim.name in active_claims or claim.name in seen:
                continue
            seen.add(claim.name)
            orphans.append(OrphanRecord(
                name=claim.name,
                declared_size=claim.declared_size,
                estimated_monthly_cost_usd=self.settings.orphan_claim_monthly_cost,
            ))
        return orphans

    def detect_for_workloads(
        self,
        claims: list[StorageClaim],
        workloads: Iterable[WorkloadUnit],
    ) -> list[OrphanRecord]:
        """Detect orphans using the claims mounted by ``workloads``."""
        return self.detect(claims, referenced_claims(workloads))
