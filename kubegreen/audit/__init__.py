"""
Audit Module - Namespace Waste Audits

Run the compute and storage audits against one namespace and collect the
results into a single report.
"""

from kubegreen.audit.models import AuditReport
from kubegreen.audit.orchestrator import AuditFailedError, AuditOrchestrator

__all__ = ["AuditReport", "AuditFailedError", "AuditOrchestrator"]
