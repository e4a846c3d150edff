"""
Configuration module for kubegreen.
"""

from kubegreen.config.pricing import cpu_monthly_cost, ram_monthly_cost
from kubegreen.config.settings import AuditSettings

__all__ = ["AuditSettings", "cpu_monthly_cost", "ram_monthly_cost"]
