"""
Audit settings, loaded from the environment (and an optional ``.env`` file).
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from kubegreen.config import pricing

ENV_PREFIX = "KUBEGREEN_"

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AuditSettings:
    """Values the audit engine depends on."""
    namespace: str = "simulation"

    cpu_rate_per_core_hour: float = pricing.CPU_RATE_PER_CORE_HOUR
    ram_rate_per_gib_hour: float = pricing.RAM_RATE_PER_GIB_HOUR
    hours_per_month: float = pricing.HOURS_PER_MONTH
    orphan_claim_monthly_cost: float = pricing.ORPHAN_CLAIM_MONTHLY_COST
    default_cpu_request_millicores: float = pricing.DEFAULT_CPU_REQUEST_MILLICORES

    waste_threshold: float = pricing.WASTE_THRESHOLD
    high_waste_threshold: float = pricing.HIGH_WASTE_THRESHOLD
    significance_threshold: float = pricing.SIGNIFICANCE_THRESHOLD

    # Flag every claim as orphaned when pod-volume bindings can't be listed
    allow_degraded_storage: bool = False

    # Kubernetes access
    list_limit: int = 100
    kubeconfig: Optional[str] = None
    kube_context: Optional[str] = None

    def __post_init__(self):
        if self.waste_threshold > self.high_waste_threshold:
            raise ValueError(
                f"waste_threshold ({self.waste_threshold}) must not exceed "
                f"high_waste_threshold ({self.high_waste_threshold})"
            )
        if self.list_limit <= 0:
            raise ValueError(f"list_limit must be positive, got {self.list_limit}")

    @classmethod
    def from_env(cls, env: Optional[dict] = None, dotenv: bool = True) -> "AuditSettings":
        """
        Build settings from ``KUBEGREEN_*`` variables.

        Pass ``env`` to read from a mapping instead of ``os.environ``.
        """
        if env is None:
            if dotenv:
                load_dotenv()
            env = os.environ

        def get(key: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + key)
            if value is None or value.strip() == "":
                return None
            return value.strip()

        def get_float(key: str, default: float) -> float:
            value = get(key)
            if value is None:
                return default
            try:
                return float(value)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}{key} must be a number, got {value!r}") from None

        def get_int(key: str, default: int) -> int:
            value = get(key)
            if value is None:
                return default
            try:
                return int(value)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}{key} must be an integer, got {value!r}") from None

        degraded = get("DEGRADED_STORAGE")

        return cls(
            namespace=get("NAMESPACE") or cls.namespace,
            cpu_rate_per_core_hour=get_float("CPU_RATE", cls.cpu_rate_per_core_hour),
            ram_rate_per_gib_hour=get_float("RAM_RATE", cls.ram_rate_per_gib_hour),
            hours_per_month=get_float("HOURS_PER_MONTH", cls.hours_per_month),
            orphan_claim_monthly_cost=get_float("ORPHAN_CLAIM_COST", cls.orphan_claim_monthly_cost),
            default_cpu_request_millicores=get_float(
                "DEFAULT_CPU_REQUEST", cls.default_cpu_request_millicores
            ),
            waste_threshold=get_float("WASTE_THRESHOLD", cls.waste_threshold),
            high_waste_threshold=get_float("HIGH_WASTE_THRESHOLD", cls.high_waste_threshold),
            significance_threshold=get_float("SIGNIFICANCE_THRESHOLD", cls.significance_threshold),
            allow_degraded_storage=(degraded or "").lower() in _TRUE_VALUES,
            list_limit=get_int("LIST_LIMIT", cls.list_limit),
            kubeconfig=get("KUBECONFIG"),
            kube_context=get("KUBE_CONTEXT"),
        )
