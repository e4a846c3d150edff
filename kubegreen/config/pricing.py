"""
Pricing Reference Data

Flat rates used to price wasted requests. Prices are approximate and are not
looked up from any provider API.
"""

# Compute (USD)
CPU_RATE_PER_CORE_HOUR = 0.0315  # ~$23/month per core
RAM_RATE_PER_GIB_HOUR = 0.004  # ~$2.92/GiB/month
HOURS_PER_MONTH = 730

# Storage (USD)
ORPHAN_CLAIM_MONTHLY_COST = 0.20

# Requests
DEFAULT_CPU_REQUEST_MILLICORES = 100.0
BYTES_PER_GIB = 1024 ** 3

# Severity cutoffs on total monthly waste (USD)
WASTE_THRESHOLD = 1.0
HIGH_WASTE_THRESHOLD = 5.0

# Detail listings hide records at or below this monthly cost
SIGNIFICANCE_THRESHOLD = 0.1


def cpu_monthly_cost(
    millicores: float,
    rate: float = CPU_RATE_PER_CORE_HOUR,
    hours: float = HOURS_PER_MONTH,
) -> float:
    """Monthly cost of holding ``millicores`` of CPU."""
    if millicores <= 0:
        return 0.0
    return (millicores / 1000.0) * rate * hours


def ram_monthly_cost(
    num_bytes: float,
    rate: float = RAM_RATE_PER_GIB_HOUR,
    hours: float = HOURS_PER_MONTH,
) -> float:
    """Monthly cost of holding ``num_bytes`` of memory."""
    if num_bytes <= 0:
        return 0.0
    return (num_bytes / BYTES_PER_GIB) * rate * hours
