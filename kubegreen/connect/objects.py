"""
Conversion of Kubernetes API objects into audit inputs.

Objects are handled in their serialized (camelCase JSON) form, which is what
``kubectl get -o json`` prints and what ``ApiClient.sanitize_for_serialization``
returns for the typed client models.
"""

from typing import Any, Optional

from kubernetes.utils import parse_quantity

from kubegreen.connect.base import ResourceAmounts, StorageClaim, UsageSample, WorkloadUnit

# Pods in these phases have finished and hold no resources
TERMINAL_PHASES = ("Succeeded", "Failed")


def _finite_quantity(value: Any):
    quantity = parse_quantity(value)
    if not quantity.is_finite():
        raise ValueError(f"non-finite quantity {value!r}")
    return quantity


def parse_cpu_millicores(value: Any) -> float:
    """Parse a CPU quantity ("250m", "0.5", 2) to millicores."""
    cores = _finite_quantity(value)
    if cores < 0:
        raise ValueError(f"negative CPU quantity {value!r}")
    return float(cores * 1000)


def parse_memory_bytes(value: Any) -> float:
    """Parse a memory quantity ("512Mi", "1G", 1048576) to bytes."""
    num_bytes = _finite_quantity(value)
    if num_bytes < 0:
        raise ValueError(f"negative memory quantity {value!r}")
    return float(num_bytes)


def amounts_from_quantities(quantities: Any) -> tuple[ResourceAmounts, tuple[str, ...]]:
    """
    Parse a ``{"cpu": ..., "memory": ...}`` mapping.

    A missing key stays unspecified. A present key that fails to parse is also
    left unspecified and its name is returned in the malformed list. A block
    that is not a mapping at all marks both fields malformed.
    """
    if not isinstance(quantities, dict):
        return ResourceAmounts(), ("cpu", "memory")

    malformed = []

    cpu = None
    if quantities.get("cpu") is not None:
        try:
            cpu = parse_cpu_millicores(quantities["cpu"])
        except (ValueError, TypeError, ArithmeticError):
            malformed.append("cpu")

    memory = None
    if quantities.get("memory") is not None:
        try:
            memory = parse_memory_bytes(quantities["memory"])
        except (ValueError, TypeError, ArithmeticError):
            malformed.append("memory")

    return ResourceAmounts(cpu_millicores=cpu, memory_bytes=memory), tuple(malformed)


def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _name(obj: dict) -> str:
    return _mapping(obj.get("metadata")).get("name") or "unknown"


def is_live(pod: dict) -> bool:
    phase = _mapping(pod.get("status")).get("phase")
    return phase not in TERMINAL_PHASES


def primary_container(pod: dict) -> Optional[dict]:
    containers = _mapping(pod.get("spec")).get("containers")
    if not isinstance(containers, list) or not containers:
        return None
    return _mapping(containers[0])


def claim_references(pod: dict) -> set[str]:
    """Names of the persistent volume claims a pod mounts."""
    claims = set()
    volumes = _mapping(pod.get("spec")).get("volumes")
    if not isinstance(volumes, list):
        return claims
    for volume in volumes:
        claim = _mapping(_mapping(volume).get("persistentVolumeClaim"))
        if isinstance(claim.get("claimName"), str) and claim["claimName"]:
            claims.add(claim["claimName"])
    return claims


def workload_from_pod(pod: dict) -> WorkloadUnit:
    """Build a WorkloadUnit from a pod object."""
    container = primary_container(pod)
    requests_block = None
    if container is not None:
        resources = container.get("resources")
        if isinstance(resources, dict):
            requests_block = resources.get("requests")
        elif resources is not None:
            # not a mapping; parsed as malformed
            requests_block = resources

    requests = None
    malformed: tuple[str, ...] = ()
    if requests_block is not None:
        requests, malformed = amounts_from_quantities(requests_block)

    return WorkloadUnit(
        name=_name(pod),
        requests=requests,
        claim_names=tuple(sorted(claim_references(pod))),
        malformed_fields=malformed,
    )


def usage_from_pod_metrics(item: dict, container_name: Optional[str] = None) -> UsageSample:
    """
    Build a UsageSample from a ``metrics.k8s.io`` PodMetrics item.

    The container named ``container_name`` is used when present, otherwise the
    first container entry.
    """
    containers = item.get("containers")
    if not isinstance(containers, list):
        containers = []
    containers = [c for c in containers if isinstance(c, dict)]

    entry = None
    if container_name:
        entry = next((c for c in containers if c.get("name") == container_name), None)
    if entry is None and containers:
        entry = containers[0]

    if entry is None or entry.get("usage") is None:
        return UsageSample(name=_name(item))

    usage, malformed = amounts_from_quantities(entry["usage"])
    return UsageSample(name=_name(item), usage=usage, malformed_fields=malformed)


def claim_from_pvc(pvc: dict) -> StorageClaim:
    """Build a StorageClaim from a PersistentVolumeClaim object."""
    requests = _mapping(_mapping(_mapping(pvc.get("spec")).get("resources")).get("requests"))
    size = requests.get("storage")
    return StorageClaim(
        name=_name(pvc),
        declared_size=str(size) if size is not None else None,
    )


def pair_workloads(
    pods: list[dict],
    metrics_items: Optional[list[dict]],
) -> list[tuple[WorkloadUnit, Optional[UsageSample]]]:
    """
    Pair live pods with their metrics by pod name, keeping pod order.

    ``metrics_items`` of None means metrics were unavailable altogether.
    """
    metrics_by_name = {
        _name(item): item for item in metrics_items or [] if isinstance(item, dict)
    }

    pairs = []
    for pod in pods:
        if not isinstance(pod, dict) or not is_live(pod):
            continue
        workload = workload_from_pod(pod)
        item = metrics_by_name.get(workload.name)
        sample = None
        if item is not None:
            container = primary_container(pod) or {}
            sample = usage_from_pod_metrics(item, container.get("name"))
        pairs.append((workload, sample))
    return pairs
