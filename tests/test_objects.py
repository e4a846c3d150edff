"""
Tests for turning Kubernetes objects into audit inputs.
"""

import pytest

from kubegreen.connect.objects import (
    amounts_from_quantities,
    claim_from_pvc,
    claim_references,
    pair_workloads,
    parse_cpu_millicores,
    parse_memory_bytes,
    usage_from_pod_metrics,
    workload_from_pod,
)


def pod(name, requests=None, volumes=None, phase="Running", resources=True, containers=None):
    container = {"name": "app"}
    if resources:
        container["resources"] = {} if requests is None else {"requests": requests}
    return {
        "metadata": {"name": name},
        "spec": {
            "containers": containers if containers is not None else [container],
            "volumes": volumes or [],
        },
        "status": {"phase": phase},
    }


def pvc_volume(claim):
    return {"name": claim, "persistentVolumeClaim": {"claimName": claim}}


class TestQuantities:
    """Tests for quantity parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [("250m", 250.0), ("0.5", 500.0), ("2", 2000.0), (1, 1000.0), ("1500000n", 1.5)],
    )
    def test_cpu(self, value, expected):
        assert parse_cpu_millicores(value) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "value, expected",
        [("1Gi", 1024 ** 3), ("512Mi", 512 * 1024 ** 2), ("1G", 10 ** 9), ("1024", 1024.0)],
    )
    def test_memory(self, value, expected):
        assert parse_memory_bytes(value) == pytest.approx(expected)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_cpu_millicores("lots")

    def test_negative(self):
        with pytest.raises(ValueError):
            parse_memory_bytes("-1Gi")

    def test_missing_key_is_unspecified_not_malformed(self):
        amounts, malformed = amounts_from_quantities({"cpu": "100m"})

        assert amounts.cpu_millicores == pytest.approx(100)
        assert amounts.memory_bytes is None
        assert malformed == ()

    def test_unparseable_value_is_malformed(self):
        amounts, malformed = amounts_from_quantities({"cpu": "fast", "memory": "1Gi"})

        assert amounts.cpu_millicores is None
        assert amounts.memory_bytes == 1024 ** 3
        assert malformed == ("cpu",)

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity", float("nan")])
    def test_non_finite(self, value):
        with pytest.raises(ValueError):
            parse_cpu_millicores(value)
        with pytest.raises(ValueError):
            parse_memory_bytes(value)

    def test_non_finite_value_is_malformed(self):
        amounts, malformed = amounts_from_quantities({"cpu": "250m", "memory": "NaN"})

        assert amounts.cpu_millicores == pytest.approx(250)
        assert amounts.memory_bytes is None
        assert malformed == ("memory",)

    @pytest.mark.parametrize("block", ["500m", ["cpu", "1"], 3])
    def test_block_not_a_mapping(self, block):
        amounts, malformed = amounts_from_quantities(block)

        assert amounts.cpu_millicores is None
        assert amounts.memory_bytes is None
        assert malformed == ("cpu", "memory")


class TestWorkloadFromPod:
    """Tests for workload_from_pod."""

    def test_requests_and_claims(self):
        workload = workload_from_pod(pod(
            "api",
            requests={"cpu": "500m", "memory": "1Gi"},
            volumes=[pvc_volume("data"), {"name": "tmp", "emptyDir": {}}, pvc_volume("cache")],
        ))

        assert workload.name == "api"
        assert workload.requests.cpu_millicores == pytest.approx(500)
        assert workload.requests.memory_bytes == 1024 ** 3
        assert workload.claim_names == ("cache", "data")

    def test_no_resources_block(self):
        workload = workload_from_pod(pod("bare", resources=False))
        assert workload.requests is None

    def test_resources_without_requests(self):
        workload = workload_from_pod(pod("limits-only"))
        assert workload.requests is None

    def test_no_containers(self):
        workload = workload_from_pod(pod("empty", containers=[]))
        assert workload.requests is None

    def test_only_primary_container_counts(self):
        workload = workload_from_pod(pod("sidecars", containers=[
            {"name": "app", "resources": {"requests": {"cpu": "100m"}}},
            {"name": "proxy", "resources": {"requests": {"cpu": "2"}}},
        ]))
        assert workload.requests.cpu_millicores == pytest.approx(100)

    def test_malformed_request(self):
        workload = workload_from_pod(pod("bad", requests={"cpu": "1", "memory": "huge"}))

        assert workload.requests.memory_bytes is None
        assert workload.malformed_fields == ("memory",)

    def test_requests_not_a_mapping(self):
        workload = workload_from_pod(pod("odd", requests="500m"))

        assert workload.requests.cpu_millicores is None
        assert workload.requests.memory_bytes is None
        assert workload.malformed_fields == ("cpu", "memory")

    def test_resources_not_a_mapping(self):
        workload = workload_from_pod(pod("odd", containers=[{"name": "app", "resources": "big"}]))
        assert workload.malformed_fields == ("cpu", "memory")

    def test_garbled_spec(self):
        workload = workload_from_pod({
            "metadata": {"name": "odd"},
            "spec": {"containers": ["app"], "volumes": "data"},
        })

        assert workload.requests is None
        assert workload.claim_names == ()


class TestUsageFromPodMetrics:
    """Tests for usage_from_pod_metrics."""

    def test_matches_container_by_name(self):
        item = {
            "metadata": {"name": "api"},
            "containers": [
                {"name": "proxy", "usage": {"cpu": "5m", "memory": "10Mi"}},
                {"name": "app", "usage": {"cpu": "120m", "memory": "256Mi"}},
            ],
        }
        sample = usage_from_pod_metrics(item, "app")

        assert sample.usage.cpu_millicores == pytest.approx(120)
        assert sample.usage.memory_bytes == 256 * 1024 ** 2

    def test_falls_back_to_first_container(self):
        item = {"metadata": {"name": "api"}, "containers": [{"name": "x", "usage": {"cpu": "1"}}]}
        sample = usage_from_pod_metrics(item, "app")

        assert sample.usage.cpu_millicores == pytest.approx(1000)
        assert sample.usage.memory_bytes is None

    def test_no_container_entries(self):
        sample = usage_from_pod_metrics({"metadata": {"name": "api"}, "containers": []})
        assert sample.name == "api"
        assert sample.usage is None

    def test_usage_not_a_mapping(self):
        item = {"metadata": {"name": "api"}, "containers": [{"name": "app", "usage": "100m"}]}
        sample = usage_from_pod_metrics(item, "app")

        assert sample.usage.cpu_millicores is None
        assert sample.malformed_fields == ("cpu", "memory")

    def test_nan_usage_is_malformed(self):
        item = {"metadata": {"name": "api"}, "containers": [{"name": "app", "usage": {"cpu": "NaN"}}]}
        sample = usage_from_pod_metrics(item, "app")

        assert sample.usage.cpu_millicores is None
        assert sample.malformed_fields == ("cpu",)

    def test_containers_not_a_list(self):
        sample = usage_from_pod_metrics({"metadata": {"name": "api"}, "containers": "app"})
        assert sample.usage is None


class TestClaims:
    """Tests for PVC handling."""

    def test_claim_from_pvc(self):
        claim = claim_from_pvc({
            "metadata": {"name": "data"},
            "spec": {"resources": {"requests": {"storage": "20Gi"}}},
        })
        assert claim.name == "data"
        assert claim.declared_size == "20Gi"

    def test_claim_without_size(self):
        claim = claim_from_pvc({"metadata": {"name": "data"}, "spec": {}})
        assert claim.declared_size is None

    def test_claim_references(self):
        assert claim_references(pod("p", volumes=[pvc_volume("a"), pvc_volume("b")])) == {"a", "b"}
        assert claim_references({"metadata": {"name": "p"}, "spec": {}}) == set()


class TestPairWorkloads:
    """Tests for pair_workloads."""

    def test_pairs_by_name_in_pod_order(self):
        pods = [pod("b", requests={"cpu": "1"}), pod("a", requests={"cpu": "1"})]
        metrics = [
            {"metadata": {"name": "a"}, "containers": [{"name": "app", "usage": {"cpu": "10m"}}]},
        ]

        pairs = pair_workloads(pods, metrics)

        assert [w.name for w, _ in pairs] == ["b", "a"]
        assert pairs[0][1] is None
        assert pairs[1][1].usage.cpu_millicores == pytest.approx(10)

    def test_skips_finished_pods(self):
        pods = [pod("done", phase="Succeeded"), pod("crashed", phase="Failed"), pod("live")]
        assert [w.name for w, _ in pair_workloads(pods, [])] == ["live"]

    def test_metrics_unavailable(self):
        pairs = pair_workloads([pod("a")], None)
        assert pairs[0][1] is None

    def test_skips_entries_that_are_not_objects(self):
        metrics = ["garbage", {"metadata": {"name": "a"}, "containers": [{"name": "app", "usage": {"cpu": "10m"}}]}]

        pairs = pair_workloads(["garbage", pod("a")], metrics)

        assert [w.name for w, _ in pairs] == ["a"]
        assert pairs[0][1].usage.cpu_millicores == pytest.approx(10)
