"""Basic sanity checks for the mock stats generator."""

from edgecast_exporter.mock.generator import CACHE_STATUSES, STATUS_CODES, MockEdgecastAPI


def test_payload_shapes_match_the_api():
    api = MockEdgecastAPI(seed=42)

    assert set(api.bandwidth(8)) == {"Result"}
    assert set(api.connections(8)) == {"Result"}

    cache = api.cachestatus(8)
    assert [row["CacheStatus"] for row in cache] == CACHE_STATUSES
    assert all(isinstance(row["Connections"], int) for row in cache)

    codes = api.statuscode(8)
    assert [row["StatusCode"] for row in codes] == STATUS_CODES
    assert all(row["Connections"] >= 0 for row in codes)


def test_values_are_non_negative():
    api = MockEdgecastAPI(seed=7)
    for _ in range(50):
        assert api.bandwidth(2)["Result"] >= 0
        assert api.connections(2)["Result"] >= 0


def test_deterministic_with_same_seed():
    api_a = MockEdgecastAPI(seed=99)
    api_b = MockEdgecastAPI(seed=99)

    assert api_a.bandwidth(3) == api_b.bandwidth(3)
    assert api_a.cachestatus(3) == api_b.cachestatus(3)
