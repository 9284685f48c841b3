import numpy as np
import pytest

from hybrid_pi.partition import LocalShare, block_share, local_count, partition, strided_share


def all_indices(n, size, policy):
    return [partition(n, rank, size, policy).indices() for rank in range(size)]


@pytest.mark.parametrize("policy", ["strided", "block"])
@pytest.mark.parametrize("size", [1, 2, 3, 4, 7, 8])
@pytest.mark.parametrize("n", [0, 1, 5, 100, 1001])
def test_every_index_owned_exactly_once(n, size, policy):
    owned = np.concatenate(all_indices(n, size, policy))
    assert len(owned) == n
    assert sorted(owned.tolist()) == list(range(1, n + 1))


@pytest.mark.parametrize("size", [1, 3, 8, 13])
@pytest.mark.parametrize("n", [0, 2, 12, 999])
def test_loads_within_one(n, size):
    counts = [local_count(n, rank, size) for rank in range(size)]
    assert sum(counts) == n
    assert max(counts) - min(counts) <= 1


def test_remainder_goes_to_lowest_ranks():
    assert [local_count(10, rank, 4) for rank in range(4)] == [3, 3, 2, 2]


def test_strided_mapping():
    share = strided_share(10, 1, 4)
    assert share == LocalShare(count=3, start=2, stride=4)
    #offset * size + rank + 1
    assert share.indices().tolist() == [2, 6, 10]
    assert share.index(2) == 2 * 4 + 1 + 1


def test_block_mapping():
    assert block_share(10, 0, 4).indices().tolist() == [1, 2, 3]
    assert block_share(10, 1, 4).indices().tolist() == [4, 5, 6]
    assert block_share(10, 2, 4).indices().tolist() == [7, 8]
    assert block_share(10, 3, 4).indices().tolist() == [9, 10]


def test_single_rank_owns_everything():
    assert partition(5, 0, 1).indices().tolist() == [1, 2, 3, 4, 5]


def test_zero_samples():
    for rank in range(3):
        share = partition(0, rank, 3)
        assert share.count == 0
        assert share.indices().size == 0


@pytest.mark.parametrize(
    "n, rank, size",
    [(10, 0, 0), (10, 4, 4), (10, -1, 4), (-1, 0, 1)],
)
def test_invalid_arguments(n, rank, size):
    with pytest.raises(ValueError):
        partition(n, rank, size)


def test_unknown_policy():
    with pytest.raises(ValueError, match="unknown partition policy"):
        partition(10, 0, 1, "cyclic-block")
