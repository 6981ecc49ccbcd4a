"""Tests for the spatial index and site generation."""

import pytest
import numpy as np
from py_glass.core.sites import Site, SiteKey, generate_sites
from py_glass.core.spatial_index import SpatialIndex
from py_glass.core.alea_prng import AleaPRNG


@pytest.fixture
def square_sites():
    return [Site(0, 0), Site(10, 0), Site(0, 10), Site(10, 10)]


class TestSpatialIndex:
    """Test k-nearest queries."""

    def test_k_nearest_order(self, square_sites):
        """Results come back closest first."""
        index = SpatialIndex(square_sites)
        result = index.k_nearest((1, 2), 4)

        assert [s.key for s in result] == [
            SiteKey(0, 0), SiteKey(0, 10), SiteKey(10, 0), SiteKey(10, 10)
        ]

    def test_exactly_k_results(self, square_sites):
        """Every k up to the index size returns exactly k sites."""
        index = SpatialIndex(square_sites)
        for k in range(1, len(square_sites) + 1):
            assert len(index.k_nearest((3, 3), k)) == k

    def test_k_too_large(self, square_sites):
        """Asking for more neighbours than sites is a caller bug."""
        index = SpatialIndex(square_sites)
        with pytest.raises(ValueError):
            index.k_nearest((0, 0), 5)
        with pytest.raises(ValueError):
            index.query([[0, 0]], 0)

    def test_squared_distances(self, square_sites):
        """Distances are squared Euclidean."""
        index = SpatialIndex(square_sites)
        sq, idx = index.query([[3, 4]], 2)

        assert sq.shape == (1, 2)
        assert idx.shape == (1, 2)
        assert sq[0, 0] == 25.0
        assert index.site_at(idx[0, 0]).key == SiteKey(0, 0)

    def test_batch_query(self, square_sites):
        """Batch queries answer each point independently."""
        index = SpatialIndex(square_sites)
        sq, idx = index.query(np.array([[0, 0], [10, 10], [9, 1]]), 1)

        found = [index.site_at(i).key for i in idx[:, 0]]
        assert found == [SiteKey(0, 0), SiteKey(10, 10), SiteKey(10, 0)]
        np.testing.assert_array_equal(sq[:, 0], [0.0, 0.0, 2.0])

    def test_nearest_site(self, square_sites):
        """nearest_site returns the site object itself."""
        index = SpatialIndex(square_sites)
        site = index.nearest_site((8, 9))
        assert site is square_sites[3]

    def test_single_site(self):
        """A lone site is nearest to everything."""
        only = Site(3, 4)
        index = SpatialIndex([only])
        for point in [(0, 0), (1000, -50), (3, 4), (-7.5, 2.25)]:
            assert index.nearest_site(point) is only

    def test_lookup_by_key(self, square_sites):
        """Sites are identified by coordinates."""
        index = SpatialIndex(square_sites)
        assert (10, 0) in index
        assert (10, 1) not in index
        assert index.site(SiteKey(0, 10)) is square_sites[2]
        assert index.index_of((10, 10)) == 3
        assert len(index) == 4

    def test_duplicate_sites_rejected(self):
        """Duplicate coordinates are a precondition violation."""
        with pytest.raises(ValueError):
            SpatialIndex([Site(1, 1), Site(2, 2), Site(1, 1)])

    def test_empty_rejected(self):
        """An index needs at least one site."""
        with pytest.raises(ValueError):
            SpatialIndex([])


class TestSiteGeneration:
    """Test seeded site placement."""

    def test_count_and_bounds(self):
        """Sites fall inside the drawable area."""
        sites = generate_sites(200, 100, 50, "test_seed")

        assert len(sites) == 50
        for site in sites:
            assert 0 <= site.x < 200
            assert 0 <= site.y < 100
            assert site.color is None

    def test_distinct(self):
        """No two sites share coordinates."""
        sites = generate_sites(50, 50, 200, "test_seed")
        assert len({s.key for s in sites}) == len(sites)

    def test_reproducible(self):
        """Same seed, same sites."""
        a = generate_sites(100, 100, 20, "test_seed")
        b = generate_sites(100, 100, 20, "test_seed")
        assert [s.key for s in a] == [s.key for s in b]

    def test_different_seeds(self):
        """Different seeds move the sites."""
        a = generate_sites(100, 100, 20, "seed1")
        b = generate_sites(100, 100, 20, "seed2")
        assert [s.key for s in a] != [s.key for s in b]

    def test_zero_sites_rejected(self):
        with pytest.raises(ValueError):
            generate_sites(100, 100, 0, "test_seed")


class TestAleaPRNG:
    """Test the seeded generator helpers."""

    def test_same_seed_same_stream(self):
        a, b = AleaPRNG("abc"), AleaPRNG("abc")
        assert [a.random() for _ in range(10)] == [b.random() for _ in range(10)]

    def test_range(self):
        prng = AleaPRNG("range")
        for _ in range(1000):
            assert 0 <= prng.random() < 1
            assert 0 <= prng.randint(6) < 6

    def test_shuffle_is_permutation(self):
        prng = AleaPRNG("shuffle")
        items = list(range(20))
        shuffled = prng.shuffled(items)

        assert sorted(shuffled) == items
        assert items == list(range(20))

    def test_shuffle_reproducible(self):
        assert AleaPRNG("x").shuffled(range(10)) == AleaPRNG("x").shuffled(range(10))

    def test_choice_empty(self):
        with pytest.raises(IndexError):
            AleaPRNG("x").choice([])
