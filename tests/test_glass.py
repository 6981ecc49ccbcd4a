"""Tests for the generation pipeline and rendering."""

import pytest
import numpy as np
from py_glass.core.sites import Site
from py_glass.core.coloring import PALETTE, coloring_conflicts
from py_glass.core.glass import GlassConfig, generate_glass, generate_or_reuse_glass
from py_glass.core.render import (
    GRID, LEAD, draw_grid, render_image, render_png_bytes, save_png
)


@pytest.fixture(scope="module")
def small_glass():
    config = GlassConfig(width=120, height=80, num_points=12)
    return generate_glass(config, seed="test_seed")


class TestGenerateGlass:
    """Test the full pipeline."""

    def test_basic_generation(self, small_glass):
        assert small_glass.seed == "test_seed"
        assert small_glass.num_points == 12
        assert len(small_glass.graph) == 12
        assert len(small_glass.order) == 12
        assert len(small_glass.colors) == 12

    def test_coloring_valid(self, small_glass):
        assert coloring_conflicts(small_glass.graph, small_glass.colors) == []
        for site in small_glass.sites:
            assert site.color in PALETTE

    def test_reproducibility(self):
        """Same config and seed give identical results."""
        config = GlassConfig(width=100, height=100, num_points=15)
        g1 = generate_glass(config, "repro")
        g2 = generate_glass(config, "repro")

        assert [s.key for s in g1.sites] == [s.key for s in g2.sites]
        assert g1.graph == g2.graph
        assert g1.order == g2.order
        assert g1.colors == g2.colors

    def test_seed_drawn_when_missing(self):
        glass = generate_glass(GlassConfig(width=50, height=50, num_points=3))
        assert isinstance(glass.seed, str) and glass.seed

    def test_given_sites(self):
        sites = [Site(0, 0), Site(10, 0), Site(0, 10), Site(10, 10)]
        glass = generate_glass(GlassConfig(20, 20, 4), "square", sites=sites)

        assert glass.graph.edge_count == 4
        assert len(glass.boundary_samples) > 0

    def test_single_site(self):
        glass = generate_glass(GlassConfig(30, 30, 1), "one")

        assert glass.graph.edge_count == 0
        only = glass.sites[0]
        for point in [(0, 0), (29, 29), (15, 3)]:
            assert glass.nearest_site(point) is only
            assert glass.color_at(point) == only.color

    def test_color_at_matches_nearest(self, small_glass):
        site = small_glass.sites[3]
        assert small_glass.color_at(site.xy) == site.color

    @pytest.mark.parametrize("width,height,points", [
        (100, 100, 10),
        (300, 120, 30),
        (64, 64, 2),
    ])
    def test_various_sizes(self, width, height, points):
        glass = generate_glass(GlassConfig(width, height, points), "sizes")

        assert glass.graph.is_symmetric()
        assert coloring_conflicts(glass.graph, glass.colors) == []


class TestGlassReuse:
    """Test reuse of a previous run."""

    def test_reuse_same_parameters(self, small_glass):
        config = GlassConfig(width=120, height=80, num_points=12)
        assert generate_or_reuse_glass(small_glass, config, "test_seed") is small_glass

    def test_regenerate_on_change(self, small_glass):
        config = GlassConfig(width=120, height=80, num_points=12)
        other = generate_or_reuse_glass(small_glass, config, "other_seed")

        assert other is not small_glass
        assert other.seed == "other_seed"

    def test_regenerate_without_seed(self, small_glass):
        config = GlassConfig(width=120, height=80, num_points=12)
        assert generate_or_reuse_glass(small_glass, config, None) is not small_glass


class TestRender:
    """Test raster output."""

    def test_shape(self, small_glass):
        img = render_image(small_glass, boundaries=False, grid=None)

        assert img.shape == (80, 120, 4)
        assert img.dtype == np.uint8
        assert np.all(img[..., 3] == 255)

    def test_fill_uses_nearest_color(self, small_glass):
        img = render_image(small_glass, boundaries=False, grid=None)

        for x, y in [(0, 0), (60, 40), (119, 79), (33, 71)]:
            expected = small_glass.color_at((x, y))
            assert tuple(img[y, x, :3]) == tuple(expected)

    def test_only_palette_colors(self, small_glass):
        img = render_image(small_glass, boundaries=False, grid=None)
        used = {tuple(px) for px in img[..., :3].reshape(-1, 3)}
        assert used <= {tuple(c) for c in PALETTE}

    def test_boundaries_drawn(self, small_glass):
        img = render_image(small_glass, boundaries=True, grid=None)
        assert np.any(np.all(img == LEAD, axis=-1))

    def test_grid(self):
        img = np.zeros((20, 30, 4), dtype=np.uint8)
        draw_grid(img, 3, 2)

        assert np.all(img[:, 0] == GRID)
        assert np.all(img[:, 10] == GRID)
        assert np.all(img[10, :] == GRID)
        assert np.all(img[5, 5] == 0)

    def test_save_png(self, small_glass, tmp_path):
        img = render_image(small_glass)
        path = save_png(img, tmp_path / "out" / "image.png")

        assert path.exists()
        assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"

    def test_png_bytes(self, small_glass):
        data = render_png_bytes(render_image(small_glass, grid=None))
        assert data.startswith(b"\x89PNG")
