"""
Core cell-adjacency extraction and coloring.
"""

from .sites import Site, SiteKey, Color, generate_sites
from .spatial_index import SpatialIndex
from .bisector import Line, bisector, sample_line
from .adjacency import AdjacencyGraph, AdjacencyRecorder, build_adjacency
from .ordering import DEGREE_THRESHOLD, elimination_order
from .coloring import PALETTE, color_sites, coloring_conflicts
from .glass import GlassConfig, GlassMap, generate_glass, generate_or_reuse_glass

__all__ = ['Site', 'SiteKey', 'Color', 'generate_sites', 'SpatialIndex',
           'Line', 'bisector', 'sample_line',
           'AdjacencyGraph', 'AdjacencyRecorder', 'build_adjacency',
           'DEGREE_THRESHOLD', 'elimination_order',
           'PALETTE', 'color_sites', 'coloring_conflicts',
           'GlassConfig', 'GlassMap', 'generate_glass', 'generate_or_reuse_glass']
