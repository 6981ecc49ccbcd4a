#!/usr/bin/env python3
"""
Walk through the glass pipeline step by step.

1. Place sites
2. Sample bisectors into an adjacency graph
3. Build the elimination order
4. Color and render
"""

from py_glass.core import (
    GlassConfig, SpatialIndex, build_adjacency, color_sites,
    coloring_conflicts, elimination_order, generate_glass, generate_sites,
)
from py_glass.core.render import render_image, save_png


def main():
    config = GlassConfig(width=580, height=200, num_points=20)
    seed = "demo_seed"

    print("=== Glass Pipeline Demo ===\n")

    print("1. Placing sites...")
    sites = generate_sites(config.width, config.height, config.num_points, seed)
    index = SpatialIndex(sites)
    print(f"   - {len(index)} sites")

    print("\n2. Sampling bisectors...")
    graph = build_adjacency(sites, config.width, config.height, index=index)
    degrees = [graph.degree(v) for v in graph]
    print(f"   - {graph.edge_count} edges, max degree {max(degrees)}")

    print("\n3. Elimination order...")
    order = elimination_order(graph)
    print(f"   - first peeled: {order[0]}, last peeled: {order[-1]}")

    print("\n4. Coloring...")
    colors = color_sites(graph, sites, seed, order=order)
    print(f"   - colors used: {len(set(colors.values()))}")
    print(f"   - conflicts: {len(coloring_conflicts(graph, colors))}")

    print("\n5. Rendering...")
    glass = generate_glass(config, seed)
    path = save_png(render_image(glass, grid=(29, 10)), "glass_demo.png")
    print(f"   - wrote {path}")


if __name__ == "__main__":
    main()
