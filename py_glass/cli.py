"""Command line entry point."""

import argparse
import sys
from typing import List, Optional

import structlog

from .config import settings
from .core.glass import GlassConfig, generate_glass
from .core.render import render_image, save_png
from .utils.logging import configure_logging

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="py-glass",
        description="Render a stained-glass style Voronoi coloring",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Log level")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Generate and write a PNG")
    render.add_argument("--num-points", type=int, default=settings.num_points,
                        help="number of points")
    render.add_argument("--seed", default=settings.seed, help="rng seed")
    render.add_argument("--width", type=int, default=settings.width)
    render.add_argument("--height", type=int, default=settings.height)
    render.add_argument("--tolerance", type=float, default=settings.tolerance)
    render.add_argument("--workers", type=int, default=settings.workers)
    render.add_argument("--no-boundaries", action="store_true", help="Skip drawing cell edges")
    render.add_argument("--no-grid", action="store_true", help="Skip the guide grid")
    render.add_argument("--out", default="glass.png", help="Output PNG path")

    serve = sub.add_parser("serve", help="Serve images over HTTP")
    serve.add_argument("--host", default=settings.api_host)
    serve.add_argument("--port", type=int, default=settings.api_port)

    return parser


def run_render(args: argparse.Namespace) -> int:
    if args.num_points < 1:
        logger.error("Need at least one point", num_points=args.num_points)
        return 2

    config = GlassConfig(width=args.width, height=args.height, num_points=args.num_points)
    glass = generate_glass(config, args.seed, tolerance=args.tolerance,
                           threshold=settings.degree_threshold, workers=args.workers)
    img = render_image(glass, boundaries=not args.no_boundaries,
                       grid=None if args.no_grid else settings.grid)
    path = save_png(img, args.out)
    print(f"ok; seed is {glass.seed} count is {glass.num_points}; wrote {path}")
    return 0


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn
    uvicorn.run("py_glass.api.main:app", host=args.host, port=args.port)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, settings.log_format)

    if args.command == "render":
        return run_render(args)
    return run_serve(args)


if __name__ == "__main__":
    sys.exit(main())
