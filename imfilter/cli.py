"""
Command line entry point: read an image, filter it, write the result.
"""

from __future__ import annotations

import argparse
import logging
import time
from typing import List, Optional

from imfilter.core.config import Backend, FilterConfig, FilterParameters
from imfilter.core.errors import ConfigurationError, ImFilterError
from imfilter.core.pipeline import BilateralImageFilter
from imfilter.io.image_io import load_image, save_image

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="imfilter",
        description="Edge-preserving bilateral filter for RGB images",
    )
    p.add_argument("--in", dest="inpath", default=None, help="path to input image")
    p.add_argument("--out", dest="outpath", default=None, help="path to output image")
    p.add_argument("--s", type=float, default=0.0, help="spatial standard deviation (pixels)")
    p.add_argument("--b", type=float, default=0.0, help="brightness standard deviation")
    p.add_argument("--reps", type=int, default=1, help="number of repetitions of the filter")
    p.add_argument("--nthreads", type=int, default=1, help="worker threads (reference backend)")
    p.add_argument(
        "--backend",
        default=Backend.REFERENCE.value,
        choices=[backend.value for backend in Backend],
        help="filter implementation",
    )
    p.add_argument("--intermediate-dir", default=".", help="directory for rep<N>.png artifacts")
    p.add_argument(
        "--no-intermediate",
        action="store_true",
        help="do not write intermediate results between repetitions",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return p


def run(args: argparse.Namespace) -> None:
    if not args.inpath:
        raise ConfigurationError("Missing input path (--in)")
    if not args.outpath:
        raise ConfigurationError("Missing output path (--out)")

    params = FilterParameters(
        spatial_sigma=args.s,
        brightness_sigma=args.b,
        reps=args.reps,
    )
    config = FilterConfig(
        backend=Backend(args.backend),
        nthreads=args.nthreads,
        write_intermediate=not args.no_intermediate,
        intermediate_dir=args.intermediate_dir,
    )
    image_filter = BilateralImageFilter(params, config)

    image = load_image(args.inpath)

    tic = time.perf_counter()
    result = image_filter.process(image)
    toc = time.perf_counter()
    logger.info("Time elapsed: %d ms", int((toc - tic) * 1000))

    save_image(result, args.outpath)
    logger.info("Wrote %s", args.outpath)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        run(args)
    except ImFilterError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
