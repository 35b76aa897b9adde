"""Headless runner: ``python -m grayscott --batches 300 --video grayscott.mp4``."""
import argparse
import contextlib
import logging
import time
from pathlib import Path

from tqdm import tqdm

from .backends import KERNELS
from .config import BATCHES, DEFAULT_PARAMETERS, HEIGHT, VIDEO_FPS, WIDTH, RunConfig, load_parameters
from .errors import GrayScottError
from .intensity import check_curve
from .render import FrameRecorder, save_frame
from .simulation import Simulation

logger = logging.getLogger("grayscott")


def build_parser():
    ap = argparse.ArgumentParser(prog="grayscott", description=__doc__)
    ap.add_argument("--width", type=int, default=WIDTH)
    ap.add_argument("--height", type=int, default=HEIGHT)
    ap.add_argument("--backend", choices=list(KERNELS), default="numpy")
    ap.add_argument("--workers", type=int, default=None, help="threads for the threaded backend")
    ap.add_argument("--seed", type=int, default=None, help="seed for the spot placement")
    ap.add_argument("--batches", type=int, default=BATCHES, help="advance() calls to run")
    ap.add_argument("--params", type=Path, default=None, help="JSON file of parameter overrides")
    ap.add_argument("--iterations", type=int, default=None, help="steps per batch")
    ap.add_argument("--video", type=Path, default=None)
    ap.add_argument("--fps", type=int, default=VIDEO_FPS)
    ap.add_argument("--record-every", type=int, default=1, help="batches per video frame")
    ap.add_argument("--frame", type=Path, default=None, help="write the final frame here")
    ap.add_argument("--cmap", default="gray", help="matplotlib colormap name or 'cyberpunk'")
    ap.add_argument("-v", "--verbose", action="count", default=0)
    return ap


def config_from_args(args):
    parameters = DEFAULT_PARAMETERS
    if args.params is not None:
        parameters = load_parameters(args.params)
    if args.iterations is not None:
        parameters = parameters.replace(iterations=args.iterations)
    return RunConfig(
        width=args.width, height=args.height, backend=args.backend, workers=args.workers,
        seed=args.seed, batches=args.batches, record_every=max(1, args.record_every),
        video=args.video, frame=args.frame, video_fps=args.fps, cmap=args.cmap,
        parameters=parameters,
    )


def run(config: RunConfig):
    """Run ``config.batches`` batches, recording frames as configured. Returns the last intensity field."""
    params = config.parameters
    check_curve(params.threshold, params.sharpness)
    start = time.time()
    if config.video is not None:
        recording = FrameRecorder(config.video, config.width, config.height,
                                  fps=config.video_fps, cmap=config.cmap)
    else:
        recording = contextlib.nullcontext()
    with Simulation(config.width, config.height, backend=config.backend, seed=config.seed,
                    spots=config.spots, radius=config.radius, **config.backend_options()) as sim, recording as recorder:
        for batch in tqdm(range(config.batches), disable=None):
            sim.advance(params)
            if recorder is not None and batch % config.record_every == 0:
                recorder.write(sim.map_to_intensity())
        intensity = sim.map_to_intensity(params)
        logger.info("Ran %d steps in %.2f seconds", sim.steps_taken, time.time() - start)

    if config.frame is not None:
        save_frame(config.frame, intensity, config.cmap)
    return intensity


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        run(config_from_args(args))
    except (GrayScottError, OSError) as exc:
        parser.exit(2, f"grayscott: error: {exc}\n")
    return 0
