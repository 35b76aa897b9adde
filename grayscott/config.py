"""Run configuration and parameter files."""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import InvalidParameterError
from .grid import SEED_SPOTS, SPOT_RADIUS
from .params import ParameterSet

WIDTH, HEIGHT = 400, 400
BATCHES = 300
VIDEO_FPS = 30

DEFAULT_PARAMETERS = ParameterSet()


@dataclass
class RunConfig:
    width: int = WIDTH
    height: int = HEIGHT
    backend: str = "numpy"
    workers: Optional[int] = None  # threaded backend only
    seed: Optional[int] = None
    spots: int = SEED_SPOTS
    radius: int = SPOT_RADIUS
    batches: int = BATCHES       # advance() calls
    record_every: int = 1        # batches per video frame
    video: Optional[Path] = None
    frame: Optional[Path] = None
    video_fps: int = VIDEO_FPS
    cmap: str = "gray"
    parameters: ParameterSet = DEFAULT_PARAMETERS

    def backend_options(self):
        if self.backend == "threaded" and self.workers:
            return {"workers": self.workers}
        return {}


def load_parameters(path, base=DEFAULT_PARAMETERS):
    """Read a JSON object of parameter keys (``{"feed": 0.035, "killMax": 0.062}``)."""
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise InvalidParameterError(f"{path}: not valid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise InvalidParameterError(f"{path}: expected a JSON object, got {type(data).__name__}")
    return ParameterSet.from_mapping(data, base=base)
