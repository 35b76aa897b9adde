"""Write intensity fields to image and video files with OpenCV."""
import logging
from pathlib import Path

import cv2

from .intensity import colorize

logger = logging.getLogger(__name__)


def save_frame(path, intensity, cmap="gray"):
    """Write one intensity field as an image; the format follows the suffix."""
    img_bgr = cv2.cvtColor(colorize(intensity, cmap), cv2.COLOR_RGB2BGR)
    if not cv2.imwrite(str(path), img_bgr):
        raise OSError(f"could not write frame to {path}")
    logger.info("Frame saved as %s", path)


class FrameRecorder:
    """mp4 writer for a sequence of same-size intensity fields."""

    def __init__(self, path, width, height, fps=30, cmap="gray"):
        self.path = Path(path)
        self.size = (width, height)
        self.cmap = cmap
        self.frames = 0
        fourcc = cv2.VideoWriter_fourcc(*"mp4v")
        self.video = cv2.VideoWriter(str(self.path), fourcc, fps, self.size)
        if not self.video.isOpened():
            raise OSError(f"could not open video writer for {self.path}")

    def write(self, intensity):
        img_bgr = cv2.cvtColor(colorize(intensity, self.cmap), cv2.COLOR_RGB2BGR)
        self.video.write(img_bgr)
        self.frames += 1

    def close(self):
        if self.video is not None:
            self.video.release()
            self.video = None
            logger.info("Video saved as %s (%d frames)", self.path, self.frames)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
