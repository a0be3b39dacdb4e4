"""CaptureRunner - runs the capture analyzer over a video source.

Example:
    >>> from smartface.runner import CaptureRunner
    >>> from smartface.backends.mediapipe_face import MediaPipeFaceMeshBackend
    >>> runner = CaptureRunner(SmartCaptureAnalyzer(), MediaPipeFaceMeshBackend(),
    ...                        output_dir="./captures")
    >>> result = runner.run("video.mp4")
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, List, Optional, Union

import cv2

from smartface.backends.base import LandmarkBackend
from smartface.capture import SmartCaptureAnalyzer
from smartface.observation import Observation
from smartface.types import Frame, pixel_format_of

logger = logging.getLogger(__name__)

ObservationCallback = Callable[[Frame, Observation], None]


@dataclass
class RunResult:
    """Result of a CaptureRunner.run() invocation.

    Attributes:
        frame_count: Frames read from the source.
        capture_count: Accepted captures.
        saved_paths: Paths of written crop images.
        statuses: Status string per processed frame (None entries skipped).
    """

    frame_count: int = 0
    capture_count: int = 0
    saved_paths: List[Path] = field(default_factory=list)
    statuses: List[str] = field(default_factory=list)


class CaptureRunner:
    """Feeds frames through a landmark backend and the capture analyzer.

    Args:
        analyzer: Capture analyzer (owns the capture session).
        backend: Landmark backend.
        output_dir: Directory for accepted crops (None = don't write).
        image_ext: Extension of written crops.
        on_observation: Callback ``(frame, obs)`` fired per processed frame.
    """

    def __init__(
        self,
        analyzer: SmartCaptureAnalyzer,
        backend: LandmarkBackend,
        *,
        output_dir: Optional[Union[str, Path]] = None,
        image_ext: str = ".jpg",
        on_observation: Optional[ObservationCallback] = None,
    ):
        self._analyzer = analyzer
        self._backend = backend
        self._output_dir = Path(output_dir) if output_dir is not None else None
        self._image_ext = image_ext
        self._on_observation = on_observation

    def run(self, source: Any, *, max_frames: Optional[int] = None) -> RunResult:
        """Run until the capture limit, the end of the source or ``max_frames``.

        Args:
            source: Video file path, camera index (int) or a list of frames.
            max_frames: Stop after this many frames.
        """
        result = RunResult()
        if self._output_dir is not None:
            self._output_dir.mkdir(parents=True, exist_ok=True)

        self._backend.initialize()
        self._analyzer.initialize()
        try:
            for frame in self._iter_frames(source):
                if self._analyzer.is_done:
                    break
                result.frame_count += 1

                faces = self._backend.detect(frame.data)
                obs = self._analyzer.process(frame, faces)
                if obs is not None:
                    self._handle(frame, obs, result)

                if max_frames and result.frame_count >= max_frames:
                    break
        finally:
            self._analyzer.cleanup()
            try:
                self._backend.cleanup()
            except Exception:
                logger.debug("Backend cleanup error", exc_info=True)

        result.capture_count = self._analyzer.capture_count
        return result

    def _handle(self, frame: Frame, obs: Observation, result: RunResult) -> None:
        output = obs.data
        if output.status is not None:
            result.statuses.append(output.status)
        if output.cropped is not None and self._output_dir is not None:
            path = self._output_dir / f"capture_{output.capture_count - 1:03d}{self._image_ext}"
            if cv2.imwrite(str(path), output.cropped.image):
                result.saved_paths.append(path)
                logger.info("Saved %s (%dx%d)", path, output.cropped.width, output.cropped.height)
            else:
                logger.warning("Failed to write %s", path)
        if self._on_observation:
            self._on_observation(frame, obs)

    def _iter_frames(self, source: Any) -> Iterator[Frame]:
        if isinstance(source, list):
            for i, item in enumerate(source):
                yield item if isinstance(item, Frame) else Frame(data=item, frame_id=i)
            return

        cap = cv2.VideoCapture(source)
        if not cap.isOpened():
            raise RuntimeError(f"Cannot open video source: {source}")
        try:
            frame_id = 0
            while True:
                ok, image = cap.read()
                if not ok:
                    break
                t_ms = cap.get(cv2.CAP_PROP_POS_MSEC)
                yield Frame(
                    data=image,
                    frame_id=frame_id,
                    t_src_ns=int(t_ms * 1e6),
                    color_format=pixel_format_of(image, bgr=True),
                )
                frame_id += 1
        finally:
            cap.release()


__all__ = ["CaptureRunner", "RunResult"]
