"""MediaPipe FaceLandmarker backend."""

from typing import List, Optional
from pathlib import Path
import logging
import urllib.request

import numpy as np

from smartface.types import NUM_FACE_LANDMARKS

logger = logging.getLogger(__name__)

FACE_LANDMARKER_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/face_landmarker/"
    "face_landmarker/float16/1/face_landmarker.task"
)


def _get_model_path() -> Path:
    """Get path to face landmarker model, downloading if necessary."""
    cache_dir = Path.home() / ".cache" / "smartface" / "models"
    cache_dir.mkdir(parents=True, exist_ok=True)

    model_path = cache_dir / "face_landmarker.task"

    if not model_path.exists():
        logger.info("Downloading face landmarker model to %s...", model_path)
        try:
            urllib.request.urlretrieve(FACE_LANDMARKER_MODEL_URL, model_path)
            logger.info("Download complete.")
        except Exception as e:
            raise RuntimeError(
                f"Failed to download face landmarker model: {e}\n"
                f"You can manually download from: {FACE_LANDMARKER_MODEL_URL}\n"
                f"And save to: {model_path}"
            ) from e

    return model_path


class MediaPipeFaceMeshBackend:
    """MediaPipe FaceLandmarker backend (Tasks API, 0.10.x+).

    FaceLandmarker returns 478 points (face mesh + iris); only the first
    468 face-mesh points are kept.

    Args:
        max_num_faces: Maximum number of faces to detect (default: 1).
        min_detection_confidence: Minimum confidence for detection.
        min_presence_confidence: Minimum face presence confidence.
        model_path: Optional local .task file (skips the download).
    """

    def __init__(
        self,
        max_num_faces: int = 1,
        min_detection_confidence: float = 0.5,
        min_presence_confidence: float = 0.5,
        model_path: Optional[str] = None,
    ):
        self._max_num_faces = max_num_faces
        self._min_detection_confidence = min_detection_confidence
        self._min_presence_confidence = min_presence_confidence
        self._model_path = model_path
        self._landmarker: Optional[object] = None
        self._initialized = False

    def initialize(self) -> None:
        if self._initialized:
            return

        try:
            from mediapipe.tasks import python
            from mediapipe.tasks.python import vision
        except ImportError as e:
            raise ImportError(
                "MediaPipe is required for face landmark detection. "
                "Install it with: pip install smartface[mediapipe]"
            ) from e

        model_path = Path(self._model_path) if self._model_path else _get_model_path()

        base_options = python.BaseOptions(model_asset_path=str(model_path))
        options = vision.FaceLandmarkerOptions(
            base_options=base_options,
            running_mode=vision.RunningMode.IMAGE,
            num_faces=self._max_num_faces,
            min_face_detection_confidence=self._min_detection_confidence,
            min_face_presence_confidence=self._min_presence_confidence,
        )

        self._landmarker = vision.FaceLandmarker.create_from_options(options)
        self._initialized = True
        logger.info("MediaPipe FaceLandmarker backend initialized")

    def detect(self, image: np.ndarray) -> List[np.ndarray]:
        """Detect faces and return their landmark arrays.

        Args:
            image: BGR image as numpy array (H, W, 3).

        Returns:
            One (468, 3) float32 array per detected face.
        """
        if not self._initialized or self._landmarker is None:
            raise RuntimeError("Backend not initialized. Call initialize() first.")

        import mediapipe as mp
        import cv2

        image_rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=image_rgb)

        result = self._landmarker.detect(mp_image)

        faces = []
        for face_lms in result.face_landmarks or []:
            landmarks = np.array(
                [[lm.x, lm.y, lm.z] for lm in face_lms[:NUM_FACE_LANDMARKS]],
                dtype=np.float32,
            )
            faces.append(landmarks)
        return faces

    def cleanup(self) -> None:
        """Release MediaPipe resources."""
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
        self._initialized = False
        logger.info("MediaPipe FaceLandmarker backend cleaned up")


__all__ = ["MediaPipeFaceMeshBackend", "FACE_LANDMARKER_MODEL_URL"]
