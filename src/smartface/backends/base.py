"""Backend protocol for face-mesh landmark detection."""

from typing import List, Protocol

import numpy as np


class LandmarkBackend(Protocol):
    """Protocol for face landmark backends.

    ``detect`` returns one (468, 3) array of normalized landmarks per face,
    largest/most confident face first. An empty list means no face.
    """

    def initialize(self) -> None:
        """Initialize the backend and load models."""
        ...

    def detect(self, image: np.ndarray) -> List[np.ndarray]:
        """Detect faces and return their landmark sets."""
        ...

    def cleanup(self) -> None:
        """Release resources."""
        ...


__all__ = ["LandmarkBackend"]
