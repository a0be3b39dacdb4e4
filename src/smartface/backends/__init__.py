from smartface.backends.base import LandmarkBackend

__all__ = ["LandmarkBackend"]
