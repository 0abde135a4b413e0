"""Profile photo handling."""

from .processor import IPhotoProcessor, PhotoProcessor

__all__ = ["IPhotoProcessor", "PhotoProcessor"]
