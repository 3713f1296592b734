"""Response post-processing package."""

from .processor import ResponseProcessor, default_processor

__all__ = ["ResponseProcessor", "default_processor"]
