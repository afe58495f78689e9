"""Service layer for toolcall-demos."""

from toolcall_demos.services.images import ImageGenerationService

__all__ = ["ImageGenerationService"]
