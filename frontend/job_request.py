# frontend/job_request.py

from typing import Sequence

from config.settings import settings

from .errors import EmptyPromptError, NoImageError, ValidationError
from .model import EncodedImage, JobRequest, Mode


def validate(mode: Mode, prompt: str, image_count: int) -> str:
    """
    Check the inputs in order, first failure wins:
    - prompt must not be blank
    - edit mode needs at least one image
    Returns the trimmed prompt.
    """
    if mode not in ("edit", "generate"):
        raise ValidationError(f"Unknown mode: {mode}")
    trimmed = (prompt or "").strip()
    if not trimmed:
        raise EmptyPromptError()
    if mode == "edit" and image_count < 1:
        raise NoImageError()
    return trimmed


def build_edit_request(prompt: str, images: Sequence[EncodedImage]) -> JobRequest:
    trimmed = validate("edit", prompt, len(images))
    # always a list, even for a single image
    return JobRequest(mode="edit", prompt=trimmed, images=tuple(images))


def build_generate_request(prompt: str) -> JobRequest:
    trimmed = validate("generate", prompt, 0)
    return JobRequest(mode="generate", prompt=trimmed, output_format=settings.OUTPUT_FORMAT)


def build(mode: Mode, prompt: str, images: Sequence[EncodedImage] = ()) -> JobRequest:
    """Assemble the request for the active mode from already-encoded images."""
    if mode == "edit":
        return build_edit_request(prompt, images)
    if mode == "generate":
        return build_generate_request(prompt)
    raise ValidationError(f"Unknown mode: {mode}")
