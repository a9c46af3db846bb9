# frontend/selection.py

from dataclasses import dataclass, field
from typing import Any, Iterable

from config.settings import settings

from .model import ImageSource


@dataclass
class Selection:
    accepted: list[ImageSource] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)


def accept_uploads(
    uploads: Iterable[Any],
    max_files: int = settings.MAX_IMAGES,
    max_bytes: int = settings.MAX_IMAGE_BYTES,
    media_types: Iterable[str] = settings.ACCEPTED_MEDIA_TYPES,
) -> Selection:
    """
    Apply the drop-zone rules to uploaded files (anything with .name, .type,
    .size and a binary read()). Too many files rejects the whole drop, the
    way the browser drop zone does.
    """
    uploads = list(uploads)
    selection = Selection()

    if len(uploads) > max_files:
        selection.rejected = [f"{u.name}: too many files (max {max_files})" for u in uploads]
        return selection

    allowed = set(media_types)
    for u in uploads:
        if u.type not in allowed:
            selection.rejected.append(f"{u.name}: unsupported file type {u.type or 'unknown'}")
        elif u.size > max_bytes:
            selection.rejected.append(f"{u.name}: file is larger than {max_bytes // (1024 * 1024)}MB")
        else:
            selection.accepted.append(ImageSource(name=u.name, media_type=u.type, size=u.size, handle=u))
    return selection
