# frontend/model.py
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict

Mode = Literal["edit", "generate"]

# data:<media type>;base64,<payload>
EncodedImage = str


@dataclass
class ImageSource:
    """One user-selected local file, held only until it has been encoded."""

    name: str
    media_type: str
    size: int
    handle: Union[Path, BinaryIO]

    @classmethod
    def from_path(cls, path: Union[str, Path], media_type: str) -> "ImageSource":
        path = Path(path)
        return cls(name=path.name, media_type=media_type, size=path.stat().st_size, handle=path)

    def read(self) -> bytes:
        if isinstance(self.handle, Path):
            return self.handle.read_bytes()
        if self.handle.seekable():
            self.handle.seek(0)
        return self.handle.read()


class JobRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Mode
    prompt: str
    images: tuple[EncodedImage, ...] = ()
    output_format: Optional[str] = None

    def payload(self) -> dict:
        """JSON body sent to the image service for this mode."""
        if self.mode == "edit":
            return {"prompt": self.prompt, "image": list(self.images)}
        return {"prompt": self.prompt, "output_format": self.output_format}


class JobResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    prompt: str
    timestamp: float
    mode: Mode
    image_count: Optional[int] = None

    @property
    def label(self) -> str:
        if self.mode == "generate":
            return "Generated"
        suffix = "s" if (self.image_count or 0) > 1 else ""
        return f"{self.image_count} Image{suffix} Edited"
