# frontend/downloads.py

from io import BytesIO
from pathlib import Path
from typing import Union

import requests
from PIL import Image


def result_filename(index: int) -> str:
    """Filename offered for the index-th (1-based) result."""
    return f"edited-image-{index}.png"


def fetch_image(image_url: str, timeout: float = 30):
    """Download an image and make sure it actually decodes. Returns (PIL image, raw bytes)."""
    resp = requests.get(image_url, timeout=timeout)
    resp.raise_for_status()
    img = Image.open(BytesIO(resp.content))
    img.load()
    return img, resp.content


def save_image(image_url: str, filename: str, dest_dir: Union[str, Path] = ".") -> Path:
    _, data = fetch_image(image_url)
    # keep only the basename so a crafted filename cannot escape dest_dir
    path = Path(dest_dir) / Path(filename).name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path
