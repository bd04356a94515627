"""Screen capture for the overlay.

Hidden design decisions:
- Capture backend (Pillow ImageGrab)
- Thumbnail sizing and PNG encoding
- Data URL format handed to the relay
"""

import base64
import io
import mimetypes
from pathlib import Path

from PIL import Image, ImageGrab

from .config import CAPTURE_MAX_SIZE


def image_to_data_url(image: Image.Image, max_size: tuple[int, int] = CAPTURE_MAX_SIZE) -> str:
    """Downsize an image to fit ``max_size`` and encode it as a PNG data URL."""
    thumbnail = image.copy()
    thumbnail.thumbnail(max_size)
    if thumbnail.mode not in ("RGB", "RGBA", "L"):
        thumbnail = thumbnail.convert("RGB")

    buffer = io.BytesIO()
    thumbnail.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def capture_screen(max_size: tuple[int, int] = CAPTURE_MAX_SIZE) -> str | None:
    """Grab the primary screen as a data URL.

    Blocking; run it off the event loop (``asyncio.to_thread``).

    Args:
        max_size: Bounding box for the thumbnail (width, height)

    Returns:
        PNG data URL, or None if the screen could not be captured
    """
    try:
        screenshot = ImageGrab.grab()
    except (OSError, ImportError):
        return None
    if screenshot is None:
        return None
    return image_to_data_url(screenshot, max_size)


def encode_image_file(path: str | Path) -> str:
    """Read an image file and return it as a data URL (original bytes).

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    mime, _ = mimetypes.guess_type(path.name)
    data = path.read_bytes()
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime or 'image/png'};base64,{encoded}"
