"""
Plant photo upload validation.

Checks an uploaded photo before it is sent to storage for classification:
- Extension allowlist (no double extensions, no path tricks)
- Size limit
- Content check with Pillow (the bytes must really be an image)
"""

from __future__ import annotations
from typing import Tuple, Optional
from PIL import Image
from io import BytesIO
import os

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}

MAX_PHOTO_SIZE = 5 * 1024 * 1024

_DANGEROUS_INNER_EXTENSIONS = {
    'php', 'phtml', 'exe', 'sh', 'bat', 'cmd', 'com',
    'js', 'py', 'rb', 'pl', 'cgi', 'asp', 'aspx', 'jsp',
}


def allowed_file(filename: str) -> bool:
    """
    Check if a filename has an image extension and nothing suspicious.

    Examples:
        >>> allowed_file('dandelion.jpg')
        True
        >>> allowed_file('dandelion.php.jpg')
        False
        >>> allowed_file('../../etc/passwd')
        False
    """
    if not filename or '.' not in filename:
        return False

    if '..' in filename or '/' in filename or '\\' in filename:
        return False

    parts = filename.lower().split('.')
    if parts[-1] not in ALLOWED_EXTENSIONS:
        return False

    # image.php.jpg
    if len(parts) > 2 and parts[-2] in _DANGEROUS_INNER_EXTENSIONS:
        return False

    return True


def is_image(file_bytes: bytes) -> bool:
    """True if Pillow can open and verify the bytes as an image."""
    try:
        Image.open(BytesIO(file_bytes)).verify()
        return True
    except Exception:
        return False


def validate_plant_photo(file, max_size: int = MAX_PHOTO_SIZE) -> Tuple[Optional[bytes], Optional[str]]:
    """
    Validate a photo from ``request.files``.

    Args:
        file: FileStorage object (may be None)
        max_size: Maximum allowed size in bytes

    Returns:
        (file_bytes, error_message) - exactly one of them is None
    """
    if not file or not file.filename:
        return None, "Please select an image first."

    if not allowed_file(file.filename):
        return None, "Invalid file type. Only images (PNG, JPG, GIF, WebP) are allowed."

    file.seek(0, os.SEEK_END)
    size = file.tell()
    if size > max_size:
        return None, f"Photo must be less than {max_size / (1024 * 1024):.0f}MB."

    file.seek(0)
    file_bytes = file.read()

    if not is_image(file_bytes):
        return None, "Invalid image file. Please upload a valid image."

    return file_bytes, None
