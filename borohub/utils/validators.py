"""
Input Validation Utilities

This module provides validation functions for user input:
1. is_allowed_image: extension whitelist for uploaded pictures
2. is_valid_url: basic check for media URLs sent as JSON
3. is_valid_handle: allowed characters for member handles
"""

import os
import re


# Extensions accepted for avatars, cover images and post media
ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}

HANDLE_PATTERN = re.compile(r"^[A-Za-z0-9_.]{3,30}$")


def is_allowed_image(filename: str | None) -> bool:
    """
    Check the extension of an uploaded file name.

    Examples:
        >>> is_allowed_image("holiday.JPG")
        True
        >>> is_allowed_image("script.sh")
        False
    """
    if not filename:
        return False
    _, ext = os.path.splitext(filename)
    return ext.lower() in ALLOWED_IMAGE_EXTENSIONS


def is_valid_url(url: str) -> bool:
    """
    Check if a string looks like a valid URL.

    Matches http:// or https:// followed by non-whitespace characters.
    """
    pattern = r"https?://\S+$"
    return bool(re.match(pattern, url))


def is_valid_handle(handle: str) -> bool:
    """3 to 30 letters, digits, underscores or dots."""
    return bool(HANDLE_PATTERN.match(handle or ""))
