"""File kinds and size strings.

Size strings follow the ``K``/``M``/``G`` suffix convention used by upload
limits (``"2M"``, ``"512K"``, ``"1G"``); a bare number is bytes and a
negative value means "no limit".
"""

from __future__ import annotations

import re
from typing import TypedDict

_SIZE_PATTERN = re.compile(r"^\s*(-?\d+)\s*([KMG]?)B?\s*$", re.IGNORECASE)
_MULTIPLIERS = {"": 1, "K": 1024, "M": 1024**2, "G": 1024**3}


class FileKind(TypedDict):
    label: str
    extensions: list[str]


FILE_KINDS: dict[str, FileKind] = {
    "access": {"label": "Access", "extensions": ["adp", "accdb", "mdb", "accde", "accdt"]},
    "audio": {
        "label": "Audio",
        "extensions": ["aac", "aif", "aiff", "flac", "m4a", "mp3", "oga", "ogg", "wav", "wma"],
    },
    "compressed": {
        "label": "Compressed",
        "extensions": ["7z", "bz2", "dmg", "gz", "rar", "tar", "tgz", "zip", "zipx"],
    },
    "excel": {"label": "Excel", "extensions": ["xls", "xlsx", "xlsm", "xltx", "xltm"]},
    "html": {"label": "HTML", "extensions": ["html", "htm"]},
    "illustrator": {"label": "Illustrator", "extensions": ["ai"]},
    "image": {
        "label": "Image",
        "extensions": [
            "bmp", "gif", "jfif", "jp2", "jpe", "jpeg", "jpg", "png", "svg", "tif", "tiff", "webp",
        ],
    },
    "javascript": {"label": "Javascript", "extensions": ["js"]},
    "json": {"label": "JSON", "extensions": ["json"]},
    "pdf": {"label": "PDF", "extensions": ["pdf"]},
    "photoshop": {"label": "Photoshop", "extensions": ["psd", "psb"]},
    "powerpoint": {
        "label": "PowerPoint",
        "extensions": ["pps", "ppsm", "ppsx", "ppt", "pptm", "pptx", "potx"],
    },
    "text": {"label": "Text", "extensions": ["txt", "text"]},
    "video": {
        "label": "Video",
        "extensions": ["avi", "m4v", "mkv", "mov", "mp4", "mpeg", "mpg", "ogv", "webm", "wmv"],
    },
    "word": {"label": "Word", "extensions": ["doc", "docx", "dot", "docm", "dotm"]},
    "xml": {"label": "XML", "extensions": ["xml"]},
}


def parse_size(value: str | int) -> int:
    """Convert a size string such as ``"8M"`` to bytes.

    Examples:
        >>> parse_size("8M")
        8388608
        >>> parse_size("512k")
        524288
        >>> parse_size(1024)
        1024

    Raises:
        ValueError: If *value* is not a recognizable size.
    """
    if isinstance(value, int):
        return value
    match = _SIZE_PATTERN.match(value)
    if match is None:
        msg = f"Unrecognized size: {value!r}"
        raise ValueError(msg)
    number, unit = match.groups()
    return int(number) * _MULTIPLIERS[unit.upper()]

