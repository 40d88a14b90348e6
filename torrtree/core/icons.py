"""
torrtree Core: File icons.

Static extension to glyph table used to decorate tree labels. Glyphs come
from the Nerd Fonts private use area, so a patched terminal font is needed
for them to render; callers can disable icons entirely.
"""
from typing import Dict

DEFAULT_DIR = ""
DEFAULT_FILE = ""

_VIDEO = ""
_AUDIO = ""
_IMAGE = ""
_ARCHIVE = ""
_DOCUMENT = ""
_PDF = ""
_BOOK = ""
_SUBTITLE = ""
_DISC = ""
_CODE = ""
_EXECUTABLE = ""
_TORRENT = ""

# Keys are the text after the last dot of the file name, case sensitive.
FILE_NODE_EXTENSIONS: Dict[str, str] = {
    # video
    "avi": _VIDEO,
    "m4v": _VIDEO,
    "mkv": _VIDEO,
    "mov": _VIDEO,
    "mp4": _VIDEO,
    "mpg": _VIDEO,
    "ts": _VIDEO,
    "webm": _VIDEO,
    "wmv": _VIDEO,
    # audio
    "aac": _AUDIO,
    "ape": _AUDIO,
    "flac": _AUDIO,
    "m4a": _AUDIO,
    "mp3": _AUDIO,
    "ogg": _AUDIO,
    "opus": _AUDIO,
    "wav": _AUDIO,
    # images
    "bmp": _IMAGE,
    "gif": _IMAGE,
    "jpeg": _IMAGE,
    "jpg": _IMAGE,
    "png": _IMAGE,
    "webp": _IMAGE,
    # archives
    "7z": _ARCHIVE,
    "bz2": _ARCHIVE,
    "gz": _ARCHIVE,
    "rar": _ARCHIVE,
    "tar": _ARCHIVE,
    "xz": _ARCHIVE,
    "zip": _ARCHIVE,
    "zst": _ARCHIVE,
    # documents
    "doc": _DOCUMENT,
    "docx": _DOCUMENT,
    "md": _DOCUMENT,
    "nfo": _DOCUMENT,
    "rtf": _DOCUMENT,
    "txt": _DOCUMENT,
    "pdf": _PDF,
    "epub": _BOOK,
    "fb2": _BOOK,
    "mobi": _BOOK,
    # subtitles
    "ass": _SUBTITLE,
    "srt": _SUBTITLE,
    "sub": _SUBTITLE,
    "vtt": _SUBTITLE,
    # disc images
    "cue": _DISC,
    "img": _DISC,
    "iso": _DISC,
    # code and executables
    "json": _CODE,
    "py": _CODE,
    "sh": _CODE,
    "xml": _CODE,
    "yaml": _CODE,
    "apk": _EXECUTABLE,
    "exe": _EXECUTABLE,
    "msi": _EXECUTABLE,
    "torrent": _TORRENT,
}


def icon_for(name: str, is_dir: bool = False) -> str:
    """Pick the icon for a tree node.

    Args:
        name: Node name (last path segment shown in the label)
        is_dir: True when the node has children

    Returns:
        Directory icon, extension icon, or the default file icon
    """
    if is_dir:
        return DEFAULT_DIR

    _, dot, extension = name.rpartition(".")
    if not dot:
        return DEFAULT_FILE
    return FILE_NODE_EXTENSIONS.get(extension, DEFAULT_FILE)
