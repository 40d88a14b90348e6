"""
torrtree Core: Display formatting helpers.

Pure string formatting for sizes, speeds, progress, ETAs and timestamps as
shown next to tree labels. Thresholds are decimal (10^6, 10^9, 10^12) while
the printed values are divided by the binary unit, matching how the
terminal client has always displayed them.

Example:
    >>> format_size(5 * 1024 * 1024)
    '5.0M'
    >>> format_eta(3725)
    '1h 2m'
"""
from datetime import datetime, timezone
from typing import Tuple

from torrtree.core.constants import PATH_SEPARATOR

DEC_TB = 1000 * 1000 * 1000 * 1000
DEC_GB = 1000 * 1000 * 1000
DEC_MB = 1000 * 1000

BYTES_TB = 1024.0 * 1024.0 * 1024.0 * 1024.0
BYTES_GB = 1024.0 * 1024.0 * 1024.0
BYTES_MB = 1024.0 * 1024.0
BYTES_KB = 1024.0

# Sentinels used by Transmission for the ETA field
ETA_NOT_AVAILABLE = -1
ETA_UNKNOWN = -2

DONE_MARK = "✓"
INFINITY_MARK = "∞"


def format_size(size: int) -> str:
    """Format a byte count, returning an empty string for zero."""
    if size == 0:
        return ""
    if size > DEC_TB:
        return f"{size / BYTES_TB:.1f}T"
    if size > DEC_GB:
        return f"{size / BYTES_GB:.1f}G"
    if size > DEC_MB:
        return f"{size / BYTES_MB:.1f}M"
    return f"{size / BYTES_KB:.1f}K"


def format_percent_done(fraction: float) -> str:
    """Format a completion fraction (0.0-1.0) as a percentage or a check mark."""
    if fraction >= 1.0:
        return DONE_MARK
    return f"{100.0 * fraction:.0f}%"


def format_download_speed(rate: int, hide_zero: bool = False) -> str:
    """Format a transfer rate in bytes per second, right-aligned."""
    if hide_zero and rate == 0:
        return ""
    if rate > DEC_MB:
        return f"{rate / BYTES_MB:>5.1f} M/s"
    return f"{rate / BYTES_KB:>5.1f} K/s"


def format_time(timestamp: int) -> str:
    """Format a unix timestamp as a UTC date and time."""
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M:%S")


def _split_toward_zero(value: int, unit: int) -> Tuple[int, int]:
    # Truncates toward zero: -5 splits into (0, -5)
    whole = abs(value) // unit
    if value < 0:
        whole = -whole
    return whole, value - whole * unit


def format_eta(secs: int) -> str:
    """Format an ETA in seconds using the two most significant units.

    Transmission reports -1 when no estimate is available (rendered empty)
    and -2 when the estimate is unknown (rendered as infinity).
    """
    if secs == ETA_NOT_AVAILABLE:
        return ""
    if secs == ETA_UNKNOWN:
        return INFINITY_MARK

    days, secs = _split_toward_zero(secs, 86400)
    hours, secs = _split_toward_zero(secs, 3600)
    minutes, secs = _split_toward_zero(secs, 60)

    if days > 0:
        return f"{days}d {hours}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def process_folder(folder: str, base_dir: str) -> str:
    """Shorten a download folder for display relative to the base directory.

    The base directory itself is shown by its last component; anything
    below it is shown as at most its last two components.

    Example:
        >>> process_folder("/data/tv/show/season1", "/data")
        'show/season1'
    """
    if folder == base_dir:
        return folder.rsplit(PATH_SEPARATOR, 1)[-1]

    # TODO: with a base_dir of "/" every separator is removed, so the folder
    # collapses into one name; show such folders relative to the root instead.
    relative = folder.replace(base_dir, "")
    if relative.startswith(PATH_SEPARATOR):
        relative = relative[len(PATH_SEPARATOR):]
    parts = relative.split(PATH_SEPARATOR)
    if len(parts) > 1:
        return PATH_SEPARATOR.join(parts[-2:])
    return relative


def utf8_truncate(text: str, max_bytes: int) -> str:
    """Truncate text so its UTF-8 encoding is shorter than ``max_bytes``.

    The cut always lands on a character boundary.
    """
    encoded = text.encode("utf-8")
    if len(encoded) < max_bytes:
        return text
    return encoded[: max(max_bytes - 1, 0)].decode("utf-8", errors="ignore")


def utf8_split(text: str, at: int) -> Tuple[str, str]:
    """Split text after ``at`` characters."""
    return text[:at], text[at:]
