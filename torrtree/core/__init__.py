"""torrtree Core - Shared constants, validators and display helpers.

Import specific functions from submodules:
    from torrtree.core import constants
    from torrtree.core import formatting
    from torrtree.core import icons
    from torrtree.core import validators
"""

from torrtree.core import constants, formatting, icons, validators

__all__ = [
    "constants",
    "formatting",
    "icons",
    "validators",
]
