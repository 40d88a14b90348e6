"""torrtree - File trees for BitTorrent client file lists."""

from torrtree.core.constants import TORRTREE_VERSION

__version__ = TORRTREE_VERSION
