"""Version of the truestamp-id distribution.

The version describes the library, not the Id layouts: compact and text Ids
carry their own layout markers and do not change with a release.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _dist_version

DISTRIBUTION = "truestamp-id"

# source checkouts without installed metadata
__fallback_version__ = "1.0.0"

try:
    __version__ = _dist_version(DISTRIBUTION)
except PackageNotFoundError:
    __version__ = __fallback_version__

__all__ = ["DISTRIBUTION", "__fallback_version__", "__version__"]
