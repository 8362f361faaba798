"""stagecopy - filtered artifact transfer between container build images.

Copies selected files out of one build image and into another through a
shared staging directory, using rsync filter rules built from include and
exclude paths.
"""

from stagecopy.core.constants import STAGECOPY_VERSION as __version__

__all__ = ["__version__"]
