"""stagecopy Core - constants and input validation.

Import specific functions from submodules:
    from stagecopy.core import constants
    from stagecopy.core import validators
"""

from stagecopy.core import constants, validators

__all__ = [
    "constants",
    "validators",
]
