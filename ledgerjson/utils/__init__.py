from __future__ import annotations

# Imports for convenience
from . import format

__all__ = [
    'format',
]
