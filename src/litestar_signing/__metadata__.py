"""Project metadata, read from the installed ``litestar-signing`` distribution."""

from __future__ import annotations

import importlib.metadata

__all__ = ("__project__", "__version__")

_metadata = importlib.metadata.metadata("litestar-signing")

__version__: str = _metadata["Version"]
"""Version of the project."""
__project__: str = _metadata["Name"]
"""Name of the project."""
