"""Database helpers for litestar-signing.

Requires the [db] extra:
    pip install litestar-signing[db]
"""

from __future__ import annotations

from litestar_signing.db.types import AutomatonType, JSONType

__all__ = ["AutomatonType", "JSONType"]
