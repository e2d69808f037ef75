"""Litestar web helpers for litestar-signing."""

from __future__ import annotations

from litestar_signing.web.exceptions import signing_error_handler, signing_error_payload

__all__ = ["signing_error_handler", "signing_error_payload"]
