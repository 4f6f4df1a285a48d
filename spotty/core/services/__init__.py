from __future__ import annotations

"""High-level orchestration services."""

from .extraction_service import ExtractionService  # noqa: F401

__all__: list[str] = [
    "ExtractionService",
]
