"""Card provider and import status constants."""

from __future__ import annotations

from typing import Final

PROVIDER_SAMSUNG: Final = "samsung"
PROVIDER_KB: Final = "kb"
PROVIDER_OTHER: Final = "other"

STATUS_REVIEWING: Final = "reviewing"
STATUS_CONFIRMED: Final = "confirmed"
# Reserved for a soft-cancel flow; cancelling a review currently deletes the import.
STATUS_CANCELLED: Final = "cancelled"

IMPORT_STATUSES: Final[tuple[str, ...]] = (
    STATUS_REVIEWING,
    STATUS_CONFIRMED,
    STATUS_CANCELLED,
)


def normalize_provider(provider: str | None) -> str | None:
    """Return a known provider code, or None when the caller wants auto-detection."""
    if provider is None:
        return None
    code = provider.strip().lower()
    if not code or code == PROVIDER_OTHER:
        return None
    return code
