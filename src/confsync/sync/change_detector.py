"""
Change Detector

Cheap fingerprinting of raw payload bytes so that refreshed payloads that
did not actually change are skipped.

The digest is djb2 truncated to 32 bits. It is fast and deterministic but
not collision resistant; payloads are few and not adversarial, so an
occasional collision (a missed update) is an accepted risk.
"""

DJB2_SEED = 5381
MASK_32 = 0xFFFFFFFF


def content_digest(raw: bytes) -> str:
    """Return the hex djb2 digest of raw."""
    h = DJB2_SEED
    for byte in raw:
        h = ((h << 5) + h + byte) & MASK_32
    return format(h, "x")


class ChangeDetector:
    """Last seen digest per profile name."""

    def __init__(self):
        self._digests: dict[str, str] = {}

    def has_changed(self, profile_name: str, digest: str) -> bool:
        return self._digests.get(profile_name) != digest

    def record(self, profile_name: str, digest: str) -> None:
        self._digests[profile_name] = digest

    def forget(self, profile_name: str) -> None:
        self._digests.pop(profile_name, None)

    def clear(self) -> None:
        self._digests.clear()

    def __contains__(self, profile_name: str) -> bool:
        return profile_name in self._digests

    def __len__(self) -> int:
        return len(self._digests)
