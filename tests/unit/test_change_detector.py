"""
Unit tests for payload fingerprinting.
"""

import pytest

from confsync.sync.change_detector import ChangeDetector, content_digest


@pytest.mark.unit
class TestContentDigest:
    """Test the djb2 digest."""

    def test_empty_input_is_seed(self):
        assert content_digest(b"") == format(5381, "x")

    def test_known_value(self):
        # 5381 * 33 + ord("a")
        assert content_digest(b"a") == format(5381 * 33 + 97, "x")

    def test_deterministic(self):
        payload = b'{"feature": true}'
        assert content_digest(payload) == content_digest(payload)

    def test_order_sensitive(self):
        assert content_digest(b"ab") != content_digest(b"ba")

    def test_fits_in_32_bits(self):
        digest = content_digest(b"x" * 10_000)
        assert int(digest, 16) <= 0xFFFFFFFF
        assert digest == digest.lower()

    def test_distinguishes_documents(self):
        assert content_digest(b'{"a":1}') != content_digest(b'{"a":2}')


@pytest.mark.unit
class TestChangeDetector:
    """Test per-profile digest tracking."""

    def test_unknown_profile_has_changed(self):
        detector = ChangeDetector()
        assert detector.has_changed("app", "abc")

    def test_recorded_digest_is_unchanged(self):
        detector = ChangeDetector()
        detector.record("app", "abc")
        assert not detector.has_changed("app", "abc")
        assert detector.has_changed("app", "def")
        assert "app" in detector
        assert len(detector) == 1

    def test_forget_and_clear(self):
        detector = ChangeDetector()
        detector.record("a", "1")
        detector.record("b", "2")

        detector.forget("a")
        detector.forget("missing")
        assert detector.has_changed("a", "1")
        assert len(detector) == 1

        detector.clear()
        assert len(detector) == 0
