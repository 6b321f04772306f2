"""Unit tests for identity token derivation."""

import pytest

from qr_tracker.domain.identity import IdentityCodec, normalize_name


@pytest.mark.unit
class TestNormalizeName:
    def test_uppercases_and_joins_words(self):
        assert normalize_name("Notebook Dell") == "NOTEBOOK_DELL"

    def test_collapses_whitespace_runs(self):
        assert normalize_name("  my \t old   bike ") == "MY_OLD_BIKE"


@pytest.mark.unit
class TestIdentityCodec:
    def test_token_format(self):
        codec = IdentityCodec(clock_ms=lambda: 1700000000000)
        assert codec.generate("Notebook Dell") == "QR_NOTEBOOK_DELL_1700000000000"

    def test_identical_names_same_millisecond_get_distinct_tokens(self):
        codec = IdentityCodec(clock_ms=lambda: 1000)

        tokens = [codec.generate("Camera") for _ in range(50)]

        assert len(set(tokens)) == 50
        assert tokens[0] == "QR_CAMERA_1000"
        assert tokens[1] == "QR_CAMERA_1001"

    def test_stamp_never_goes_backwards(self):
        readings = iter([5000, 4000, 4000, 6000])
        codec = IdentityCodec(clock_ms=lambda: next(readings))

        stamps = [codec.next_stamp() for _ in range(4)]

        assert stamps == [5000, 5001, 5002, 6000]

    def test_default_clock_produces_unique_tokens(self):
        codec = IdentityCodec()
        assert codec.generate("Tablet") != codec.generate("Tablet")
