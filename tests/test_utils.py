"""Unit tests for utils.py functions."""

from __future__ import annotations

import pytest

from bluzelle.utils import (
    MEMO_ALPHABET,
    base64_decode,
    base64_encode,
    path_segment,
    random_memo,
    sha256_digest,
    sha256_hex,
    to_int,
)


class TestSha256:
    """Tests for sha256_digest / sha256_hex."""

    def test_empty_bytes(self) -> None:
        assert sha256_hex(b"") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

    def test_digest_matches_hex(self) -> None:
        assert sha256_digest(b"hello").hex() == sha256_hex(b"hello")
        assert len(sha256_digest(b"hello")) == 32


class TestBase64:
    """Tests for standard (padded) base64."""

    def test_encode_keeps_padding(self) -> None:
        assert base64_encode(b"a") == "YQ=="

    def test_decode_rejects_garbage(self) -> None:
        with pytest.raises(ValueError):
            base64_decode("not base64!")


class TestRandomMemo:
    """Tests for random_memo."""

    def test_length_and_alphabet(self) -> None:
        memo = random_memo()
        assert len(memo) == 32
        assert set(memo) <= set(MEMO_ALPHABET)

    def test_custom_length(self) -> None:
        assert len(random_memo(8)) == 8

    def test_successive_memos_differ(self) -> None:
        assert len({random_memo() for _ in range(20)}) == 20


class TestPathSegment:
    """Tests for path_segment."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("plain", "plain"),
            ("a b", "a%20b"),
            ("a/b", "a%2Fb"),
            ("k?x=1", "k%3Fx%3D1"),
            (12, "12"),
        ],
    )
    def test_quoting(self, value, expected) -> None:
        assert path_segment(value) == expected


class TestToInt:
    """Tests for to_int."""

    @pytest.mark.parametrize(("value", "expected"), [(5, 5), ("17280", 17280), (" 3 ", 3), ("-2", -2)])
    def test_accepts_numbers_and_decimal_strings(self, value, expected) -> None:
        assert to_int(value, "n") == expected

    @pytest.mark.parametrize("value", [True, None, "", "1.5", "abc", 2.0])
    def test_rejects_everything_else(self, value) -> None:
        with pytest.raises(ValueError, match="n must be an integer"):
            to_int(value, "n")
