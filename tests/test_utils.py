"""Tests for chainprobe.utils."""

from __future__ import annotations

import pytest

from chainprobe.utils import (
    ZERO_ADDRESS,
    bytes_to_hex,
    hex_to_bytes,
    is_hex_address,
    is_zero_address,
    keccak256,
    to_checksum_address,
    word_to_address,
)


class TestKeccak:
    def test_empty_input(self) -> None:
        assert keccak256(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"

    def test_not_sha3(self) -> None:
        assert keccak256(b"").hex() != "a7ffc6f8bf1ed76651c14756a061d662f580ff4de43b49fa82d80a4b80f8434a"


class TestChecksum:
    @pytest.mark.parametrize(
        "address",
        [
            "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
            "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
            "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
            "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
        ],
    )
    def test_eip55_vectors(self, address: str) -> None:
        assert to_checksum_address(address.lower()) == address

    def test_from_bytes(self) -> None:
        raw = bytes.fromhex("5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
        assert to_checksum_address(raw) == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"

    @pytest.mark.parametrize("value", ["0x1234", "not an address", b"\x00" * 19])
    def test_invalid(self, value) -> None:
        with pytest.raises(ValueError):
            to_checksum_address(value)

    def test_is_hex_address(self) -> None:
        assert is_hex_address(ZERO_ADDRESS)
        assert is_hex_address("ab" * 20)
        assert not is_hex_address(None)  # type: ignore[arg-type]


class TestHex:
    def test_round_trip(self) -> None:
        assert hex_to_bytes(bytes_to_hex(b"\x00\x01")) == b"\x00\x01"

    def test_accepts_unprefixed_and_bytes(self) -> None:
        assert hex_to_bytes("00ff") == b"\x00\xff"
        assert hex_to_bytes(bytearray(b"\x01")) == b"\x01"
        assert hex_to_bytes("0x") == b""

    @pytest.mark.parametrize("value", ["0x1", "0x" + "zz" * 2, "0x00 01", "0x00\n"])
    def test_rejects_malformed_hex(self, value: str) -> None:
        with pytest.raises(ValueError):
            hex_to_bytes(value)

    def test_word_to_address(self) -> None:
        word = b"\xff" * 12 + bytes.fromhex("5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
        assert word_to_address(word) == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        with pytest.raises(ValueError):
            word_to_address(b"\x00" * 20)

    def test_zero_address(self) -> None:
        assert is_zero_address(ZERO_ADDRESS)
        assert not is_zero_address("0x" + "00" * 19 + "01")
