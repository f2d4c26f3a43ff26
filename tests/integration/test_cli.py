"""
CLI integration tests using Click's test runner.

Commands run end-to-end against a Foundry out/ tree on disk and an
in-memory chain patched in place of the RPC client, so no node is needed.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Iterator
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from eth_abi import encode

from chainprobe.cli import cli
from chainprobe.utils import to_checksum_address
from chainprobe.verify.proxy import EIP1967_ADMIN_SLOT, EIP1967_IMPLEMENTATION_SLOT

from conftest import (
    DEPLOYED_BYTECODE,
    IMPL_ADDRESS,
    LEGACY_IMPL_ADDRESS,
    MANAGER_ADDRESS,
    PROXY_ADDRESS,
    FakeChain,
    address_word,
    packed_word,
)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def deploy_file(tmp_path: Path) -> Path:
    path = tmp_path / "deploy.json"
    path.write_text(
        json.dumps(
            {
                "L1CrossDomainMessengerProxy": PROXY_ADDRESS,
                "SystemConfigProxy": "0x" + "66" * 20,
                "AddressManager": MANAGER_ADDRESS,
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def isolated_env(tmp_path: Path) -> Iterator[None]:
    """No CHAINPROBE_* variables and no ~/.chainprobe/.env."""
    with patch("chainprobe.config.CHAINPROBE_ENV", tmp_path / "absent.env"):
        with patch.dict(os.environ, {}, clear=True):
            yield


@pytest.fixture()
def fake_chain(chain: FakeChain, isolated_env: None) -> Iterator[FakeChain]:
    with patch("chainprobe.session.RpcClient", return_value=chain):
        yield chain


def _chain_args(foundry_out: Path, deploy_file: Path) -> list[str]:
    return ["--artifacts", str(foundry_out), "--addresses", str(deploy_file)]


class TestVersion:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.3.0" in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("resolve", "initialized", "slot", "call", "bytecode"):
            assert command in result.output


class TestSlot:
    """Layout lookups work offline."""

    def test_initialized_slot(self, runner: CliRunner, foundry_out: Path, isolated_env: None) -> None:
        result = runner.invoke(cli, ["slot", "L1CrossDomainMessenger", "_initialized", "--artifacts", str(foundry_out)])
        assert result.exit_code == 0, result.output
        assert "Slot:    0" in result.output
        assert "Offset:  20" in result.output
        assert "Width:   1" in result.output

    def test_type_mismatch(self, runner: CliRunner, foundry_out: Path, isolated_env: None) -> None:
        result = runner.invoke(
            cli,
            ["slot", "L1CrossDomainMessenger", "_initialized", "--type", "t_bool", "--artifacts", str(foundry_out)],
        )
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_artifacts_from_environment(self, runner: CliRunner, foundry_out: Path, isolated_env: None) -> None:
        with patch.dict(os.environ, {"CHAINPROBE_ARTIFACTS": str(foundry_out)}):
            result = runner.invoke(cli, ["slot", "L1CrossDomainMessenger", "msgNonce", "--type", "t_uint240"])
        assert result.exit_code == 0, result.output
        assert "Slot:    205" in result.output

    def test_unknown_contract(self, runner: CliRunner, foundry_out: Path, isolated_env: None) -> None:
        result = runner.invoke(cli, ["slot", "OptimismPortal", "_initialized", "--artifacts", str(foundry_out)])
        assert result.exit_code == 8
        assert "ERROR:" in result.output


class TestInitialized:
    def test_reads_counter_at_proxy(
        self, runner: CliRunner, foundry_out: Path, deploy_file: Path, fake_chain: FakeChain
    ) -> None:
        fake_chain.set_storage(PROXY_ADDRESS, EIP1967_IMPLEMENTATION_SLOT, address_word(IMPL_ADDRESS))
        fake_chain.set_storage(PROXY_ADDRESS, 0, packed_word(1, 20))

        result = runner.invoke(
            cli,
            ["initialized", "L1CrossDomainMessengerProxy", "--expect", "1", *_chain_args(foundry_out, deploy_file)],
        )

        assert result.exit_code == 0, result.output
        assert f"L1CrossDomainMessengerProxy @ {to_checksum_address(PROXY_ADDRESS)}: 1" in result.output
        assert fake_chain.closed

    def test_expectation_mismatch(
        self, runner: CliRunner, foundry_out: Path, deploy_file: Path, fake_chain: FakeChain
    ) -> None:
        fake_chain.set_storage(PROXY_ADDRESS, EIP1967_IMPLEMENTATION_SLOT, address_word(IMPL_ADDRESS))

        result = runner.invoke(
            cli,
            ["initialized", "L1CrossDomainMessengerProxy", "--expect", "1", *_chain_args(foundry_out, deploy_file)],
        )

        assert result.exit_code == 1
        assert "(not initialized)" in result.output
        assert "FAILED: expected 1" in result.output

    def test_disabled(self, runner: CliRunner, foundry_out: Path, deploy_file: Path, fake_chain: FakeChain) -> None:
        fake_chain.set_storage(PROXY_ADDRESS, EIP1967_IMPLEMENTATION_SLOT, address_word(IMPL_ADDRESS))
        fake_chain.set_storage(PROXY_ADDRESS, 0, packed_word(0xFF, 20))

        result = runner.invoke(cli, ["initialized", "L1CrossDomainMessengerProxy", *_chain_args(foundry_out, deploy_file)])

        assert result.exit_code == 0, result.output
        assert ": 255 (disabled)" in result.output

    def test_missing_initialized_variable(
        self, runner: CliRunner, foundry_out: Path, deploy_file: Path, fake_chain: FakeChain
    ) -> None:
        contract_dir = foundry_out / "SystemConfig.sol"
        contract_dir.mkdir()
        (contract_dir / "SystemConfig.json").write_text(
            json.dumps({"abi": [], "storageLayout": {"storage": [], "types": None}}), encoding="utf-8"
        )

        result = runner.invoke(cli, ["initialized", "SystemConfigProxy", *_chain_args(foundry_out, deploy_file)])

        assert result.exit_code == 5
        assert "declares no _initialized" in result.output

    def test_unresolved_proxy(
        self, runner: CliRunner, foundry_out: Path, deploy_file: Path, fake_chain: FakeChain
    ) -> None:
        fake_chain.call_results[MANAGER_ADDRESS.lower()] = encode(["address"], ["0x" + "00" * 20])

        result = runner.invoke(cli, ["initialized", "L1CrossDomainMessengerProxy", *_chain_args(foundry_out, deploy_file)])

        assert result.exit_code == 6
        assert "OVM_L1CrossDomainMessenger" in result.output


class TestResolve:
    def test_eip1967_proxy(self, runner: CliRunner, deploy_file: Path, fake_chain: FakeChain) -> None:
        fake_chain.set_storage(PROXY_ADDRESS, EIP1967_IMPLEMENTATION_SLOT, address_word(IMPL_ADDRESS))
        fake_chain.set_storage(PROXY_ADDRESS, EIP1967_ADMIN_SLOT, address_word(MANAGER_ADDRESS))

        result = runner.invoke(cli, ["resolve", "L1CrossDomainMessengerProxy", "--addresses", str(deploy_file)])

        assert result.exit_code == 0, result.output
        assert to_checksum_address(IMPL_ADDRESS) in result.output
        assert "Resolved via:    eip1967" in result.output
        assert f"Admin:           {to_checksum_address(MANAGER_ADDRESS)}" in result.output

    def test_legacy_proxy(self, runner: CliRunner, deploy_file: Path, fake_chain: FakeChain) -> None:
        fake_chain.call_results[MANAGER_ADDRESS.lower()] = encode(["address"], [LEGACY_IMPL_ADDRESS])

        result = runner.invoke(cli, ["resolve", "L1CrossDomainMessengerProxy", "--addresses", str(deploy_file)])

        assert result.exit_code == 0, result.output
        assert to_checksum_address(LEGACY_IMPL_ADDRESS) in result.output
        assert "Resolved via:    legacy" in result.output
        assert "Admin:" not in result.output

    def test_direct_name(self, runner: CliRunner, deploy_file: Path, fake_chain: FakeChain) -> None:
        result = runner.invoke(cli, ["resolve", "AddressManager", "--addresses", str(deploy_file)])
        assert result.exit_code == 0, result.output
        assert f"AddressManager: {to_checksum_address(MANAGER_ADDRESS)}" in result.output

    def test_unknown_name(self, runner: CliRunner, deploy_file: Path, fake_chain: FakeChain) -> None:
        result = runner.invoke(cli, ["resolve", "OptimismPortalProxy", "--addresses", str(deploy_file)])
        assert result.exit_code == 9


class TestCall:
    def test_read_only_call(self, runner: CliRunner, foundry_out: Path, fake_chain: FakeChain) -> None:
        fake_chain.call_results[PROXY_ADDRESS.lower()] = encode(["bool"], [True])
        message_hash = "0x" + "ab" * 32

        result = runner.invoke(
            cli,
            [
                "call",
                PROXY_ADDRESS,
                "successfulMessages",
                "--abi-name",
                "L1CrossDomainMessenger",
                "--args",
                json.dumps([message_hash]),
                "--artifacts",
                str(foundry_out),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "[0] bool: True" in result.output
        (request,) = fake_chain.calls
        assert request.data[4:] == bytes.fromhex("ab" * 32)

    def test_invalid_args(self, runner: CliRunner, foundry_out: Path, fake_chain: FakeChain) -> None:
        result = runner.invoke(
            cli,
            ["call", PROXY_ADDRESS, "successfulMessages", "--abi-name", "L1CrossDomainMessenger", "--args", "{"],
        )
        assert result.exit_code == 1
        assert "Invalid args" in result.output
        assert fake_chain.calls == []

    def test_encoding_error(self, runner: CliRunner, foundry_out: Path, fake_chain: FakeChain) -> None:
        result = runner.invoke(
            cli,
            [
                "call",
                PROXY_ADDRESS,
                "successfulMessages",
                "--abi-name",
                "L1CrossDomainMessenger",
                "--args",
                "[1, 2]",
                "--artifacts",
                str(foundry_out),
            ],
        )
        assert result.exit_code == 2


class TestBytecode:
    def test_matching_implementation(
        self, runner: CliRunner, foundry_out: Path, deploy_file: Path, fake_chain: FakeChain
    ) -> None:
        compiled = bytes.fromhex(DEPLOYED_BYTECODE[2:])
        fake_chain.set_storage(PROXY_ADDRESS, EIP1967_IMPLEMENTATION_SLOT, address_word(IMPL_ADDRESS))
        fake_chain.code[IMPL_ADDRESS.lower()] = compiled[:5] + b"\x07" * 32 + compiled[37:]

        result = runner.invoke(cli, ["bytecode", "L1CrossDomainMessengerProxy", *_chain_args(foundry_out, deploy_file)])

        assert result.exit_code == 0, result.output
        assert "OK" in result.output

    def test_mismatch(self, runner: CliRunner, foundry_out: Path, deploy_file: Path, fake_chain: FakeChain) -> None:
        fake_chain.set_storage(PROXY_ADDRESS, EIP1967_IMPLEMENTATION_SLOT, address_word(IMPL_ADDRESS))
        fake_chain.code[IMPL_ADDRESS.lower()] = b"\x60\x80"

        result = runner.invoke(cli, ["bytecode", "L1CrossDomainMessengerProxy", *_chain_args(foundry_out, deploy_file)])

        assert result.exit_code == 1
        assert "DIFF" in result.output


class TestBadSettings:
    def test_invalid_address_book_entry(self, runner: CliRunner, tmp_path: Path, fake_chain: FakeChain) -> None:
        book = tmp_path / "bad.json"
        book.write_text(json.dumps({"L1CrossDomainMessenger": "0x1234"}), encoding="utf-8")

        result = runner.invoke(cli, ["resolve", "L1CrossDomainMessenger", "--addresses", str(book)])

        assert result.exit_code == 11
        assert "ERROR:" in result.output
        assert "not an address" in result.output
        assert "Traceback" not in result.output

    def test_invalid_timeout_variable(self, runner: CliRunner, deploy_file: Path, fake_chain: FakeChain) -> None:
        with patch.dict(os.environ, {"CHAINPROBE_RPC_TIMEOUT": "soon"}):
            result = runner.invoke(cli, ["resolve", "AddressManager", "--addresses", str(deploy_file)])

        assert result.exit_code == 11
        assert "CHAINPROBE_RPC_TIMEOUT" in result.output
