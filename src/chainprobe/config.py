"""
Runtime configuration.

Settings come from the environment, optionally seeded from
~/.chainprobe/.env (KEY=VALUE lines, loaded with python-dotenv).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError


# Default config directory
CHAINPROBE_DIR = Path.home() / ".chainprobe"
CHAINPROBE_ENV = CHAINPROBE_DIR / ".env"

DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_RPC_TIMEOUT = 30.0
DEFAULT_ADDRESS_MANAGER = "AddressManager"


@dataclass(frozen=True)
class Settings:
    rpc_url: str = DEFAULT_RPC_URL
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT
    addresses_path: Optional[Path] = None
    artifacts_dir: Optional[Path] = None
    address_manager: str = DEFAULT_ADDRESS_MANAGER


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("CHAINPROBE_RPC_URL", DEFAULT_RPC_URL)


def _optional_path(key: str) -> Optional[Path]:
    value = os.environ.get(key, "").strip()
    return Path(value).expanduser() if value else None


def load_settings(env_path: Optional[Path] = None) -> Settings:
    """
    Build settings from the environment.

    Args:
        env_path: Path to a .env file (default: ~/.chainprobe/.env).
                  Values already present in the environment win.

    Raises:
        ConfigError: If CHAINPROBE_RPC_TIMEOUT is not a number
    """
    env_path = env_path or CHAINPROBE_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)

    timeout_raw = os.environ.get("CHAINPROBE_RPC_TIMEOUT", str(DEFAULT_RPC_TIMEOUT))
    try:
        timeout = float(timeout_raw)
    except ValueError:
        raise ConfigError(
            f"CHAINPROBE_RPC_TIMEOUT must be a number of seconds, got {timeout_raw!r}"
        ) from None

    return Settings(
        rpc_url=get_rpc_url(),
        rpc_timeout=timeout,
        addresses_path=_optional_path("CHAINPROBE_ADDRESSES"),
        artifacts_dir=_optional_path("CHAINPROBE_ARTIFACTS"),
        address_manager=os.environ.get("CHAINPROBE_ADDRESS_MANAGER", DEFAULT_ADDRESS_MANAGER),
    )
