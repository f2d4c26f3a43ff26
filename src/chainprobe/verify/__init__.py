"""
Verify - post-deployment checks built on the call, layout and chain layers.

- proxy:       resolve proxies to implementations (EIP-1967, legacy registry)
- initialized: read the packed ``_initialized`` counter
- bytecode:    compare runtime code with compiled output
"""

from .bytecode import BytecodeCheck, check_deployed_bytecode, mask_immutables
from .initialized import InitializationReader, InitializationState
from .proxy import (
    EIP1967_ADMIN_SLOT,
    EIP1967_IMPLEMENTATION_SLOT,
    ContractKind,
    ContractRef,
    ProxyBinding,
    ProxyResolver,
    ResolutionStrategy,
)

__all__ = [
    "EIP1967_ADMIN_SLOT",
    "EIP1967_IMPLEMENTATION_SLOT",
    "BytecodeCheck",
    "ContractKind",
    "ContractRef",
    "InitializationReader",
    "InitializationState",
    "ProxyBinding",
    "ProxyResolver",
    "ResolutionStrategy",
    "check_deployed_bytecode",
    "mask_immutables",
]
