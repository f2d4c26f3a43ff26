"""
Commands - CLI command implementations for chainprobe.

Each module corresponds to a top-level CLI command:
- resolve:     Resolve a logical name (and its proxy) to addresses
- initialized: Read the _initialized counter of upgradeable contracts
- slot:        Look up a variable's slot coordinates in a storage layout
- call:        Execute a read-only contract call and decode the result
- bytecode:    Compare deployed runtime code with compiled bytecode
"""
