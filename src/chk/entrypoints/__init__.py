"""Entrypoints (inbound adapters) for chk.

The module-level API used by test files (`chk.test`, `chk.expect`,
`chk.snapshot`) and the `chk` command-line interface.

Dependency rule: may import `chk.service_layer` and `chk.bootstrap`; avoid
importing `chk.adapters` directly outside the CLI wiring.
"""
