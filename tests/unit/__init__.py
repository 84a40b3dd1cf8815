"""Unit tests.

Purpose
- Verify a single module/class/function in isolation.

Guidelines
- No real I/O; the `env` fixture wires an in-memory snapshot store.
- Prefer behavior-centric assertions (outcome keys, report lines) over internals.
- Keep tests small, fast, and deterministic.
"""
