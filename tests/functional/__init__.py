"""Functional tests.

Purpose
- Validate user-visible behavior of the `chk` CLI.

Guidelines
- Treat the CLI as a black box; check exit codes, output and files on disk.
- One journey per test.
"""
