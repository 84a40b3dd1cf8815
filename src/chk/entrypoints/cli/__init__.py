"""The `chk` command-line interface."""
