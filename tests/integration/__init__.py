"""Integration tests.

Purpose
- Exercise the snapshot stores against real files and SQLite databases, and
  the runner wired to them by bootstrap.

Guidelines
- Use tmp_path for every file and database.
- Minimize fakes; a scripted prompter stands in for the terminal.
"""
