"""Contract tests.

Purpose
- Define snapshot store behavior once and run it against the memory, local
  and SQLAlchemy backends to keep them interchangeable.

Guidelines
- Parametrize backends via the `store` fixture.
- Assert only the public contract, not file layouts or table rows.
"""
