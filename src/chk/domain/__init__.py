"""Domain layer for chk.

Mock functions, the matcher registry, expectations and test nodes. Nothing
here touches the filesystem, a database or the terminal; snapshot persistence
and report rendering arrive through the service layer.

Dependency rule: do not import from `chk.adapters` or `chk.entrypoints`.
"""
