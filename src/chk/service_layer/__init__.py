"""Service layer for chk.

Use-cases on top of the domain: the snapshot comparison workflow and the
runner that owns root test nodes, runs them and hands reports to a reporter.

Dependency rule: may import `chk.domain` and `chk.interfaces`, but not
`chk.adapters` or `chk.entrypoints`.
"""
