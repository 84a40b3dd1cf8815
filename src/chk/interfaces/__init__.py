"""Interfaces (application boundary) for chk.

Ports implemented by adapters: snapshot persistence, the report sink and the
interactive snapshot prompt, plus the small value types they exchange.

Dependency rule: import only from `chk.domain`. May be imported by
`chk.service_layer`, `chk.adapters` and `chk.bootstrap`.
"""
