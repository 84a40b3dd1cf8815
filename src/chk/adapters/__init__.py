"""Adapters (outbound implementations) for chk.

Concrete implementations of the ports in `chk.interfaces`: snapshot stores
(memory, local JSON files, SQLAlchemy), report sinks (rich console, memory)
and snapshot prompters (click, scripted).

Dependency rule: may import `chk.interfaces` and `chk.domain`; never
`chk.service_layer` or `chk.entrypoints`.
"""
