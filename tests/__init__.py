"""chk test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- contract/     : One behavior suite run against every snapshot store backend.
- integration/  : Real files and SQLite databases behind the snapshot stores.
- e2e/          : The `chk` CLI driven through click's CliRunner.
- functional/   : User journeys (help, first snapshot) told through the CLI.
- fixtures/     : Shared pytest plugins (SQLite engines); no tests here.

General guidance
- Unit tests use the in-memory snapshot store and a fixed call site.
- Async tests are marked with @pytest.mark.asyncio (strict mode).
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
"""
