import os
from pathlib import Path
from typing import Any

import pytest

# Monkeypatch coverage to bypass teardown crash in act/docker
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop


@pytest.fixture  # type: ignore[misc]
def schema_file(tmp_path: Path) -> Path:
    path = tmp_path / "Orders.js"
    path.write_text("let base = { sql: `orders` }\ncube(`Orders`, { ...base, title: 'Orders' })\n")
    return path
