"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from co2audit.estimators import BYTES_PER_MEGABYTE

MB = BYTES_PER_MEGABYTE


class TableEstimator:
    """Estimator returning fixed emissions per size; unknown sizes emit 0."""

    def __init__(self, table: dict[int, float]):
        self.table = table
        self.calls: list[int] = []

    def __call__(self, size_bytes: int) -> float:
        self.calls.append(size_bytes)
        return self.table.get(size_bytes, 0.0)


@pytest.fixture
def table_estimator():
    return TableEstimator


def _write_bytes(path: Path, size: int) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """A small build output directory."""
    out = tmp_path / "dist"
    _write_bytes(out / "main.js", 4096)
    _write_bytes(out / "styles" / "app.css", 1024)
    _write_bytes(out / "assets" / "logo.png", 2048)
    _write_bytes(out / "empty.txt", 0)
    return out
