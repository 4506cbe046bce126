"""Artifact enumeration for a finished build's output directory."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

REPORT_FILENAMES = ("co2-report.json", "co2-report.csv")


def enumerate_artifacts(build_dir: Path, *, exclude: set[str] | None = None) -> Iterator[tuple[str, int]]:
    """Yield (relative posix path, size in bytes) for every file under `build_dir`.

    Order is sorted by relative path so repeated runs over the same output
    produce identical reports. Report files written by a previous run at the
    top of the build directory are skipped.
    """
    excluded = set(REPORT_FILENAMES) if exclude is None else exclude
    files = sorted(
        (p for p in build_dir.rglob("*") if p.is_file()),
        key=lambda p: p.relative_to(build_dir).as_posix(),
    )
    for path in files:
        rel = path.relative_to(build_dir).as_posix()
        if rel in excluded:
            continue
        yield rel, path.stat().st_size


def report_excludes(build_dir: Path, report_dir: Path | None = None) -> set[str]:
    """Relative paths under `build_dir` that hold this tool's own report files.

    Always covers reports at the top of the build directory; adds the
    report directory's copies when it lies inside the build directory.
    """
    excluded = set(REPORT_FILENAMES)
    if report_dir is None:
        return excluded
    try:
        rel = report_dir.resolve().relative_to(build_dir.resolve())
    except ValueError:
        return excluded
    excluded.update((rel / name).as_posix() for name in REPORT_FILENAMES)
    return excluded


def parse_artifact_arg(value: str) -> tuple[str, int]:
    """Parse a "name=size" pair as given on the command line."""
    name, sep, size = value.rpartition("=")
    if not sep or not name.strip():
        raise ValueError(f"Expected NAME=SIZE, got {value!r}")
    try:
        size_bytes = int(size.strip())
    except ValueError as e:
        raise ValueError(f"Size in {value!r} is not an integer") from e
    return name.strip(), size_bytes
