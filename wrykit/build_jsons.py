"""Append the latest benchmark result to the published history files."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence, TypeVar

from .benchutils import (
    BenchResult,
    bench_result_from_dict,
    read_json,
    target_dir,
    write_json,
    wry_root_path,
)

RECENT_LIMIT = 20

T = TypeVar("T")


def recent_results(all_data: Sequence[T], limit: int = RECENT_LIMIT) -> list[T]:
    """Return the last *limit* entries of *all_data* as a new list."""
    if len(all_data) > limit:
        return list(all_data[len(all_data) - limit:])
    return list(all_data)


def merge_results(
    current_path: Path, all_path: Path, recent_path: Path
) -> tuple[list[BenchResult], list[BenchResult]]:
    """Add the current result to the full history and rewrite both history files.

    Returns the full history and its recent tail as written.
    """
    current = bench_result_from_dict(read_json(current_path))
    history = read_json(all_path)
    if not isinstance(history, list):
        raise ValueError(f"{all_path} must hold a list of benchmark results")
    all_data = [bench_result_from_dict(entry) for entry in history]
    all_data.append(current)
    recent = recent_results(all_data)

    write_json(all_path, [result.to_dict() for result in all_data])
    write_json(recent_path, [result.to_dict() for result in recent])
    return all_data, recent


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="wrykit-build-jsons",
        description="Append bench.json to the benchmark history files.",
    )
    parser.add_argument("--current", type=Path, help="result of the latest run")
    parser.add_argument("--all", dest="all_path", type=Path, help="full history file")
    parser.add_argument("--recent", type=Path, help="recent history file")
    args = parser.parse_args(argv)

    pages = wry_root_path() / "gh-pages"
    current = args.current or target_dir() / "bench.json"
    all_path = args.all_path or pages / "wry-data.json"
    recent_path = args.recent or pages / "wry-recent.json"
    merge_results(current, all_path, recent_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())