"""Helpers shared by the benchmark commands: result records, parsers and process runners."""

from __future__ import annotations

import json
import os
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Sequence, Union

PathLike = Union[str, "os.PathLike[str]"]

BENCH_ROOT_ENV = "WRYKIT_BENCH_ROOT"


@dataclass
class BenchResult:
    """One benchmark run: when, which commit, and the measured figures."""

    created_at: str = ""
    sha1: str = ""
    exec_time: dict[str, dict[str, float]] = field(default_factory=dict)
    binary_size: dict[str, int] = field(default_factory=dict)
    max_memory: dict[str, int] = field(default_factory=dict)
    thread_count: dict[str, int] = field(default_factory=dict)
    syscall_count: dict[str, int] = field(default_factory=dict)
    cargo_deps: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the record as plain JSON-ready data, fields in declaration order."""
        return {
            "created_at": self.created_at,
            "sha1": self.sha1,
            "exec_time": {name: dict(values) for name, values in self.exec_time.items()},
            "binary_size": dict(self.binary_size),
            "max_memory": dict(self.max_memory),
            "thread_count": dict(self.thread_count),
            "syscall_count": dict(self.syscall_count),
            "cargo_deps": dict(self.cargo_deps),
        }


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _require_int_map(data: dict[str, Any], key: str) -> dict[str, int]:
    value = data[key]
    if not isinstance(value, dict):
        raise ValueError(f"field {key!r} must be an object")
    result: dict[str, int] = {}
    for name, number in value.items():
        if isinstance(number, bool) or not isinstance(number, int) or number < 0:
            raise ValueError(f"field {key!r}.{name!r} must be a non-negative integer")
        result[name] = number
    return result


def _require_float_maps(data: dict[str, Any], key: str) -> dict[str, dict[str, float]]:
    value = data[key]
    if not isinstance(value, dict):
        raise ValueError(f"field {key!r} must be an object")
    result: dict[str, dict[str, float]] = {}
    for name, inner in value.items():
        if not isinstance(inner, dict):
            raise ValueError(f"field {key!r}.{name!r} must be an object")
        converted: dict[str, float] = {}
        for stat, number in inner.items():
            if isinstance(number, bool) or not isinstance(number, (int, float)):
                raise ValueError(f"field {key!r}.{name!r}.{stat!r} must be a number")
            converted[stat] = float(number)
        result[name] = converted
    return result


def bench_result_from_dict(data: dict[str, Any]) -> BenchResult:
    """Build a :class:`BenchResult` from decoded JSON; every field is required."""
    if not isinstance(data, dict):
        raise ValueError("benchmark result must be an object")
    return BenchResult(
        created_at=_require_str(data, "created_at"),
        sha1=_require_str(data, "sha1"),
        exec_time=_require_float_maps(data, "exec_time"),
        binary_size=_require_int_map(data, "binary_size"),
        max_memory=_require_int_map(data, "max_memory"),
        thread_count=_require_int_map(data, "thread_count"),
        syscall_count=_require_int_map(data, "syscall_count"),
        cargo_deps=_require_int_map(data, "cargo_deps"),
    )


@dataclass(frozen=True)
class StraceOutput:
    """One row of an ``strace -c`` summary."""

    percent_time: float
    seconds: float
    usecs_per_call: Optional[int]
    calls: int
    errors: int


def get_target() -> str:
    """Return the target triple the benchmark binaries are built for."""
    if sys.platform == "darwin":
        return "x86_64-apple-darwin"
    if sys.platform.startswith("linux"):
        return "x86_64-unknown-linux-gnu"
    raise RuntimeError(f"benchmarks are not supported on {sys.platform}")


def bench_root_path() -> Path:
    """Return the benchmark directory, from the environment or the working directory."""
    root = os.environ.get(BENCH_ROOT_ENV)
    return Path(root) if root else Path.cwd()


def target_dir() -> Path:
    """Return the release directory holding the built benchmark binaries."""
    return bench_root_path() / "tests" / "target" / get_target() / "release"


def wry_root_path() -> Path:
    """Return the repository root, the parent of the benchmark directory."""
    return bench_root_path().parent


def run_collect(cmd: Sequence[str]) -> tuple[str, str]:
    """Run *cmd*, returning its (stdout, stderr); a non-zero exit raises RuntimeError."""
    completed = subprocess.run(list(cmd), input=b"", capture_output=True)
    stdout = completed.stdout.decode("utf-8")
    stderr = completed.stderr.decode("utf-8")
    if completed.returncode != 0:
        print(f"stdout: <<<{stdout}>>>", file=sys.stderr)
        print(f"stderr: <<<{stderr}>>>", file=sys.stderr)
        raise RuntimeError(f"Unexpected exit code: {completed.returncode}")
    return stdout, stderr


def parse_max_mem(file_path: PathLike) -> Optional[int]:
    """Return the peak memory in bytes from an mprof data file, then delete the file.

    Lines look like ``MEM 203.437500 1621617192.4123``, with memory in MiB.
    Returns None when no positive reading was found.
    """
    path = Path(file_path)
    highest = 0
    for line in path.read_text().splitlines():
        fields = line.split(" ")
        if len(fields) == 3:
            current_bytes = max(0, int(float(fields[1]))) * 1024 * 1024
            highest = max(highest, current_bytes)
    path.unlink()
    return highest if highest > 0 else None


def _text_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_strace_output(output: str) -> dict[str, StraceOutput]:
    """Parse the summary table of ``strace -c`` into rows keyed by syscall, plus ``total``."""
    lines = [
        line for line in _text_lines(output) if line and "detached ..." not in line
    ]
    if len(lines) < 4:
        return {}

    total_line = lines[-1]
    summary: dict[str, StraceOutput] = {}
    for line in lines[2:-2]:
        fields = line.split()
        if 5 <= len(fields) <= 6:
            summary[fields[-1]] = StraceOutput(
                percent_time=float(fields[0]),
                seconds=float(fields[1]),
                usecs_per_call=int(fields[2]),
                calls=int(fields[3]),
                errors=0 if len(fields) < 6 else int(fields[4]),
            )

    total_fields = total_line.split()
    summary["total"] = StraceOutput(
        percent_time=float(total_fields[0]),
        seconds=float(total_fields[1]),
        usecs_per_call=None,
        calls=int(total_fields[2]),
        errors=int(total_fields[3]),
    )
    return summary


def run(cmd: Sequence[str]) -> None:
    """Run *cmd* with inherited output; a non-zero exit raises RuntimeError."""
    completed = subprocess.run(list(cmd), input=b"")
    if completed.returncode != 0:
        raise RuntimeError(f"Unexpected exit code: {completed.returncode}")


def read_json(filename: PathLike) -> Any:
    """Load and return the JSON document in *filename*."""
    with open(filename, encoding="utf-8") as handle:
        return json.load(handle)


def write_json(filename: PathLike, value: Any) -> None:
    """Write *value* to *filename* as compact JSON."""
    with open(filename, "w", encoding="utf-8") as handle:
        json.dump(value, handle, separators=(",", ":"))