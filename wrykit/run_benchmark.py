"""Run the benchmark suite and record its figures in bench.json."""

from __future__ import annotations

import argparse
import json
import os
import subprocess
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Sequence

from .benchutils import (
    BenchResult,
    bench_root_path,
    get_target,
    parse_max_mem,
    parse_strace_output,
    read_json,
    run,
    run_collect,
    target_dir,
    write_json,
    wry_root_path,
)

TARGETS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "Windows",
        (
            "x86_64-pc-windows-gnu",
            "i686-pc-windows-gnu",
            "i686-pc-windows-msvc",
            "x86_64-pc-windows-msvc",
        ),
    ),
    (
        "Linux",
        (
            "x86_64-unknown-linux-gnu",
            "i686-unknown-linux-gnu",
            "aarch64-unknown-linux-gnu",
        ),
    ),
    ("macOS", ("x86_64-apple-darwin", "aarch64-apple-darwin")),
)

RESULT_KEYS = ("mean", "stddev", "user", "system", "min", "max")


def get_all_benchmarks() -> list[tuple[str, str]]:
    """Return (benchmark name, binary path relative to the bench root) pairs."""
    target = get_target()
    return [
        ("wry_hello_world", f"tests/target/{target}/release/bench_hello_world"),
        ("wry_custom_protocol", f"tests/target/{target}/release/bench_custom_protocol"),
        ("wry_cpu_intensive", f"tests/target/{target}/release/bench_cpu_intensive"),
    ]


def run_strace_benchmarks(new_data: BenchResult) -> None:
    """Count threads and syscalls of each benchmark under strace and store them in *new_data*."""
    thread_count: dict[str, int] = {}
    syscall_count: dict[str, int] = {}

    for name, example_exe in get_all_benchmarks():
        with tempfile.TemporaryDirectory() as scratch:
            trace_file = Path(scratch) / "strace.out"
            trace_file.touch()
            subprocess.run(
                [
                    "strace",
                    "-c",
                    "-f",
                    "-o",
                    str(trace_file),
                    str(bench_root_path() / example_exe),
                ]
            )
            output = trace_file.read_text()

        summary = parse_strace_output(output)
        clone = summary["clone"].calls if "clone" in summary else 0
        thread_count[name] = clone + 1
        syscall_count[name] = summary["total"].calls

    new_data.thread_count = thread_count
    new_data.syscall_count = syscall_count


def run_max_mem_benchmark() -> dict[str, int]:
    """Measure the peak memory of each benchmark with mprof."""
    results: dict[str, int] = {}
    for name, example_exe in get_all_benchmarks():
        benchmark_file = str(target_dir() / f"mprof{name}_.dat")
        completed = subprocess.run(
            [
                "mprof",
                "run",
                "-C",
                "-o",
                benchmark_file,
                str(bench_root_path() / example_exe),
            ],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
        )
        print(completed)
        peak = parse_max_mem(benchmark_file)
        if peak is None:
            raise RuntimeError(f"no memory readings recorded for {name}")
        results[name] = peak
    return results


def rlib_size(target_dir: Path, prefix: str) -> int:
    """Sum the sizes of the ``.rlib`` files in ``deps`` starting with *prefix*, one per crate."""
    size = 0
    seen: set[str] = set()
    print(target_dir)

    entries = sorted(os.scandir(Path(target_dir) / "deps"), key=lambda entry: entry.name)
    for entry in entries:
        name = entry.name
        if name.startswith(prefix) and name.endswith(".rlib"):
            start = name.split("-")[0]
            if start in seen:
                print(f"skip {name}")
            else:
                seen.add(start)
                size += entry.stat().st_size
                print(f"check size {name} {size}")
    if size <= 0:
        raise ValueError(f"no {prefix} rlib found in {target_dir}")
    return size


def get_binary_sizes(target_dir: Path) -> dict[str, int]:
    """Return the sizes of the library rlibs and of every benchmark binary."""
    sizes: dict[str, int] = {}

    wry_size = rlib_size(target_dir, "libwry")
    print(f"wry {wry_size} bytes")
    sizes["wry_rlib"] = wry_size

    tao_size = rlib_size(target_dir, "libtao")
    print(f"tao {tao_size} bytes")
    sizes["tao_rlib"] = tao_size

    for name, example_exe in get_all_benchmarks():
        sizes[name] = os.stat(example_exe).st_size
    return sizes


def cargo_deps() -> dict[str, int]:
    """Return, per operating system, the largest dependency count over its targets."""
    results: dict[str, int] = {}
    for os_name, targets in TARGETS:
        for target in targets:
            completed = subprocess.run(
                [
                    "cargo",
                    "tree",
                    "--no-dedupe",
                    "--edges",
                    "normal",
                    "--prefix",
                    "none",
                    "--target",
                    target,
                ],
                cwd=wry_root_path(),
                capture_output=True,
            )
            full_deps = completed.stdout.decode("utf-8")
            # the output lists the root crate itself as well
            count = len(set(full_deps.splitlines())) - 1
            results[os_name] = max(count, results.get(os_name, 0))
            if count <= 10:
                raise RuntimeError(f"implausible dependency count {count} for {target}")
    return results


def filter_exec_results(
    names: Sequence[str], hyperfine_results: dict[str, Any]
) -> dict[str, dict[str, float]]:
    """Pair benchmark names with hyperfine results, keeping only the timing statistics."""
    entries = hyperfine_results["results"]
    return {
        name: {key: float(value) for key, value in data.items() if key in RESULT_KEYS}
        for name, data in zip(names, entries)
    }


def run_exec_time(target_dir: Path) -> dict[str, dict[str, float]]:
    """Time every benchmark with hyperfine and return its statistics by name."""
    benchmark_file = str(Path(target_dir) / "hyperfine_results.json")
    benchmarks = get_all_benchmarks()
    command = ["hyperfine", "--export-json", benchmark_file, "--warmup", "3"]
    command.extend(str(bench_root_path() / example_exe) for _, example_exe in benchmarks)
    run(command)
    return filter_exec_results([name for name, _ in benchmarks], read_json(benchmark_file))


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="wrykit-run-benchmark",
        description="Run the benchmark binaries and write bench.json.",
    )
    parser.parse_args(argv)

    print("Starting wry benchmark")
    release_dir = target_dir()
    os.chdir(bench_root_path())

    new_data = BenchResult(
        created_at=str(datetime.now(timezone.utc)),
        sha1=run_collect(["git", "rev-parse", "HEAD"])[0].strip(),
        exec_time=run_exec_time(release_dir),
        binary_size=get_binary_sizes(release_dir),
        cargo_deps=cargo_deps(),
    )

    if sys.platform.startswith("linux"):
        run_strace_benchmarks(new_data)
        new_data.max_memory = run_max_mem_benchmark()

    print("===== <BENCHMARK RESULTS>")
    print(json.dumps(new_data.to_dict(), indent=2))
    print("===== </BENCHMARK RESULTS>")

    write_json(release_dir / "bench.json", new_data.to_dict())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())