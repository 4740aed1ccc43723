import json
import sys
from pathlib import Path

import pytest

from wrykit.benchutils import (
    BenchResult,
    StraceOutput,
    bench_result_from_dict,
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

STRACE_SAMPLE = """\
% time     seconds  usecs/call     calls    errors syscall
------ ----------- ----------- --------- --------- ----------------
 50.00    0.000100          10        10         2 clone
 50.00    0.000100           5        20           read
------ ----------- ----------- --------- --------- ----------------
100.00    0.000200                    30         2 total
"""


def _sample_result() -> BenchResult:
    return BenchResult(
        created_at="2021-05-21 12:00:00 +00:00:00",
        sha1="abc123",
        exec_time={"wry_hello_world": {"mean": 0.5, "max": 0.75}},
        binary_size={"wry_rlib": 1000},
        max_memory={"wry_hello_world": 2048},
        thread_count={"wry_hello_world": 4},
        syscall_count={"wry_hello_world": 300},
        cargo_deps={"Linux": 42},
    )


def test_bench_result_round_trip():
    result = _sample_result()
    assert bench_result_from_dict(result.to_dict()) == result


def test_bench_result_round_trip_through_json():
    result = _sample_result()
    decoded = json.loads(json.dumps(result.to_dict()))
    assert bench_result_from_dict(decoded) == result


def test_bench_result_field_order():
    assert list(BenchResult().to_dict()) == [
        "created_at",
        "sha1",
        "exec_time",
        "binary_size",
        "max_memory",
        "thread_count",
        "syscall_count",
        "cargo_deps",
    ]


def test_bench_result_missing_field_raises():
    data = _sample_result().to_dict()
    del data["sha1"]
    with pytest.raises(KeyError):
        bench_result_from_dict(data)


def test_bench_result_wrong_type_raises():
    data = _sample_result().to_dict()
    data["binary_size"] = {"wry_rlib": "big"}
    with pytest.raises(ValueError):
        bench_result_from_dict(data)


def test_exec_time_integers_become_floats():
    data = _sample_result().to_dict()
    data["exec_time"] = {"x": {"mean": 2}}
    result = bench_result_from_dict(data)
    assert result.exec_time["x"]["mean"] == 2.0
    assert isinstance(result.exec_time["x"]["mean"], float)


@pytest.mark.parametrize(
    "platform, triple",
    [("darwin", "x86_64-apple-darwin"), ("linux", "x86_64-unknown-linux-gnu")],
)
def test_get_target(monkeypatch, platform, triple):
    monkeypatch.setattr(sys, "platform", platform)
    assert get_target() == triple


def test_get_target_unsupported(monkeypatch):
    monkeypatch.setattr(sys, "platform", "win32")
    with pytest.raises(RuntimeError):
        get_target()


def test_paths_follow_bench_root(monkeypatch, tmp_path):
    monkeypatch.setattr(sys, "platform", "linux")
    root = tmp_path / "bench"
    monkeypatch.setenv("WRYKIT_BENCH_ROOT", str(root))
    assert bench_root_path() == root
    assert wry_root_path() == tmp_path
    assert target_dir() == root / "tests" / "target" / "x86_64-unknown-linux-gnu" / "release"


def test_parse_strace_output_rows():
    summary = parse_strace_output(STRACE_SAMPLE)
    assert set(summary) == {"clone", "read", "total"}
    assert summary["clone"] == StraceOutput(50.0, 0.0001, 10, 10, 2)
    assert summary["read"].errors == 0
    assert summary["read"].calls == 20


def test_parse_strace_output_total():
    total = parse_strace_output(STRACE_SAMPLE)["total"]
    assert total.usecs_per_call is None
    assert total.calls == 30
    assert total.errors == 2
    assert total.percent_time == 100.0


def test_parse_strace_output_ignores_detached_lines():
    noisy = "strace: Process 1234 detached ...\n\n" + STRACE_SAMPLE
    assert parse_strace_output(noisy) == parse_strace_output(STRACE_SAMPLE)


def test_parse_strace_output_too_short():
    assert parse_strace_output("a\nb\nc\n") == {}


def test_parse_max_mem_takes_highest_and_removes_file(tmp_path):
    data = tmp_path / "mprof.dat"
    data.write_text(
        "CMDLINE /bin/app\nMEM 100.500000 1621617191.0\nMEM 203.437500 1621617192.4123\n"
    )
    assert parse_max_mem(data) == 203 * 1024 * 1024
    assert not data.exists()


def test_parse_max_mem_none_when_empty(tmp_path):
    data = tmp_path / "mprof.dat"
    data.write_text("CMDLINE /bin/app\n")
    assert parse_max_mem(data) is None
    assert not data.exists()


def test_run_collect_returns_output():
    stdout, stderr = run_collect([sys.executable, "-c", "print('hi')"])
    assert stdout.strip() == "hi"
    assert stderr == ""


def test_run_collect_failure():
    with pytest.raises(RuntimeError, match="Unexpected exit code"):
        run_collect([sys.executable, "-c", "import sys; sys.exit(3)"])


def test_run_failure():
    with pytest.raises(RuntimeError, match="Unexpected exit code"):
        run([sys.executable, "-c", "import sys; sys.exit(1)"])


def test_run_success_runs_command(tmp_path):
    marker = tmp_path / "marker"
    run([sys.executable, "-c", f"open({str(marker)!r}, 'w').write('done')"])
    assert marker.read_text() == "done"


def test_write_json_is_compact(tmp_path):
    target = tmp_path / "out.json"
    write_json(target, {"a": 1, "b": [1, 2]})
    assert target.read_text() == '{"a":1,"b":[1,2]}'


def test_json_round_trip(tmp_path):
    target = tmp_path / "out.json"
    value = {"results": [{"mean": 0.25}], "name": "x"}
    write_json(target, value)
    assert read_json(target) == value


def test_read_json_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_json(Path(tmp_path / "missing.json"))