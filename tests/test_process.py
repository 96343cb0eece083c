import os
import signal
import stat
import sys

import pytest

from cairn.environment import SystemEnvironment
from cairn.process import Process, StreamFlags


def test_output_is_captured_and_exit_code_reported(tmp_path):
    with Process.spawn(
        sys.executable, tmp_path, ["-c", "import sys; print('hi'); sys.exit(3)"], StreamFlags.OUTPUT
    ) as proc:
        data = proc.stdout_stream.read()
        status = proc.waitpid_status()
    assert data.strip() == b"hi"
    assert os.WIFEXITED(status)
    assert os.WEXITSTATUS(status) == 3


def test_input_is_forwarded(tmp_path):
    script = "import sys; sys.stdout.write(sys.stdin.read().upper())"
    with Process.spawn(sys.executable, tmp_path, ["-c", script], StreamFlags.INPUT_OUTPUT) as proc:
        proc.stdin_stream.write(b"echo me")
        proc.stdin_stream.close()
        data = proc.stdout_stream.read()
        status = proc.waitpid_status()
    assert data == b"ECHO ME"
    assert os.WEXITSTATUS(status) == 0


def test_error_stream(tmp_path):
    script = "import sys; sys.stderr.write('oops')"
    with Process.spawn(sys.executable, tmp_path, ["-c", script], StreamFlags.ERROR) as proc:
        data = proc.stderr_stream.read()
    assert data == b"oops"


def test_unrequested_streams_are_none(tmp_path):
    with Process.spawn(sys.executable, tmp_path, ["-c", "pass"], StreamFlags.NO_STREAMS) as proc:
        status = proc.waitpid_status()
        assert proc.stdout_stream is None
        assert proc.stdin_stream is None
    assert os.WEXITSTATUS(status) == 0


def test_runs_in_workdir(tmp_path):
    script = "import os; print(os.getcwd())"
    with Process.spawn(sys.executable, tmp_path, ["-c", script], StreamFlags.OUTPUT) as proc:
        data = proc.stdout_stream.read().decode().strip()
    assert data == str(tmp_path.resolve())


def test_custom_environment(tmp_path):
    env = SystemEnvironment.parse("CAIRN_VALUE=from_env\0")
    script = "import os; print(os.environ.get('CAIRN_VALUE', ''))"
    with Process.spawn(sys.executable, tmp_path, ["-c", script], StreamFlags.OUTPUT, env) as proc:
        data = proc.stdout_stream.read().decode().strip()
    assert data == "from_env"


def test_relative_path_is_resolved_against_workdir(tmp_path):
    runner = tmp_path / "runner"
    runner.write_text(f"#!{sys.executable}\nprint('ran')\n")
    runner.chmod(runner.stat().st_mode | stat.S_IXUSR)
    with Process.spawn("runner", tmp_path, [], StreamFlags.OUTPUT) as proc:
        data = proc.stdout_stream.read()
    assert data.strip() == b"ran"


def test_kill_child_terminates(tmp_path):
    with Process.spawn(sys.executable, tmp_path, ["-c", "import time; time.sleep(30)"], StreamFlags.NO_STREAMS) as proc:
        proc.kill_child()
        status = proc.waitpid_status()
    assert os.WIFSIGNALED(status)
    assert os.WTERMSIG(status) == signal.SIGTERM


def test_missing_workdir_raises(tmp_path):
    with pytest.raises(OSError):
        Process.spawn(sys.executable, tmp_path / "missing", ["-c", "pass"], StreamFlags.NO_STREAMS)


def test_missing_program_raises(tmp_path):
    with pytest.raises(OSError):
        Process.spawn(tmp_path / "no-such-program", tmp_path, [], StreamFlags.NO_STREAMS)


def test_combined_stream_flags_open_both_streams(tmp_path):
    script = "import sys; sys.stdout.write(sys.stdin.read()[::-1])"
    flags = StreamFlags.INPUT | StreamFlags.OUTPUT
    with Process.spawn(sys.executable, tmp_path, ["-c", script], flags) as proc:
        assert proc.stderr_stream is None
        proc.stdin_stream.write(b"abc")
        proc.stdin_stream.close()
        data = proc.stdout_stream.read()
    assert data == b"cba"