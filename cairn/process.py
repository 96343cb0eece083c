"""Starting child processes with optional pipes to their standard streams."""

from __future__ import annotations

import os
import signal
import subprocess
from enum import IntFlag
from typing import IO, Optional, Sequence, Union

from cairn.environment import SystemEnvironment
from cairn.log import Log

PathArg = Union[str, "os.PathLike[str]"]

log = Log()


class StreamFlags(IntFlag):
    """Which of the child's standard streams are connected to pipes."""

    NO_STREAMS = 0
    INPUT = 1
    OUTPUT = 2
    INPUT_OUTPUT = 3
    ERROR = 4
    INPUT_ERROR = 5
    OUTPUT_ERROR = 6
    INPUT_OUTPUT_ERROR = 7


class Process:
    """A running child process.

    ``stdin_stream``, ``stdout_stream`` and ``stderr_stream`` are binary pipe
    ends, or None when that stream was not requested.
    """

    def __init__(self, popen: "subprocess.Popen[bytes]") -> None:
        self._popen = popen

    @property
    def pid(self) -> int:
        return self._popen.pid

    @property
    def stdin_stream(self) -> Optional[IO[bytes]]:
        return self._popen.stdin

    @property
    def stdout_stream(self) -> Optional[IO[bytes]]:
        return self._popen.stdout

    @property
    def stderr_stream(self) -> Optional[IO[bytes]]:
        return self._popen.stderr

    @classmethod
    def spawn(
        cls,
        path: PathArg,
        workdir: PathArg,
        args: Sequence[str],
        flags: StreamFlags = StreamFlags.NO_STREAMS,
        env: Optional[SystemEnvironment] = None,
    ) -> "Process":
        """Start ``path`` with ``args`` in ``workdir``.

        The executable is not searched for on PATH: a relative ``path`` is
        taken relative to ``workdir``. Without ``env`` the child inherits the
        current environment. Raises OSError when the directory or the program
        cannot be used.
        """
        path_str = os.fspath(path)
        workdir_str = os.fspath(workdir)
        executable = path_str if os.path.isabs(path_str) else os.path.join(workdir_str, path_str)
        argv = [path_str, *args]
        log.debug("spawn: {}", lambda: "".join(f" {a}" for a in argv))
        popen = subprocess.Popen(
            argv,
            executable=executable,
            cwd=workdir_str,
            stdin=subprocess.PIPE if flags & StreamFlags.INPUT else None,
            stdout=subprocess.PIPE if flags & StreamFlags.OUTPUT else None,
            stderr=subprocess.PIPE if flags & StreamFlags.ERROR else None,
            env=None if env is None else env.as_dict(),
        )
        return cls(popen)

    def waitpid_status(self) -> int:
        """Wait for the child and return its wait status.

        The status is in the form ``os.WIFEXITED`` and related functions read.
        """
        code = self._popen.wait()
        return -code if code < 0 else code << 8

    def kill_child(self, sig: int = signal.SIGTERM) -> None:
        """Send ``sig`` to the child unless it has already been reaped."""
        self._popen.send_signal(sig)

    def close(self) -> None:
        """Close whatever pipe ends are still open."""
        for stream in (self._popen.stdin, self._popen.stdout, self._popen.stderr):
            if stream is not None:
                stream.close()

    def __enter__(self) -> "Process":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
        self._popen.wait()