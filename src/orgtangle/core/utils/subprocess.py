"""Subprocess helpers with enforced timeouts.

- No shell=True (commands are argv lists)
- Child runs in its own process group so a timeout kills the whole tree
"""
from __future__ import annotations

import logging
import os
import shlex
import signal
import subprocess
from time import perf_counter
from typing import Any, List, Sequence

logger = logging.getLogger(__name__)


def _flatten_cmd(cmd: Any) -> List[str]:
    if isinstance(cmd, (list, tuple)):
        return [str(p) for p in cmd]
    return shlex.split(str(cmd))


def _popen_process_group_kwargs() -> dict[str, Any]:
    if os.name == "posix":
        return {"start_new_session": True}
    if os.name == "nt":
        creationflags = getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", None)
        if isinstance(creationflags, int):
            return {"creationflags": creationflags}
    return {}


def _terminate_process_group(proc: subprocess.Popen[Any]) -> None:
    if proc.poll() is not None:
        return
    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGTERM)
        except OSError:
            proc.terminate()
        try:
            proc.wait(timeout=0.2)
        except subprocess.TimeoutExpired:
            pass
        if proc.poll() is None:
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except OSError:
                proc.kill()
        try:
            proc.wait(timeout=0.2)
        except subprocess.TimeoutExpired:
            pass
        return

    proc.kill()
    try:
        proc.wait(timeout=0.2)
    except subprocess.TimeoutExpired:
        pass


def run_with_timeout(
    cmd: Sequence[str] | str,
    *,
    timeout: float,
    cwd: Any = None,
    env: Any = None,
) -> subprocess.CompletedProcess:
    """Run ``cmd`` capturing text output, killing it after ``timeout`` seconds.

    Raises:
        subprocess.TimeoutExpired: When the command exceeds ``timeout``.
        FileNotFoundError: When the executable does not exist.
    """
    argv = _flatten_cmd(cmd)
    start = perf_counter()
    proc = subprocess.Popen(
        argv,
        cwd=cwd,
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        **_popen_process_group_kwargs(),
    )
    try:
        stdout, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        _terminate_process_group(proc)
        try:
            stdout, stderr = proc.communicate(timeout=0.2)
        except subprocess.TimeoutExpired:
            stdout = getattr(exc, "output", None)
            stderr = getattr(exc, "stderr", None)
        logger.warning("Command timed out after %.1fs: %s", timeout, argv[0])
        raise subprocess.TimeoutExpired(argv, timeout, output=stdout, stderr=stderr) from None

    logger.debug(
        "Command %s exited %s in %.3fs",
        argv[0],
        proc.returncode,
        perf_counter() - start,
    )
    return subprocess.CompletedProcess(
        argv,
        proc.returncode if proc.returncode is not None else 0,
        stdout=stdout,
        stderr=stderr,
    )


__all__ = ["run_with_timeout"]
