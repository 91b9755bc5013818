#!/usr/bin/env python3
"""Process orchestration: fork, wire descriptors, wait.

Every strategy here blocks until the processes it started have terminated.
Child bodies never return into the caller's control flow; they leave
through ``os._exit`` with the status of whatever they ran.
"""
import os
import signal
import sys
from typing import Any, Callable, Dict, List, NoReturn, Optional, Sequence, Tuple

from loguru import logger

from ..errors import ShellExit
from ..ui import UIManager
from .parser import Node, Redirect

RunNode = Callable[[Node], int]

# Python ignores these at startup; programs we start expect the defaults.
_RESTORED_SIGNALS = tuple(
    getattr(signal, name)
    for name in ("SIGPIPE", "SIGXFSZ", "SIGINT")
    if hasattr(signal, name)
)


def exit_status_from_wait(wait_status: int) -> int:
    """Translate a raw ``waitpid`` status into a shell exit status."""
    code = os.waitstatus_to_exitcode(wait_status)
    if code < 0:
        return 128 + (-code)
    return code & 0xFF


def flush_std_streams() -> None:
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            continue


def restore_default_signals() -> Dict[int, Any]:
    previous = {}
    for signum in _RESTORED_SIGNALS:
        previous[signum] = signal.signal(signum, signal.SIG_DFL)
    return previous


class ProcessOrchestrator:
    def __init__(self, ui: UIManager) -> None:
        self.ui = ui

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def spawn(self, argv: Sequence[str]) -> int:
        pid = self._fork()
        if pid is None:
            return 1
        if pid == 0:
            self._run_child(lambda: self.replace_or_fail(argv))
        return self._wait(pid)

    def replace_or_fail(self, argv: Sequence[str]) -> NoReturn:
        """Replace the current process image with ``argv``.

        Raises ``ShellExit(127)`` when the program cannot be started.
        """
        flush_std_streams()
        previous_handlers = restore_default_signals()
        try:
            os.execvp(argv[0], list(argv))
        except OSError as error:
            for signum, handler in previous_handlers.items():
                signal.signal(signum, handler)
            logger.debug("process.exec.failed program={} error={}", argv[0], error)
            self.ui.report_os_error(argv[0], error)
            raise ShellExit(127) from error

    def pipeline(self, stages: Sequence[Node], run_stage: RunNode) -> int:
        pipes: List[Tuple[int, int]] = []
        try:
            for _ in range(len(stages) - 1):
                pipes.append(os.pipe())
        except OSError as error:
            self.ui.report_os_error("pipe", error)
            self._close_pipes(pipes)
            return 1

        pids: List[int] = []
        for index, stage in enumerate(stages):
            pid = self._fork()
            if pid is None:
                break
            if pid == 0:
                self._run_child(
                    lambda: self._run_pipeline_stage(stage, index, pipes, run_stage)
                )
            pids.append(pid)

        self._close_pipes(pipes)
        statuses = [self._wait(pid) for pid in pids]

        if len(pids) < len(stages):
            return 1
        return statuses[-1]

    def redirect(self, node: Redirect, run_body: RunNode) -> int:
        pid = self._fork()
        if pid is None:
            return 1
        if pid == 0:
            self._run_child(lambda: self._run_redirected(node, run_body))

        wait_status = self._wait_raw(pid)
        if wait_status is None or not os.WIFEXITED(wait_status):
            return 1
        return os.WEXITSTATUS(wait_status)

    def subshell(self, body: Node, run_body: RunNode) -> int:
        pid = self._fork()
        if pid is None:
            return 1
        if pid == 0:
            self._run_child(lambda: run_body(body))
        return self._wait(pid)

    # ------------------------------------------------------------------
    # Child-side helpers
    # ------------------------------------------------------------------

    def _run_pipeline_stage(
        self,
        stage: Node,
        index: int,
        pipes: List[Tuple[int, int]],
        run_stage: RunNode,
    ) -> int:
        try:
            if index > 0:
                os.dup2(pipes[index - 1][0], 0)
            if index < len(pipes):
                os.dup2(pipes[index][1], 1)
        except OSError as error:
            self.ui.report_os_error("dup2", error)
            return 1
        finally:
            self._close_pipes(pipes)
        return run_stage(stage)

    def _run_redirected(self, node: Redirect, run_body: RunNode) -> int:
        if not self._apply_redirect(node):
            return 1
        return run_body(node.body)

    def _apply_redirect(self, node: Redirect) -> bool:
        target = node.target

        if target.startswith("&"):
            return self._duplicate_descriptor(node.fd, target[1:].strip())

        try:
            fd = os.open(target, node.mode.flags, 0o644)
        except OSError as error:
            self.ui.report_os_error(target, error)
            return False

        try:
            if fd == node.fd:
                os.set_inheritable(fd, True)
            else:
                os.dup2(fd, node.fd)
        except (OSError, OverflowError) as error:
            self.ui.report_os_error("dup2", error)
            return False
        finally:
            if fd != node.fd:
                os.close(fd)
        return True

    def _duplicate_descriptor(self, fd: int, source: str) -> bool:
        if source == "-":
            try:
                os.close(fd)
            except (OSError, OverflowError) as error:
                self.ui.report_os_error("close", error)
                return False
            return True

        move = source.endswith("-")
        if move:
            source = source[:-1]

        if not source.isascii() or not source.isdigit():
            self.ui.report(f"pish: {source or '&'}: bad file descriptor")
            return False

        source_fd = int(source)
        try:
            if source_fd == fd:
                os.set_inheritable(fd, True)
            else:
                os.dup2(source_fd, fd)
                if move:
                    os.close(source_fd)
        except (OSError, OverflowError) as error:
            self.ui.report_os_error("dup2", error)
            return False
        return True

    def _run_child(self, body: Callable[[], int]) -> NoReturn:
        status = 1
        try:
            restore_default_signals()
            status = body()
        except ShellExit as error:
            status = error.status
        except BaseException:
            logger.exception("process.child.crashed pid={}", os.getpid())
        finally:
            flush_std_streams()
            os._exit(status & 0xFF)

    # ------------------------------------------------------------------
    # Parent-side helpers
    # ------------------------------------------------------------------

    def _fork(self) -> Optional[int]:
        flush_std_streams()
        try:
            return os.fork()
        except OSError as error:
            logger.warning("process.fork.failed error={}", error)
            self.ui.report_os_error("fork", error)
            return None

    def _wait_raw(self, pid: int) -> Optional[int]:
        while True:
            try:
                _, wait_status = os.waitpid(pid, 0)
                return wait_status
            except KeyboardInterrupt:
                # The child received the same SIGINT; keep waiting for it.
                continue
            except ChildProcessError as error:
                self.ui.report_os_error("waitpid", error)
                return None

    def _wait(self, pid: int) -> int:
        wait_status = self._wait_raw(pid)
        if wait_status is None:
            return 1
        status = exit_status_from_wait(wait_status)
        logger.debug("process.exited pid={} status={}", pid, status)
        return status

    @staticmethod
    def _close_pipes(pipes: List[Tuple[int, int]]) -> None:
        for read_end, write_end in pipes:
            for fd in (read_end, write_end):
                try:
                    os.close(fd)
                except OSError:
                    continue
