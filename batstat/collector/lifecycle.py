"""Process lifecycle: pidfile, detachment and signal-driven shutdown."""

import logging
import os
import select
import signal
from typing import Optional

from batstat.shared.errors import BatstatError

logger = logging.getLogger(__name__)

DAEMON_UMASK = 0o027


class AlreadyRunningError(BatstatError):
    """Raised when the pidfile already exists."""

    pass


class DaemonizeError(BatstatError):
    """Raised when the process could not be detached."""

    pass


class PidFile:
    """Exclusively created pidfile owned by this process."""

    def __init__(self, path: str):
        # Absolute, since detaching changes the working directory
        self.path = os.path.abspath(path)
        self._fd: Optional[int] = None
        self.owned = False

    def acquire(self) -> None:
        """Create the pidfile; fail if another instance already holds it.

        Raises:
            AlreadyRunningError: If the pidfile exists.
            DaemonizeError: If it cannot be created for any other reason.
        """
        try:
            self._fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError as e:
            raise AlreadyRunningError(
                f"Pidfile {self.path} exists, another instance is running"
            ) from e
        except OSError as e:
            raise DaemonizeError(f"Cannot create pidfile {self.path}: {e.strerror}") from e
        self.owned = True

    def write_pid(self, pid: Optional[int] = None) -> None:
        if self._fd is None:
            raise DaemonizeError(f"Pidfile {self.path} is not held")
        os.write(self._fd, f"{pid or os.getpid()}\n".encode())
        os.close(self._fd)
        self._fd = None

    def release(self) -> None:
        """Close and remove the pidfile if this process created it."""
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None
        if self.owned:
            try:
                os.unlink(self.path)
            except FileNotFoundError:
                pass
            self.owned = False


def _detach_child(pidfile: PidFile) -> None:
    os.setsid()
    os.umask(DAEMON_UMASK)
    os.chdir("/")

    nullfd = os.open(os.devnull, os.O_RDWR)
    for fd in (0, 1, 2):
        os.dup2(nullfd, fd)
    os.close(nullfd)

    pidfile.write_pid()


def daemonize(pidfile: PidFile) -> None:
    """Detach the process from its controlling terminal.

    The pidfile must already be acquired. Only the detached child returns;
    the original process exits with status 0 once the child reports that
    detachment finished, so either both steps happen or neither survives.

    Raises:
        DaemonizeError: In the original process, if fork or any step in the
            child fails.
    """
    read_fd, write_fd = os.pipe()
    try:
        pid = os.fork()
    except OSError as e:
        os.close(read_fd)
        os.close(write_fd)
        raise DaemonizeError(f"fork failed: {e.strerror}") from e

    if pid == 0:
        os.close(read_fd)
        try:
            _detach_child(pidfile)
        except (OSError, DaemonizeError) as e:
            os.write(write_fd, str(e).encode() or b"detach failed")
            os.close(write_fd)
            os._exit(1)
        os.write(write_fd, b"\0")
        os.close(write_fd)
        logger.info(f"Detached as pid {os.getpid()}")
        return

    os.close(write_fd)
    with os.fdopen(read_fd, "rb") as reader:
        status = reader.read()

    if status == b"\0":
        os._exit(0)

    os.waitpid(pid, 0)
    pidfile.release()
    message = status.decode(errors="replace") or "child exited during setup"
    raise DaemonizeError(f"Detaching failed: {message}")


class ShutdownFlag:
    """Termination request observed synchronously by the main loop.

    The signal handler only records the request and writes one byte to a
    self-pipe, so a pending wait() returns at once. Teardown is left to the
    code that observes the flag.
    """

    def __init__(self):
        self._requested = False
        self._read_fd, self._write_fd = os.pipe()
        os.set_blocking(self._read_fd, False)
        os.set_blocking(self._write_fd, False)
        self._previous_handlers = {}

    @property
    def requested(self) -> bool:
        return self._requested

    def request(self) -> None:
        self._requested = True
        try:
            os.write(self._write_fd, b"\0")
        except BlockingIOError:
            pass

    def _handle_signal(self, signum, frame) -> None:
        self.request()

    def install(self, signum: int = signal.SIGTERM) -> None:
        """Route ``signum`` to this flag."""
        self._previous_handlers[signum] = signal.signal(signum, self._handle_signal)

    def restore(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers = {}

    def wait(self, timeout: float) -> bool:
        """Block for up to ``timeout`` seconds or until shutdown is requested.

        Returns:
            True if shutdown has been requested.
        """
        if not self._requested:
            select.select([self._read_fd], [], [], timeout)
            self._drain()
        return self._requested

    def _drain(self) -> None:
        try:
            while os.read(self._read_fd, 64):
                pass
        except BlockingIOError:
            pass

    def close(self) -> None:
        self.restore()
        for fd in (self._read_fd, self._write_fd):
            try:
                os.close(fd)
            except OSError:
                pass
