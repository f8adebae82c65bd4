"""Signal-aware output writing for the dirtree command.

Rendered documents go either to stdout or to a file. Writes stop as soon as
the reader goes away (SIGPIPE / EPIPE) or the user interrupts (SIGINT), so the
command can exit with the conventional status instead of a traceback.
"""

import errno
import os
import signal
from pathlib import Path
from threading import Event
from types import FrameType, TracebackType
from typing import Any, Dict, Optional, Type, Union


class InterruptState:
    """Records SIGPIPE and SIGINT so that writers and the exit path can react.

    Attributes:
        sigpipe_received: Set once the output pipe has been closed by the reader.
        sigint_received: Set once the user has pressed Ctrl+C.
    """

    def __init__(self) -> None:
        self.sigpipe_received = Event()
        self.sigint_received = Event()
        self._previous: Dict[int, Any] = {}

    @property
    def interrupted(self) -> bool:
        return self.sigpipe_received.is_set() or self.sigint_received.is_set()

    def install(self) -> None:
        """Install the SIGPIPE handler where the platform has one.

        SIGINT keeps its default handler so that Ctrl+C interrupts a long walk
        with KeyboardInterrupt; the command records it with mark_interrupted().
        """
        sigpipe = getattr(signal, "SIGPIPE", None)
        if sigpipe is not None:
            self._previous[sigpipe] = signal.signal(sigpipe, self._on_sigpipe)

    def restore(self) -> None:
        for signum, handler in self._previous.items():
            signal.signal(signum, handler)
        self._previous.clear()

    def reset(self) -> None:
        self.sigpipe_received.clear()
        self.sigint_received.clear()

    def _on_sigpipe(self, signum: int, frame: Optional[FrameType]) -> None:
        self.sigpipe_received.set()

    def mark_interrupted(self) -> None:
        self.sigint_received.set()


interrupt_state = InterruptState()


class OutputWriter:
    """Writes UTF-8 text to a file descriptor or a file path.

    A file given by path is created (or truncated) on construction and closed
    by the context manager. A broken pipe surfaces as BrokenPipeError.

    Attributes:
        target: The file descriptor or path being written.
    """

    def __init__(self, target: Union[int, str, "os.PathLike[str]"], state: InterruptState = interrupt_state):
        """Open the destination.

        Args:
            target: A file descriptor (e.g. ``sys.stdout.fileno()``) or a path.
            state: Interrupt flags consulted before each write.

        Raises:
            TypeError: If target is neither an int nor path-like.
        """
        self.target = target
        self._state = state
        self._closed = False
        self._file_obj: Optional[Any] = None

        if isinstance(target, int):
            self._fd = target
        elif isinstance(target, (str, os.PathLike)):
            self._file_obj = Path(target).open("wb")
            self._fd = self._file_obj.fileno()
        else:
            raise TypeError(f"Expected int, str, or PathLike, got {type(target).__name__}")

    def write(self, text: str) -> None:
        """Write all of text.

        Raises:
            BrokenPipeError: If the reader has gone away or the user interrupted.
            ValueError: If the writer is closed.
        """
        if self._closed:
            raise ValueError("Cannot write to a closed OutputWriter")
        if self._state.interrupted:
            raise BrokenPipeError()

        data = memoryview(text.encode("utf-8"))
        try:
            while data:
                written = os.write(self._fd, data)
                data = data[written:]
        except OSError as e:
            if e.errno == errno.EPIPE:
                self._state.sigpipe_received.set()
                raise BrokenPipeError() from e
            raise

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._file_obj is not None:
            try:
                self._file_obj.close()
            except OSError as e:
                if e.errno != errno.EPIPE:
                    raise

    def __enter__(self) -> "OutputWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        try:
            self.close()
        except OSError:
            # An exception from the with block takes precedence
            if exc_type is None:
                raise
