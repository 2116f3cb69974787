"""
Codec Stage Base
================

Pull-based drain protocol shared by the decode and encode stages.

A codec stage accepts one input at a time and may hold output back in its
internal buffers. Callers drain it after every submission and once more after
flushing:

    stage.submit(item)
    for out in stage.drain():
        ...
    stage.flush()
    for out in stage.drain():
        ...

Signal Mapping:
    av.error.BlockingIOError  "try again later"  -> ends the current exchange
    av.error.EOFError         "end of stream"    -> stage is finished
    other av.error.FFmpegError                   -> CodecError (fatal)

Neither drain signal ever reaches the caller as an exception.
"""

import logging
from collections import deque
from typing import Any, Callable, Deque, Iterator, Optional

import av

from slideshow_video.errors import CodecError


logger = logging.getLogger(__name__)


class CodecStage:
    """
    Output queue plus drain/flush discipline around a PyAV codec context.

    Subclasses set `stage_name` and call `_exchange` with the codec
    operation (`decode` or `encode`) and its input.

    Attributes:
        stage_name: Name reported in CodecError ("decode", "encode")
        finished: True once end of stream was reached
    """

    stage_name = "codec"

    def __init__(self) -> None:
        self._pending: Deque[Any] = deque()
        self._flushed: bool = False
        self._finished: bool = False

    @property
    def finished(self) -> bool:
        """Whether the codec reported end of stream."""
        return self._finished

    @property
    def flushed(self) -> bool:
        """Whether end-of-input has been signalled."""
        return self._flushed

    @property
    def pending(self) -> int:
        """Number of outputs waiting to be drained."""
        return len(self._pending)

    def drain(self) -> Iterator[Any]:
        """
        Yield every output currently available.

        Lazy and finite: stops as soon as the stage has nothing more to give
        for the inputs submitted so far.
        """
        while self._pending:
            yield self._pending.popleft()

    def _exchange(
        self,
        operation: Callable[[Any], list],
        item: Any,
        filename: Optional[str] = None,
    ) -> None:
        """
        Send one input (or None for end-of-input) and queue what comes back.

        Raises:
            CodecError: On any codec failure other than the drain signals,
                or when input is sent after end of stream
        """
        if self._finished or (self._flushed and item is not None):
            raise CodecError(
                self.stage_name,
                "input submitted after end of stream",
                filename,
            )

        try:
            produced = operation(item)
        except av.error.BlockingIOError:
            logger.debug(f"{self.stage_name}: codec asked to try again later")
            return
        except av.error.EOFError:
            logger.debug(f"{self.stage_name}: end of stream")
            self._finished = True
            return
        except av.error.FFmpegError as e:
            raise CodecError(self.stage_name, str(e), filename) from e

        self._pending.extend(produced)

    def _signal_end(self, operation: Callable[[Any], list]) -> None:
        """Send end-of-input once; later calls are no-ops."""
        if self._flushed:
            return
        self._flushed = True
        self._exchange(operation, None)
        # decode(None)/encode(None) drain the codec to EOF internally
        self._finished = True
