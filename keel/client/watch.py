"""Watch streams: lazily consumed, cancellable sequences of change events.

A ``WatchStream`` owns one long-lived HTTP response. A background reader task
decodes newline-delimited ``{"type": ..., "object": ...}`` documents into
``WatchEvent`` values and hands them to the single consumer through a bounded
queue. The stream never reconnects on its own; to resume, start a new watch
from ``last_resource_version``.

State machine::

    IDLE -> CONNECTING -> STREAMING -> COMPLETED | FAILED | CANCELLED
"""

import asyncio
import threading
from enum import Enum
from typing import Any, Generic, TypeVar

import httpx
from aiolimiter import AsyncLimiter

from keel._codes import codes
from keel.codec import EnvelopeCodec, load_document
from keel.exceptions import (
    DecodeError,
    KeelException,
    StreamFailure,
    TransportError,
    classify,
    parse_status,
)
from keel.logger import init_logger
from keel.models.watch import EventType, WatchEvent

logger = init_logger(__name__)

T = TypeVar("T")

_END = object()


class WatchState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = (WatchState.COMPLETED, WatchState.FAILED, WatchState.CANCELLED)


class WatchStream(Generic[T]):
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        path: str,
        params: dict[str, Any],
        codec: EnvelopeCodec,
        connect_timeout: float | None = None,
        queue_size: int = 100,
        rate_limiter: AsyncLimiter | None = None,
    ):
        self._http_client = http_client
        self._path = path
        self._params = params
        self._codec = codec
        self._connect_timeout = connect_timeout
        self._rate_limiter = rate_limiter

        self._queue: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self._state = WatchState.IDLE
        self._task: asyncio.Task | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._loop_thread: int | None = None
        self._cancel_requested = False
        self._lock = threading.Lock()
        self._exhausted = False
        self._failure: StreamFailure | None = None
        self._last_resource_version: str | None = None

    @property
    def state(self) -> WatchState:
        return self._state

    @property
    def path(self) -> str:
        return self._path

    @property
    def params(self) -> dict[str, Any]:
        return dict(self._params)

    @property
    def failure(self) -> StreamFailure | None:
        return self._failure

    @property
    def last_resource_version(self) -> str | None:
        """resourceVersion of the last delivered event's object, for resuming with a new watch."""
        return self._last_resource_version

    def start(self):
        """Open the connection in a background task. Calling it again is a no-op."""
        with self._lock:
            if self._state != WatchState.IDLE:
                return
            self._loop = asyncio.get_running_loop()
            self._loop_thread = threading.get_ident()
            self._state = WatchState.CONNECTING
            self._task = self._loop.create_task(self._run())
        logger.info(f"Starting watch on {self._path} params={self._params}")

    def cancel(self):
        """Stop the stream. Idempotent, and safe to call from any task or thread."""
        with self._lock:
            if self._cancel_requested:
                return
            if self._loop is None:
                # not started yet: nothing is reading the queue, and start() now stays a no-op
                self._cancel()
                return
            loop = self._loop
        if threading.get_ident() == self._loop_thread:
            self._cancel()
        else:
            try:
                loop.call_soon_threadsafe(self._cancel)
            except RuntimeError:
                # loop already closed, so no consumer can still be waiting
                self._cancel_requested = True

    def _cancel(self):
        if self._cancel_requested:
            return
        self._cancel_requested = True
        if self._state not in TERMINAL_STATES:
            self._state = WatchState.CANCELLED
            logger.info(f"Watch on {self._path} cancelled")
        if self._task is not None and not self._task.done():
            self._task.cancel()
        while not self._queue.empty():
            self._queue.get_nowait()
        # wake a consumer blocked in __anext__
        self._queue.put_nowait(_END)

    async def aclose(self):
        self.cancel()
        if self._task is not None:
            await asyncio.wait({self._task})

    async def __aenter__(self) -> "WatchStream[T]":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def __aiter__(self) -> "WatchStream[T]":
        return self

    async def __anext__(self) -> WatchEvent[T]:
        if self._state == WatchState.IDLE and not self._cancel_requested:
            self.start()
        if self._cancel_requested or self._exhausted:
            raise StopAsyncIteration

        item = await self._queue.get()
        if self._cancel_requested:
            raise StopAsyncIteration
        if item is _END:
            self._exhausted = True
            if self._failure is not None:
                raise self._failure
            raise StopAsyncIteration

        self._last_resource_version = getattr(item.object, "resource_version", None) or self._last_resource_version
        return item

    async def _run(self):
        try:
            await self._connect_and_read()
        except asyncio.CancelledError:
            self._state = WatchState.CANCELLED
            raise
        except KeelException as e:
            await self._fail(e)
        except (httpx.RequestError, httpx.StreamError) as e:
            await self._fail(TransportError(f"Watch connection on {self._path} broke: {e}"))
        except Exception as e:
            logger.error(f"Unexpected error reading watch on {self._path}", exc_info=True)
            await self._fail(KeelException(f"Unexpected error reading watch: {e}"))
        else:
            if self._cancel_requested:
                return
            self._state = WatchState.COMPLETED
            logger.info(f"Watch on {self._path} closed by server")
            await self._queue.put(_END)

    async def _fail(self, error: KeelException):
        if self._cancel_requested:
            self._state = WatchState.CANCELLED
            return
        self._failure = StreamFailure(error)
        self._state = WatchState.FAILED
        logger.warning(f"Watch on {self._path} failed: {error}")
        await self._queue.put(_END)

    async def _connect_and_read(self):
        if self._rate_limiter is not None:
            await self._rate_limiter.acquire()

        request = self._http_client.build_request(
            "GET", self._path, params=self._params, timeout=httpx.Timeout(self._connect_timeout, read=None)
        )
        try:
            response = await asyncio.wait_for(
                self._http_client.send(request, stream=True), timeout=self._connect_timeout
            )
        except asyncio.TimeoutError as e:
            raise TransportError(f"Timed out after {self._connect_timeout}s opening watch on {self._path}") from e

        try:
            if response.status_code != codes.OK:
                body = await response.aread()
                raise classify(response.status_code, body)

            self._state = WatchState.STREAMING
            logger.debug(f"Watch on {self._path} streaming")
            async for line in response.aiter_lines():
                if not line.strip():
                    continue
                await self._queue.put(self._decode_event(line))
        finally:
            await response.aclose()

    def _decode_event(self, line: str) -> WatchEvent[T]:
        data = load_document(line)
        raw_type = data.get("type")
        try:
            event_type = EventType(raw_type)
        except ValueError:
            raise DecodeError(f"Unknown watch event type {raw_type!r}")

        obj = data.get("object")
        if obj is None:
            raise DecodeError("Watch event without an object", missing_fields=("object",))

        if event_type == EventType.ERROR:
            status = parse_status(obj)
            raise classify(status.code if status and status.code else codes.INTERNAL_SERVER_ERROR, obj)

        return WatchEvent(type=event_type, object=self._codec.decode(obj))
