"""Bounded worker pool that dispatches HTTP requests concurrently."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from types import TracebackType

from requester.core.barrier import CompletionBarrier
from requester.ports.errors import DispatchError, DispatcherClosedError
from requester.ports.request import Request
from requester.ports.settings import DispatcherSettings

__all__ = ["Dispatcher", "FetchFn"]

logger = logging.getLogger(__name__)

FetchFn = Callable[[Request], Awaitable[bytes]]


class Dispatcher:
    """Fixed pool of workers draining a bounded request queue.

    Workers are started eagerly at construction and share one fetch
    function (and so one HTTP session). Each submitted Request ends in
    exactly one callback: on_success with the body, or on_failure with a
    DispatchError.

    Must be constructed inside a running event loop.

    Example:
        async with HttpClient() as http:
            async with Dispatcher(DispatcherSettings(on_success=show), http.fetch) as d:
                await d.submit(make_request("example.com", "GET"))
                await d.wait()
    """

    def __init__(self, settings: DispatcherSettings, fetch: FetchFn) -> None:
        """Initialize the queue and start the workers.

        Args:
            settings: Worker count, queue capacity and outcome callbacks.
            fetch: Async function returning the body of a successful request,
                raising DispatchError otherwise.
        """
        self.settings = settings
        self.worker_count = settings.resolved_worker_count
        self.queue_capacity = settings.resolved_queue_capacity

        self._fetch = fetch
        self._queue: asyncio.Queue[Request] = asyncio.Queue(maxsize=self.queue_capacity)
        self._barrier = CompletionBarrier()
        self._closed = False

        loop = asyncio.get_running_loop()
        self._workers: list[asyncio.Task[None]] = [
            loop.create_task(self._worker(i), name=f"requester-worker-{i}")
            for i in range(self.worker_count)
        ]
        logger.debug(
            f"Dispatcher started: workers={self.worker_count}, queue={self.queue_capacity}"
        )

    async def __aenter__(self) -> "Dispatcher":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def outstanding(self) -> int:
        """Requests submitted but not yet finished."""
        return self._barrier.outstanding

    async def submit(self, *requests: Request) -> None:
        """Enqueue requests for execution.

        Suspends while the queue is full.

        Args:
            requests: Requests built with make_request().

        Raises:
            DispatcherClosedError: If close() has been called, including while
                this call was suspended on a full queue. Requests already
                enqueued still run.
        """
        for req in requests:
            if self._closed:
                raise DispatcherClosedError("Dispatcher is closed; cannot submit new requests")
            self._barrier.add()
            try:
                await self._queue.put(req)
            except BaseException:
                # Not enqueued, so no worker will release it.
                self._barrier.done()
                raise

    async def wait(self) -> None:
        """Suspend until every submitted request has reached its callback."""
        await self._barrier.wait()

    async def close(self) -> None:
        """Stop accepting work, drain outstanding requests and join the workers.

        Idempotent.
        """
        if self._closed and not self._workers:
            return
        self._closed = True

        await self.wait()

        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers.clear()
        logger.debug("Dispatcher closed")

    async def _worker(self, worker_id: int) -> None:
        """Pull requests forever; cancelled by close()."""
        logger.debug(f"Worker {worker_id} started")
        try:
            while True:
                req = await self._queue.get()
                try:
                    await self._execute(req)
                finally:
                    self._queue.task_done()
                    self._barrier.done()
        except asyncio.CancelledError:
            logger.debug(f"Worker {worker_id} stopped")
            raise

    async def _execute(self, req: Request) -> None:
        """Run one request and deliver its outcome to exactly one callback."""
        try:
            body = await self._fetch(req)
        except DispatchError as e:
            await self._notify_failure(e)
            return
        except Exception as e:  # noqa: BLE001
            logger.error(f"Unexpected error dispatching {req.target}: {e}", exc_info=True)
            await self._notify_failure(DispatchError(req.target, e))
            return

        if self.settings.on_success is None:
            logger.debug(f"No success callback set; dropping response of {req.target}")
            return
        await self._invoke(self.settings.on_success, req, body)

    async def _notify_failure(self, error: DispatchError) -> None:
        if self.settings.on_failure is None:
            logger.warning(f"No failure callback set; dropping error: {error}")
            return
        await self._invoke(self.settings.on_failure, error)

    @staticmethod
    async def _invoke(callback: Callable[..., object], *args: object) -> None:
        """Call a sync or async callback, logging anything it raises."""
        try:
            result = callback(*args)
            if inspect.isawaitable(result):
                await result
        except Exception as e:  # noqa: BLE001
            logger.error(f"Outcome callback {callback!r} raised: {e}", exc_info=True)
