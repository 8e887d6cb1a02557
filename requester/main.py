"""Application entrypoint."""

import asyncio
import hashlib
import logging
from typing import Annotated

import typer

from requester.adapters.driven.config.settings import Settings, load_settings
from requester.adapters.driven.http.client import HttpClient
from requester.adapters.driven.logging.logging_config import configure_logs
from requester.adapters.driven.metrics.dispatch_metrics import Metrics
from requester.adapters.driving.signals import make_stop_on_sigterm
from requester.core.dispatcher import Dispatcher
from requester.ports.errors import DispatchError, RequestValidationError
from requester.ports.request import Request, make_request
from requester.ports.settings import DispatcherSettings

__all__ = [
    "app",
    "run",
    "build_requests",
    "dispatch_until_stopped",
    "print_body_digest",
    "log_failure",
]

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Send HTTP requests in parallel.")


def print_body_digest(req: Request, body: bytes) -> None:
    """Print the target and the MD5 digest of its response body."""
    typer.echo(f"{req.target} {hashlib.md5(body).hexdigest()}")


def log_failure(error: DispatchError) -> None:
    logger.warning(str(error))


def build_requests(settings: Settings) -> list[Request]:
    """Build one Request per configured address.

    Raises:
        RequestValidationError: On the first invalid address.
    """
    return [make_request(a, settings.method, settings.body) for a in settings.addresses]


async def dispatch_until_stopped(
    dispatcher: Dispatcher,
    requests: list[Request],
    stop: asyncio.Event,
) -> bool:
    """Submit requests and wait for them, unless stop is set first.

    When stop fires, submission halts and only already accepted requests
    are drained.

    Args:
        dispatcher: Running dispatcher.
        requests: Requests to submit.
        stop: Event set by the signal handler.

    Returns:
        True if the run was interrupted by stop, False if it completed.
    """

    async def _submit_and_wait() -> None:
        await dispatcher.submit(*requests)
        await dispatcher.wait()

    work = asyncio.create_task(_submit_and_wait())
    stopper = asyncio.create_task(stop.wait())
    done, _ = await asyncio.wait({work, stopper}, return_when=asyncio.FIRST_COMPLETED)

    if work in done:
        stopper.cancel()
        await asyncio.gather(stopper, return_exceptions=True)
        work.result()
        return False

    work.cancel()
    await asyncio.gather(work, return_exceptions=True)
    logger.info(f"Stopped submitting; waiting for {dispatcher.outstanding} accepted requests")
    await dispatcher.wait()
    return True


async def run(settings: Settings) -> int:
    """Dispatch every configured address and report the outcomes.

    Startup sequence:
    1. Validate all addresses (no network activity on failure).
    2. Open the shared HTTP session and start the dispatcher.
    3. Submit and wait, draining early on SIGTERM/SIGINT.
    4. Close the dispatcher and log a metrics summary.

    Args:
        settings: Validated run configuration.

    Returns:
        Process exit code.
    """
    try:
        requests = build_requests(settings)
    except RequestValidationError as exc:
        logger.error(f"Invalid request: {exc}")
        return 1

    metrics = Metrics()
    dispatcher_settings = DispatcherSettings(
        worker_count=settings.worker_count,
        on_success=print_body_digest,
        on_failure=log_failure,
    )

    async with HttpClient(metrics=metrics) as http:
        async with Dispatcher(dispatcher_settings, fetch=http.fetch) as dispatcher:
            interrupted = await dispatch_until_stopped(
                dispatcher, requests, stop=make_stop_on_sigterm()
            )

    if interrupted:
        logger.info("Drained after termination signal.")
    logger.info(f"Requester finished: {metrics}")
    return 0


@app.command()
def send(
    urls: Annotated[
        list[str] | None,
        typer.Argument(help="Addresses to request; http:// is assumed without a scheme."),
    ] = None,
    parallel: Annotated[
        int | None,
        typer.Option("--parallel", "-p", help="Parallel worker count (<= 0 uses the default)."),
    ] = None,
    method: Annotated[
        str | None,
        typer.Option("--method", "-X", help="HTTP method for every request."),
    ] = None,
    body: Annotated[
        str | None,
        typer.Option("--body", "-d", help="Request body for every request."),
    ] = None,
) -> None:
    """Request every URL in parallel and print '<url> <md5 of body>' per success."""
    configure_logs()

    try:
        settings = load_settings(urls or [], worker_count=parallel, method=method, body=body)
    except (RuntimeError, ValueError) as exc:
        logger.error(
            "Configuration error: %s\n"
            "Hint: pass at least one URL and check REQUESTER_PARALLEL, REQUESTER_METHOD.",
            exc,
        )
        raise typer.Exit(code=1) from exc

    raise typer.Exit(code=asyncio.run(run(settings)))


if __name__ == "__main__":
    app()
