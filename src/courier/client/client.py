"""
Courier API client.

Drives the courier HTTP API from the outside, retrying every failed attempt
according to an injected backoff policy:

    async with CourierClient("https://courier.example.com") as client:
        await client.store_certificate_password(
            StorePasswordRequest(id="1234", password="supersecret")
        )
        reply = await client.status()

When retries run out (or the call deadline expires) the distinct errors of all
attempts are raised as one exception (see ``join_status_errors``).
"""

import asyncio
import ssl
import time
from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError
from tenacity import AsyncRetrying, RetryCallState, RetryError, stop_after_attempt

from courier.client.backoff import BackoffFactory, exponential_backoff
from courier.client.errors import (
    ClientError,
    DeadlineExceededError,
    EndpointRequiredError,
    IDRequiredError,
    InvalidRetriesError,
    StatusError,
    UnexpectedContentTypeError,
    join_status_errors,
)
from courier.core.responses import JSON_CONTENT_TYPE
from courier.models import Reply, StatusReply, StoreCertificateRequest, StorePasswordRequest

USER_AGENT = "Courier API Client/v1"
DEFAULT_RETRIES = 3
DEFAULT_TIMEOUT = 30.0

DEFAULT_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "application/json",
    "Accept-Language": "en-US,en",
    "Accept-Encoding": "gzip, deflate, br",
    "Content-Type": JSON_CONTENT_TYPE,
}

M = TypeVar("M", bound=BaseModel)


class CourierClient:
    """
    Async client for the courier API.

    Attributes:
        endpoint: Base URL of the courier service
        retries: Retries after the first attempt (0 disables retrying)
        backoff: Factory producing the backoff policy for each call
        timeout: Default deadline in seconds for a whole call, retries included
    """

    def __init__(
        self,
        endpoint: str,
        *,
        retries: int = DEFAULT_RETRIES,
        backoff: BackoffFactory = exponential_backoff,
        timeout: float | None = DEFAULT_TIMEOUT,
        ssl_context: ssl.SSLContext | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            endpoint: Base URL of the courier service
            retries: Number of retries after the first attempt
            backoff: Backoff policy factory
            timeout: Default call deadline in seconds (None for no deadline)
            ssl_context: TLS configuration for mTLS deployments
            transport: Custom httpx transport (used by tests)

        Raises:
            EndpointRequiredError: If endpoint is empty
            InvalidRetriesError: If retries is negative
        """
        if not endpoint:
            raise EndpointRequiredError()

        if retries < 0:
            raise InvalidRetriesError()

        self.endpoint = httpx.URL(endpoint)
        self.retries = retries
        self.backoff = backoff
        self.timeout = timeout

        client_kwargs: dict[str, Any] = {"headers": DEFAULT_HEADERS}
        if ssl_context is not None:
            client_kwargs["verify"] = ssl_context
        if transport is not None:
            client_kwargs["transport"] = transport

        self._http = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> "CourierClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP connections."""
        await self._http.aclose()

    # ========================================================================
    # API operations
    # ========================================================================

    async def status(self, timeout: float | None = None) -> StatusReply:
        """
        Fetch the service status.

        A 503 is a valid answer here: the reply reports whether the server is
        in maintenance or stopping.
        """
        return await self._call(
            "GET",
            "/v1/status",
            reply_model=StatusReply,
            accept={200, 503},
            timeout=timeout,
        )

    async def store_certificate(
        self, request: StoreCertificateRequest, timeout: float | None = None
    ) -> None:
        """
        Post a base64 encoded certificate for request.id.

        Raises:
            IDRequiredError: If the request has no id; nothing is sent
        """
        if not request.id:
            raise IDRequiredError()

        await self._call(
            "POST", f"/v1/certs/{request.id}", body=request, timeout=timeout
        )

    async def store_certificate_password(
        self, request: StorePasswordRequest, timeout: float | None = None
    ) -> None:
        """
        Post the PKCS#12 password for request.id.

        Raises:
            IDRequiredError: If the request has no id; nothing is sent
        """
        if not request.id:
            raise IDRequiredError()

        await self._call(
            "POST",
            f"/v1/certs/{request.id}/pkcs12password",
            body=request,
            timeout=timeout,
        )

    # ========================================================================
    # Request handling
    # ========================================================================

    def new_request(
        self, method: str, path: str, body: BaseModel | None = None
    ) -> httpx.Request:
        """Build a request for path resolved against the endpoint."""
        url = self.endpoint.join(path)
        content = body.model_dump_json().encode("utf-8") if body is not None else None
        return self._http.build_request(method, url, content=content)

    async def do(
        self,
        request: httpx.Request,
        reply_model: type[M] | None = None,
        accept: set[int] | None = None,
    ) -> M | None:
        """
        Send a single request and classify the response.

        Without ``accept`` any 2xx status is a success and other statuses are
        raised as StatusError. With ``accept`` only the listed statuses are
        successes and their bodies are decoded as-is.

        Returns:
            The decoded reply, or None for 204 No Content or when no
            reply model is expected
        """
        response = await self._http.send(request)

        if accept is not None:
            if response.status_code not in accept:
                raise StatusError(response.status_code, response.reason_phrase)
            return _decode(response, reply_model)

        if not response.is_success:
            raise StatusError(response.status_code, _error_message(response))

        if response.status_code == 204 or reply_model is None:
            return None

        content_type = response.headers.get("content-type")
        if content_type != JSON_CONTENT_TYPE:
            raise UnexpectedContentTypeError(content_type)

        return _decode(response, reply_model)

    async def _call(
        self,
        method: str,
        path: str,
        body: BaseModel | None = None,
        reply_model: type[M] | None = None,
        accept: set[int] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Run a request until it succeeds, retries run out, or the deadline expires."""
        backoff = self.backoff()
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.retries + 1) | backoff.stop,
            wait=backoff.wait,
            before_sleep=_log_retry,
        )

        errors: list[Exception] = []
        attempts = 0
        started = time.monotonic()

        async def attempt() -> Any:
            nonlocal attempts
            attempts += 1
            try:
                return await self.do(
                    self.new_request(method, path, body), reply_model, accept
                )
            except Exception as e:
                errors.append(e)
                raise

        try:
            async with asyncio.timeout(timeout if timeout is not None else self.timeout):
                return await retrying(attempt)
        except RetryError:
            pass
        except TimeoutError:
            errors.append(DeadlineExceededError())

        err = join_status_errors(attempts, time.monotonic() - started, *errors)
        if err is None:
            raise DeadlineExceededError()
        raise err


def _decode(response: httpx.Response, reply_model: type[M] | None) -> M | None:
    if reply_model is None:
        return None

    try:
        return reply_model.model_validate_json(response.content)
    except ValidationError as e:
        raise ClientError(f"could not deserialize response data: {e}") from e


def _error_message(response: httpx.Response) -> str:
    """Error text from the reply body, falling back to the reason phrase."""
    try:
        reply = Reply.model_validate_json(response.content)
    except ValidationError:
        return response.reason_phrase

    return reply.error or response.reason_phrase


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.debug(
        f"Courier request attempt {retry_state.attempt_number} failed, "
        f"retrying in {delay:.2f}s: {exc}"
    )
