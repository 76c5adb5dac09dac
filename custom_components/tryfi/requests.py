"""
Low-level HTTP request library for TryFi API communication.
This module handles all HTTP requests with automatic retry logic and maps
HTTP failures onto the error kinds of the TryFi client.
"""
import asyncio
import logging

import aiohttp

from custom_components.tryfi.api.errors import (
    AuthError,
    MalformedResponseError,
    RemoteError,
    RequestTimeoutError,
    TransientRemoteError,
)
from custom_components.tryfi.const import (
    API_BASE_URL,
    AUTH_STATUS_CODES,
    REQUEST_ATTEMPTS,
    REQUEST_TIMEOUT,
    TRANSIENT_STATUS_CODES,
)

_LOGGER = logging.getLogger(__name__)


async def check_tryfi_availability(timeout: int = 15) -> bool:
    """
    Check if the TryFi API is reachable by sending a HEAD request.

    Any HTTP answer counts as reachable; only network failures and timeouts
    return False.
    """
    try:
        timeout_config = aiohttp.ClientTimeout(total=timeout)
        async with aiohttp.ClientSession(timeout=timeout_config) as session:
            async with session.head(API_BASE_URL) as response:
                _LOGGER.debug("TryFi API answered HEAD with status %s", response.status)
                return True
    except (asyncio.TimeoutError, TimeoutError):
        _LOGGER.warning("Timeout while checking TryFi API URL")
        return False
    except aiohttp.ClientError as e:
        _LOGGER.warning("Error while checking TryFi API availability: %s", e)
        return False


async def make_request(
    http: aiohttp.ClientSession,
    method: str,
    url: str,
    headers: dict | None = None,
    payload: dict | None = None,
    data: dict | None = None,
    params: dict | None = None,
    timeout: int = REQUEST_TIMEOUT,
    max_attempts: int = REQUEST_ATTEMPTS,
):
    """
    Make an HTTP request with automatic retry on timeout.

    Args:
        http: Session carrying the TryFi cookies
        method: HTTP method (GET, POST, PUT, etc.)
        url: Target URL for the request
        headers: HTTP headers dictionary (optional)
        payload: JSON body (optional)
        data: Form body (optional)
        params: URL query parameters (optional)
        timeout: Base timeout in seconds (multiplied by attempt number for each retry)
        max_attempts: Maximum number of attempts

    Returns:
        Parsed JSON response

    Raises:
        RequestTimeoutError: If all attempts time out
        AuthError: On 401/403
        TransientRemoteError: On a server-busy status
        MalformedResponseError: If the body is not JSON
        RemoteError: For other HTTP or network errors
    """
    method = method.upper()

    for attempt in range(max_attempts):
        # Timeout grows with each attempt
        timeout_config = aiohttp.ClientTimeout(total=timeout * (attempt + 1))
        try:
            async with http.request(
                method,
                url,
                headers=headers,
                json=payload,
                data=data,
                params=params,
                timeout=timeout_config,
            ) as response:
                return await _process_response(response, url)

        except (asyncio.TimeoutError, TimeoutError) as e:
            if attempt < max_attempts - 1:
                _LOGGER.debug(
                    "Timeout on %s request to %s (attempt %s of %s), retrying",
                    method, url, attempt + 1, max_attempts,
                )
                continue
            raise RequestTimeoutError(
                f"Timeout on {method} request to {url} after {max_attempts} attempts"
            ) from e

        except aiohttp.ClientError as e:
            raise RemoteError(f"{method} request to {url} failed: {e}") from e

    # max_attempts < 1
    raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")


async def _process_response(response, url: str):
    """
    Classify the HTTP status and extract the JSON body.

    Raises:
        AuthError, TransientRemoteError, MalformedResponseError, RemoteError
    """
    status = response.status

    if status in AUTH_STATUS_CODES:
        raise AuthError(f"HTTP {status} from {url}")

    if status in TRANSIENT_STATUS_CODES:
        raise TransientRemoteError(f"HTTP {status} from {url}", status=status)

    content_type = response.headers.get("Content-Type", "")

    if "application/json" not in content_type:
        # Non-JSON response (e.g. HTML error page); its encoding is not trusted
        try:
            text = await response.text(errors="replace")
        except (UnicodeDecodeError, LookupError) as e:
            raise MalformedResponseError(f"Undecodable {content_type} body from {url}: {e}") from e
        _LOGGER.debug(
            "Received non-JSON response from %s: status %s, content-type: %s, body preview: %s",
            url, status, content_type, text[:200],
        )
        if status == 200:
            raise MalformedResponseError(f"Expected JSON but got {content_type} from {url}")
        raise RemoteError(f"HTTP {status} with {content_type} from {url}")

    try:
        body = await response.json()
    except (aiohttp.ContentTypeError, ValueError) as e:
        raise MalformedResponseError(f"Invalid JSON from {url}: {e}") from e

    if status != 200:
        raise RemoteError(f"HTTP {status} from {url}: {body}", payload=body if isinstance(body, dict) else None)

    return body
