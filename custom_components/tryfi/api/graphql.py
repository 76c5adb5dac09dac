"""
GraphQL transport for the TryFi API.

Every query and mutation is a POST to /graphql.  A 200 response can still
carry an ``errors`` array; that is an application-level failure and is
raised as RemoteError.
"""
import logging

import aiohttp

from custom_components.tryfi.api.errors import MalformedResponseError, RemoteError
from custom_components.tryfi.const import API_GRAPHQL_URL
from custom_components.tryfi.requests import make_request

_LOGGER = logging.getLogger(__name__)

HEADERS = {
    "accept": "application/json",
    "Content-Type": "application/json",
}


async def graphql_request(
    http: aiohttp.ClientSession, query: str, variables: dict | None = None
) -> dict:
    """
    Run one GraphQL document and return its ``data`` object.

    Raises RemoteError when the response lists errors, and
    MalformedResponseError when it has no ``data`` object.
    """
    payload: dict = {"query": query}
    if variables:
        payload["variables"] = variables

    body = await make_request(http, "POST", API_GRAPHQL_URL, HEADERS, payload=payload)
    if not isinstance(body, dict):
        raise MalformedResponseError(f"Unexpected GraphQL response: {body!r}")

    errors = body.get("errors")
    if errors and not isinstance(errors, list):
        raise MalformedResponseError(f"Unexpected GraphQL errors field: {errors!r}")
    if errors:
        _LOGGER.debug("GraphQL response carried errors: %s", errors)
        first = errors[0] if isinstance(errors[0], dict) else {}
        raise RemoteError(f"GraphQL error: {first.get('message', errors[0])}", payload=body)

    data = body.get("data")
    if not isinstance(data, dict):
        raise MalformedResponseError("GraphQL response carried no data")
    return data
