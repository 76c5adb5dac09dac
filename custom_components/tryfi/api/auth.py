"""
Low-level authentication logic for the TryFi API.

Responsible for:
- Exchanging credentials for a session via the REST login endpoint
- Validating that the response carries the session fields
"""
import logging

import aiohttp

from custom_components.tryfi.api.errors import AuthError, RemoteError
from custom_components.tryfi.const import API_LOGIN_URL
from custom_components.tryfi.models import Session
from custom_components.tryfi.requests import make_request

_LOGGER = logging.getLogger(__name__)


def parse_login_response(json: dict) -> Session:
    """Build a Session from the login response or raise AuthError."""
    if not isinstance(json, dict):
        raise AuthError(f"Login failed: unexpected response {json!r}")

    error = json.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else error
        raise AuthError(f"Login failed: {message}")

    user_id = json.get("userId")
    session_id = json.get("sessionId")
    if not user_id or not session_id:
        raise AuthError("Login failed: no session data returned")

    return Session(user_id=str(user_id), session_id=str(session_id))


async def login(http: aiohttp.ClientSession, email: str, password: str) -> Session:
    """
    Obtain a session from the TryFi API.

    The session cookie set by the server is kept by *http*; the returned
    Session records the ids for the caller.

    Corresponding CURL command:
    curl -X 'POST' 'https://api.tryfi.com/auth/login' \\
      -H 'Content-Type: application/x-www-form-urlencoded' \\
      -d 'email=EMAIL&password=PASSWORD'
    """
    headers = {
        "accept": "application/json",
        "Content-Type": "application/x-www-form-urlencoded",
    }
    form = {"email": email, "password": password}
    try:
        json_response = await make_request(http, "POST", API_LOGIN_URL, headers, data=form)
    except RemoteError as e:
        # Rejected credentials come back as a 4xx with an error object
        if e.payload and e.payload.get("error"):
            raise AuthError(f"Login failed: {e.payload['error']}") from e
        raise

    session = parse_login_response(json_response)
    _LOGGER.debug("Logged in to TryFi as user %s", session.user_id)
    return session
