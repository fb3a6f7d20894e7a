"""HTTP client for Azure DevOps API.

Every query goes through ``call_api`` / ``call_api_raw``. They share one
request-construction path (``prepare_request``):

- ``Authorization: Basic base64(":" + PAT)`` on every request
- GET: body items become query parameters, in order
- POST: body is sent as compact JSON with ``Content-Type: application/json``

No retries and no timeout beyond httpx's defaults; failures surface as
``RequestError``.
"""
import base64
import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional

import httpx

from .credentials import Credential
from .errors import InvalidArgumentError, RequestError

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST")
JSON_CONTENT_TYPE = "application/json"


def encode_auth(credential: Optional[Credential] = None, token: Optional[str] = None) -> str:
    """Return the Basic auth payload for a credential or a raw token."""
    if (credential is not None) == bool(token):
        raise InvalidArgumentError("Exactly one of 'credential' or 'token' is required")

    if credential is not None:
        with credential.reveal() as secret:
            if not secret:
                raise InvalidArgumentError("Credential holds an empty token")
            return _b64_pair(secret)
    return _b64_pair(token)


def _b64_pair(secret: str) -> str:
    return base64.b64encode(f":{secret}".encode("utf-8")).decode("ascii")


@dataclass(frozen=True)
class RequestDescriptor:
    uri: str
    method: str
    body: Optional[Mapping[str, Any]] = None
    auth_value: str = field(default="", repr=False)

    def to_request(self) -> httpx.Request:
        headers = {
            "Authorization": self.auth_value,
            "Accept": JSON_CONTENT_TYPE,
        }

        if self.method == "GET":
            # merge by hand: httpx replaces an existing query when given params=
            url = httpx.URL(self.uri)
            if self.body:
                url = url.copy_merge_params(list(self.body.items()))
            return httpx.Request("GET", url, headers=headers)

        if self.method == "POST":
            content = None
            if self.body is not None:
                content = json.dumps(dict(self.body), separators=(",", ":"))
                headers["Content-Type"] = JSON_CONTENT_TYPE
            return httpx.Request("POST", self.uri, content=content, headers=headers)

        raise InvalidArgumentError(
            f"Unsupported HTTP method '{self.method}'; expected one of {', '.join(SUPPORTED_METHODS)}"
        )


@dataclass(frozen=True)
class ApiResponse:
    """Full response envelope returned by ``call_api_raw``."""

    status_code: int
    headers: Dict[str, str]
    content: bytes

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.content)


def prepare_request(
        uri: str,
        method: str = "GET",
        body: Optional[Mapping[str, Any]] = None,
        *,
        credential: Optional[Credential] = None,
        token: Optional[str] = None,
) -> httpx.Request:
    """Validate inputs and build the request without sending it."""
    auth_value = "Basic " + encode_auth(credential=credential, token=token)
    descriptor = RequestDescriptor(
        uri=uri,
        method=(method or "").upper(),
        body=body,
        auth_value=auth_value,
    )
    return descriptor.to_request()


def describe(request: httpx.Request) -> str:
    return f"{request.method} {request.url}"


@contextmanager
def _client_scope(client: Optional[httpx.Client]) -> Iterator[httpx.Client]:
    if client is not None:
        yield client
        return
    with httpx.Client() as owned:
        yield owned


def _send(
        uri: str,
        method: str,
        body: Optional[Mapping[str, Any]],
        credential: Optional[Credential],
        token: Optional[str],
        dry_run: bool,
        client: Optional[httpx.Client],
) -> Optional[httpx.Response]:
    request = prepare_request(uri, method, body, credential=credential, token=token)

    if dry_run:
        logger.info("Dry run, not sending: %s", describe(request))
        return None

    try:
        with _client_scope(client) as http:
            resp = http.send(request)
    except httpx.TransportError as exc:
        raise RequestError(
            f"{describe(request)} failed: {exc}",
            method=request.method,
            uri=str(request.url),
        ) from exc

    logger.debug("%s -> HTTP %s", describe(request), resp.status_code)

    if not resp.is_success:
        raise RequestError(
            f"{describe(request)} failed with HTTP {resp.status_code}",
            status_code=resp.status_code,
            body=resp.text or None,
            method=request.method,
            uri=str(request.url),
        )

    return resp


def parse_body(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    if "json" in resp.headers.get("content-type", ""):
        return resp.json()
    return resp.text


def call_api(
        uri: str,
        method: str = "GET",
        body: Optional[Mapping[str, Any]] = None,
        *,
        credential: Optional[Credential] = None,
        token: Optional[str] = None,
        dry_run: bool = False,
        client: Optional[httpx.Client] = None,
) -> Any:
    """
    Issue a request and return the parsed response body.

    JSON responses are decoded, anything else is returned as text, and an
    empty body gives None. In dry-run mode the request is only logged and
    None is returned.
    """
    resp = _send(uri, method, body, credential, token, dry_run, client)
    if resp is None:
        return None
    return parse_body(resp)


def call_api_raw(
        uri: str,
        method: str = "GET",
        body: Optional[Mapping[str, Any]] = None,
        *,
        credential: Optional[Credential] = None,
        token: Optional[str] = None,
        dry_run: bool = False,
        client: Optional[httpx.Client] = None,
) -> Optional[ApiResponse]:
    """Same as ``call_api`` but returns status code, headers and raw body."""
    resp = _send(uri, method, body, credential, token, dry_run, client)
    if resp is None:
        return None
    return ApiResponse(
        status_code=resp.status_code,
        headers=dict(resp.headers),
        content=resp.content,
    )
