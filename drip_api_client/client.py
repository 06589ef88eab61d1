"""
Client implementation for the Drip REST API.

This module defines the :class:`DripClient` class which authenticates
against the Drip v2 API using HTTP Basic authentication (your API key
as the username, a blank password) and exposes one method per
supported subscriber and tag operation.

Usage
-----

.. code-block:: python

    from drip_api_client import DripClient, ListSubscribersRequest

    client = DripClient(api_key="abc123", account_id="9999999")

    resp = client.list_subscribers(ListSubscribersRequest(status="active"))
    for error in resp.errors:
        print(error.code, error.attribute, error.message)
    for subscriber in resp.subscribers:
        print(subscriber.email)

Every method returns a response envelope.  Drip reports validation
problems inside otherwise successful responses, so the envelope's
``errors`` list must be checked even when no exception was raised.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional, Type, TypeVar
from urllib.parse import quote

import requests
from requests.auth import HTTPBasicAuth

from .exceptions import (
    DripBadAccountIDError,
    DripBadAPIKeyError,
    DripDecodeError,
    DripIdentifierRequiredError,
    DripRequestError,
    DripSerializationError,
    DripTransportError,
    DripUnexpectedResponseError,
)
from .models import (
    ListSubscribersRequest,
    Response,
    SubscribersResponse,
    TagRequest,
    TagsRequest,
    UpdateSubscribersRequest,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.getdrip.com/v2/"
DEFAULT_USER_AGENT = "drip-python client"
MEDIA_TYPE = "application/vnd.api+json"

_HTTP_METHODS = {"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"}

EnvelopeT = TypeVar("EnvelopeT", bound=Response)


class DripClient:
    """A client for the Drip REST API.

    Parameters
    ----------
    api_key : str
        Your Drip API token.  Sent as the username of the HTTP Basic
        credentials on every request.
    account_id : str
        The Drip account identifier.  Every resource URL is scoped to
        this account.
    session : requests.Session, optional
        The transport used to send requests.  A new session is created
        when omitted.  Sessions are safe to share between clients.
    user_agent : str, optional
        Value of the ``User-Agent`` header.
    base_url : str, optional
        Override the API base URL.
    timeout : float, optional
        Timeout in seconds applied to each request.  ``None`` waits
        indefinitely.

    Raises
    ------
    DripBadAPIKeyError
        If ``api_key`` is empty.
    DripBadAccountIDError
        If ``account_id`` is empty.

    Notes
    -----
    Construction performs no network I/O.  The client keeps no state
    between calls and never retries; wrap calls yourself if you need a
    retry policy.
    """

    def __init__(
        self,
        api_key: str,
        account_id: str,
        *,
        session: Optional[requests.Session] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
    ) -> None:
        if not api_key:
            raise DripBadAPIKeyError("bad api key")
        if not account_id:
            raise DripBadAccountIDError("bad drip account id")

        self._api_key = api_key
        self._account_id = account_id
        self._session = session if session is not None else requests.Session()
        self._user_agent = user_agent
        self._base_url = base_url
        self._timeout = timeout
        logger.debug("DripClient initialized for account %s", account_id)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "DripClient":
        """Create a client from the ``DRIP_API_KEY`` and ``DRIP_ACCOUNT_ID``
        environment variables.

        Keyword arguments are passed through to the constructor, which
        still validates both values.
        """
        return cls(
            os.environ.get("DRIP_API_KEY", ""),
            os.environ.get("DRIP_ACCOUNT_ID", ""),
            **kwargs,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(account_id={self._account_id!r})"

    @property
    def account_id(self) -> str:
        return self._account_id

    @property
    def session(self) -> requests.Session:
        return self._session

    @property
    def user_agent(self) -> str:
        return self._user_agent

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    # ------------------------------------------------------------------
    # HTTP request helpers
    # ------------------------------------------------------------------
    def build_url(self, *segments: str) -> str:
        """Build the full URL for a resource under the client's account.

        Each segment is percent-encoded so that emails and tag names
        containing spaces or slashes stay a single path segment.

        >>> client.build_url("subscribers", "a@b.com")
        'https://api.getdrip.com/v2/9999999/subscribers/a@b.com'
        """
        path = "/".join(
            quote(str(segment), safe="@") for segment in (self._account_id, *segments)
        )
        return f"{self._base_url.rstrip('/')}/{path}"

    def _build_request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Any] = None,
    ) -> requests.PreparedRequest:
        """Return a transport-ready request.

        ``body`` may be a request model (anything with ``to_dict``) or a
        plain JSON-serialisable object.  ``None`` sends no body.

        Raises
        ------
        DripSerializationError
            If the body cannot be encoded as JSON.
        DripRequestError
            If the method is unknown or the URL cannot be prepared.
        """
        data: Optional[bytes] = None
        if body is not None:
            try:
                payload = body.to_dict() if hasattr(body, "to_dict") else body
                data = json.dumps(payload).encode("utf-8")
            except (TypeError, ValueError) as exc:
                raise DripSerializationError(f"Failed to encode request body: {exc}") from exc

        method = method.upper()
        if method not in _HTTP_METHODS:
            raise DripRequestError(f"Unsupported HTTP method {method!r}")

        request = requests.Request(
            method=method,
            url=url,
            params=params,
            data=data,
            headers={
                "User-Agent": self._user_agent,
                "Content-Type": MEDIA_TYPE,
                "Accept": MEDIA_TYPE,
            },
            auth=HTTPBasicAuth(self._api_key, ""),
        )
        try:
            return self._session.prepare_request(request)
        except (requests.RequestException, ValueError) as exc:
            raise DripRequestError(f"Failed to build {method} request for {url}: {exc}") from exc

    def _decode_response(
        self, response: requests.Response, envelope: Type[EnvelopeT]
    ) -> EnvelopeT:
        """Decode ``response`` into an instance of ``envelope``.

        The status code of the HTTP response is always copied onto the
        envelope.  A non-empty ``errors`` list is a successful decode.

        Raises
        ------
        DripUnexpectedResponseError
            If the body is not JSON, e.g. an HTML error page.
        DripDecodeError
            If the JSON body is malformed or does not match the envelope.
        """
        status_code = response.status_code
        content_type = response.headers.get("Content-Type", "")
        if status_code == 204 or "no content" in content_type.lower():
            return envelope(status_code=status_code)

        if "json" not in content_type.lower():
            logger.warning(
                "Drip returned non-JSON response: status=%s content_type=%r",
                status_code,
                content_type,
            )
            raise DripUnexpectedResponseError(status_code, response.text)

        try:
            data = response.json()
        except ValueError as exc:
            raise DripDecodeError(f"Malformed JSON in {status_code} response: {exc}") from exc
        try:
            return envelope.from_dict(data, status_code=status_code)
        except (TypeError, ValueError) as exc:
            raise DripDecodeError(f"Unexpected {status_code} response shape: {exc}") from exc

    def _request(
        self,
        method: str,
        url: str,
        envelope: Type[EnvelopeT],
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Any] = None,
    ) -> EnvelopeT:
        """Build, send and decode a single request.

        Raises
        ------
        DripTransportError
            If the request could not be sent or no response arrived.
        """
        prepared = self._build_request(method, url, params=params, body=body)
        logger.debug("Sending %s %s", prepared.method, prepared.url)
        settings = self._session.merge_environment_settings(prepared.url, {}, None, None, None)
        try:
            response = self._session.send(prepared, timeout=self._timeout, **settings)
        except requests.RequestException as exc:
            raise DripTransportError(f"Failed to connect to {url}: {exc}") from exc
        logger.debug("Received %s for %s %s", response.status_code, prepared.method, prepared.url)
        return self._decode_response(response, envelope)

    # ------------------------------------------------------------------
    # Subscribers
    # ------------------------------------------------------------------
    def list_subscribers(
        self, req: Optional[ListSubscribersRequest] = None
    ) -> SubscribersResponse:
        """List subscribers, optionally filtered and paginated.

        Only the requested page is fetched; ``resp.meta`` tells you how
        many pages there are.
        """
        params = req.to_params() if req is not None else None
        return self._request(
            "GET", self.build_url("subscribers"), SubscribersResponse, params=params
        )

    def update_subscriber(self, req: UpdateSubscribersRequest) -> SubscribersResponse:
        """Create or update one or more subscribers.

        Subscribers are matched on ``email`` or ``id``.  Fields left as
        ``None`` keep their current value on the server.
        """
        return self._request(
            "POST", self.build_url("subscribers"), SubscribersResponse, body=req
        )

    def delete_subscriber(self, id_or_email: str) -> Response:
        """Delete a subscriber by Drip id or email.

        Raises
        ------
        DripIdentifierRequiredError
            If ``id_or_email`` is empty.  No request is sent.
        """
        if not id_or_email:
            raise DripIdentifierRequiredError("ID and Email both cannot be empty")
        return self._request("DELETE", self.build_url("subscribers", id_or_email), Response)

    def fetch_subscriber(self, id_or_email: str) -> SubscribersResponse:
        """Fetch a single subscriber by Drip id or email.

        Raises
        ------
        DripIdentifierRequiredError
            If ``id_or_email`` is empty.  No request is sent.
        """
        if not id_or_email:
            raise DripIdentifierRequiredError("ID and Email both cannot be empty")
        return self._request(
            "GET", self.build_url("subscribers", id_or_email), SubscribersResponse
        )

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------
    def tag_subscriber(self, req: TagsRequest) -> Response:
        """Apply tags to subscribers in one batch."""
        return self._request("POST", self.build_url("tags"), Response, body=req)

    def remove_subscriber_tag(self, req: TagRequest) -> Response:
        """Remove ``req.tag`` from the subscriber with ``req.email``.

        Raises
        ------
        DripIdentifierRequiredError
            If the email or the tag is empty.  No request is sent.
        """
        if not req.email:
            raise DripIdentifierRequiredError("Email cannot be empty")
        if not req.tag:
            raise DripIdentifierRequiredError("Tag cannot be empty")
        return self._request(
            "DELETE",
            self.build_url("subscribers", req.email, "tags", req.tag),
            Response,
        )
