"""
Request and response shapes for the Drip REST API.

Request objects know how to turn themselves into the JSON body (or
query string) Drip expects; response envelopes know how to build
themselves from a decoded JSON document.  Every optional request field
defaults to ``None`` and is left out of the wire body while it stays
``None``.  A field set to a falsy value such as ``0``, ``False`` or an
empty list is still sent, so an update never clears server data by
accident.

See https://developer.drip.com/ for the field reference.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class ErrorCode(str, Enum):
    """Codes Drip attaches to validation errors.

    https://developer.drip.com/#errors
    """

    # The attribute is required.
    PRESENCE = "presence_error"
    # The length of the attribute is out of bounds.
    LENGTH = "length_error"
    # The attribute must be unique.
    UNIQUENESS = "uniqueness_error"
    # The attribute must be a valid email address.
    EMAIL = "email_error"
    # The attribute must be a valid URL.
    URL = "url_error"
    # The attribute must be a valid domain name.
    DOMAIN = "domain_error"
    # The attribute must be a valid time in ISO-8601 format.
    TIME = "time_error"
    # The attribute must be a valid comma separated list of email addresses.
    EMAIL_ADDRESS_LIST = "email_address_list_error"
    # The attribute must be a days of the week mask matching /\A(0|1){7}\z/,
    # excluding 0000000.
    DAYS_OF_THE_WEEK = "days_of_the_week_error"
    # A resource has been disabled or deleted.
    UNAVAILABLE = "unavailable_error"
    # A resource identifier or object is not formatted correctly.
    FORMAT = "format_error"
    # A numeric value is out of range.
    RANGE = "range_error"


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is ``None``."""
    return {key: value for key, value in data.items() if value is not None}


def _require_mapping(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _require_list(data: Any, what: str) -> List[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise TypeError(f"{what} must be a JSON array, got {type(data).__name__}")
    return data


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a Drip ISO 8601 timestamp.  A trailing ``Z`` denotes UTC."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"timestamp must be a string, got {type(value).__name__}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime as an ISO 8601 UTC string ending in ``Z``.

    Naive datetimes are taken to be in UTC already.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


# ----------------------------------------------------------------------
# Response shapes
# ----------------------------------------------------------------------
@dataclass
class CodeError:
    """A validation error returned by Drip inside a response body."""

    code: Union[ErrorCode, str] = ""
    attribute: str = ""
    message: str = ""

    def __str__(self) -> str:
        return self.message

    @property
    def is_known(self) -> bool:
        """Whether ``code`` is one of the documented :class:`ErrorCode` values."""
        return isinstance(self.code, ErrorCode)

    @classmethod
    def from_dict(cls, data: Any) -> "CodeError":
        data = _require_mapping(data, "error")
        raw_code = data.get("code") or ""
        try:
            code: Union[ErrorCode, str] = ErrorCode(raw_code)
        except ValueError:
            # Codes Drip adds later are kept verbatim
            code = str(raw_code)
        return cls(
            code=code,
            attribute=data.get("attribute") or "",
            message=data.get("message") or "",
        )


@dataclass
class Links:
    """Hyperlink metadata sent alongside resources."""

    account: Optional[str] = None
    forms: List[str] = field(default_factory=list)
    subscriber: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Links":
        if data is None:
            return cls()
        data = _require_mapping(data, "links")
        return cls(
            account=data.get("account"),
            forms=list(_require_list(data.get("forms"), "links.forms")),
            subscriber=data.get("subscriber"),
        )


@dataclass
class Meta:
    """Pagination data attached to list responses."""

    page: Optional[int] = None
    count: Optional[int] = None
    total_pages: Optional[int] = None
    total_count: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Meta":
        if data is None:
            return cls()
        data = _require_mapping(data, "meta")
        return cls(
            page=data.get("page"),
            count=data.get("count"),
            total_pages=data.get("total_pages"),
            total_count=data.get("total_count"),
        )


@dataclass
class Subscriber:
    """A subscriber as stored by Drip."""

    id: Optional[str] = None
    status: Optional[str] = None
    email: Optional[str] = None
    time_zone: Optional[str] = None
    utc_offset: Optional[int] = None
    visitor_uuid: Optional[str] = None
    custom_fields: Dict[str, str] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    original_referrer: Optional[str] = None
    landing_url: Optional[str] = None
    prospect: Optional[bool] = None
    lead_score: Optional[int] = None
    lifetime_value: Optional[int] = None
    created_at: Optional[datetime] = None
    href: Optional[str] = None
    user_id: Optional[str] = None
    base_lead_score: Optional[int] = None
    links: Links = field(default_factory=Links)

    @classmethod
    def from_dict(cls, data: Any) -> "Subscriber":
        data = _require_mapping(data, "subscriber")
        custom_fields = data.get("custom_fields") or {}
        _require_mapping(custom_fields, "subscriber.custom_fields")
        return cls(
            id=data.get("id"),
            status=data.get("status"),
            email=data.get("email"),
            time_zone=data.get("time_zone"),
            utc_offset=data.get("utc_offset"),
            visitor_uuid=data.get("visitor_uuid"),
            custom_fields=dict(custom_fields),
            tags=list(_require_list(data.get("tags"), "subscriber.tags")),
            ip_address=data.get("ip_address"),
            user_agent=data.get("user_agent"),
            original_referrer=data.get("original_referrer"),
            landing_url=data.get("landing_url"),
            prospect=data.get("prospect"),
            lead_score=data.get("lead_score"),
            lifetime_value=data.get("lifetime_value"),
            created_at=parse_timestamp(data.get("created_at")),
            href=data.get("href"),
            user_id=data.get("user_id"),
            base_lead_score=data.get("base_lead_score"),
            links=Links.from_dict(data.get("links")),
        )


@dataclass
class Response:
    """The basic envelope: the HTTP status and any Drip errors.

    A successful HTTP status does not mean Drip accepted the request;
    check ``errors`` as well.
    """

    status_code: int = 0
    errors: List[CodeError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @staticmethod
    def _decode_errors(data: Dict[str, Any]) -> List[CodeError]:
        return [CodeError.from_dict(item) for item in _require_list(data.get("errors"), "errors")]

    @classmethod
    def from_dict(cls, data: Any, status_code: int = 0) -> "Response":
        data = _require_mapping(data, "response")
        return cls(status_code=status_code, errors=cls._decode_errors(data))


@dataclass
class SubscribersResponse(Response):
    """Envelope for operations that return subscribers."""

    links: Links = field(default_factory=Links)
    meta: Meta = field(default_factory=Meta)
    subscribers: List[Subscriber] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any, status_code: int = 0) -> "SubscribersResponse":
        data = _require_mapping(data, "response")
        return cls(
            status_code=status_code,
            errors=cls._decode_errors(data),
            links=Links.from_dict(data.get("links")),
            meta=Meta.from_dict(data.get("meta")),
            subscribers=[
                Subscriber.from_dict(item)
                for item in _require_list(data.get("subscribers"), "subscribers")
            ],
        )


# ----------------------------------------------------------------------
# Request shapes
# ----------------------------------------------------------------------
@dataclass
class ListSubscribersRequest:
    """Filters and pagination for :meth:`DripClient.list_subscribers`."""

    status: Optional[str] = None
    tags: Optional[List[str]] = None
    subscribed_before: Optional[datetime] = None
    subscribed_after: Optional[datetime] = None
    page: Optional[int] = None
    per_page: Optional[int] = None

    def to_params(self) -> Dict[str, Any]:
        """Return the query string parameters for this filter."""
        return _compact(
            {
                "status": self.status,
                # An empty tag list means no tag filter
                "tags": ",".join(self.tags) if self.tags else None,
                "subscribed_before": format_timestamp(self.subscribed_before),
                "subscribed_after": format_timestamp(self.subscribed_after),
                "page": self.page,
                "per_page": self.per_page,
            }
        )


@dataclass
class UpdateSubscriber:
    """Fields to create or update a subscriber.

    ``email`` or ``id`` selects the subscriber.  Leave a field as
    ``None`` to keep the value Drip already has.
    """

    email: Optional[str] = None
    id: Optional[str] = None
    new_email: Optional[str] = None
    user_id: Optional[str] = None
    time_zone: Optional[str] = None
    lifetime_value: Optional[float] = None
    ip_address: Optional[str] = None
    custom_fields: Optional[Dict[str, str]] = None
    tags: Optional[List[str]] = None
    remove_tags: Optional[List[str]] = None
    prospect: Optional[bool] = None
    base_lead_score: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            {
                "email": self.email,
                "id": self.id,
                "new_email": self.new_email,
                "user_id": self.user_id,
                "time_zone": self.time_zone,
                "lifetime_value": self.lifetime_value,
                "ip_address": self.ip_address,
                "custom_fields": dict(self.custom_fields) if self.custom_fields is not None else None,
                "tags": list(self.tags) if self.tags is not None else None,
                "remove_tags": list(self.remove_tags) if self.remove_tags is not None else None,
                "prospect": self.prospect,
                "base_lead_score": self.base_lead_score,
            }
        )


@dataclass
class UpdateSubscribersRequest:
    """A batch of subscriber updates."""

    subscribers: List[UpdateSubscriber] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"subscribers": [subscriber.to_dict() for subscriber in self.subscribers]}


@dataclass
class TagRequest:
    """A single email/tag pair."""

    email: str = ""
    tag: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"email": self.email, "tag": self.tag}


@dataclass
class TagsRequest:
    """A batch of email/tag pairs for :meth:`DripClient.tag_subscriber`."""

    tags: List[TagRequest] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"tags": [tag.to_dict() for tag in self.tags]}
