"""
Python client for interacting with the Drip REST API.

This package provides a `DripClient` class that authenticates against
the Drip v2 API with your API key and exposes typed methods for
listing, fetching, updating and deleting subscribers and for tagging
and untagging them.

Examples
--------

```python
from drip_api_client import DripClient, TagRequest, TagsRequest

client = DripClient(api_key="YOUR_API_KEY", account_id="YOUR_ACCOUNT_ID")

resp = client.tag_subscriber(
    TagsRequest(tags=[TagRequest(email="jane@example.com", tag="customer")])
)
if resp.errors:
    for error in resp.errors:
        print(error.code, error.attribute, error.message)
```

Errors come back on two channels.  An exception means the request
failed or the response could not be read, and no envelope is
returned.  A returned envelope may still carry a list of `CodeError`
values describing fields Drip rejected.

See Also
--------
The Drip developer documentation (https://developer.drip.com/) lists
all endpoints and the meaning of each error code.
"""

from .client import DripClient
from .exceptions import (
    DripBadAccountIDError,
    DripBadAPIKeyError,
    DripDecodeError,
    DripError,
    DripIdentifierRequiredError,
    DripRequestError,
    DripSerializationError,
    DripTransportError,
    DripUnexpectedResponseError,
)
from .models import (
    CodeError,
    ErrorCode,
    Links,
    ListSubscribersRequest,
    Meta,
    Response,
    Subscriber,
    SubscribersResponse,
    TagRequest,
    TagsRequest,
    UpdateSubscriber,
    UpdateSubscribersRequest,
)

__all__ = [
    "DripClient",
    "DripError",
    "DripBadAPIKeyError",
    "DripBadAccountIDError",
    "DripIdentifierRequiredError",
    "DripSerializationError",
    "DripRequestError",
    "DripTransportError",
    "DripDecodeError",
    "DripUnexpectedResponseError",
    "CodeError",
    "ErrorCode",
    "Links",
    "Meta",
    "Subscriber",
    "Response",
    "SubscribersResponse",
    "ListSubscribersRequest",
    "UpdateSubscriber",
    "UpdateSubscribersRequest",
    "TagRequest",
    "TagsRequest",
]
