"""
Tests for the subscriber and tag operations of DripClient.
"""

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlsplit

import pytest
import requests
import responses

from drip_api_client import (
    DripClient,
    DripIdentifierRequiredError,
    ErrorCode,
    ListSubscribersRequest,
    Response,
    SubscribersResponse,
    TagRequest,
    TagsRequest,
    UpdateSubscriber,
    UpdateSubscribersRequest,
)
from tests.helpers import BASE, MEDIA_TYPE


@pytest.fixture
def spy_session():
    """A session that records calls and never touches the network."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def spy_client(spy_session):
    return DripClient("key", "9999999", session=spy_session)


class TestListSubscribers:
    @responses.activate
    def test_no_filters(self, client):
        responses.add(
            responses.GET,
            f"{BASE}/subscribers",
            json={"subscribers": [{"id": "1", "email": "a@b.com"}]},
            status=200,
        )
        resp = client.list_subscribers()
        assert isinstance(resp, SubscribersResponse)
        assert resp.status_code == 200
        assert len(resp.subscribers) == 1
        assert resp.subscribers[0].email == "a@b.com"
        assert resp.errors == []
        request = responses.calls[0].request
        assert request.method == "GET"
        assert urlsplit(request.url).query == ""
        assert request.body is None

    @responses.activate
    def test_filters_sent_as_query(self, client):
        responses.add(
            responses.GET,
            f"{BASE}/subscribers",
            json={
                "meta": {"page": 2, "count": 0, "total_pages": 2, "total_count": 100},
                "subscribers": [],
            },
            content_type=MEDIA_TYPE,
        )
        resp = client.list_subscribers(
            ListSubscribersRequest(
                status="unsubscribed",
                tags=["Customer"],
                subscribed_before=datetime(2020, 1, 1, tzinfo=timezone.utc),
                page=2,
                per_page=50,
            )
        )
        assert resp.meta.page == 2
        assert resp.subscribers == []
        query = parse_qs(urlsplit(responses.calls[0].request.url).query)
        assert query == {
            "status": ["unsubscribed"],
            "tags": ["Customer"],
            "subscribed_before": ["2020-01-01T00:00:00Z"],
            "page": ["2"],
            "per_page": ["50"],
        }


class TestUpdateSubscriber:
    @responses.activate
    def test_posts_batch(self, client):
        responses.add(
            responses.POST,
            f"{BASE}/subscribers",
            json={"subscribers": [{"id": "1", "email": "test@test.com", "tags": ["dev", "test"]}]},
            status=200,
            content_type=MEDIA_TYPE,
        )
        resp = client.update_subscriber(
            UpdateSubscribersRequest(
                subscribers=[
                    UpdateSubscriber(email="test@test.com", new_email="test@test.com", tags=["dev", "test"])
                ]
            )
        )
        assert resp.subscribers[0].tags == ["dev", "test"]
        request = responses.calls[0].request
        assert request.headers["Content-Type"] == MEDIA_TYPE
        assert json.loads(request.body) == {
            "subscribers": [{"email": "test@test.com", "new_email": "test@test.com", "tags": ["dev", "test"]}]
        }

    @responses.activate
    def test_validation_errors_returned_not_raised(self, client):
        responses.add(
            responses.POST,
            f"{BASE}/subscribers",
            json={"errors": [{"code": "presence_error", "attribute": "email", "message": "Email is required"}]},
            status=422,
            content_type=MEDIA_TYPE,
        )
        resp = client.update_subscriber(UpdateSubscribersRequest())
        assert resp.status_code == 422
        assert resp.subscribers == []
        assert resp.errors[0].code is ErrorCode.PRESENCE
        assert resp.errors[0].attribute == "email"


class TestFetchSubscriber:
    @responses.activate
    def test_fetch(self, client, subscriber_payload):
        responses.add(
            responses.GET,
            f"{BASE}/subscribers/john@acme.com",
            json={"subscribers": [subscriber_payload]},
            content_type=MEDIA_TYPE,
        )
        resp = client.fetch_subscriber("john@acme.com")
        assert resp.subscribers[0].id == "z1togz2hcjrkpp5treip"
        assert resp.subscribers[0].lead_score == 65

    def test_empty_identifier_makes_no_call(self, spy_client, spy_session):
        with pytest.raises(DripIdentifierRequiredError):
            spy_client.fetch_subscriber("")
        assert spy_session.prepare_request.call_count == 0
        assert spy_session.send.call_count == 0


class TestDeleteSubscriber:
    @responses.activate
    def test_delete(self, client):
        responses.add(responses.DELETE, f"{BASE}/subscribers/test@test.com", status=204)
        resp = client.delete_subscriber("test@test.com")
        assert isinstance(resp, Response)
        assert resp.status_code == 204
        assert resp.errors == []
        assert responses.calls[0].request.method == "DELETE"

    @responses.activate
    def test_delete_unknown(self, client):
        responses.add(
            responses.DELETE,
            f"{BASE}/subscribers/nobody@test.com",
            json={"errors": [{"code": "unavailable_error", "attribute": "id", "message": "Subscriber is gone"}]},
            status=404,
            content_type=MEDIA_TYPE,
        )
        resp = client.delete_subscriber("nobody@test.com")
        assert resp.status_code == 404
        assert resp.errors[0].code is ErrorCode.UNAVAILABLE

    def test_empty_identifier_makes_no_call(self, spy_client, spy_session):
        with pytest.raises(DripIdentifierRequiredError):
            spy_client.delete_subscriber("")
        assert spy_session.send.call_count == 0


class TestTagSubscriber:
    @responses.activate
    def test_posts_tags(self, client):
        responses.add(responses.POST, f"{BASE}/tags", status=204)
        resp = client.tag_subscriber(
            TagsRequest(tags=[TagRequest(email="a@b.com", tag="Customer")])
        )
        assert resp.status_code == 204
        assert json.loads(responses.calls[0].request.body) == {
            "tags": [{"email": "a@b.com", "tag": "Customer"}]
        }


class TestRemoveSubscriberTag:
    @responses.activate
    def test_remove(self, client):
        responses.add(
            responses.DELETE,
            f"{BASE}/subscribers/a@b.com/tags/Big%20Spender",
            status=204,
        )
        resp = client.remove_subscriber_tag(TagRequest(email="a@b.com", tag="Big Spender"))
        assert resp.status_code == 204
        assert responses.calls[0].request.url == f"{BASE}/subscribers/a@b.com/tags/Big%20Spender"

    @pytest.mark.parametrize(
        "req",
        [TagRequest(email="", tag="Customer"), TagRequest(email="a@b.com", tag=""), TagRequest()],
    )
    def test_empty_identifiers_make_no_call(self, spy_client, spy_session, req):
        with pytest.raises(DripIdentifierRequiredError):
            spy_client.remove_subscriber_tag(req)
        assert spy_session.send.call_count == 0
