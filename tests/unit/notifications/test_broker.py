"""Unit tests for the access token broker.

Tests cover:
- Coalescing concurrent requests under one credential into one token POST
- Separate token requests per credential pair
- Sharing one error across every queued send
- Token response validation
- Cancellation on close
"""

from __future__ import annotations

import asyncio

import pytest

from tests.fixtures.http_mocks import FakeHTTPClient, status_response, token_response
from tests.fixtures.send_contexts import ContextFactory
from wns_push.config.models import DEFAULT_TOKEN_URL
from wns_push.errors import TokenAcquisitionError, TransportError, WNSError, WNSErrorType
from wns_push.notifications import AccessTokenBroker, SendContext
from wns_push.types import Credential, Response, SendResult


def _resolve_with_token(context: SendContext) -> None:
    """Stand-in for the dispatcher: report the attached token as the result."""
    _ = context.completion.resolve(SendResult(status_code=200, new_access_token=context.new_access_token))


@pytest.fixture
def broker(fake_http: FakeHTTPClient) -> AccessTokenBroker:
    return AccessTokenBroker(fake_http, on_token=_resolve_with_token)


class TestCoalescing:
    """Test single-flight token acquisition per credential key."""

    async def test_concurrent_requests_share_one_token_post(
        self,
        broker: AccessTokenBroker,
        fake_http: FakeHTTPClient,
        make_context: ContextFactory,
    ) -> None:
        """Test that three sends without a token produce exactly one token request."""
        contexts = [make_context() for _ in range(3)]
        for context in contexts:
            broker.request_token(context)

        assert broker.pending_count(contexts[0].key) == 3

        results = await asyncio.gather(*(context.completion.future for context in contexts))

        assert len(fake_http.token_requests) == 1
        assert [result.new_access_token for result in results] == ["T", "T", "T"]
        assert not broker.has_pending(contexts[0].key)

    async def test_queue_released_in_fifo_order(
        self,
        fake_http: FakeHTTPClient,
        make_context: ContextFactory,
    ) -> None:
        """Test that queued sends are handed off in registration order."""
        released: list[SendContext] = []
        broker = AccessTokenBroker(fake_http, on_token=released.append)
        contexts = [make_context(payload=str(index)) for index in range(4)]
        for context in contexts:
            broker.request_token(context)

        for _ in range(5):
            await asyncio.sleep(0)

        assert [context.payload for context in released] == ["0", "1", "2", "3"]

    async def test_distinct_credentials_request_separately(
        self,
        broker: AccessTokenBroker,
        fake_http: FakeHTTPClient,
        make_context: ContextFactory,
    ) -> None:
        """Test that different credential pairs never share a token request."""
        first = make_context()
        second = make_context(send_credential=Credential(client_id="other", client_secret="b"))
        broker.request_token(first)
        broker.request_token(second)

        _ = await asyncio.gather(first.completion.future, second.completion.future)

        assert len(fake_http.token_requests) == 2
        assert {request.form["client_id"] for request in fake_http.token_requests} == {"a", "other"}

    async def test_enqueue_if_pending_without_request_in_flight(
        self,
        broker: AccessTokenBroker,
        make_context: ContextFactory,
    ) -> None:
        """Test that enqueue_if_pending declines when nothing is in flight."""
        context = make_context()

        assert broker.enqueue_if_pending(context) is False
        assert broker.pending_count(context.key) == 0

    async def test_enqueue_if_pending_joins_in_flight_request(
        self,
        broker: AccessTokenBroker,
        fake_http: FakeHTTPClient,
        make_context: ContextFactory,
    ) -> None:
        """Test that a send joining an in-flight request receives its token."""
        first = make_context()
        joiner = make_context()
        broker.request_token(first)

        assert broker.enqueue_if_pending(joiner) is True

        result = await joiner.completion.future
        assert result.new_access_token == "T"
        assert len(fake_http.token_requests) == 1

    async def test_new_request_after_release(
        self,
        broker: AccessTokenBroker,
        fake_http: FakeHTTPClient,
        make_context: ContextFactory,
    ) -> None:
        """Test that a request made after release starts a fresh token POST."""
        fake_http.script_tokens(token_response("T1"), token_response("T2"))
        first = make_context()
        broker.request_token(first)
        assert (await first.completion.future).new_access_token == "T1"

        second = make_context()
        broker.request_token(second)
        assert (await second.completion.future).new_access_token == "T2"

        assert len(fake_http.token_requests) == 2


class TestTokenRequest:
    """Test the token request wire format."""

    async def test_form_body_and_headers(
        self,
        broker: AccessTokenBroker,
        fake_http: FakeHTTPClient,
        make_context: ContextFactory,
    ) -> None:
        """Test the client_credentials form sent to the token endpoint."""
        context = make_context()
        broker.request_token(context)
        _ = await context.completion.future

        request = fake_http.token_requests[0]
        assert request.url == DEFAULT_TOKEN_URL
        assert request.header("Content-Type") == "application/x-www-form-urlencoded"
        assert request.form == {
            "grant_type": "client_credentials",
            "client_id": "a",
            "client_secret": "b",
            "scope": "notify.windows.com",
        }

    async def test_custom_endpoint_and_scope(self, make_context: ContextFactory) -> None:
        """Test that token_url and scope are configurable."""
        fake_http = FakeHTTPClient(token_url="https://login.example.test/token")
        broker = AccessTokenBroker(
            fake_http,
            on_token=_resolve_with_token,
            token_url="https://login.example.test/token",
            scope="custom.scope",
        )
        context = make_context()
        broker.request_token(context)
        _ = await context.completion.future

        assert fake_http.token_requests[0].form["scope"] == "custom.scope"


class TestTokenFailures:
    """Test that failures reach every queued send."""

    async def test_http_error_shared_by_all_queued_sends(
        self,
        broker: AccessTokenBroker,
        fake_http: FakeHTTPClient,
        make_context: ContextFactory,
    ) -> None:
        """Test that a non-200 token answer fails all queued sends with one error."""
        fake_http.script_tokens(status_response(400, body='{"error":"invalid_client"}'))
        contexts = [make_context() for _ in range(3)]
        for context in contexts:
            broker.request_token(context)

        outcomes = await asyncio.gather(
            *(context.completion.future for context in contexts),
            return_exceptions=True,
        )

        first = outcomes[0]
        assert isinstance(first, TokenAcquisitionError)
        assert all(outcome is first for outcome in outcomes)
        assert first.error_type is WNSErrorType.TOKEN_HTTP_ERROR
        assert first.status_code == 400
        assert str(first) == (
            'Unable to obtain access token for WNS. HTTP status code: 400. HTTP response body: {"error":"invalid_client"}'
        )
        assert fake_http.notification_requests == []

    @pytest.mark.parametrize(
        "body",
        [
            "not json",
            "[]",
            '{"token_type": "bearer"}',
            '{"access_token": 12, "token_type": "bearer"}',
            '{"access_token": "T", "token_type": "mac"}',
        ],
    )
    async def test_invalid_body_rejected(
        self,
        broker: AccessTokenBroker,
        fake_http: FakeHTTPClient,
        make_context: ContextFactory,
        body: str,
    ) -> None:
        """Test that malformed token bodies fail as invalid responses."""
        fake_http.script_tokens(Response(status=200, body=body, headers={}))
        context = make_context()
        broker.request_token(context)

        with pytest.raises(TokenAcquisitionError) as exc_info:
            _ = await context.completion.future

        assert exc_info.value.error_type is WNSErrorType.INVALID_TOKEN_RESPONSE
        assert str(exc_info.value) == f"Unable to obtain access token for WNS. Invalid response body: {body}"

    async def test_transport_error(
        self,
        broker: AccessTokenBroker,
        fake_http: FakeHTTPClient,
        make_context: ContextFactory,
    ) -> None:
        """Test that connection failures become TransportError with the cause attached."""
        cause = OSError("Connection refused")
        fake_http.script_tokens(cause)
        context = make_context()
        broker.request_token(context)

        with pytest.raises(TransportError) as exc_info:
            _ = await context.completion.future

        assert str(exc_info.value) == (
            "Unable to send request for access token to Windows Notification Service: Connection refused"
        )
        assert exc_info.value.inner_error is cause
        assert exc_info.value.__cause__ is cause

    async def test_failure_clears_queue(
        self,
        broker: AccessTokenBroker,
        fake_http: FakeHTTPClient,
        make_context: ContextFactory,
    ) -> None:
        """Test that the next request after a failure retries the token endpoint."""
        fake_http.script_tokens(status_response(503))
        failed = make_context()
        broker.request_token(failed)
        with pytest.raises(TokenAcquisitionError):
            _ = await failed.completion.future

        retried = make_context()
        broker.request_token(retried)
        assert (await retried.completion.future).new_access_token == "T"


class TestClose:
    """Test broker shutdown."""

    async def test_aclose_fails_queued_sends(self, make_context: ContextFactory) -> None:
        """Test that closing cancels the in-flight request and fails its queue."""
        fake_http = FakeHTTPClient(token_gate=asyncio.Event())
        broker = AccessTokenBroker(fake_http, on_token=_resolve_with_token)
        contexts = [make_context() for _ in range(2)]
        for context in contexts:
            broker.request_token(context)
        await asyncio.sleep(0)

        await broker.aclose()

        for context in contexts:
            with pytest.raises(WNSError) as exc_info:
                _ = await context.completion.future
            assert exc_info.value.error_type is WNSErrorType.CLOSED
        assert not broker.has_pending(contexts[0].key)

    async def test_aclose_before_request_starts(
        self,
        broker: AccessTokenBroker,
        make_context: ContextFactory,
    ) -> None:
        """Test that a request cancelled before its first step still fails its queue."""
        context = make_context()
        broker.request_token(context)

        await broker.aclose()

        with pytest.raises(WNSError, match="closed"):
            _ = await context.completion.future
