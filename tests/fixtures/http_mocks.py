"""Scripted HTTP transport for token and notification tests.

FakeHTTPClient implements the HTTPClient protocol. Requests to the token
endpoint and to channel URIs are answered from separate scripts, so a test
can say "the token request returns T, the first notification gets 401, the
second is received" without caring about interleaving.
"""

from __future__ import annotations

import asyncio
import json
from collections import deque
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from urllib.parse import parse_qs

from wns_push.config.models import DEFAULT_TOKEN_URL
from wns_push.types import Response

CHANNEL_URI = "https://db5.notify.windows.com/?token=AwYAAABtcQ%2bW0d"

type Scripted = Response | BaseException | Callable[[RecordedRequest], Response]


@dataclass(slots=True)
class RecordedRequest:
    """One POST seen by the fake transport."""

    url: str
    body: bytes
    headers: dict[str, str]

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    @property
    def form(self) -> dict[str, str]:
        """Decoded x-www-form-urlencoded body."""
        return {key: values[0] for key, values in parse_qs(self.text).items()}

    def header(self, name: str) -> str | None:
        """Look up a request header case-insensitively."""
        for key, value in self.headers.items():
            if key.lower() == name.lower():
                return value
        return None


def token_response(access_token: str = "T", token_type: str = "bearer") -> Response:
    """Successful token endpoint answer."""
    body = json.dumps({"access_token": access_token, "token_type": token_type})
    return Response(status=200, body=body, headers={"content-type": "application/json"})


def received_response(**headers: str) -> Response:
    """WNS answer for a notification that was accepted."""
    response_headers = {
        "x-wns-notificationstatus": "received",
        "x-wns-deviceconnectionstatus": "connected",
        "x-wns-msg-id": "1ACE8CB8A1D7A8DD",
    }
    response_headers.update(headers)
    return Response(status=200, body="", headers=response_headers)


def status_response(status: int, notification_status: str | None = None, body: str = "") -> Response:
    """WNS answer with an arbitrary status code."""
    headers: dict[str, str] = {}
    if notification_status is not None:
        headers["x-wns-notificationstatus"] = notification_status
    return Response(status=status, body=body, headers=headers)


@dataclass
class FakeHTTPClient:
    """HTTPClient double with per-endpoint scripted answers.

    Unscripted token requests get ``default_token``; unscripted
    notification requests get ``default_notification``. When ``token_gate``
    is set, token requests wait for it before answering.
    """

    token_url: str = DEFAULT_TOKEN_URL
    default_token: Scripted = field(default_factory=token_response)
    default_notification: Scripted = field(default_factory=received_response)
    token_gate: asyncio.Event | None = None
    requests: list[RecordedRequest] = field(default_factory=list)
    _token_script: deque[Scripted] = field(default_factory=deque)
    _notification_script: deque[Scripted] = field(default_factory=deque)

    def script_tokens(self, *answers: Scripted) -> None:
        self._token_script.extend(answers)

    def script_notifications(self, *answers: Scripted) -> None:
        self._notification_script.extend(answers)

    @property
    def token_requests(self) -> list[RecordedRequest]:
        return [request for request in self.requests if request.url == self.token_url]

    @property
    def notification_requests(self) -> list[RecordedRequest]:
        return [request for request in self.requests if request.url != self.token_url]

    async def post(self, url: str, body: bytes, *, headers: Mapping[str, str]) -> Response:
        request = RecordedRequest(url=url, body=body, headers=dict(headers))
        self.requests.append(request)

        if url == self.token_url:
            if self.token_gate is not None:
                _ = await self.token_gate.wait()
            answer = self._token_script.popleft() if self._token_script else self.default_token
        else:
            # Yield once so concurrent sends interleave like real I/O
            await asyncio.sleep(0)
            answer = self._notification_script.popleft() if self._notification_script else self.default_notification

        if isinstance(answer, BaseException):
            raise answer
        if callable(answer):
            return answer(request)
        return answer


def bearer_tokens(requests: Iterable[RecordedRequest]) -> list[str | None]:
    """Authorization header values of the given requests."""
    return [request.header("Authorization") for request in requests]
