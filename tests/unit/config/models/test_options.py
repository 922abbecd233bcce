"""Tests for per-send options."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from wns_push.config import AudioOptions, SendOptions
from wns_push.config.models import CREDENTIALS_MESSAGE
from wns_push.utils.sanitization import REDACTED


class TestSendOptions:
    """Test suite for SendOptions."""

    def test_from_none(self) -> None:
        options = SendOptions.from_value(None)

        assert options.client_id is None
        assert options.headers == {}

    def test_from_mapping(self) -> None:
        options = SendOptions.from_value(
            {"client_id": "a", "client_secret": "b", "headers": {"X-WNS-TTL": "60"}, "duration": "long"}
        )

        assert (options.client_id, options.client_secret) == ("a", "b")
        assert options.headers == {"X-WNS-TTL": "60"}
        assert options.duration == "long"

    def test_instance_passed_through(self) -> None:
        options = SendOptions(access_token="T")

        assert SendOptions.from_value(options) is options

    def test_empty_strings_normalized_to_none(self) -> None:
        options = SendOptions(client_id="", access_token="")

        assert options.client_id is None
        assert options.access_token is None

    def test_frozen(self) -> None:
        options = SendOptions()

        with pytest.raises(ValidationError):
            options.client_id = "a"  # pyright: ignore[reportAttributeAccessIssue]

    @pytest.mark.parametrize(
        ("data", "message"),
        [
            ({"client_id": 1}, CREDENTIALS_MESSAGE),
            ({"client_secret": ["b"]}, CREDENTIALS_MESSAGE),
            ({"access_token": 7}, "If options.access_token is specified, it must be a string."),
            ({"headers": {"X-WNS-TTL": 60}}, "The options.headers must map header names to string values."),
            ({"headers": "X-WNS-TTL: 60"}, "The options.headers must map header names to string values."),
            ({"duration": "medium"}, 'The options.duration must be a string value from the following set: ["long","short"]'),
            ({"launch": {"page": 1}}, "The options.launch must be a string value."),
        ],
    )
    def test_invalid_values(self, data: dict[str, object], message: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _ = SendOptions.model_validate(data)

        assert message in str(exc_info.value)

    def test_repr_redacts_secrets(self) -> None:
        options = SendOptions(client_id="a", client_secret="topsecret", access_token="EgAcAQ")
        text = repr(options)

        assert "topsecret" not in text
        assert "EgAcAQ" not in text
        assert text.count(REDACTED) == 2


class TestAudioOptions:
    """Test suite for AudioOptions."""

    @pytest.mark.parametrize(
        "src",
        ["Mail", "Looping.Call2", "ms-winsoundevent:Notification.Reminder"],
    )
    def test_known_sources_prefixed(self, src: str) -> None:
        audio = AudioOptions(src=src)

        assert audio.src is not None
        assert audio.src.startswith("ms-winsoundevent:Notification.")

    @pytest.mark.parametrize("src", ["Ringtone", "ms-winsoundevent:Notification.Ringtone", 3])
    def test_unknown_source_rejected(self, src: object) -> None:
        with pytest.raises(ValidationError, match="options.audio.src must be a string value from the following set"):
            _ = AudioOptions.model_validate({"src": src})

    @pytest.mark.parametrize("field", ["loop", "silent"])
    def test_flags_must_be_boolean(self, field: str) -> None:
        with pytest.raises(ValidationError, match=f"The options.audio.{field} must be a boolean value."):
            _ = AudioOptions.model_validate({field: "yes"})

    def test_silent_without_source(self) -> None:
        audio = AudioOptions(silent=True)

        assert audio.src is None
        assert audio.silent is True

    def test_nested_in_send_options(self) -> None:
        options = SendOptions.from_value({"audio": {"src": "IM", "loop": True}})

        assert options.audio == AudioOptions(src="ms-winsoundevent:Notification.IM", loop=True)
