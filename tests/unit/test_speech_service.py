"""Tests for the text-to-speech service."""

from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from trip_assistant.config import APIConfig
from trip_assistant.services.speech_service import (
    ELEVENLABS_DEFAULT_VOICE,
    MAX_TEXT_LENGTH,
    SONIC_API_URL,
    SpeechProvider,
    SpeechService,
)
from trip_assistant.utils.error_handling import APIError, ValidationError


@pytest.fixture
def mock_session():
    """Patch aiohttp.ClientSession; yields (session, response) mocks."""
    with patch("trip_assistant.services.speech_service.aiohttp.ClientSession") as cls:
        session = cls.return_value.__aenter__.return_value
        # post() is used as "async with", so it must not be a coroutine
        session.post = MagicMock()
        response = session.post.return_value.__aenter__.return_value
        response.status = 200
        response.read = AsyncMock(return_value=b"audio-bytes")
        response.text = AsyncMock(return_value="")
        yield session, response


@pytest.fixture
def service(test_config):
    return SpeechService(test_config.api)


async def test_elevenlabs_default_voice(service, mock_session):
    session, _ = mock_session

    audio, media_type = await service.synthesize("Welcome to Goa!")

    assert audio == b"audio-bytes"
    assert media_type == "audio/mpeg"
    url = session.post.call_args.args[0]
    kwargs = session.post.call_args.kwargs
    assert url.endswith(f"/{ELEVENLABS_DEFAULT_VOICE}")
    assert kwargs["headers"]["xi-api-key"] == "test-eleven"
    assert kwargs["json"]["text"] == "Welcome to Goa!"


async def test_sonic_provider(service, mock_session):
    session, _ = mock_session

    _, media_type = await service.synthesize("Namaste", voice_id="v-1", provider="sonic")

    assert media_type == "audio/wav"
    assert session.post.call_args.args[0] == SONIC_API_URL
    payload = session.post.call_args.kwargs["json"]
    assert payload["transcript"] == "Namaste"
    assert payload["voice"]["id"] == "v-1"
    assert session.post.call_args.kwargs["headers"]["X-API-Key"] == "test-sonic"


@pytest.mark.parametrize("text", ["", "   ", "a" * (MAX_TEXT_LENGTH + 1)])
async def test_invalid_text(service, mock_session, text):
    session, _ = mock_session

    with pytest.raises(ValidationError):
        await service.synthesize(text)
    session.post.assert_not_called()


async def test_unknown_provider(service, mock_session):
    with pytest.raises(ValidationError):
        await service.synthesize("Hello", provider="polly")


async def test_missing_key(mock_session):
    service = SpeechService(APIConfig(gemini_api_key="k"))

    with pytest.raises(APIError) as exc_info:
        await service.synthesize("Hello", provider=SpeechProvider.SONIC)
    assert exc_info.value.upstream_status is None


async def test_upstream_error(service, mock_session):
    _, response = mock_session
    response.status = 401
    response.text = AsyncMock(return_value="invalid api key")

    with pytest.raises(APIError) as exc_info:
        await service.synthesize("Hello")
    assert exc_info.value.upstream_status == 401
    assert exc_info.value.status_code == 502
    assert "invalid api key" in exc_info.value.message


async def test_connection_error(service):
    with patch("trip_assistant.services.speech_service.aiohttp.ClientSession") as cls:
        cls.return_value.__aenter__.side_effect = aiohttp.ClientConnectionError("down")

        with pytest.raises(APIError):
            await service.synthesize("Hello")
