"""
Text-to-speech through ElevenLabs or Cartesia Sonic.
"""

from enum import Enum
from typing import Any

import aiohttp

from trip_assistant.config import APIConfig
from trip_assistant.utils.error_handling import APIError, ValidationError
from trip_assistant.utils.logging import get_logger

logger = get_logger(__name__)

ELEVENLABS_API_URL = "https://api.elevenlabs.io/v1/text-to-speech"
ELEVENLABS_DEFAULT_VOICE = "EXAVITQu4vr4xnSDxMaL"

SONIC_API_URL = "https://api.cartesia.ai/tts/bytes"
SONIC_API_VERSION = "2024-06-10"
SONIC_MODEL = "sonic-3"
SONIC_DEFAULT_VOICE = "9cebb910-d4b7-4a4a-85a4-12c79137724c"

MAX_TEXT_LENGTH = 5000

HTTP_STATUS_OK = 200
HTTP_STATUS_REDIRECT = 300


class SpeechProvider(str, Enum):
    ELEVENLABS = "elevenlabs"
    SONIC = "sonic"


MEDIA_TYPES = {
    SpeechProvider.ELEVENLABS: "audio/mpeg",
    SpeechProvider.SONIC: "audio/wav",
}


class SpeechService:
    """Synthesizes speech audio with aiohttp."""

    def __init__(self, api_config: APIConfig, timeout: float = 30.0):
        self.api_config = api_config
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def synthesize(
        self,
        text: str,
        voice_id: str | None = None,
        provider: SpeechProvider | str = SpeechProvider.ELEVENLABS,
    ) -> tuple[bytes, str]:
        """
        Convert ``text`` to audio.

        Args:
            text: Text to speak
            voice_id: Provider voice id (optional)
            provider: Which provider to use

        Returns:
            Tuple of (audio bytes, media type)

        Raises:
            ValidationError: If the text is empty or too long
            APIError: If the provider key is missing or the request fails
        """
        if not text or not text.strip():
            raise ValidationError("Text is required")
        if len(text) > MAX_TEXT_LENGTH:
            raise ValidationError(f"Text too long (max {MAX_TEXT_LENGTH} chars)")

        try:
            provider = SpeechProvider(provider)
        except ValueError as e:
            raise ValidationError(f"Unknown speech provider: {provider}") from e

        if provider is SpeechProvider.SONIC:
            audio = await self._sonic(text, voice_id or SONIC_DEFAULT_VOICE)
        else:
            audio = await self._elevenlabs(text, voice_id or ELEVENLABS_DEFAULT_VOICE)

        logger.info(f"{provider.value} audio generated, {len(audio)} bytes")
        return audio, MEDIA_TYPES[provider]

    async def _elevenlabs(self, text: str, voice_id: str) -> bytes:
        if not self.api_config.elevenlabs_api_key:
            raise APIError("ELEVENLABS_API_KEY is not configured", "ElevenLabs")

        return await self._post(
            f"{ELEVENLABS_API_URL}/{voice_id}",
            service_name="ElevenLabs",
            headers={
                "accept": "audio/mpeg",
                "xi-api-key": self.api_config.elevenlabs_api_key,
            },
            payload={
                "text": text,
                "voice_settings": {
                    "stability": 0.6,
                    "similarity_boost": 0.8,
                    "use_speaker_boost": True,
                },
            },
        )

    async def _sonic(self, text: str, voice_id: str) -> bytes:
        if not self.api_config.sonic_api_key:
            raise APIError("SONIC_API_KEY is not configured", "Sonic")

        return await self._post(
            SONIC_API_URL,
            service_name="Sonic",
            headers={
                "Cartesia-Version": SONIC_API_VERSION,
                "X-API-Key": self.api_config.sonic_api_key,
            },
            payload={
                "model_id": SONIC_MODEL,
                "transcript": text,
                "voice": {"mode": "id", "id": voice_id},
                "output_format": {
                    "container": "wav",
                    "encoding": "pcm_f32le",
                    "sample_rate": 44100,
                },
                "language": "en",
            },
        )

    async def _post(
        self,
        url: str,
        service_name: str,
        headers: dict[str, str],
        payload: dict[str, Any],
    ) -> bytes:
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(url, json=payload, headers=headers) as response:
                    status_code = response.status
                    if not (HTTP_STATUS_OK <= status_code < HTTP_STATUS_REDIRECT):
                        error_text = await response.text()
                        logger.error(
                            f"{service_name} API error: {status_code} {error_text}"
                        )
                        raise APIError(
                            f"Speech request failed: {error_text}",
                            service_name,
                            status_code=status_code,
                        )
                    return await response.read()
        except aiohttp.ClientError as e:
            raise APIError("Speech request failed", service_name, original_error=e) from e
