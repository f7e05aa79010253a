"""
Text-to-speech endpoint.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from trip_assistant.api.dependencies import get_speech_service
from trip_assistant.api.schemas import SpeechRequest
from trip_assistant.services.speech_service import SpeechService

router = APIRouter(prefix="/api", tags=["speech"])


@router.post("/text-to-speech")
async def text_to_speech(
    body: SpeechRequest,
    speech: Annotated[SpeechService, Depends(get_speech_service)],
):
    audio, media_type = await speech.synthesize(
        body.text, body.voice_id, body.provider
    )
    return Response(content=audio, media_type=media_type)
