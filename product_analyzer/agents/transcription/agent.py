# =============================================================================
# Agente de Transcripción de Audio
#
# El audio es un canal secundario: cualquier fallo (descarga, modelo,
# respuesta vacía) se degrada a "sin transcripción" y el análisis de la
# imagen continúa. Esta función nunca lanza excepciones al orquestador.
# =============================================================================

import logging
from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from product_analyzer.config import Settings
from product_analyzer.models import Transcript, TranscriptionOutcome, TranscriptUnavailable
from . import prompt

logger = logging.getLogger(__name__)


def resolve_audio_mime_type(content_type: Optional[str], default: str) -> str:
    """Usa el Content-Type de la descarga si es audio/*; si no, el valor por defecto."""
    if content_type:
        mime_type = content_type.split(";", 1)[0].strip().lower()
        if mime_type.startswith("audio/"):
            return mime_type
    return default


async def transcribe_audio(
    audio_url: Optional[str],
    http_client: httpx.AsyncClient,
    genai_client: genai.Client,
    settings: Settings,
) -> TranscriptionOutcome:
    if not audio_url:
        return TranscriptUnavailable("no_audio")

    # 1. Descargar el audio (URL firmada de vida corta, una sola vez)
    try:
        audio_response = await http_client.get(audio_url, timeout=settings.http_timeout_seconds)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(f"No se pudo descargar el audio para transcribir: {e!r}")
        return TranscriptUnavailable("fetch_failed")

    if not audio_response.is_success:
        logger.error(
            f"Descarga de audio fallida (status {audio_response.status_code}): {audio_response.text[:500]}"
        )
        return TranscriptUnavailable("fetch_failed")

    audio_bytes = audio_response.content
    if not audio_bytes:
        logger.warning("El audio descargado está vacío; se continúa sin transcripción.")
        return TranscriptUnavailable("empty_audio")

    mime_type = resolve_audio_mime_type(
        audio_response.headers.get("content-type"), settings.default_audio_mime_type
    )

    # 2. Pedir la transcripción a Gemini
    contents = [
        types.Content(
            role="user",
            parts=[
                types.Part(text=prompt.PROMPT),
                types.Part.from_bytes(data=audio_bytes, mime_type=mime_type),
            ],
        )
    ]
    try:
        response = await genai_client.aio.models.generate_content(
            model=settings.gemini_transcription_model,
            contents=contents,
        )
        transcription_text = (response.text or "").strip()
    except genai_errors.APIError as e:
        logger.error(f"Error de Gemini en la transcripción (status {e.code}): {e.message}")
        return TranscriptUnavailable("model_failed")
    except httpx.HTTPError as e:
        logger.error(f"Error de red llamando a Gemini para transcribir: {e!r}")
        return TranscriptUnavailable("model_failed")
    except Exception as e:
        logger.error(f"Error inesperado durante la transcripción de audio: {e}", exc_info=True)
        return TranscriptUnavailable("model_failed")

    if not transcription_text:
        logger.warning("Gemini no devolvió texto para el audio; se continúa sin transcripción.")
        return TranscriptUnavailable("empty_transcript")

    logger.info(f"Audio transcrito ({len(transcription_text)} caracteres, {mime_type}).")
    return Transcript(transcription_text)
