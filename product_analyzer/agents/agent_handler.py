# =============================================================================
# Orquestador del Pipeline de Análisis
#
# Secuencia por petición (cada paso espera al anterior):
#   Auth -> Parseo del cuerpo -> Transcripción (best-effort) -> Generación
#   -> Extracción -> Resultado
# Cualquier fallo, salvo la transcripción, corta el pipeline con una
# excepción de product_analyzer.exceptions.
# =============================================================================

import logging
import time
from typing import Optional

import httpx
from google import genai
from pydantic import ValidationError

from product_analyzer import auth_client
from product_analyzer.config import Settings
from product_analyzer.exceptions import InvalidRequestError, UnauthenticatedError
from product_analyzer.models import Transcript
from product_analyzer.schemas import AnalysisRequest, AnalysisResult
from .product_analysis.agent import build_composed_prompt, detect_image_mime_type, generate_product_content
from .prompt_generator import compose_user_text
from .response_parser import extract_analysis_result
from .transcription.agent import transcribe_audio

logger = logging.getLogger(__name__)


async def authenticate(
    authorization_header: Optional[str],
    http_client: httpx.AsyncClient,
    settings: Settings,
) -> None:
    """Lanza UnauthenticatedError si la credencial falta o no es válida."""
    token = auth_client.extract_bearer_token(authorization_header)
    if token is None:
        logger.warning("Petición rechazada: header Authorization ausente o sin formato Bearer.")
        raise UnauthenticatedError()
    if not await auth_client.is_token_valid(token, http_client, settings):
        raise UnauthenticatedError()


def parse_request_body(raw_body: bytes) -> AnalysisRequest:
    try:
        return AnalysisRequest.model_validate_json(raw_body)
    except ValidationError as e:
        first_error = e.errors()[0]
        location = ".".join(str(part) for part in first_error.get("loc", ())) or "body"
        logger.warning(f"Cuerpo de petición inválido ({location}): {first_error.get('msg')}")
        raise InvalidRequestError(f"Invalid request body: {location}: {first_error.get('msg')}") from e


async def process_analysis_request(
    authorization_header: Optional[str],
    raw_body: bytes,
    http_client: httpx.AsyncClient,
    genai_client: genai.Client,
    settings: Settings,
) -> AnalysisResult:
    """
    Ejecuta el pipeline completo para una petición y devuelve el resultado
    estructurado. Todo o nada: no existen respuestas parciales.
    """
    start_time = time.time()

    # 1. Autenticación (antes de mirar el cuerpo)
    await authenticate(authorization_header, http_client, settings)

    # 2. Parseo y validación del cuerpo
    analysis_request = parse_request_body(raw_body)
    try:
        image_data, declared_mime = analysis_request.decode_image()
    except ValueError as e:
        logger.warning(f"Imagen inválida en la petición: {e}")
        raise InvalidRequestError(str(e)) from e

    # 3. Transcripción opcional; nunca corta el pipeline
    outcome = await transcribe_audio(analysis_request.audio_url, http_client, genai_client, settings)
    transcript = outcome.text if isinstance(outcome, Transcript) else None
    if transcript is None and analysis_request.audio_url:
        logger.warning(f"Se continúa sin transcripción (motivo: {outcome.reason}).")

    # 4. Generación
    composed_text = compose_user_text(analysis_request.text, transcript)
    mime_type = detect_image_mime_type(image_data, declared_mime, settings.default_image_mime_type)
    composed_prompt = build_composed_prompt(image_data, mime_type, composed_text)
    response_text = await generate_product_content(composed_prompt, genai_client, settings)

    # 5. Extracción
    result = extract_analysis_result(response_text)

    duration_ms = round((time.time() - start_time) * 1000, 2)
    logger.info(
        f"Análisis completado en {duration_ms} ms (imagen {mime_type}, "
        f"{len(image_data)} bytes, con audio: {transcript is not None})."
    )
    return result
