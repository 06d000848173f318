# =============================================================================
# Agente de Análisis de Producto
#
# Recibe la imagen y el texto compuesto, construye el prompt multimodal y
# llama UNA vez a Gemini. No hay reintentos: cualquier fallo se propaga como
# GenerationError.
# =============================================================================

import logging
from io import BytesIO
from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from PIL import Image, UnidentifiedImageError

from product_analyzer.config import Settings
from product_analyzer.exceptions import GenerationError
from product_analyzer.models import ComposedPrompt
from ..prompt_generator import build_analysis_prompt

logger = logging.getLogger(__name__)


def detect_image_mime_type(image_data: bytes, declared: Optional[str], default: str) -> str:
    """
    Determina el tipo MIME de la imagen: el declarado en el data URL si
    existe; si no, el detectado por Pillow a partir de la cabecera; si no,
    el valor por defecto.
    """
    if declared and declared.startswith("image/"):
        return declared
    try:
        # Image.open solo lee la cabecera; no decodifica la imagen completa.
        with Image.open(BytesIO(image_data)) as img:
            detected = Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError, ValueError):
        detected = None
    return detected or default


def build_composed_prompt(image_data: bytes, mime_type: str, composed_text: str) -> ComposedPrompt:
    return ComposedPrompt(
        instruction_text=build_analysis_prompt(composed_text),
        image_data=image_data,
        mime_type=mime_type,
    )


async def generate_product_content(
    composed_prompt: ComposedPrompt,
    genai_client: genai.Client,
    settings: Settings,
) -> str:
    """Devuelve el texto crudo de Gemini o lanza GenerationError."""
    try:
        response = await genai_client.aio.models.generate_content(
            model=settings.gemini_model,
            contents=composed_prompt.to_contents(),
        )
    except genai_errors.APIError as e:
        body = str(e.details) if e.details is not None else e.message
        logger.error(f"Gemini API error (status {e.code}): {body}")
        raise GenerationError(f"Gemini API error: {e.code}", upstream_status=e.code, body=body) from e
    except httpx.HTTPError as e:
        logger.error(f"Error de red llamando a Gemini para el análisis: {e!r}", exc_info=True)
        raise GenerationError("Gemini API request failed") from e

    response_text = response.text
    if not response_text or not response_text.strip():
        logger.error("Gemini respondió sin texto utilizable para el análisis de la imagen.")
        raise GenerationError("No response from Gemini")
    return response_text
