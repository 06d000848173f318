# =============================================================================
# Módulo de Extracción de la Respuesta del Modelo
#
# Dos etapas independientes:
#   1. find_json_block: localiza el objeto JSON dentro del texto libre.
#   2. decode_analysis_result: decodifica ese bloque de forma estricta.
# =============================================================================

import json
import logging
import re
from typing import Optional

from product_analyzer.exceptions import ExtractionError
from product_analyzer.schemas import RESULT_FIELDS, AnalysisResult

logger = logging.getLogger(__name__)

# Codicioso: desde la primera '{' hasta la última '}', cruzando saltos de línea.
JSON_BLOCK_PATTERN = re.compile(r"\{[\s\S]*\}")


def find_json_block(text: str) -> Optional[str]:
    """Devuelve el substring entre la primera '{' y la última '}', o None."""
    if not text:
        return None
    match = JSON_BLOCK_PATTERN.search(text)
    return match.group(0) if match else None


def decode_analysis_result(block: str) -> AnalysisResult:
    """
    Decodifica el bloque JSON en un AnalysisResult.

    No se exige que estén los cinco campos: los ausentes quedan como cadena
    vacía y se registran como advertencia.
    """
    try:
        data = json.loads(block)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Invalid JSON in Gemini response: {e.msg}") from e

    if not isinstance(data, dict):
        raise ExtractionError("Gemini response JSON is not an object")

    missing_fields = [name for name in RESULT_FIELDS if name not in data]
    if missing_fields:
        logger.warning(f"La respuesta de Gemini no incluye los campos: {missing_fields}")

    return AnalysisResult.model_validate(data)


def extract_analysis_result(response_text: str) -> AnalysisResult:
    block = find_json_block(response_text)
    if block is None:
        logger.error(f"No se encontró JSON en la respuesta de Gemini: {response_text[:200]!r}")
        raise ExtractionError("Could not extract JSON from Gemini response")
    return decode_analysis_result(block)
