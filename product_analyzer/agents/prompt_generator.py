# =============================================================================
# Módulo de Composición de Prompts
#
# Une el texto escrito por el usuario con la transcripción de su audio (si
# existe) y genera la instrucción final para el análisis del producto.
# =============================================================================

from typing import Optional

from .product_analysis import prompt as analysis_prompt

DEFAULT_USER_TEXT = "Analiza esta imagen y genera información para venta"
VOICE_SECTION_LABEL = "Descripción por voz del usuario:"


def compose_user_text(user_text: str, transcript: Optional[str] = None) -> str:
    """
    Combina el texto original y la transcripción opcional en un solo string.

    La transcripción va en una sección etiquetada, separada por una línea en
    blanco, para que el modelo distinga lo escrito de lo hablado. Si el texto
    del usuario está vacío se usa una instrucción por defecto.
    """
    base_text = user_text or DEFAULT_USER_TEXT
    if transcript:
        return f"{base_text}\n\n{VOICE_SECTION_LABEL} {transcript}"
    return base_text


def build_analysis_prompt(composed_text: str) -> str:
    return analysis_prompt.PROMPT.format(user_text=composed_text)
