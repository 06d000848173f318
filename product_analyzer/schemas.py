# =============================================================================
# Esquemas Pydantic de la API (entrada, resultado y error)
# =============================================================================

import base64
import binascii
import json
import re
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Prefijo que agrega FileReader.readAsDataURL en el navegador.
DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,", re.IGNORECASE)

RESULT_FIELDS = (
    "caption_instagram",
    "titulo_marketplace",
    "precio_sugerido",
    "categoria",
    "descripcion_detallada",
)


class AnalysisRequest(BaseModel):
    """
    Cuerpo de la petición de análisis. Inmutable una vez validado.
    No se impone límite de tamaño ni de formato de imagen en esta capa.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    image_base64: str = Field(alias="imageBase64", min_length=1)
    text: str = ""
    audio_url: Optional[str] = Field(default=None, alias="audioUrl")

    @field_validator("text", mode="before")
    @classmethod
    def _none_text_is_empty(cls, value):
        return "" if value is None else value

    @field_validator("audio_url", mode="before")
    @classmethod
    def _blank_audio_url_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def decode_image(self) -> Tuple[bytes, Optional[str]]:
        """
        Decodifica 'imageBase64' y devuelve (bytes, mime_type).
        mime_type solo viene informado si el cliente envió un data URL.
        Lanza ValueError si el contenido no es base64 válido.
        """
        raw = self.image_base64.strip()
        declared_mime = None
        match = DATA_URL_PATTERN.match(raw)
        if match:
            declared_mime = match.group("mime").lower()
            raw = raw[match.end():]
        try:
            image_bytes = base64.b64decode("".join(raw.split()), validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"imageBase64 is not valid base64: {e}") from e
        if not image_bytes:
            raise ValueError("imageBase64 is empty")
        return image_bytes, declared_mime


class AnalysisResult(BaseModel):
    """
    Único formato de éxito visible para el cliente: exactamente cinco claves,
    todas de tipo string. Los campos ausentes en la salida del modelo se
    normalizan a cadena vacía y las claves extra se descartan.
    """

    model_config = ConfigDict(extra="ignore")

    caption_instagram: str = ""
    titulo_marketplace: str = ""
    precio_sugerido: str = ""
    categoria: str = ""
    descripcion_detallada: str = ""

    @field_validator(*RESULT_FIELDS, mode="before")
    @classmethod
    def _coerce_to_string(cls, value: Any) -> str:
        # El modelo a veces devuelve el precio como número: 29.99 -> "29.99"
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False)
        return str(value)


class ErrorResponse(BaseModel):
    error: str
