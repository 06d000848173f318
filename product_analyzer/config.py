# =============================================================================
# Módulo de Configuración del Analizador de Productos
#
# Toda la configuración se lee UNA sola vez al arrancar la aplicación y se
# pasa explícitamente al pipeline y a cada componente. Si falta una variable
# obligatoria, la aplicación no arranca.
# =============================================================================

import logging

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from product_analyzer.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

REQUIRED_VARIABLES = ("GEMINI_API_KEY", "SUPABASE_URL", "SUPABASE_ANON_KEY")


class Settings(BaseSettings):
    """
    Configuración central del servicio.

    Las variables de entorno se leen sin prefijo (GEMINI_API_KEY,
    SUPABASE_URL, SUPABASE_ANON_KEY), igual que en el despliegue en Supabase.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # --- Credenciales y servicios externos (obligatorios) ---
    gemini_api_key: str = Field(min_length=1, description="API key de Gemini")
    supabase_url: str = Field(min_length=1, description="URL base de Supabase (Auth)")
    supabase_anon_key: str = Field(min_length=1, description="Clave pública de Supabase")

    # --- Modelos de Gemini ---
    gemini_model: str = Field(default="gemini-1.5-flash")
    gemini_transcription_model: str = Field(default="gemini-1.5-flash")

    # --- Tipos MIME por defecto ---
    default_image_mime_type: str = Field(default="image/jpeg")
    # El grabador del navegador produce audio/webm.
    default_audio_mime_type: str = Field(default="audio/webm")

    # --- Tiempos límite de las llamadas salientes (segundos) ---
    http_timeout_seconds: float = Field(default=15.0, gt=0)
    gemini_timeout_seconds: float = Field(default=60.0, gt=0)

    log_level: str = Field(default="INFO")

    @field_validator("gemini_api_key", "supabase_url", "supabase_anon_key", mode="before")
    @classmethod
    def _strip_quotes(cls, value):
        # Saneamos las variables, eliminando espacios y comillas.
        if isinstance(value, str):
            return value.strip().strip('"\'')
        return value

    @field_validator("supabase_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def auth_user_endpoint(self) -> str:
        return f"{self.supabase_url}/auth/v1/user"

    @property
    def gemini_timeout_ms(self) -> int:
        return int(self.gemini_timeout_seconds * 1000)


def load_settings(**overrides) -> Settings:
    """
    Construye la configuración a partir del entorno.

    Lanza ConfigurationError si falta alguna variable obligatoria o si algún
    valor no es válido, nombrando los campos afectados.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        invalid_fields = sorted({str(err["loc"][0]).upper() for err in e.errors() if err.get("loc")})
        missing = [name for name in REQUIRED_VARIABLES if name in invalid_fields]
        if missing:
            message = f"Missing required configuration: {', '.join(missing)}"
        else:
            message = f"Invalid configuration: {', '.join(invalid_fields)}"
        logger.critical(message)
        raise ConfigurationError(message) from e
