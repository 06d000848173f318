# =============================================================================
# Taxonomía de Errores del Pipeline
#
# Cada error conoce el código HTTP con el que se responde al cliente. La
# degradación de la transcripción NO es un error: es un valor
# (ver models.TranscriptUnavailable).
# =============================================================================

from typing import Optional


class ProductAnalyzerError(Exception):
    """Error base. 'message' es lo único que ve el cliente."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthenticatedError(ProductAnalyzerError):
    """Credencial ausente o inválida, o fallo al consultar el servicio de identidad."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class InvalidRequestError(ProductAnalyzerError):
    status_code = 400


class ConfigurationError(ProductAnalyzerError):
    status_code = 500


class GenerationError(ProductAnalyzerError):
    """
    La llamada de análisis a Gemini falló o no devolvió texto.

    'upstream_status' y 'body' se registran en el servidor; al cliente solo
    le llega el mensaje genérico.
    """

    status_code = 500

    def __init__(self, message: str, upstream_status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body


class ExtractionError(ProductAnalyzerError):
    status_code = 500
