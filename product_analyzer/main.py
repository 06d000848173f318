# =============================================================================
# Módulo Principal del Analizador de Productos
#
# Arquitectura:
# - FastAPI asíncrono con gestión de ciclo de vida 'lifespan'.
# - Configuración explícita cargada UNA vez al construir la app; si falta
#   una variable obligatoria la app no arranca.
# - Clientes salientes (httpx y Gemini) creados al arranque y compartidos
#   entre peticiones; no hay estado mutable compartido.
# - El endpoint delega todo el pipeline a agents.agent_handler.
#
# Ejecución:  uvicorn product_analyzer.main:create_app --factory
# =============================================================================

# --- 1. Importaciones ---
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from google import genai
from google.genai import types

from product_analyzer.agents.agent_handler import process_analysis_request
from product_analyzer.config import Settings, load_settings
from product_analyzer.exceptions import ProductAnalyzerError
from product_analyzer.schemas import ErrorResponse

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}


# --- 2. Configuración Inicial ---
def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=CORS_HEADERS,
    )


# --- 3. Fábrica de la Aplicación ---
def create_app(
    settings: Optional[Settings] = None,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
    genai_client: Optional[genai.Client] = None,
) -> FastAPI:
    """
    Construye la aplicación FastAPI.

    'http_client' y 'genai_client' pueden inyectarse (p. ej. en pruebas); si
    no, se crean en el arranque y el cliente HTTP se cierra al apagar.
    """
    if settings is None:
        settings = load_settings()  # Lanza ConfigurationError si falta algo
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # --- FASE DE ARRANQUE ---
        logger.info("Iniciando servicios del analizador de productos...")
        owns_http_client = http_client is None
        app.state.http_client = (
            httpx.AsyncClient(timeout=settings.http_timeout_seconds) if owns_http_client else http_client
        )
        app.state.genai_client = genai_client if genai_client is not None else genai.Client(
            api_key=settings.gemini_api_key,
            http_options=types.HttpOptions(timeout=settings.gemini_timeout_ms),
        )
        logger.info(
            f"Clientes listos (modelo de análisis: {settings.gemini_model}, "
            f"modelo de transcripción: {settings.gemini_transcription_model})."
        )

        yield  # La aplicación está activa y lista para recibir peticiones

        # --- FASE DE APAGADO ---
        if owns_http_client:
            await app.state.http_client.aclose()
        logger.info("Servicios del analizador cerrados.")

    app = FastAPI(
        title="Product Analyzer API",
        description="Genera contenido de venta a partir de la imagen de un producto, texto y audio opcional.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # --- 4. CORS ---
    # El preflight se responde aquí mismo: sin autenticación ni llamadas externas.
    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    # --- 5. Mapeo de errores al sobre {"error": ...} ---
    @app.exception_handler(ProductAnalyzerError)
    async def product_analyzer_error_handler(request: Request, exc: ProductAnalyzerError):
        if exc.status_code >= 500:
            logger.error(f"Petición fallida ({exc.status_code}): {exc.message}")
        return error_response(exc.status_code, exc.message)

    # --- 6. Endpoints ---
    @app.get("/")
    async def read_root():
        """Endpoint de salud para verificar que la API está en línea."""
        return {"status": "Product analyzer API is running"}

    @app.post("/{path:path}")
    async def analyze_product(request: Request, path: str):
        """
        Analiza la imagen de un producto (más texto y audio opcionales) y
        devuelve el contenido de venta generado. Se acepta en cualquier ruta.
        """
        logger.info(f"Petición de análisis recibida en /{path}")
        try:
            result = await process_analysis_request(
                authorization_header=request.headers.get("Authorization"),
                raw_body=await request.body(),
                http_client=request.app.state.http_client,
                genai_client=request.app.state.genai_client,
                settings=settings,
            )
        except ProductAnalyzerError:
            raise
        except Exception as e:
            logger.error(f"Error inesperado procesando el análisis: {e}", exc_info=True)
            raise ProductAnalyzerError("Internal server error") from e
        return JSONResponse(content=result.model_dump(), headers=CORS_HEADERS)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        create_app(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )
