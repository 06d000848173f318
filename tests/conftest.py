"""Fixtures de pytest compartidas por las pruebas del analizador.

Ninguna prueba sale a la red: Supabase Auth y las descargas de audio pasan
por ``httpx.MockTransport`` y Gemini se sustituye por ``FakeGenaiClient``.
"""

import base64
import json
from io import BytesIO
from types import SimpleNamespace
from typing import Callable

import httpx
import pytest
from PIL import Image

from product_analyzer.config import Settings

AUTH_URL = "https://auth.example.test"
VALID_TOKEN = "valid-token"

MODEL_RESULT = {
    "caption_instagram": "Nice!",
    "titulo_marketplace": "Lamp",
    "precio_sugerido": "19.99",
    "categoria": "Home",
    "descripcion_detallada": "A lamp.",
}


class FakeGenaiModels:
    """Sustituto de ``client.aio.models`` que reproduce respuestas encoladas.

    Cada respuesta es el texto que devuelve el modelo (``str`` o ``None``) o
    una instancia de excepción a lanzar.
    """

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    async def generate_content(self, *, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents})
        if not self.replies:
            raise AssertionError("Unexpected call to Gemini")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(text=reply)


class FakeGenaiClient:
    def __init__(self, *replies):
        self.models = FakeGenaiModels(replies)
        self.aio = SimpleNamespace(models=self.models)

    @property
    def calls(self):
        return self.models.calls


@pytest.fixture
def test_settings() -> Settings:
    """Configuración con credenciales de prueba, ignorando cualquier .env local."""
    return Settings(
        gemini_api_key="test-gemini-key",
        supabase_url=AUTH_URL,
        supabase_anon_key="test-anon-key",
        _env_file=None,
    )


@pytest.fixture
def fake_genai() -> type:
    return FakeGenaiClient


@pytest.fixture
def model_result() -> dict:
    return dict(MODEL_RESULT)


@pytest.fixture
def model_output() -> str:
    """Respuesta del modelo con texto alrededor del objeto JSON."""
    return f"Here you go: {json.dumps(MODEL_RESULT)} thanks"


@pytest.fixture
def png_bytes() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def jpeg_bytes() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color=(30, 200, 30)).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def png_base64(png_bytes: bytes) -> str:
    return base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def request_log() -> list:
    """Acumula cada petición HTTP saliente que ve el transporte simulado."""
    return []


@pytest.fixture
def make_http_client(request_log: list) -> Callable[..., httpx.AsyncClient]:
    """Construye un ``httpx.AsyncClient`` respaldado por ``httpx.MockTransport``.

    Args:
        auth_status: Status que devuelve ``GET /auth/v1/user``.
        audio_status: Status que devuelve la URL del audio.
        audio_body: Bytes servidos para la URL del audio.
        audio_content_type: Header Content-Type de la respuesta de audio.
        auth_error: Excepción lanzada en lugar de responder la llamada de auth.
        audio_error: Excepción lanzada en lugar de responder la descarga de audio.
    """

    def factory(
        auth_status: int = 200,
        audio_status: int = 200,
        audio_body: bytes = b"fake-webm-bytes",
        audio_content_type: str = "audio/webm",
        auth_error: Exception = None,
        audio_error: Exception = None,
    ) -> httpx.AsyncClient:
        def handler(request: httpx.Request) -> httpx.Response:
            request_log.append(request)
            if request.url.path == "/auth/v1/user":
                if auth_error is not None:
                    raise auth_error
                if request.headers.get("Authorization") != f"Bearer {VALID_TOKEN}":
                    return httpx.Response(401, json={"msg": "invalid JWT"})
                return httpx.Response(auth_status, json={"id": "user-1"})
            if audio_error is not None:
                raise audio_error
            return httpx.Response(
                audio_status,
                content=audio_body,
                headers={"Content-Type": audio_content_type},
            )

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory
