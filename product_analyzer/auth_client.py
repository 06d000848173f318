# =============================================================================
# Cliente de Autenticación (Supabase Auth)
#
# El token del llamante se valida remotamente contra el endpoint de usuario
# actual. Cualquier fallo (formato, red, estado no exitoso) cierra el paso:
# la petición termina en 401.
# =============================================================================

import logging
from typing import Optional

import httpx

from product_analyzer.config import Settings

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization_header: Optional[str]) -> Optional[str]:
    """Devuelve el token de un header 'Bearer <token>', o None si no tiene ese formato."""
    if not authorization_header or not authorization_header.startswith("Bearer "):
        return None
    token = authorization_header[len("Bearer "):].strip()
    # Un token con caracteres no ASCII no puede reenviarse como header HTTP.
    if not token or not token.isascii():
        return None
    return token


async def is_token_valid(token: str, http_client: httpx.AsyncClient, settings: Settings) -> bool:
    """
    Valida el token contra el endpoint 'usuario actual' de Supabase Auth.

    No se verifica la firma localmente: solo el servicio de identidad decide.
    Cualquier estado no exitoso, o un error de red, se considera inválido.
    """
    headers = {
        "Authorization": f"Bearer {token}",
        "apikey": settings.supabase_anon_key,
    }
    try:
        response = await http_client.get(
            settings.auth_user_endpoint,
            headers=headers,
            timeout=settings.http_timeout_seconds,
        )
    except httpx.HTTPError as e:
        logger.error(f"Error de red al validar el token con Supabase Auth: {e!r}")
        return False
    except UnicodeEncodeError:
        logger.warning("El token contiene caracteres no válidos para un header HTTP.")
        return False

    if not response.is_success:
        logger.warning(f"Supabase Auth rechazó el token (status {response.status_code}).")
        return False
    return True
