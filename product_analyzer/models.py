# =============================================================================
# Valores internos del pipeline (no se exponen en la API)
# =============================================================================

from dataclasses import dataclass
from typing import Union

from google.genai import types


@dataclass(frozen=True)
class Transcript:
    """Transcripción utilizable del audio del usuario (nunca vacía)."""
    text: str


@dataclass(frozen=True)
class TranscriptUnavailable:
    """
    El audio no aportó texto. 'reason' es uno de: no_audio, fetch_failed,
    empty_audio, model_failed, empty_transcript.
    """
    reason: str


TranscriptionOutcome = Union[Transcript, TranscriptUnavailable]


@dataclass(frozen=True)
class ComposedPrompt:
    """Payload multimodal: instrucción de texto seguida de la imagen."""
    instruction_text: str
    image_data: bytes
    mime_type: str

    def to_contents(self) -> list[types.Content]:
        # El orden de las partes importa: primero el texto, luego la imagen.
        return [
            types.Content(
                role="user",
                parts=[
                    types.Part(text=self.instruction_text),
                    types.Part.from_bytes(data=self.image_data, mime_type=self.mime_type),
                ],
            )
        ]
