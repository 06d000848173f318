PROMPT = "Transcribe este audio del usuario. Devuelve solo el texto transcrito en español, sin comentarios adicionales."
