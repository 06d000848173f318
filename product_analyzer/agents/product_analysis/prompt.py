# El texto del usuario se inserta en {user_text}. Las llaves literales del
# ejemplo de salida van duplicadas por str.format.
PROMPT = """Analiza esta imagen y el siguiente texto del usuario (incluyendo, si está presente, una descripción por voz transcrita): "{user_text}".

Genera un JSON con los siguientes campos:
- caption_instagram: Un caption atractivo para Instagram (máximo 150 caracteres, con emojis relevantes)
- titulo_marketplace: Un título conciso para marketplace (máximo 60 caracteres)
- precio_sugerido: Un precio sugerido en dólares (solo el número, ej: "29.99")
- categoria: La categoría del producto (ej: "Electrónica", "Ropa", "Hogar", etc.)
- descripcion_detallada: Una descripción detallada del producto para marketplace (150-200 palabras)

Ejemplo de salida:
{{
  "caption_instagram": "...",
  "titulo_marketplace": "...",
  "precio_sugerido": "29.99",
  "categoria": "...",
  "descripcion_detallada": "..."
}}

Responde SOLO con el JSON, sin texto adicional."""
