"""Pruebas unitarias de product_analyzer.agents.prompt_generator."""

from product_analyzer.agents.prompt_generator import (
    DEFAULT_USER_TEXT,
    build_analysis_prompt,
    compose_user_text,
)


class TestComposeUserText:
    def test_without_transcript_is_verbatim(self):
        text = "Lámpara de escritorio, poco uso"
        assert compose_user_text(text) == text
        assert compose_user_text(text, None) == text

    def test_is_idempotent(self):
        first = compose_user_text("Silla", "de madera")
        assert compose_user_text("Silla", "de madera") == first

    def test_transcript_appended_after_blank_line(self):
        composed = compose_user_text("Silla", "es de roble macizo")
        assert composed == "Silla\n\nDescripción por voz del usuario: es de roble macizo"

    def test_empty_text_uses_default(self):
        assert compose_user_text("") == DEFAULT_USER_TEXT

    def test_whitespace_text_is_kept_verbatim(self):
        assert compose_user_text("   ") == "   "
        assert compose_user_text("  ", "una mesa").startswith("  \n\n")

    def test_empty_text_with_transcript(self):
        composed = compose_user_text("", "una bici roja")
        assert composed.startswith(DEFAULT_USER_TEXT + "\n\n")
        assert composed.endswith("una bici roja")


class TestBuildAnalysisPrompt:
    def test_includes_user_text(self):
        prompt = build_analysis_prompt("Bicicleta {rodada 26}")
        assert '"Bicicleta {rodada 26}"' in prompt

    def test_requests_the_five_fields_as_json_only(self):
        prompt = build_analysis_prompt("x")
        for field in (
            "caption_instagram",
            "titulo_marketplace",
            "precio_sugerido",
            "categoria",
            "descripcion_detallada",
        ):
            assert field in prompt
        assert "150-200 palabras" in prompt
        assert prompt.rstrip().endswith("Responde SOLO con el JSON, sin texto adicional.")
