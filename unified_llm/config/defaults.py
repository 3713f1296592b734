"""unified_llm.config.defaults
==========================

Central place for small, stable default values used by the provider configs
and the factory. Plain constants only (no I/O) so every layer can import it
without circular dependencies.
"""

from __future__ import annotations

# ---- OpenAI (chat completions) ----
OPENAI_DEFAULT_MODEL = "gpt-4o-2024-08-06"
OPENAI_DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
OPENAI_IMAGES_PATH = "images/generations"
OPENAI_DEFAULT_IMAGES_URL = "https://api.openai.com/v1/images/generations"
OPENAI_API_VERSION_MARKER = "/v1/"

OPENAI_DEFAULT_TEMPERATURE = 0.28
OPENAI_DEFAULT_MAX_TOKENS = 4000
OPENAI_DEFAULT_TOP_P = 1.0
OPENAI_DEFAULT_FREQUENCY_PENALTY = 0.0
OPENAI_DEFAULT_PRESENCE_PENALTY = 0.0
OPENAI_MAX_STOP_SEQUENCES = 4
OPENAI_MAX_LOGIT_BIAS_ENTRIES = 300

# Presets
OPENAI_JSON_TEMPERATURE = 0.2
OPENAI_JSON_TOP_P = 0.8
OPENAI_TEXT_TEMPERATURE = 0.7
OPENAI_TEXT_TOP_P = 0.9

# Appended to the prompt in JSON object mode when nothing mentions JSON.
OPENAI_JSON_INSTRUCTION = " Please provide your response in JSON format."

# ---- Gemini (generateContent) ----
GEMINI_DEFAULT_MODEL = "gemini-1.5-flash-latest"
GEMINI_API_URL_TEMPLATE = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

GEMINI_DEFAULT_TEMPERATURE = 0.7
GEMINI_DEFAULT_TOP_K = 40
GEMINI_DEFAULT_TOP_P = 0.95
GEMINI_DEFAULT_MAX_OUTPUT_TOKENS = 2048
GEMINI_DEFAULT_CANDIDATE_COUNT = 1

# Joins the system message and the prompt for providers with one text channel.
SYSTEM_PROMPT_SEPARATOR = "\n\n"


__all__ = [
    "OPENAI_DEFAULT_MODEL",
    "OPENAI_DEFAULT_API_URL",
    "OPENAI_IMAGES_PATH",
    "OPENAI_DEFAULT_IMAGES_URL",
    "OPENAI_API_VERSION_MARKER",
    "OPENAI_DEFAULT_TEMPERATURE",
    "OPENAI_DEFAULT_MAX_TOKENS",
    "OPENAI_DEFAULT_TOP_P",
    "OPENAI_DEFAULT_FREQUENCY_PENALTY",
    "OPENAI_DEFAULT_PRESENCE_PENALTY",
    "OPENAI_MAX_STOP_SEQUENCES",
    "OPENAI_MAX_LOGIT_BIAS_ENTRIES",
    "OPENAI_JSON_TEMPERATURE",
    "OPENAI_JSON_TOP_P",
    "OPENAI_TEXT_TEMPERATURE",
    "OPENAI_TEXT_TOP_P",
    "OPENAI_JSON_INSTRUCTION",
    "GEMINI_DEFAULT_MODEL",
    "GEMINI_API_URL_TEMPLATE",
    "GEMINI_DEFAULT_TEMPERATURE",
    "GEMINI_DEFAULT_TOP_K",
    "GEMINI_DEFAULT_TOP_P",
    "GEMINI_DEFAULT_MAX_OUTPUT_TOKENS",
    "GEMINI_DEFAULT_CANDIDATE_COUNT",
    "SYSTEM_PROMPT_SEPARATOR",
]
