"""unified_llm package

One asynchronous client surface over an OpenAI-style chat completion API and
a Gemini-style content generation API.

Public API (re-exported):
    - Version: ``__version__``
    - Requests/results: :class:`GenerationRequest`, :class:`LlmResult`,
      :class:`StreamChunk`, :class:`TypedStreamChunk`, :class:`LlmUsage`
    - Errors: :class:`LlmError`, :class:`ErrorKind`
    - Clients: :class:`OpenAiClient`, :class:`GeminiClient`,
      :class:`LlmClientFactory`
    - Configs: :class:`OpenAiConfig`, :class:`GeminiConfig`,
      :class:`RetryPolicy`, :class:`StreamParsingMode`

Example::

    async with LlmClientFactory.from_env() as factory:
        client = factory.create_openai_client(OpenAiConfig.text_config())
        result = await client.generate_text(GenerationRequest.of("Say hi"))
        print(result.unwrap())
"""

from .base import (
    NO_RETRY,
    CancellationToken,
    ErrorKind,
    GenerationRequest,
    LlmClient,
    LlmClientFactory,
    LlmError,
    LlmResult,
    LlmUsage,
    RetryPolicy,
    StreamChunk,
    StreamParsingMode,
    TypedStreamChunk,
    build_generation_request,
)
from .base.logging import configure_logger, get_logger
from .gemini import GeminiClient, GeminiConfig, GeminiModel
from .openai import (
    ImageGenerationRequest,
    ImageResponseFormat,
    ImageResult,
    Models,
    OpenAiClient,
    OpenAiConfig,
    OpenAiImageModel,
    ResponseFormat,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "GenerationRequest",
    "build_generation_request",
    "LlmResult",
    "LlmUsage",
    "StreamChunk",
    "TypedStreamChunk",
    "LlmError",
    "ErrorKind",
    "LlmClient",
    "LlmClientFactory",
    "CancellationToken",
    "RetryPolicy",
    "NO_RETRY",
    "StreamParsingMode",
    "OpenAiClient",
    "OpenAiConfig",
    "Models",
    "ResponseFormat",
    "ImageGenerationRequest",
    "ImageResponseFormat",
    "ImageResult",
    "OpenAiImageModel",
    "GeminiClient",
    "GeminiConfig",
    "GeminiModel",
    "configure_logger",
    "get_logger",
]
