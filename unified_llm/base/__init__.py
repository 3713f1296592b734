"""
unified_llm base package

Provider-agnostic building blocks shared by every facade:
- Models: normalized request, chunks, usage and the result type
- Errors: closed taxonomy plus classification
- Resilience: retry policy and executor
- Transport: shared httpx client, headers and the invoker
- Streaming: parsing modes, decoder and metrics
- Factory: creation of provider facades over one transport
"""

from .cancellation import CancellationToken, CancelledError
from .client_base import BaseHttpLlmClient
from .errors import (
    ContentExtractionError,
    ErrorKind,
    LlmError,
    classify_exception,
    classify_http_response,
    parse_retry_after_seconds,
)
from .factory import LlmClientFactory, UnknownProviderError
from .interfaces import ContentExtractor, LlmClient, RequestBuilder, SupportsImageGeneration
from .models import (
    GenerationRequest,
    LlmResult,
    LlmUsage,
    StreamChunk,
    TypedStreamChunk,
    UsageSink,
    build_generation_request,
)
from .resilience import NO_RETRY, RetryPolicy, execute_with_retry, retry
from .response import ResponseProcessor
from .streaming import StreamDecoder, StreamMetrics, StreamParsingMode
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    # Models
    "GenerationRequest",
    "build_generation_request",
    "StreamChunk",
    "TypedStreamChunk",
    "LlmUsage",
    "UsageSink",
    "LlmResult",
    # Errors
    "ErrorKind",
    "LlmError",
    "ContentExtractionError",
    "classify_exception",
    "classify_http_response",
    "parse_retry_after_seconds",
    # Interfaces
    "LlmClient",
    "RequestBuilder",
    "ContentExtractor",
    "SupportsImageGeneration",
    "BaseHttpLlmClient",
    # Resilience
    "RetryPolicy",
    "NO_RETRY",
    "execute_with_retry",
    "retry",
    # Processing / streaming
    "ResponseProcessor",
    "StreamDecoder",
    "StreamMetrics",
    "StreamParsingMode",
    # Infra
    "CancellationToken",
    "CancelledError",
    "TimeoutConfig",
    "get_timeout_config",
    "LlmClientFactory",
    "UnknownProviderError",
]
