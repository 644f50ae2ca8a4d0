from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod

from openai import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    RateLimitError,
)
from openai.types import CreateEmbeddingResponse
from openai.types.chat import ChatCompletion
from pydantic import ValidationError

from app.core.config import settings
from app.llm.prompts import get_bot_reply_system_prompt, get_bot_reply_user_prompt
from app.llm.schemas import BotReply


class LLMServiceError(Exception):
    """Base error raised when the LLM service cannot fulfill a request."""

    def __init__(self, message: str, error_code: str) -> None:
        super().__init__(message)
        self.error_code = error_code


class LLMUnavailableError(LLMServiceError):
    """LLM is unavailable (timeout, rate limit, or upstream outage)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "llm_unavailable")


class LLMAuthenticationError(LLMServiceError):
    """LLM authentication failed (service credentials invalid)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "llm_auth_failed")


class LLMInvalidResponseError(LLMServiceError):
    """LLM returned an invalid or unexpected response."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "llm_response_invalid")


class EmbeddingRequestError(LLMServiceError):
    """Embeddings endpoint answered with a non-success status; message carries the body."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "embedding_request_failed")


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def generate_embedding(self, text: str) -> list[float]:
        """Return the embedding vector for a piece of text."""
        raise NotImplementedError

    @abstractmethod
    async def generate_bot_reply(
        self, message: str, context: str, language: str | None
    ) -> BotReply:
        """Compose a reply to a chat message from the retrieved context."""
        raise NotImplementedError


class OpenAIClient(LLMClient):
    """OpenAI implementation of LLM client."""

    def __init__(self, api_key: str | None = None) -> None:
        """Initialize OpenAI client."""
        self.client = AsyncOpenAI(api_key=api_key or settings.openai_api_key)

    def _handle_errors(self, error: Exception) -> LLMServiceError:
        """Log error with appropriate message based on error type."""
        if isinstance(error, APITimeoutError):
            logging.error(f"OpenAI API request timed out. Error: {error}")
            return LLMUnavailableError("LLM request timed out.")
        elif isinstance(error, APIConnectionError):
            logging.error(f"OpenAI API connection failed. Error: {error}")
            return LLMUnavailableError("LLM service unreachable.")
        elif isinstance(error, RateLimitError):
            logging.error(f"OpenAI API rate limit exceeded. Error: {error}")
            return LLMUnavailableError("LLM rate limit exceeded.")
        elif isinstance(error, AuthenticationError):
            logging.error(f"OpenAI API authentication failed. Error: {error}")
            return LLMAuthenticationError("LLM authentication failed.")
        elif isinstance(error, APIError):
            logging.error(f"OpenAI API error. Error: {error}")
            return LLMUnavailableError("LLM service error.")
        elif isinstance(error, (IndexError, AttributeError)):
            logging.error(f"Unexpected response structure from OpenAI. Error: {error}")
            return LLMInvalidResponseError("LLM returned an unexpected response.")
        elif isinstance(error, json.JSONDecodeError):
            logging.error(f"Invalid JSON response from OpenAI. Error: {error}")
            return LLMInvalidResponseError("LLM returned invalid JSON.")
        elif isinstance(error, ValidationError):
            logging.error(f"Pydantic validation failed. Error: {error}")
            return LLMInvalidResponseError("LLM response did not match expected format.")
        else:
            logging.error(f"Unexpected error calling OpenAI. Error: {error}")
            return LLMServiceError("LLM request failed.", "llm_error")

    async def generate_embedding(self, text: str) -> list[float]:
        """Embed text with the configured embedding model."""
        logging.info("Calling OpenAI API to generate embedding")
        try:
            response: CreateEmbeddingResponse = await self.client.embeddings.create(
                model=settings.embedding_model,
                input=text,
                encoding_format="float",
            )
            return list(response.data[0].embedding)
        except APIStatusError as e:
            # Surface the raw body so per-item failures say what the API rejected
            body = e.response.text
            logging.error(f"OpenAI API responded with an error: {body}")
            raise EmbeddingRequestError(f"OpenAI API error: {body}") from e
        except Exception as e:
            raise self._handle_errors(e) from e

    async def generate_bot_reply(
        self, message: str, context: str, language: str | None
    ) -> BotReply:
        """Ask the chat model for a JSON reply citing the context sources it used."""
        try:
            response: ChatCompletion = await self.client.chat.completions.create(
                model=settings.chat_model,
                messages=[
                    {"role": "system", "content": get_bot_reply_system_prompt(language)},
                    {"role": "user", "content": get_bot_reply_user_prompt(context, message)},
                ],
                response_format={"type": "json_object"},
            )

            content = response.choices[0].message.content
            if not content:
                raise LLMInvalidResponseError("No response received from OpenAI")

            parsed = json.loads(content)
            return BotReply.model_validate(parsed)

        except LLMServiceError:
            raise
        except Exception as e:
            raise self._handle_errors(e) from e
