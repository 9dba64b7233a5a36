import json
import logging
from typing import Optional

import httpx
import openai
from openai import AsyncOpenAI

from config import AppConfig, ModelConfig, ModelType
from utils import count_tokens

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    """Base class for failures of a chat-completion call."""


class AuthError(CompletionError):
    """No API key is available; nothing was sent."""


class RequestError(CompletionError):
    """The request could not be delivered or the endpoint answered with an error status."""


class MalformedResponseError(CompletionError):
    """The endpoint answered successfully but without the expected message content."""


def _log_token_count(label: str, messages: list[dict]):
    """
    Log the token count of `messages` at info level.

    Counting is best-effort: a tokenizer failure (e.g. tiktoken unable to
    fetch its encoding offline) is logged as a warning and never raised.

    Args:
        label: What is being counted ("request" or "response").
        messages: Chat messages whose content is counted.
    """
    if not logger.isEnabledFor(logging.INFO):
        return
    try:
        tokens = count_tokens(messages)
    except Exception as e:
        logger.warning(f"⚠️  Could not count tokens in {label}: {e}")
        return
    logger.info(f"📏 Tokens in {label}: {tokens}")


def _log_request(model: ModelConfig, messages: list[dict]):
    """
    Log the request being sent to the model for debugging and traceability.

    Args:
        model: The model configuration being used.
        messages: The list of messages sent to the LLM.
    """
    logger.debug(
        f"📝 Prompt sent to model '{model.name}':\n{json.dumps(messages, indent=2, ensure_ascii=False)}"
    )
    _log_token_count("request", messages)


def _log_response(model: ModelConfig, answer: str):
    """
    Log the response returned from the model.

    Args:
        model: The model configuration used.
        answer: The full text response.
    """
    logger.debug(f"🧠 Response from {model.name}:\n{answer}")
    _log_token_count("response", [{"role": "assistant", "content": answer}])


def _error_message(resp: httpx.Response) -> str:
    try:
        detail = resp.json().get("error", {}).get("message")
    except (ValueError, AttributeError):
        detail = None
    return detail or f"API request failed: {resp.status_code}"


def _extract_content(data) -> str:
    """
    Pull `choices[0].message.content` out of a decoded response body.

    Raises:
        MalformedResponseError: If any part of that path is missing.
    """
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise MalformedResponseError("Invalid response from API")
    if not isinstance(content, str):
        raise MalformedResponseError("Invalid response from API")
    return content


class CompletionClient:
    """
    Sends an assembled message list to the chat-completion endpoint.

    Both backends talk to the same OpenAI-compatible API; `ModelType.HTTP` posts
    the JSON body with httpx, `ModelType.OPENAI` goes through the OpenAI SDK.

    Args:
        config: Global application configuration.
        transport: Optional httpx transport, used instead of the network (tests).
    """

    def __init__(self, config: AppConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.model = config.model
        self.transport = transport

    async def send(self, messages: list[dict], api_key: Optional[str]) -> str:
        """
        Send a non-streaming chat completion request.

        Args:
            messages: List of chat messages in OpenAI format, system message first.
            api_key: Bearer token for the endpoint.

        Returns:
            The assistant's reply text.

        Raises:
            AuthError: If `api_key` is missing.
            RequestError: If the call fails or returns a non-success status.
            MalformedResponseError: If the response lacks the message content.
            ValueError: If the model type is unsupported.
        """
        if not api_key:
            raise AuthError("API key not configured")

        _log_request(self.model, messages)

        if self.model.model_type == ModelType.HTTP:
            result = await self._http_completion(messages, api_key)
        elif self.model.model_type == ModelType.OPENAI:
            result = await self._openai_completion(messages, api_key)
        else:
            raise ValueError(f"Unsupported model type: {self.model.model_type}")

        _log_response(self.model, result)
        return result

    async def _http_completion(self, messages: list[dict], api_key: str) -> str:
        model = self.model
        async with httpx.AsyncClient(transport=self.transport, timeout=model.timeout) as client:
            try:
                resp = await client.post(
                    f"{model.url}/chat/completions",
                    headers={"Authorization": f"Bearer {api_key}"},
                    json={
                        "model": model.name,
                        "messages": messages,
                        "temperature": model.temperature,
                        "max_tokens": model.max_response_tokens,
                        "top_p": model.top_p,
                        "stream": False,
                    },
                )
            except httpx.HTTPError as e:
                logger.error(f"❌ Request to {model.url} failed: {e}")
                raise RequestError(f"API request failed: {e}") from e

        if not resp.is_success:
            message = _error_message(resp)
            logger.error(f"❌ Completion endpoint returned {resp.status_code}: {message}")
            raise RequestError(message)

        try:
            data = resp.json()
        except ValueError:
            raise MalformedResponseError("Invalid response from API")
        return _extract_content(data)

    async def _openai_completion(self, messages: list[dict], api_key: str) -> str:
        model = self.model
        http_client = None
        if self.transport is not None:
            http_client = httpx.AsyncClient(transport=self.transport)

        client = AsyncOpenAI(
            api_key=api_key,
            base_url=model.url,
            timeout=model.timeout,
            max_retries=0,
            http_client=http_client,
        )
        try:
            response = await client.chat.completions.create(
                model=model.name,
                messages=messages,
                max_tokens=model.max_response_tokens,
                temperature=model.temperature,
                top_p=model.top_p,
            )
        except openai.APIStatusError as e:
            logger.error(f"❌ Completion endpoint returned {e.status_code}: {e.message}")
            raise RequestError(e.message or f"API request failed: {e.status_code}") from e
        except openai.APIError as e:
            logger.error(f"❌ Request to {model.url} failed: {e}")
            raise RequestError(f"API request failed: {e}") from e
        finally:
            await client.close()

        choices = getattr(response, "choices", None)
        message = getattr(choices[0], "message", None) if choices else None
        content = getattr(message, "content", None)
        if not isinstance(content, str):
            raise MalformedResponseError("Invalid response from API")
        return content
