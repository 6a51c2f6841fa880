import json
import logging
from typing import Any, Mapping

import anthropic

import config

logger = logging.getLogger(__name__)

_client: anthropic.AsyncAnthropic | None = None


def get_client() -> anthropic.AsyncAnthropic:
    """Build the Anthropic client on first use; config is read at that point."""
    global _client
    if not config.ANTHROPIC_API_KEY or config.ANTHROPIC_API_KEY == "your-api-key-here":
        raise anthropic.AnthropicError("ANTHROPIC_API_KEY is not configured")
    if _client is None:
        _client = anthropic.AsyncAnthropic(
            api_key=config.ANTHROPIC_API_KEY,
            timeout=config.LLM_TIMEOUT_SECONDS,
            max_retries=0,
        )
    return _client


async def run_model(messages: list[dict], model: str = None) -> Any:
    """
    Send role-tagged messages to the hosted model and return its raw result.

    A leading "system" message is passed as the system prompt. The result is
    the response serialized to plain data, so callers see a dict.
    Raises anthropic.AnthropicError on any failure.
    """
    system = None
    api_messages = []
    for m in messages:
        if m["role"] == "system":
            system = m["content"] if system is None else f"{system}\n\n{m['content']}"
        else:
            api_messages.append({"role": m["role"], "content": m["content"]})

    kwargs = {}
    if system is not None:
        kwargs["system"] = system

    response = await get_client().messages.create(
        model=model or config.LLM_MODEL,
        max_tokens=config.LLM_MAX_TOKENS,
        messages=api_messages,
        **kwargs
    )
    logger.debug("Model %s stop_reason=%s", response.model, response.stop_reason)
    return response.model_dump()


def _text_blocks(content: Any) -> str | None:
    """Join the text of Anthropic-style content blocks, if that's what this is."""
    if not isinstance(content, list):
        return None
    texts = [
        block.get("text")
        for block in content
        if isinstance(block, Mapping) and block.get("type") == "text" and isinstance(block.get("text"), str)
    ]
    if not texts:
        return None
    return "".join(texts)


def extract_reply(result: Any) -> str:
    """
    Pull a reply string out of a model result, trying known shapes in order:
      1. plain string
      2. {"response": "..."}
      3. {"choices": [{"message": {"content": "..."}}]}
      4. {"content": [{"type": "text", "text": "..."}]}
    Falls back to a JSON dump of whatever came back.
    """
    if isinstance(result, str):
        return result

    if isinstance(result, Mapping):
        response = result.get("response")
        if isinstance(response, str):
            return response

        choices = result.get("choices")
        if isinstance(choices, list) and choices:
            first = choices[0]
            message = first.get("message") if isinstance(first, Mapping) else None
            content = message.get("content") if isinstance(message, Mapping) else None
            if isinstance(content, str):
                return content

        text = _text_blocks(result.get("content"))
        if text is not None:
            return text

    return json.dumps(result, default=str)
