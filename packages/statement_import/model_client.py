"""Narrow model-access seam for the statement parser.

The parser only needs "prompt text in, JSON text out" plus whether the
provider refused the request. :class:`StatementModelClient` captures that;
:class:`OpenAIModelClient` implements it over the OpenAI Responses API with a
request timeout. Tests substitute either a fake client or a stubbed
``OpenAI`` class.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from openai import OpenAI
from openai.types.responses import ResponseTextConfigParam
from openai.types.responses.response_format_text_json_schema_config_param import (
    ResponseFormatTextJSONSchemaConfigParam,
)

from .config import llm_timeout_seconds, model_name
from .logging_setup import get_logger

_logger = get_logger("statement_import.model_client")


@dataclass(frozen=True, slots=True)
class ModelReply:
    """Raw outcome of one model call.

    ``block_reason`` is set when the provider declined to answer (refusal or
    content filter); ``text`` is then usually empty.
    """

    text: str | None
    block_reason: str | None = None


@runtime_checkable
class StatementModelClient(Protocol):
    def generate(
        self,
        prompt: str,
        response_format: ResponseFormatTextJSONSchemaConfigParam,
        *,
        instructions: str | None = None,
    ) -> ModelReply: ...


def _extract_output_text(resp: Any) -> str | None:
    """Locate the text output of a Responses SDK result.

    Prefer ``resp.output_text``; fall back to the first ``output_text``
    content item.
    """

    text: str | None = getattr(resp, "output_text", None)
    if text and isinstance(text, str):
        return text
    for item in getattr(resp, "output", None) or []:
        for content in getattr(item, "content", None) or []:
            if getattr(content, "type", None) == "output_text":
                txt = getattr(content, "text", None)
                if isinstance(txt, str) and txt:
                    return txt
    return None


def _extract_block_reason(resp: Any) -> str | None:
    """Return why the provider blocked the request, or ``None``.

    A ``refusal`` content item yields its message (or ``"refusal"``); an
    ``incomplete`` response cut by the content filter yields
    ``"content_filter"``.
    """

    for item in getattr(resp, "output", None) or []:
        for content in getattr(item, "content", None) or []:
            if getattr(content, "type", None) == "refusal":
                message = getattr(content, "refusal", None)
                if isinstance(message, str) and message.strip():
                    return message.strip()
                return "refusal"
    if getattr(resp, "status", None) == "incomplete":
        details = getattr(resp, "incomplete_details", None)
        reason = getattr(details, "reason", None)
        if reason == "content_filter":
            return "content_filter"
    return None


class OpenAIModelClient:
    """``StatementModelClient`` over ``client.responses.create``.

    Parameters
    ----------
    model:
        Model name; defaults to ``STATEMENT_IMPORT_MODEL`` (``gpt-5``).
    timeout:
        Request timeout in seconds; defaults to ``STATEMENT_IMPORT_LLM_TIMEOUT``.
    """

    def __init__(self, *, model: str | None = None, timeout: float | None = None) -> None:
        self.model = model or model_name()
        self.timeout = timeout if timeout is not None else llm_timeout_seconds()

    def _create_client(self) -> OpenAI:
        # The SDK reads OPENAI_API_KEY itself; SDK retries stay off.
        return OpenAI(timeout=self.timeout, max_retries=0)

    def generate(
        self,
        prompt: str,
        response_format: ResponseFormatTextJSONSchemaConfigParam,
        *,
        instructions: str | None = None,
    ) -> ModelReply:
        client = self._create_client()
        text_cfg = ResponseTextConfigParam(format=response_format)
        kwargs: dict[str, Any] = {"model": self.model, "input": prompt, "text": text_cfg}
        if instructions:
            kwargs["instructions"] = instructions

        _logger.info(
            "model_client:request model=%s prompt_chars=%d timeout_s=%.1f",
            self.model,
            len(prompt),
            self.timeout,
        )
        t0 = time.perf_counter()
        try:
            resp = client.responses.create(**kwargs)
        except Exception as e:  # noqa: BLE001
            dt_ms = (time.perf_counter() - t0) * 1000.0
            _logger.error(
                "model_client:failed model=%s latency_ms=%.2f error=%s",
                self.model,
                dt_ms,
                e.__class__.__name__,
            )
            raise RuntimeError(f"statement model call failed: {e}") from e

        dt_ms = (time.perf_counter() - t0) * 1000.0
        block_reason = _extract_block_reason(resp)
        text = None if block_reason else _extract_output_text(resp)
        _logger.info(
            "model_client:done model=%s latency_ms=%.2f chars=%d blocked=%s",
            self.model,
            dt_ms,
            len(text or ""),
            block_reason is not None,
        )
        return ModelReply(text=text, block_reason=block_reason)


__all__ = ["ModelReply", "OpenAIModelClient", "StatementModelClient"]
