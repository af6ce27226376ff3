"""Test helpers to stub the OpenAI Responses client used by model_client.py.

The stub extracts the statement text embedded in the user content and hands
it to a ``respond`` callable that returns the decoded JSON body the model
would have produced. Tests monkeypatch ``statement_import.model_client.OpenAI``
with the class returned by :func:`make_openai_stub`.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

BEGIN = "BEGIN_STATEMENT_TEXT\n"
END = "\nEND_STATEMENT_TEXT"


def extract_statement_text(user_content: str) -> str:
    b = user_content.find(BEGIN)
    e = user_content.rfind(END)
    if b == -1 or e == -1 or e <= b:
        raise AssertionError("statement prompt is missing the embedded statement text block")
    return user_content[b + len(BEGIN) : e]


class _Content:
    def __init__(self, type_: str, **attrs: Any) -> None:
        self.type = type_
        for k, v in attrs.items():
            setattr(self, k, v)


class _OutputItem:
    def __init__(self, content: list[_Content]) -> None:
        self.type = "message"
        self.content = content


class _IncompleteDetails:
    def __init__(self, reason: str) -> None:
        self.reason = reason


class FakeResponse:
    """Shape-compatible subset of ``openai.types.responses.Response``."""

    def __init__(
        self,
        *,
        output_text: str = "",
        refusal: str | None = None,
        incomplete_reason: str | None = None,
    ) -> None:
        self.output_text = output_text
        content: list[_Content] = []
        if refusal is not None:
            content.append(_Content("refusal", refusal=refusal))
        elif output_text:
            content.append(_Content("output_text", text=output_text))
        self.output = [_OutputItem(content)] if content else []
        self.status = "incomplete" if incomplete_reason else "completed"
        self.incomplete_details = (
            _IncompleteDetails(incomplete_reason) if incomplete_reason else None
        )


def make_openai_stub(
    respond: Callable[[str], Any] | FakeResponse,
    calls_out: list[dict[str, Any]] | None = None,
    init_kwargs_out: list[dict[str, Any]] | None = None,
):
    """Return a minimal class matching the ``openai.OpenAI`` shape.

    Parameters
    ----------
    respond:
        Either a ready :class:`FakeResponse`, or a callable receiving the
        embedded statement text and returning a JSON-serializable body.
    calls_out:
        Appended with each ``responses.create`` call's kwargs.
    init_kwargs_out:
        Appended with each client constructor's kwargs (timeout, retries).
    """

    calls = calls_out if calls_out is not None else []
    inits = init_kwargs_out if init_kwargs_out is not None else []

    class _Responses:
        def create(self, **kwargs):
            calls.append(kwargs)
            if isinstance(respond, FakeResponse):
                return respond
            body = respond(extract_statement_text(kwargs["input"]))
            return FakeResponse(output_text=json.dumps(body))

    class _Client:
        def __init__(self, *a: Any, **kw: Any) -> None:
            inits.append(kw)
            self.responses = _Responses()

    return _Client
