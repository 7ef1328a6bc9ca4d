"""Response decoding for the Gemini generateContent endpoint.

Hides the provider's nested response schema:

    {"candidates": [{"content": {"parts": [{"text": "<reply>"}]}}]}

Gemini can legitimately return no text (safety filtering, recitation,
max tokens reached before any output). Those cases are reported as
EmptyReply rather than as errors.
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import EmptyReply, ParsedReply, ParseError, TextReply

EMPTY_ANSWER_EXPLANATION = "The assistant declined to answer or returned no content."


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ResponsePart(_Lenient):
    text: str | None = None


class ResponseContent(_Lenient):
    role: str | None = None
    parts: list[ResponsePart] | None = None


class Candidate(_Lenient):
    content: ResponseContent | None = None
    finish_reason: str | None = Field(default=None, alias="finishReason")


class PromptFeedback(_Lenient):
    block_reason: str | None = Field(default=None, alias="blockReason")


class GenerateContentResponse(_Lenient):
    candidates: list[Candidate] | None = None
    prompt_feedback: PromptFeedback | None = Field(default=None, alias="promptFeedback")


class ResponseParser:
    """Extracts the reply text from a raw response body. Pure."""

    def decode(self, raw_body: str) -> ParsedReply:
        """Decode a response body.

        Args:
            raw_body: Response body as returned by the transport

        Returns:
            TextReply with the first part's text, EmptyReply if any step of
            the path is missing or empty, ParseError if the body is not JSON
            or has the wrong structure
        """
        try:
            response = GenerateContentResponse.model_validate_json(raw_body)
        except ValidationError as e:
            return ParseError(message=self._describe(e), raw_body=raw_body)
        except ValueError as e:
            # e.g. strings that cannot be encoded as UTF-8
            return ParseError(message=f"response body could not be decoded: {e}", raw_body=raw_body)

        if not response.candidates:
            block_reason = response.prompt_feedback.block_reason if response.prompt_feedback else None
            return self._empty(block_reason)

        candidate = response.candidates[0]
        if candidate.content is None or not candidate.content.parts:
            return self._empty(candidate.finish_reason)

        text = candidate.content.parts[0].text
        if not text:
            return self._empty(candidate.finish_reason)

        return TextReply(text=text)

    def _empty(self, reason: str | None) -> EmptyReply:
        explanation = EMPTY_ANSWER_EXPLANATION
        if reason:
            explanation = f"{explanation} (reason: {reason})"
        return EmptyReply(explanation=explanation, finish_reason=reason)

    def _describe(self, error: ValidationError) -> str:
        errors = error.errors()
        if errors and errors[0]["type"] == "json_invalid":
            return "response body is not valid JSON"
        first = errors[0] if errors else None
        if first is None:
            return "unexpected response structure"
        location = ".".join(str(part) for part in first["loc"]) or "<root>"
        return f"unexpected response structure at {location}: {first['msg']}"
