"""Request encoding for the Gemini generateContent endpoint.

Hides the provider's request schema. The shape is:

    {"contents": [{"role": "user", "parts": [{"text": "..."}]}],
     "tools": [{"google_search": {}}],
     "generationConfig": {"temperature": 0.7, "maxOutputTokens": 256}}

"tools" and "generationConfig" are only present when enabled in the
session's ProviderOptions.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .models import ChatRequest, ProviderOptions


class RequestPart(BaseModel):
    text: str


class RequestContent(BaseModel):
    role: str = "user"
    parts: list[RequestPart]


class SearchTool(BaseModel):
    google_search: dict[str, Any] = Field(default_factory=dict)


class GenerationConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    temperature: float | None = None
    max_output_tokens: int | None = Field(default=None, alias="maxOutputTokens")


class GenerateContentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contents: list[RequestContent]
    tools: list[SearchTool] | None = None
    generation_config: GenerationConfig | None = Field(default=None, alias="generationConfig")


class RequestCodec:
    """Builds the provider request body for a single user turn."""

    def to_model(self, prompt: str, options: ProviderOptions) -> GenerateContentRequest:
        """Build the request model for one user turn.

        The prompt is expected to be trimmed and non-empty already.
        """
        generation_config = None
        if options.temperature is not None or options.max_output_tokens is not None:
            generation_config = GenerationConfig(
                temperature=options.temperature,
                max_output_tokens=options.max_output_tokens,
            )

        return GenerateContentRequest(
            contents=[RequestContent(role="user", parts=[RequestPart(text=prompt)])],
            tools=[SearchTool()] if options.google_search else None,
            generation_config=generation_config,
        )

    def encode(self, prompt: str, options: ProviderOptions) -> bytes:
        """Serialize the request to compact UTF-8 JSON. Deterministic."""
        request = self.to_model(prompt, options)
        return request.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")

    def build_request(self, prompt: str, options: ProviderOptions) -> ChatRequest:
        """Encode once and wrap the body with its headers."""
        return ChatRequest(
            prompt=prompt,
            options=options,
            body=self.encode(prompt, options),
        )
