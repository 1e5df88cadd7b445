"""Request and response types for AI text generation."""

from pydantic import BaseModel, Field


class AiGenerationOptions(BaseModel):
    """Sampling options passed to a provider."""

    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, gt=0)


class AiUsage(BaseModel):
    """Token usage a provider reports for one call."""

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)


class AiResponse(BaseModel):
    """Generated text with the usage it was billed for."""

    content: str
    usage: AiUsage = Field(default_factory=AiUsage)
