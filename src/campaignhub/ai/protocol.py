"""AI content provider protocol.

Any text-generation backend (Gemini, OpenAI, a test double) can be used
by the content service as long as it exposes this interface.
"""

from typing import Protocol, runtime_checkable

from .types import AiGenerationOptions, AiResponse


@runtime_checkable
class AiContentProvider(Protocol):
    """Interface all AI text providers must implement.

    Example implementation:
        class GeminiProvider:
            provider_id = "GEMINI"
            model = "gemini-2.0-flash"

            async def generate_text(self, prompt, options=None) -> AiResponse:
                # Call the Gemini API and normalize the token counts
                ...
    """

    @property
    def provider_id(self) -> str:
        """Get the provider identifier recorded on the usage ledger.

        Returns:
            Identifier such as "GEMINI" or "OPENAI".
        """
        ...

    @property
    def model(self) -> str:
        """Get the model name used for generation."""
        ...

    async def generate_text(
        self, prompt: str, options: AiGenerationOptions | None = None
    ) -> AiResponse:
        """Generate text for a prompt.

        Args:
            prompt: Full prompt text.
            options: Sampling options; provider defaults when None.

        Returns:
            AiResponse with the generated content and token usage.
        """
        ...
