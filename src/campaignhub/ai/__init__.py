"""AI provider abstraction.

Usage:
    from campaignhub.ai import AiContentProvider, AiGenerationOptions

    response = await provider.generate_text(
        prompt, AiGenerationOptions(temperature=0.8, max_tokens=1500)
    )
    print(response.content, response.usage.total_tokens)
"""

from .protocol import AiContentProvider
from .types import AiGenerationOptions, AiResponse, AiUsage

__all__ = [
    "AiContentProvider",
    "AiGenerationOptions",
    "AiResponse",
    "AiUsage",
]
