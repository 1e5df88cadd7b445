"""AI content generation.

Generation calls are billed to a workspace on the usage ledger after the
provider answers; a failed provider call records nothing.
"""

from campaignhub.ai import AiContentProvider, AiGenerationOptions, AiResponse
from campaignhub.core.access import TenantAccessGuard
from campaignhub.core.logging import LogContext, get_logger
from campaignhub.core.principal import Principal
from campaignhub.db.models.ai_log import AiGenerationType
from campaignhub.db.storage.client import StorageClient

from .types import CopyRequest, TokenUsage
from .usage import AiUsageLedger

logger = get_logger(__name__)

COPY_OPTIONS = AiGenerationOptions(temperature=0.8, max_tokens=1500)

COPY_PROMPT = """\
Act as a senior direct-response copywriter specialised in high-converting ads.

I am building a marketing campaign and need creatives that stop the scroll
and earn the click.

PRODUCT OR SERVICE: "{product}"
OBJECTIVE: "{objective}"

Instructions:
1. Use the AIDA (Attention, Interest, Desire, Action) or PAS (Problem,
   Agitation, Solution) structure.
2. Use a strong persuasion trigger such as curiosity, urgency, authority
   or social proof.
3. Sell the benefits and the customer's transformation, not just features.
4. Keep the tone magnetic and human. Avoid robotic corporate cliches.

Required output format (markdown):

## Headline options
1. [Curiosity hook]
2. [Pain point and immediate solution]
3. [Short and punchy]

## Ad body
[At most three short paragraphs. Open with a question or a bold claim and
close with a clear imperative call to action.]
"""


class ContentService:
    """Generates marketing copy through an AI provider."""

    def __init__(
        self,
        client: StorageClient,
        provider: AiContentProvider,
        guard: TenantAccessGuard | None = None,
        ledger: AiUsageLedger | None = None,
    ):
        self.client = client
        self.provider = provider
        self.guard = guard or TenantAccessGuard(client)
        self.ledger = ledger or AiUsageLedger(client, self.guard)

    async def generate_campaign_copy(
        self, product: str, objective: str, principal: Principal
    ) -> AiResponse:
        """Write headline and body copy for a product.

        Args:
            product: Product or service being advertised
            objective: Campaign objective the copy should serve
            principal: The caller; usage is billed to their first workspace

        Returns:
            The provider response with the markdown copy and token usage

        Raises:
            ForbiddenError: If the principal has no workspace
            pydantic.ValidationError: If product or objective is empty
        """
        request = CopyRequest(product=product, objective=objective)
        workspace_id = await self.guard.require_single_tenant(principal)

        with LogContext(workspace_id=str(workspace_id), provider=self.provider.provider_id):
            response = await self.provider.generate_text(
                COPY_PROMPT.format(product=request.product, objective=request.objective),
                COPY_OPTIONS,
            )
            usage = response.usage
            await self.ledger.record(
                TokenUsage(
                    type=AiGenerationType.COPY_GENERATION,
                    input_tokens=usage.input_tokens,
                    output_tokens=usage.output_tokens,
                    total_tokens=usage.total_tokens or None,
                    provider=self.provider.provider_id,
                    model=self.provider.model,
                ),
                principal,
                workspace_id=workspace_id,
            )
            logger.info("Campaign copy generated", total_tokens=usage.total_tokens)
        return response
