"""
Review Generator component.

Sends the rendered prompt to an OpenAI (or Azure OpenAI) chat-completion
model and returns the generated review text.
"""

from typing import Union

from openai import AsyncAzureOpenAI, AsyncOpenAI

from app.services.prompt_builder import SYSTEM_PROMPT
from app.utils.logging import get_logger

logger = get_logger(__name__)

AZURE_OPENAI_API_VERSION = "2024-02-15-preview"


def create_openai_client(settings) -> Union[AsyncOpenAI, AsyncAzureOpenAI]:
    """
    Build the completion client from settings.

    Azure OpenAI is used when endpoint, key and deployment are all configured,
    otherwise the public OpenAI API.
    """
    if (
        settings.azure_openai_endpoint
        and settings.azure_openai_api_key
        and settings.azure_openai_deployment
    ):
        logger.info("Initialized Azure OpenAI client")
        return AsyncAzureOpenAI(
            api_key=settings.azure_openai_api_key,
            api_version=AZURE_OPENAI_API_VERSION,
            azure_endpoint=settings.azure_openai_endpoint,
        )

    logger.info("Initialized OpenAI client")
    return AsyncOpenAI(api_key=settings.openai_api_key)


class ReviewGenerator:
    """Generates review text with a single chat completion."""

    def __init__(
        self,
        client: Union[AsyncOpenAI, AsyncAzureOpenAI],
        model: str,
        temperature: float = 0.1,
        max_tokens: int = 3000,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        """
        Args:
            client: Async OpenAI client
            model: Model name (deployment name for Azure)
            temperature: Sampling temperature
            max_tokens: Output length ceiling
            system_prompt: System instruction sent with every request
        """
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt

    async def generate(self, prompt: str) -> str:
        """
        Generate a review for ``prompt``.

        Returns:
            The completion text, verbatim

        Raises:
            openai.OpenAIError: Propagated as-is; there is no retry
        """
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            n=1,
        )

        return response.choices[0].message.content or ""
