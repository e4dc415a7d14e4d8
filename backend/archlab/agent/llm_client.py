import logging

from openai import AsyncOpenAI

from archlab.core.config import settings

logger = logging.getLogger(__name__)


class LLMClient:
    """Provider-agnostic text generation client using the OpenAI chat completions API.

    One request per call. Provider errors (rate limiting included) are raised as-is;
    retrying is left to the caller.
    """

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
        *,
        temperature: float | None = None,
        timeout: float | None = None,
    ):
        self.model_name = model_name or settings.MODEL_DEFAULT
        self.temperature = settings.LLM_TEMPERATURE if temperature is None else temperature

        # Use LLM_API_KEY or fallback to GEMINI_API_KEY if they only provided the original one
        resolved_api_key = api_key or settings.LLM_API_KEY or settings.GEMINI_API_KEY
        resolved_base_url = base_url or settings.LLM_BASE_URL

        self.client = AsyncOpenAI(
            base_url=resolved_base_url,
            api_key=resolved_api_key,
            timeout=timeout or settings.LLM_TIMEOUT_SECONDS,
            max_retries=0,
        )

    def _chat_completion_kwargs(self) -> dict:
        """Build provider/model-compatible kwargs for chat completions."""
        model_name = (self.model_name or "").lower()
        # GPT-5 family rejects non-default temperature values in some OpenAI endpoints.
        if model_name.startswith("gpt-5"):
            return {}
        return {"temperature": self.temperature}

    async def generate_text(self, system_prompt: str, user_prompt: str) -> str:
        """
        Issue a single chat completion and return the raw text of the first choice.
        The text is returned untouched; pulling JSON out of it is the caller's job.
        """
        logger.info("Issuing text request to model %s...", self.model_name)
        response = await self.client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            **self._chat_completion_kwargs(),
        )

        if getattr(response, "choices", None) is None:
            logger.error("Received invalid response structure from %s: %s", self.model_name, response)
            raise ValueError(
                f"Provider {self.model_name} returned an invalid response. Try a different model in .env."
            )
        if len(response.choices) == 0:
            logger.error("Received 0 choices from %s: %s", self.model_name, response)
            raise ValueError(f"Provider {self.model_name} returned no output. Try again or change model.")

        text_response = response.choices[0].message.content or ""
        logger.info(
            "Received text response from %s (%s chars).", self.model_name, len(text_response)
        )
        return text_response
