"""
Thin wrapper around the Anthropic Messages API.
"""

from typing import Optional
import logging
import re

from signal_desk.core.exceptions import OptimizationError


DEFAULT_MODEL = "claude-sonnet-4-20250514"

CODE_BLOCK_PATTERN = re.compile(
    r"```(?:python|py|json|text|markdown|md)?[ \t]*\n(.*?)```",
    re.IGNORECASE | re.DOTALL,
)


def extract_code_block(text: str) -> tuple[str, str]:
    """
    Split model output into the fenced block and the surrounding prose.

    Returns:
        Tuple of (code, rationale). Without a fenced block the whole trimmed
        text is the code and the rationale is empty.
    """
    match = CODE_BLOCK_PATTERN.search(text)
    if not match:
        return text.strip(), ""

    code = match.group(1).strip()
    rationale = (text[:match.start()] + text[match.end():]).strip()
    return code, rationale


class LLMClient:
    """Sends single-turn prompts to Claude."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 4000,
        timeout: Optional[float] = 60.0,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.logger = logging.getLogger(self.__class__.__name__)
        self._client = None

    def _get_client(self):
        if self._client is None:
            import anthropic

            self._client = anthropic.Anthropic(api_key=self.api_key, timeout=self.timeout)
        return self._client

    def complete(self, prompt: str, temperature: float = 0.2, system: Optional[str] = None) -> str:
        """
        Send a prompt and return the concatenated text of the response.

        Raises:
            OptimizationError: If the request fails for any reason
        """
        kwargs = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system

        try:
            response = self._get_client().messages.create(**kwargs)
        except Exception as e:
            self.logger.error(f"Model request failed: {e}")
            raise OptimizationError("Model sync failed. Verify API key and provider status.") from e

        text = "".join(
            getattr(block, "text", "") for block in response.content
        )
        self.logger.info(f"Received {len(text)} characters from {self.model}")
        return text
