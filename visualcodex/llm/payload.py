"""LLM prompt and payload preparation for visualcodex."""

from typing import Any, Dict, List, Optional

from ..config.templates import SYSTEM_PROMPT_TEMPLATE, FOLLOW_UP_PROMPT_TEMPLATE
from ..constants import DEFAULT_TEMPERATURE, DEFAULT_MAX_TOKENS
from ..utils.helpers import prompt_context
from ..utils.logging import logger


class PayloadBuilder:
    """Builds prompts and JSON payloads for chat-completion calls."""

    def __init__(self,
                 system_prompt_template: Optional[str] = None,
                 temperature: float = DEFAULT_TEMPERATURE,
                 max_tokens: int = DEFAULT_MAX_TOKENS):
        """Initialize payload builder.

        Args:
            system_prompt_template: Replacement for the built-in instructions
            temperature: Sampling temperature sent with each request
            max_tokens: Reply length cap sent with each request
        """
        self.system_prompt_template = system_prompt_template or SYSTEM_PROMPT_TEMPLATE
        self.temperature = temperature
        self.max_tokens = max_tokens

    def build_system_prompt(self, working_directory: str) -> str:
        """Describe the reply conventions and the repository being worked on."""
        try:
            return self.system_prompt_template.format(**prompt_context(working_directory))
        except (KeyError, IndexError, ValueError) as e:
            # A custom prompt with stray braces is sent as written
            logger.warning(f"System prompt template could not be formatted ({e}); sending it unformatted")
            return self.system_prompt_template

    def build_follow_up_prompt(self, read_results: List[str]) -> str:
        """Hand the requested file contents back to the model."""
        # Plain replace: file contents may contain braces
        return FOLLOW_UP_PROMPT_TEMPLATE.replace("{read_results}", "\n\n".join(read_results))

    def build_payload(self, system_prompt: str, user_prompt: str, model: str) -> Dict[str, Any]:
        """Build the request body for a two-message chat completion."""
        return {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }


def create_payload_builder(system_prompt_template: Optional[str] = None,
                           temperature: float = DEFAULT_TEMPERATURE,
                           max_tokens: int = DEFAULT_MAX_TOKENS) -> PayloadBuilder:
    """Create a configured payload builder instance."""
    return PayloadBuilder(system_prompt_template, temperature, max_tokens)
