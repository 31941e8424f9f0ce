"""Text-completion backends for the AI writing features.

A provider turns one prompt plus a small option dict into plain text.
Keys and model names come from the environment (``GEMINI_API_KEY``,
``OPENAI_API_KEY``, ``LLM_MODEL``); a ``.env`` file is honoured.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod

from dotenv import load_dotenv

from resume_builder.errors import ExternalServiceError

load_dotenv()

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_OPENAI_MODEL = "gpt-4o"


class LLMError(ExternalServiceError):
    """A provider is misconfigured, unreachable or answered unusably."""


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        raise LLMError(f"Missing {name} environment variable")
    return value


class LLMProvider(ABC):
    """One completion backend."""

    def generate_llm_config(
        self,
        temperature: float,
        max_tokens: int | None,
        seed: int | None,
    ) -> dict:
        """Build request options, leaving out anything set to None.

        Subclasses rename keys their SDK spells differently.
        """
        options = {"temperature": temperature, "max_tokens": max_tokens, "seed": seed}
        return {key: value for key, value in options.items() if value is not None}

    @abstractmethod
    def send_prompt(self, prompt: str, config: dict) -> str:
        """Return the model's answer to *prompt*, stripped of outer whitespace.

        Raises:
            LLMError: If the backend call fails.
        """


class GeminiProvider(LLMProvider):
    """Google Gemini through the ``google-genai`` SDK."""

    def __init__(self) -> None:
        from google import genai

        self.api_key = _require_env("GEMINI_API_KEY")
        self.model = os.environ.get("LLM_MODEL", DEFAULT_GEMINI_MODEL)
        self.client = genai.Client(api_key=self.api_key)

    def generate_llm_config(
        self,
        temperature: float,
        max_tokens: int | None,
        seed: int | None,
    ) -> dict:
        config = super().generate_llm_config(temperature, max_tokens, seed)
        if "max_tokens" in config:
            config["max_output_tokens"] = config.pop("max_tokens")
        return config

    def send_prompt(self, prompt: str, config: dict) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.model, contents=prompt, config=config
            )
        except Exception as e:
            raise LLMError(f"Gemini API call failed: {e}") from e
        return (response.text or "").strip()


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions, sending the whole prompt as one user message."""

    def __init__(self) -> None:
        from openai import OpenAI

        self.api_key = _require_env("OPENAI_API_KEY")
        self.model = os.environ.get("LLM_MODEL", DEFAULT_OPENAI_MODEL)
        self.client = OpenAI(api_key=self.api_key)

    def send_prompt(self, prompt: str, config: dict) -> str:
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                **config,
            )
        except Exception as e:
            raise LLMError(f"OpenAI API call failed: {e}") from e
        return (completion.choices[0].message.content or "").strip()
