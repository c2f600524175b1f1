import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from openai import OpenAI

from errors import EnrichmentFailure

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "gpt-3.5-turbo"
DEFAULT_TIMEOUT_SECONDS = 20.0
FALSE_VALUES = {"0", "false", "no", "off"}


LLM_PROMPT_TEMPLATE = """
Analyze this resume and provide professional insights:

Resume: {resume_text}
{job_section}

Please provide:
1. Top 3 strengths
2. Top 3 areas for improvement
3. Specific recommendations for better job matching

Keep responses concise and professional.
"""


class NoOpInsightProvider:
    """Stand-in used when AI enrichment is disabled or not configured."""

    def get_insights(self, resume_text: str, job_description: str = "") -> Optional[Dict[str, Any]]:
        return None


class OpenAIInsightProvider:
    def __init__(
        self,
        client: OpenAI,
        model: str = DEFAULT_MODEL_NAME,
        max_tokens: int = 500,
        temperature: float = 0.7,
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    def get_insights(self, resume_text: str, job_description: str = "") -> Optional[Dict[str, Any]]:
        """Ask the LLM for narrative feedback; any failure degrades to ``None``."""
        try:
            analysis = self._request_analysis(resume_text, job_description)
        except Exception as exc:
            logger.exception("AI insight generation failed: %s", exc)
            return None

        return {
            "analysis": analysis,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def _request_analysis(self, resume_text: str, job_description: str) -> str:
        prompt = build_prompt(resume_text, job_description)
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        if not response.choices:
            raise EnrichmentFailure("LLM response contained no choices.")
        content = (response.choices[0].message.content or "").strip()
        if not content:
            raise EnrichmentFailure("LLM returned an empty analysis.")
        return content


def build_prompt(resume_text: str, job_description: str = "") -> str:
    job_section = f"Job Description: {job_description}" if job_description else ""
    return LLM_PROMPT_TEMPLATE.format(resume_text=resume_text, job_section=job_section)


def _default_client(timeout: float) -> Optional[OpenAI]:
    api_key = os.getenv("OPENAI_API_KEY") or os.getenv("OPENROUTER_API_KEY")
    if not api_key:
        logger.info("AI Analyzer: no API key configured; AI insights disabled.")
        return None

    base_url = os.getenv("OPENAI_BASE_URL") or None
    try:
        client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)
        logger.info("AI Analyzer: initialized OpenAI-compatible client for base_url=%s", base_url or "default")
        return client
    except Exception as exc:  # pragma: no cover - best effort logging
        logger.exception("AI Analyzer: failed to initialize client: %s", exc)
        return None


def _read_timeout() -> float:
    raw = os.getenv("LLM_TIMEOUT_SECONDS", "")
    try:
        return float(raw) if raw else DEFAULT_TIMEOUT_SECONDS
    except ValueError:
        logger.warning("Invalid LLM_TIMEOUT_SECONDS=%r; using %s", raw, DEFAULT_TIMEOUT_SECONDS)
        return DEFAULT_TIMEOUT_SECONDS


def build_insight_provider():
    """Return the configured AI provider, or a no-op one when AI is disabled."""
    if os.getenv("AI_INSIGHTS_ENABLED", "true").strip().lower() in FALSE_VALUES:
        logger.info("AI Analyzer: disabled via AI_INSIGHTS_ENABLED.")
        return NoOpInsightProvider()

    client = _default_client(_read_timeout())
    if client is None:
        return NoOpInsightProvider()
    return OpenAIInsightProvider(client, model=os.getenv("RESUME_LLM_MODEL", DEFAULT_MODEL_NAME))
