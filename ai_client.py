"""
Hosted generative-AI client (Gemini via google-genai) for keyword ideas and content audits
"""
import json
import logging
from typing import Any, Dict, List, Optional

import httpx
from google import genai
from google.genai import errors, types

from models import KeywordIdea, ContentAudit, KeywordIntent
from config import config as default_config, WorkspaceConfig

logger = logging.getLogger(__name__)

KEYWORD_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "keyword": {"type": "STRING"},
            "volume": {"type": "NUMBER"},
            "difficulty": {"type": "NUMBER"},
            "intent": {"type": "STRING", "enum": [intent.value for intent in KeywordIntent]},
            "cpc": {"type": "NUMBER"},
        },
        "required": ["keyword", "volume", "difficulty", "intent", "cpc"],
    },
}

AUDIT_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "score": {"type": "NUMBER"},
        "title": {"type": "STRING"},
        "description": {"type": "STRING"},
        "headings": {"type": "ARRAY", "items": {"type": "STRING"}},
        "recommendations": {"type": "ARRAY", "items": {"type": "STRING"}},
        "keywordDensity": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "keyword": {"type": "STRING"},
                    "density": {"type": "NUMBER"},
                },
            },
        },
    },
    "required": ["score", "title", "description", "headings", "recommendations", "keywordDensity"],
}


class AIServiceError(Exception):
    """The AI service could not produce a usable answer"""


class MissingCredentialError(AIServiceError):
    """No API key is configured for the AI service"""

    def __init__(self, message: str = None):
        super().__init__(message or (
            "No AI service API key is configured. Set the API_KEY (or GEMINI_API_KEY) "
            "environment variable, or switch keyword_source/audit_engine back to the local engines."
        ))


class GeminiClient:
    """Thin JSON-mode wrapper over the google-genai SDK. No retries."""

    def __init__(self, scraper_config: WorkspaceConfig = None, api_key: Optional[str] = None,
                 client: genai.Client = None):
        self.config = scraper_config or default_config
        self.api_key = api_key if api_key is not None else self.config.gemini_api_key
        self.model = self.config.gemini_model
        # Built on first use; the SDK refuses to construct without a key
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=self.config.request_timeout * 4 * 1000),
            )
        return self._client

    def close(self):
        self._client = None

    def get_keyword_ideas(self, query: str) -> List[KeywordIdea]:
        """Keyword ideas researched by the model, clamped to valid ranges"""
        prompt = (
            f'Research high-potential SEO keywords related to: "{query}". '
            f"Provide a list of 10-15 keywords with volume, difficulty, intent, and CPC."
        )
        data = self._generate_json(prompt, KEYWORD_SCHEMA)
        if not isinstance(data, list):
            raise AIServiceError("Expected a JSON array of keyword ideas")

        ideas = [KeywordIdea.from_dict(item) for item in data if isinstance(item, dict)]
        logger.info(f"AI returned {len(ideas)} keyword ideas for {query!r}")
        return ideas

    def analyze_content(self, content: str, baseline: ContentAudit = None) -> ContentAudit:
        """Model-written audit; fields the model leaves out come from the baseline audit"""
        prompt = f"Perform a detailed SEO content audit for the following text: \n\n{content}"
        data = self._generate_json(prompt, AUDIT_SCHEMA)
        if not isinstance(data, dict):
            raise AIServiceError("Expected a JSON object describing the audit")

        if baseline is not None:
            merged = baseline.to_dict()
            merged.update({k: v for k, v in data.items() if v is not None})
            data = merged
        return ContentAudit.from_dict(data)

    def _generate_json(self, prompt: str, schema: Dict[str, Any]) -> Any:
        if not self.api_key:
            raise MissingCredentialError()

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=schema,
                ),
            )
        except errors.APIError as e:
            logger.error(f"AI service returned an error: {e}")
            raise AIServiceError(f"AI service returned an error: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"AI request failed: {e}")
            raise AIServiceError(f"AI request failed: {e}") from e

        try:
            return json.loads(response.text.strip())
        except (AttributeError, TypeError, ValueError) as e:
            logger.error(f"Unreadable AI response: {e}")
            raise AIServiceError("Unreadable AI response") from e
