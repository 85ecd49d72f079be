"""
Keyword research module for SEO Workspace
"""
import asyncio
import json
import random
import logging
from typing import List, Optional, Tuple

import aiohttp

from models import KeywordIdea, KeywordIntent
from config import config as default_config, WorkspaceConfig

logger = logging.getLogger(__name__)

FALLBACK_MODIFIERS = ["guide", "best", "vs", "review", "tutorial", "pricing", "alternative", "how to"]
COMMERCIAL_MODIFIERS = {"pricing", "alternative"}

INTENTS = [
    KeywordIntent.INFORMATIONAL,
    KeywordIntent.TRANSACTIONAL,
    KeywordIntent.COMMERCIAL,
    KeywordIntent.NAVIGATIONAL,
]


class SuggestionsUnavailable(Exception):
    """The autocomplete source answered with an error status or an unusable body"""


class KeywordResearcher:
    """Builds keyword ideas from public autocomplete, degrading to synthetic variants"""

    def __init__(self, scraper_config: WorkspaceConfig = None, rng: random.Random = None,
                 session: aiohttp.ClientSession = None):
        self.config = scraper_config or default_config
        self.rng = rng or random.Random()
        # An injected session is borrowed, never closed here
        self.session = session

    async def suggest(self, seed: str) -> List[KeywordIdea]:
        """Keyword ideas for a seed query; never raises for unreachable sources or empty seeds"""
        ideas, _ = await self.suggest_with_source(seed)
        return ideas

    async def suggest_with_source(self, seed: str) -> Tuple[List[KeywordIdea], bool]:
        """Like suggest(), also reporting whether the synthetic fallback was used"""
        seed = seed or ""
        logger.info(f"Researching keyword ideas for: {seed!r}")

        try:
            suggestions = await self._fetch_suggestions(seed)
            if not suggestions:
                raise SuggestionsUnavailable("No suggestions returned")
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, SuggestionsUnavailable) as e:
            logger.warning(f"Public autocomplete failed or blocked ({e}). Using simulated data generator.")
            return self.generate_fallback(seed), True

        logger.info(f"Found {len(suggestions)} autocomplete suggestions for {seed!r}")
        return [self._simulate_metrics(suggestion) for suggestion in suggestions], False

    def generate_fallback(self, seed: str) -> List[KeywordIdea]:
        """One synthetic idea per fixed modifier, in modifier order"""
        ideas = []
        for modifier in FALLBACK_MODIFIERS:
            ideas.append(KeywordIdea(
                keyword=f"{seed} {modifier}",
                volume=int(500 + self.rng.random() * 15000),
                difficulty=int(20 + self.rng.random() * 60),
                intent=KeywordIntent.COMMERCIAL if modifier in COMMERCIAL_MODIFIERS else KeywordIntent.INFORMATIONAL,
                cpc=round(self.rng.random() * 3, 2),
            ))
        return ideas

    def _simulate_metrics(self, keyword: str) -> KeywordIdea:
        return KeywordIdea(
            keyword=keyword,
            volume=int(2500 + self.rng.random() * 45000),
            difficulty=int(15 + self.rng.random() * 75),
            intent=INTENTS[int(self.rng.random() * len(INTENTS))],
            cpc=round(0.5 + self.rng.random() * 4.5, 2),
        )

    async def _fetch_suggestions(self, seed: str) -> List[str]:
        """Single read from the autocomplete endpoint, no retries"""
        params = {"client": self.config.suggest_client, "q": seed}

        if self.session is not None:
            return await self._request_suggestions(self.session, params)

        timeout = None
        if self.config.suggest_timeout is not None:
            timeout = aiohttp.ClientTimeout(total=self.config.suggest_timeout)
        session_kwargs = {"headers": {"User-Agent": random.choice(self.config.user_agents)}}
        if timeout is not None:
            session_kwargs["timeout"] = timeout

        async with aiohttp.ClientSession(**session_kwargs) as session:
            return await self._request_suggestions(session, params)

    async def _request_suggestions(self, session, params: dict) -> List[str]:
        async with session.get(self.config.suggest_url, params=params) as response:
            if not 200 <= response.status < 300:
                raise SuggestionsUnavailable(f"HTTP {response.status}")
            payload = await response.json(content_type=None)
        return self._parse_suggestions(payload)

    @staticmethod
    def _parse_suggestions(payload) -> List[str]:
        """Autocomplete bodies look like [query, [suggestion, ...], ...]"""
        if isinstance(payload, (str, bytes)):
            payload = json.loads(payload)
        if not isinstance(payload, list) or len(payload) < 2 or not isinstance(payload[1], list):
            raise SuggestionsUnavailable("Malformed autocomplete response")
        if not all(isinstance(item, str) for item in payload[1]):
            raise SuggestionsUnavailable("Malformed autocomplete response")
        return list(payload[1])


def export_keywords(ideas: List[KeywordIdea]) -> str:
    """Newline-separated keyword list for pasting elsewhere"""
    return '\n'.join(idea.keyword for idea in ideas)


async def suggest(seed: str, rng: Optional[random.Random] = None) -> List[KeywordIdea]:
    """Keyword ideas with the default configuration"""
    return await KeywordResearcher(rng=rng).suggest(seed)
