"""
Content audit module for SEO Workspace
"""
import re
import random
import logging
from collections import Counter
from typing import List, Optional

import requests
from bs4 import BeautifulSoup

from models import ContentAudit, KeywordDensity
from config import config as default_config, WorkspaceConfig
from utils import safe_extract_text, clean_line, round_places_half_up

logger = logging.getLogger(__name__)

WORD_PATTERN = re.compile(r"\w+", re.ASCII)

STOP_WORDS = frozenset([
    'the', 'and', 'a', 'to', 'of', 'in', 'is', 'it', 'for', 'with',
    'on', 'as', 'at', 'by', 'an', 'be', 'this', 'that',
])

TOP_KEYWORDS = 5
MAX_HEADING_LENGTH = 100
TITLE_LENGTH = 60
DESCRIPTION_LENGTH = 155

NO_HEADINGS_PLACEHOLDER = "No clear headings detected"
UNTITLED = "Untitled Content"

HEADING_TAGS = ['h1', 'h2', 'h3', 'h4', 'h5', 'h6']
BLOCK_TAGS = ['p', 'div', 'li', 'section', 'article', 'blockquote', 'tr', 'pre']


class ContentFetchError(Exception):
    """Raised when a page cannot be fetched for auditing"""


class ContentAnalyzer:
    """Scores text for SEO quality with a deterministic frequency heuristic"""

    def __init__(self, scraper_config: WorkspaceConfig = None, session: requests.Session = None):
        self.config = scraper_config or default_config
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': random.choice(self.config.user_agents)
        })

    def audit(self, text: str) -> ContentAudit:
        """Audit a block of prose. Total over its input: empty text yields the baseline score."""
        text = text or ""
        words = self._tokenize(text)
        word_count = len(words)

        keyword_density = self._calculate_keyword_density(words)
        headings = self._detect_headings(text)
        score = self._calculate_score(word_count, headings, keyword_density)

        lines = text.split('\n')
        title = lines[0][:TITLE_LENGTH] or UNTITLED

        audit = ContentAudit(
            score=score,
            title=title,
            description=text[:DESCRIPTION_LENGTH] + "...",
            headings=headings or [NO_HEADINGS_PLACEHOLDER],
            recommendations=self._build_recommendations(word_count, headings, keyword_density),
            keyword_density=keyword_density,
        )

        logger.debug(f"Audited {word_count} words, {len(headings)} headings, score {score}")
        return audit

    def audit_html(self, html: str) -> ContentAudit:
        """Audit an HTML document, keeping its headings as '#' lines"""
        return self.audit(self._extract_auditable_text(html))

    def audit_url(self, url: str) -> ContentAudit:
        """Fetch a page and audit its visible text"""
        logger.info(f"Fetching content for audit: {url}")

        try:
            response = self.session.get(url, timeout=self.config.request_timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error for {url}: {e}")
            raise ContentFetchError(f"Could not fetch {url}: {e}") from e

        if response.status_code != 200:
            logger.error(f"HTTP {response.status_code} for {url}")
            raise ContentFetchError(f"HTTP {response.status_code} for {url}")

        return self.audit_html(response.text)

    def _tokenize(self, text: str) -> List[str]:
        return WORD_PATTERN.findall(text.lower())

    def _calculate_keyword_density(self, words: List[str]) -> List[KeywordDensity]:
        """Top keywords by raw frequency with their share of all tokens"""
        frequency = Counter(
            word for word in words
            if len(word) > 3 and word not in STOP_WORDS
        )

        # sorted() is stable and Counter keeps first-seen order, so ties stay in text order
        ranked = sorted(frequency.items(), key=lambda item: item[1], reverse=True)[:TOP_KEYWORDS]

        word_count = len(words)
        return [
            KeywordDensity(
                keyword=keyword,
                density=round_places_half_up(count / word_count * 100, 2) if word_count else 0.0,
            )
            for keyword, count in ranked
        ]

    def _detect_headings(self, text: str) -> List[str]:
        """Lines that look like headings: short and either all caps or markdown-style"""
        return [
            line for line in text.split('\n')
            if 0 < len(line) < MAX_HEADING_LENGTH and (line.upper() == line or line.startswith('#'))
        ]

    def _calculate_score(self, word_count: int, headings: List[str],
                         keyword_density: List[KeywordDensity]) -> int:
        score = 40
        if word_count > 300:
            score += 20
        if word_count > 1000:
            score += 10
        if len(headings) > 2:
            score += 15
        if keyword_density and keyword_density[0].density < 5:
            score += 15
        return min(100, score)

    def _build_recommendations(self, word_count: int, headings: List[str],
                               keyword_density: List[KeywordDensity]) -> List[str]:
        return [
            "Content length is low. Aim for 1,000+ words for better authority."
            if word_count < 500 else "Good content length detected.",
            "Add more subheadings (H2, H3) to improve readability."
            if len(headings) < 3 else "Heading structure looks diverse.",
            "Keyword stuffing detected. Reduce top keyword frequency."
            if any(entry.density > 4 for entry in keyword_density)
            else "Keyword density is within healthy limits.",
            "Ensure your primary keyword appears in the first 100 words.",
            "Add internal links to related high-value pages.",
            "Optimize images with descriptive ALT text containing secondary keywords.",
        ]

    def _extract_auditable_text(self, html: str) -> str:
        """Flatten HTML into lines, page title first and headings prefixed with '#'"""
        soup = BeautifulSoup(html or "", 'html.parser')
        page_title = safe_extract_text(soup.find('title'))

        for tag in soup(["script", "style", "noscript", "head", "title"]):
            tag.decompose()

        for heading in soup.find_all(HEADING_TAGS):
            heading.replace_with(f"\n# {safe_extract_text(heading)}\n")
        for br in soup.find_all('br'):
            br.replace_with("\n")
        for block in soup.find_all(BLOCK_TAGS):
            block.insert_after("\n")

        lines = [clean_line(line) for line in soup.get_text().splitlines()]
        body = [line for line in lines if line]

        if page_title:
            body.insert(0, page_title)
        return '\n'.join(body)


_analyzer: Optional[ContentAnalyzer] = None


def _default_analyzer() -> ContentAnalyzer:
    global _analyzer
    if _analyzer is None:
        _analyzer = ContentAnalyzer()
    return _analyzer


def audit(text: str) -> ContentAudit:
    """Audit text with the default analyzer"""
    return _default_analyzer().audit(text)
