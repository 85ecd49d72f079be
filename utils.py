"""
Utility functions for numeric clamping, identifiers, text handling and timing
"""
import math
import time
import uuid
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Union
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

Number = Union[int, float]


def clamp(value: Number, lower: Number, upper: Number) -> Number:
    """Clamp a value into the inclusive range [lower, upper]"""
    return max(lower, min(upper, value))


def to_int(value: Any, default: int = 0) -> int:
    """Coerce loosely typed input (stored JSON, AI output) to an int"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return int(number)


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce loosely typed input to a finite float"""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, unlike round()"""
    return int(math.floor(value + 0.5))


def round_places_half_up(value: float, places: int) -> float:
    """Round to a number of decimal places, ties going up.

    Ties are judged on the exact binary value of the float, so 3.125 becomes
    3.13 while 2.675 (stored just below the tie) becomes 2.67.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


TRUE_STRINGS = ("true", "yes", "on", "1")
FALSE_STRINGS = ("false", "no", "off", "0", "")


def to_bool(value: Any, default: bool = False) -> bool:
    """Coerce stored or user-supplied flags; "false" and "off" read as False"""
    if value is None:
        return default
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
        return default
    return bool(value)


def generate_record_id(length: int = 9) -> str:
    """Short random identifier for stored records"""
    return uuid.uuid4().hex[:length]


def validate_url(url: str) -> bool:
    """Validate if a URL is properly formatted"""
    try:
        result = urlparse(url)
        return all([result.scheme in ("http", "https"), result.netloc])
    except ValueError:
        return False


def safe_extract_text(element, default: str = "") -> str:
    """Safely extract text from BeautifulSoup element"""
    if element is None:
        return default
    return element.get_text(" ", strip=True) or default


def clean_line(text: str) -> str:
    """Collapse runs of whitespace inside a single line"""
    if not text:
        return ""
    return ' '.join(text.split())


class PerformanceMonitor:
    """Monitor and log timing of named operations"""

    def __init__(self):
        self.metrics = {}

    def start_timer(self, operation: str):
        """Start timing an operation"""
        self.metrics[operation] = {'start': time.time()}

    def end_timer(self, operation: str) -> float:
        """End timing and log results"""
        entry = self.metrics.get(operation)
        if not entry or 'start' not in entry:
            return 0.0
        duration = time.time() - entry['start']
        entry['duration'] = duration
        logger.debug(f"Operation '{operation}' completed in {duration:.3f} seconds")
        return duration

    def get_metrics(self) -> dict:
        """Get all recorded metrics"""
        return {name: dict(values) for name, values in self.metrics.items()}
