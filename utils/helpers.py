"""Helper utility functions."""

from datetime import datetime, timezone
import re


def utc_now() -> datetime:
    """Get current time in UTC."""
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as ISO-8601 UTC with a trailing Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_currency(amount: float, symbol: str = "$") -> str:
    """Format amount as US dollars."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_percentage(value: float, decimals: int = 2) -> str:
    """Format value as percentage with sign."""
    sign = "+" if value > 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def slugify(text: str) -> str:
    """Lower-case, hyphen-separated slug for URLs."""
    slug = re.sub(r'[^a-z0-9]+', '-', text.lower())
    return slug.strip('-')

