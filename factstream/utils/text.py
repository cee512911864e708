import re
from urllib.parse import urlparse


def clean_text(text):
    """Normalize whitespace and strip."""
    return re.sub(r'\s+', ' ', text or '').strip()


def contains_any(text, keywords):
    """Case-insensitive substring check against any keyword."""
    lowered = (text or '').lower()
    return any(k in lowered for k in keywords)


def is_http_url(value):
    """True for absolute http(s) URLs with a host."""
    if not isinstance(value, str):
        return False
    try:
        parsed = urlparse(value or '')
    except ValueError:
        return False
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)
