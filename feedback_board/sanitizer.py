"""Allow-list HTML sanitization for user supplied rich text."""
import nh3

ALLOWED_TAGS = {
    "p", "br", "strong", "b", "em", "i", "u", "s", "code", "pre",
    "blockquote", "ul", "ol", "li", "a", "h1", "h2", "h3",
}

ALLOWED_ATTRIBUTES = {
    "a": {"href", "title"},
}

ALLOWED_URL_SCHEMES = {"http", "https", "mailto"}


def sanitize_html(value: str) -> str:
    """Strip markup outside the rich-text allow-list and trim the result."""
    if not value:
        return ""
    cleaned = nh3.clean(
        value,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        url_schemes=ALLOWED_URL_SCHEMES,
    )
    return cleaned.strip()
