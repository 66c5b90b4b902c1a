"""
Helper Utility Module

This module provides the text normalization used on post content
(escape resolution, HTML entity decoding, tag stripping) together with
small helpers shared by the services and the HTTP layer.
"""

import json
from datetime import timedelta
from typing import Any, Dict, List, Tuple

# Order matters: "&amp;" goes last so "&amp;lt;" decodes once to "&lt;"
HTML_ENTITIES: List[Tuple[str, str]] = [
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&apos;", "'"),
    ("&amp;", "&"),
]


def unescape_unicode(text: str) -> str:
    """
    Resolve JSON-style escape sequences such as \\u00e9 or \\n.

    Args:
        text: Text that may contain backslash escapes

    Returns:
        str: The decoded text

    Raises:
        ValueError: If the text holds an escape JSON does not accept
    """
    # Quotes are escaped so the text can sit inside a JSON string literal
    literal = '"' + text.replace('"', '\\"') + '"'
    return json.loads(literal, strict=False)


def decode_html_entities(text: str) -> str:
    """Replace the supported HTML entities with their literal characters."""
    for escaped, unescaped in HTML_ENTITIES:
        text = text.replace(escaped, unescaped)
    return text


def cleanup_content(content: str) -> str:
    """
    Clean up escaped characters and HTML entities in raw post content.

    Args:
        content: The raw content value returned by the upstream

    Returns:
        str: Content with quotes, escapes and entities resolved
    """
    # Remove the surrounding quotes if they exist
    if len(content) > 2 and content[0] == '"' and content[-1] == '"':
        content = content[1:-1]

    content = content.replace('\\"', '"')

    # Best effort: keep the content as-is when it is not valid escaped text
    try:
        content = unescape_unicode(content)
    except ValueError:
        pass

    return decode_html_entities(replace_lone_surrogates(content))


def replace_lone_surrogates(text: str) -> str:
    """Replace unpaired UTF-16 surrogates (e.g. from a bare \\ud800 escape) with U+FFFD."""
    return text.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


def strip_html_tags(html: str) -> str:
    """
    Remove HTML tags from text.

    Not an HTML parser: everything from '<' to '>' is dropped and each '>'
    leaves a single space behind so adjacent words do not run together.

    Args:
        html: The text to clean

    Returns:
        str: Plain text with whitespace collapsed and trimmed
    """
    result = []
    in_tag = False

    for ch in html:
        if ch == '<':
            in_tag = True
            continue
        if ch == '>':
            in_tag = False
            result.append(' ')
            continue
        if not in_tag:
            result.append(ch)

    text = ''.join(result)
    text = text.replace('&nbsp;', ' ')
    text = text.replace('\n\n', '\n')

    while '  ' in text:
        text = text.replace('  ', ' ')

    return text.strip()


def normalize_content(content: str, output_format: str = "html") -> str:
    """
    Apply the normalization matching the requested output format.

    Args:
        content: Raw content from the upstream
        output_format: "html" keeps markup, "text" strips tags as well

    Returns:
        str: The normalized content
    """
    cleaned = cleanup_content(content)
    if output_format == "text":
        return strip_html_tags(cleaned)
    return cleaned


def mask_token(token: str, visible: int = 10) -> str:
    """
    Show only the start of a secret.

    Returns an empty string for tokens too short to mask safely.
    """
    if not token or len(token) <= visible:
        return ""
    return token[:visible] + "..."


def _with_fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}." + f"{frac:0{digits}d}".rstrip("0")


def format_duration(delta: timedelta) -> str:
    """
    Format a timedelta the way Go prints durations.

    Examples: "23h59m58s", "23h59m58.5s", "-4m2s", "1.5ms", "500µs".
    Resolution is one microsecond, the precision of timedelta.
    """
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_with_fraction(micros, 1000)}ms"

    whole_seconds, frac = divmod(micros, 1_000_000)
    hours, rem = divmod(whole_seconds, 3600)
    minutes, seconds = divmod(rem, 60)
    secs = _with_fraction(seconds * 1_000_000 + frac, 1_000_000)

    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


def safe_get(data: Dict[str, Any], *keys, default: Any = None) -> Any:
    """
    Safely get a value from a nested dictionary.

    Args:
        data: The dictionary to search
        *keys: The keys to follow
        default: Default value if key doesn't exist

    Returns:
        The value at the specified keys or the default value
    """
    for key in keys:
        try:
            data = data[key]
        except (KeyError, TypeError, IndexError):
            return default
    return default if data is None else data
