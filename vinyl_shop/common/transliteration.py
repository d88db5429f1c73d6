"""
Transliteration Utilities

Folds accented and special Latin characters to ASCII for collection handles.
"""

import re
import unicodedata

# Characters NFKD does not decompose into an ASCII base letter
TRANSLIT_MAP = {
    'ß': 'ss', 'æ': 'ae', 'Æ': 'AE', 'ø': 'o', 'Ø': 'O', 'œ': 'oe', 'Œ': 'OE',
    'ł': 'l', 'Ł': 'L', 'đ': 'd', 'Đ': 'D', 'þ': 'th', 'Þ': 'Th', '&': ' and ',
}


def transliterate(text: str) -> str:
    """
    Transliterate text to plain ASCII characters.

    Example:
        >>> transliterate("Motörhead")
        'Motorhead'
    """
    mapped = ''.join(TRANSLIT_MAP.get(char, char) for char in text)
    decomposed = unicodedata.normalize('NFKD', mapped)
    return ''.join(c for c in decomposed if not unicodedata.combining(c))


def generate_handle(title: str, prefix: str = '') -> str:
    """
    Generate URL-friendly handle from title.

    Converts title to lowercase, folds accents, and replaces
    spaces/special characters with hyphens.

    Args:
        title: Product or collection title
        prefix: Optional prefix (e.g., 'rock-' for a style under Rock)

    Returns:
        URL-friendly handle

    Example:
        >>> generate_handle("Folk, World, & Country")
        'folk-world-and-country'
        >>> generate_handle("Punk", prefix="rock-")
        'rock-punk'
    """
    text = f"{prefix}{title}" if prefix else title

    result = []
    for char in transliterate(text).lower():
        if char.isascii() and char.isalnum():
            result.append(char)
        elif char in ' -_,/.':
            result.append('-')
        # Skip other characters

    handle = ''.join(result)

    # Clean up multiple consecutive hyphens
    handle = re.sub(r'-+', '-', handle)

    # Remove leading/trailing hyphens
    return handle.strip('-')
