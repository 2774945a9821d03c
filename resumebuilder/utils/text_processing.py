"""
Text processing utilities for formatting and display.
"""

import re


def slugify(text: str) -> str:
    """
    Turn a display name into a lowercase, hyphen-separated file stem.

    Example:
        >>> slugify("Modern Two Column")
        'modern-two-column'
        >>> slugify("  Résumé: Jane / 2025 ")
        'résumé-jane-2025'
    """
    text = re.sub(r"[^\w\s-]", "", text.strip().lower())
    return re.sub(r"[\s_-]+", "-", text).strip("-")


def set_max_consecutive_blank_lines(content: str, max_consecutive: int = 1) -> str:
    """
    Normalize consecutive blank lines to a maximum number.

    Args:
        content: The text content to normalize
        max_consecutive: Maximum number of consecutive blank lines to allow.
                        Use 0 to remove all blank lines (default: 1)

    Returns:
        Content with normalized blank lines

    Example:
        >>> set_max_consecutive_blank_lines("text\\n\\n\\n\\nmore", max_consecutive=1)
        'text\\n\\nmore'
        >>> set_max_consecutive_blank_lines("text\\n\\n\\n\\nmore", max_consecutive=0)
        'text\\nmore'
    """
    if max_consecutive == 0:
        pattern = r"\n\s*\n(\s*\n)*"
    else:
        pattern = r"\n\s*\n(\s*\n)+"

    replacement = "\n" * (max_consecutive + 1)

    return re.sub(pattern, replacement, content)
