from __future__ import annotations

# '&' must stay first so entities introduced below are not escaped again.
_ENTITIES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)


def escape(text: str) -> str:
    """Brief: Escape a string for use inside a double-quoted XML attribute.

    Inputs:
      - text: Raw, unescaped string.

    Outputs:
      - str: text with the five XML special characters replaced by their
        named entities.

    Notes:
      - Not idempotent: escaping an already escaped value escapes its '&'
        again, so callers escape raw input exactly once.

    Example:
      >>> escape("a<b & 'c'")
      'a&lt;b &amp; &apos;c&apos;'
    """

    for raw, entity in _ENTITIES:
        text = text.replace(raw, entity)
    return text
