"""
Brief: Tests for cococo.xml_escape.escape.

Inputs:
  - None

Outputs:
  - None
"""

import pytest

from cococo.xml_escape import escape


def test_escape_all_special_characters_in_sequence():
    """
    Brief: The five XML specials are replaced and '&' is not re-escaped.

    Inputs:
      - None

    Outputs:
      - None
    """
    assert escape("&<>\"'") == "&amp;&lt;&gt;&quot;&apos;"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Sources/App.swift", "Sources/App.swift"),
        ("a & b", "a &amp; b"),
        ('say "hi"', "say &quot;hi&quot;"),
        ("it's", "it&apos;s"),
        ("List<T>.swift", "List&lt;T&gt;.swift"),
        ("", ""),
    ],
)
def test_escape_examples(raw, expected):
    """
    Brief: Individual characters map to their named entities.

    Inputs:
      - raw: unescaped text
      - expected: escaped text

    Outputs:
      - None
    """
    assert escape(raw) == expected


def test_escape_is_not_idempotent():
    """
    Brief: Escaping twice double-escapes the ampersand.

    Inputs:
      - None

    Outputs:
      - None
    """
    assert escape(escape("<")) == "&amp;lt;"
