"""Filtering helpers for file lists reported by xccov.

Both filters are plain string matches: case-sensitive, no path
normalization, and the relative order of surviving entries is preserved.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence


def filter_by_extension(
    paths: Iterable[str], excluded_extensions: Sequence[str]
) -> List[str]:
    """Brief: Drop paths ending with any of the excluded extensions.

    Inputs:
      - paths: File paths in listing order.
      - excluded_extensions: Suffixes such as ".h" or ".swift".

    Outputs:
      - list[str]: Paths that end with none of the suffixes.
    """

    suffixes = tuple(excluded_extensions)
    if not suffixes:
        return list(paths)
    return [p for p in paths if not p.endswith(suffixes)]


def filter_by_path_substring(
    paths: Iterable[str], ignored_substrings: Sequence[str]
) -> List[str]:
    """Brief: Drop paths containing any of the ignored substrings.

    Inputs:
      - paths: File paths in listing order.
      - ignored_substrings: Substrings such as "Pods/" or "Generated".

    Outputs:
      - list[str]: Paths that contain none of the substrings.
    """

    return [p for p in paths if not any(s in p for s in ignored_substrings)]
