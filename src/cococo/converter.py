"""Conversion of xccov output into SonarQube generic coverage XML.

Brief:
  - convert_archive() lists the files covered by one xcresult archive, filters
    them, and converts each file on a thread pool.
  - convert_file() asks xccov for one file's line view and renders a
    ``<file>`` fragment.
  - convert() runs every archive in order and wraps the fragments in a
    ``<coverage version="1">`` document.

Output order always follows the listing order, whatever order the workers
finish in. Per-file failures are logged and dropped; a listing failure
propagates and stops the whole run.
"""

from __future__ import annotations

import concurrent.futures
import logging
import os
import threading
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .config.config_parser import ConverterConfig
from .path_filter import filter_by_extension, filter_by_path_substring
from .tool_runner import ToolRunner
from .xml_escape import escape

logger = logging.getLogger(__name__)

COVERAGE_OPEN = '<coverage version="1">'
COVERAGE_CLOSE = "</coverage>\n"
NOT_EXECUTABLE_MARKER = "*"


def list_arguments(archive_path: str, legacy_mode: bool = False) -> List[str]:
    """Brief: xccov arguments listing the files of an archive."""

    if legacy_mode:
        return ["xccov", "view", "--file-list", archive_path]
    return ["xccov", "view", "--archive", "--file-list", archive_path]


def view_arguments(
    file_path: str, archive_path: str, legacy_mode: bool = False
) -> List[str]:
    """Brief: xccov arguments printing the per-line view of one file."""

    if legacy_mode:
        return ["xccov", "view", "--file", file_path, archive_path]
    return ["xccov", "view", "--archive", "--file", file_path, archive_path]


def parse_coverage_lines(lines: Iterable[str]) -> Iterator[Tuple[str, bool]]:
    """Brief: Yield (line_number, covered) records from xccov view output.

    Inputs:
      - lines: Raw lines such as ``"  12: 0"`` or ``"  13: 4"``.

    Outputs:
      - Iterator of (line number text, covered flag).

    Notes:
      - Lines ending with ``*`` are not executable and are dropped.
      - Lines that do not split into exactly two parts on ``": "`` are
        skipped without a diagnostic.
      - A hit count starting with ``0`` means not covered.
    """

    for line in lines:
        if line.endswith(NOT_EXECUTABLE_MARKER):
            continue
        parts = line.split(": ")
        if len(parts) != 2:
            continue
        yield parts[0].strip(), not parts[1].startswith("0")


def render_file_fragment(file_path: str, lines: Iterable[str]) -> str:
    """Brief: Render one ``<file>`` element for the given view output lines.

    Inputs:
      - file_path: Path reported by xccov; escaped here exactly once.
      - lines: Raw xccov view lines for that file.

    Outputs:
      - str: Newline-joined fragment without a trailing newline.
    """

    out = [f'  <file path="{escape(file_path)}">']
    for line_number, covered in parse_coverage_lines(lines):
        out.append(
            f'    <lineToCover lineNumber="{line_number}" '
            f'covered="{"true" if covered else "false"}"/>'
        )
    out.append("  </file>")
    return "\n".join(out)


class Converter:
    """Brief: Convert xcresult archives into SonarQube generic coverage XML.

    Inputs:
      - config: ConverterConfig with filters, legacy flag, worker count and
        tool command. Defaults apply when omitted.
      - runner: Object exposing ``run(command_name, arguments) -> str``.
        Defaults to a subprocess-backed ToolRunner.

    Example:
      >>> Converter().convert(["build/Test.xcresult"])  # doctest: +SKIP
    """

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        runner: Optional[ToolRunner] = None,
    ) -> None:
        self.config = config or ConverterConfig()
        self.runner = runner or ToolRunner()

    def _settings(
        self,
        excluded_file_extensions: Optional[Sequence[str]],
        ignored_paths: Optional[Sequence[str]],
        legacy_mode: Optional[bool],
    ) -> Tuple[Optional[Sequence[str]], Optional[Sequence[str]], bool]:
        # Explicit arguments win over the instance configuration.
        if excluded_file_extensions is None:
            excluded_file_extensions = self.config.excluded_file_extensions
        if ignored_paths is None:
            ignored_paths = self.config.ignored_paths
        if legacy_mode is None:
            legacy_mode = self.config.legacy_mode
        return excluded_file_extensions, ignored_paths, bool(legacy_mode)

    def convert(
        self,
        archive_paths: Sequence[str],
        excluded_file_extensions: Optional[Sequence[str]] = None,
        ignored_paths: Optional[Sequence[str]] = None,
        legacy_mode: Optional[bool] = None,
    ) -> str:
        """Brief: Convert archives in order into one coverage document.

        Inputs:
          - archive_paths: xcresult bundle paths, processed sequentially.
          - excluded_file_extensions: Optional suffix-exclude list.
          - ignored_paths: Optional substring-exclude list.
          - legacy_mode: Omit ``--archive`` from xccov invocations.

        Outputs:
          - str: Complete XML document ending with a newline.

        Raises:
          - ToolInvocationError: when listing any archive fails; no partial
            document is produced.
        """

        fragments: List[str] = []
        for archive_path in archive_paths:
            results = self.convert_archive(
                archive_path,
                excluded_file_extensions=excluded_file_extensions,
                ignored_paths=ignored_paths,
                legacy_mode=legacy_mode,
            )
            fragments.extend(r for r in results if r is not None)

        return "\n".join([COVERAGE_OPEN, *fragments, COVERAGE_CLOSE])

    def convert_archive(
        self,
        archive_path: str,
        excluded_file_extensions: Optional[Sequence[str]] = None,
        ignored_paths: Optional[Sequence[str]] = None,
        legacy_mode: Optional[bool] = None,
    ) -> List[Optional[str]]:
        """Brief: Convert every file listed in one archive.

        Inputs:
          - archive_path: xcresult bundle path.
          - excluded_file_extensions, ignored_paths, legacy_mode: as convert().

        Outputs:
          - list: One slot per filtered file in listing order, holding the
            rendered fragment or None when that file failed.

        Raises:
          - ToolInvocationError: when the file listing cannot be obtained.
        """

        extensions, ignored, legacy = self._settings(
            excluded_file_extensions, ignored_paths, legacy_mode
        )

        listing = self.runner.run(
            self.config.tool_command, list_arguments(archive_path, legacy)
        )
        file_list = [line for line in listing.splitlines() if line]

        if extensions is not None:
            file_list = filter_by_extension(file_list, extensions)
        if ignored is not None:
            file_list = filter_by_path_substring(file_list, ignored)

        total = len(file_list)
        results: List[Optional[str]] = [None] * total
        if not total:
            logger.info("%s: no files to convert", archive_path)
            return results

        lock = threading.Lock()

        def _work(index: int, file_path: str) -> None:
            logger.info("%d/%d %s", index, total, file_path)
            try:
                fragment = self.convert_file(file_path, archive_path, legacy)
            except Exception as exc:
                logger.warning("Conversion failed for: %s (%s)", file_path, exc)
                return
            with lock:
                results[index] = fragment

        max_workers = self.config.max_workers or os.cpu_count() or 1
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [
                pool.submit(_work, i, path) for i, path in enumerate(file_list)
            ]
            for fut in futures:
                fut.result()

        return results

    def convert_file(
        self, file_path: str, archive_path: str, legacy_mode: Optional[bool] = None
    ) -> str:
        """Brief: Convert one file's xccov line view into a ``<file>`` fragment.

        Inputs:
          - file_path: Path as reported by the archive listing.
          - archive_path: xcresult bundle path.
          - legacy_mode: Omit ``--archive``; defaults to the configured value.

        Outputs:
          - str: Rendered fragment.

        Raises:
          - ToolInvocationError: when xccov fails for this file.
        """

        if legacy_mode is None:
            legacy_mode = self.config.legacy_mode
        output = self.runner.run(
            self.config.tool_command,
            view_arguments(file_path, archive_path, bool(legacy_mode)),
        )
        lines = [line for line in output.split("\n") if line]
        return render_file_fragment(file_path, lines)
