"""
Diff Parser Module

Extracts the list of changed file paths from a unified git diff.

Design Decisions:
- Read paths from the `diff --git a/<old> b/<new>` file headers
- Report the new-side path, so renames and additions name the file
  as it exists on the pull request branch
- Decode paths git wrote in C-style quotes (non-ASCII names by default)
- Keep first-seen order and drop duplicates
"""

import re
from typing import List, Optional

from reviewer_mention.logging_config import get_logger

logger = get_logger(__name__)


# Inside of a C-style quoted path: anything but a bare quote or backslash
_QUOTED_BODY = r'(?:[^"\\]|\\.)*'

# Regex pattern for file headers: diff --git a/old/path b/new/path
FILE_HEADER_PATTERN = re.compile(
    r'^diff --git (?P<old>"a/' + _QUOTED_BODY + r'"|a/.+?) '
    r'(?P<new>"b/' + _QUOTED_BODY + r'"|b/.+)$'
)

# Fallbacks for headers whose paths contain " b/"
OLD_FILE_PATTERN = re.compile(r'^--- (?P<path>"a/' + _QUOTED_BODY + r'"|a/.+)$')
NEW_FILE_PATTERN = re.compile(r'^\+\+\+ (?P<path>"b/' + _QUOTED_BODY + r'"|b/.+)$')

ESCAPE_PATTERN = re.compile(r'\\([0-7]{1,3}|.)')

C_ESCAPES = {
    "a": "\a", "b": "\b", "t": "\t", "n": "\n",
    "v": "\v", "f": "\f", "r": "\r",
}


def unquote_path(token: str) -> str:
    """
    Decode a path token as git writes it in diff headers.

    Quoted tokens use C-style escapes, and octal escapes are the raw
    bytes of the UTF-8 encoded name, so `"caf\\303\\251.rb"` decodes to
    `café.rb`. Unquoted tokens are returned unchanged.
    """
    if len(token) < 2 or not (token.startswith('"') and token.endswith('"')):
        return token

    body = token[1:-1]
    decoded = bytearray()
    position = 0

    for match in ESCAPE_PATTERN.finditer(body):
        decoded += body[position:match.start()].encode("utf-8")
        escape = match.group(1)
        if escape[0] in "01234567":
            decoded.append(int(escape, 8) & 0xFF)
        else:
            decoded += C_ESCAPES.get(escape, escape).encode("utf-8")
        position = match.end()

    decoded += body[position:].encode("utf-8")
    return decoded.decode("utf-8", errors="replace")


def _strip_side(token: str) -> str:
    """Unquote a path token and drop its a/ or b/ prefix."""
    return unquote_path(token)[2:]


class DiffParserError(Exception):
    """Custom exception for diff parsing errors."""
    pass


class DiffParser:
    """
    Parser for unified diff format.

    Usage:
        parser = DiffParser()
        paths = parser.parse_changed_files(diff_text)
    """

    def parse_changed_files(self, diff: str) -> List[str]:
        """
        Parse the changed file paths out of a unified diff.

        Args:
            diff: Raw output of `git diff` for the whole pull request

        Returns:
            Changed file paths in diff order

        Raises:
            DiffParserError: If the text is non-empty but has no file headers
        """
        if not diff or not diff.strip():
            return []

        paths: List[str] = []
        seen = set()
        pending_header = False
        old_path: Optional[str] = None

        for raw_line in diff.splitlines():
            if raw_line.startswith("diff --git "):
                path = self._path_from_header(raw_line)
                pending_header = path is None
                old_path = None
                if path is not None:
                    self._add(path, paths, seen)
                continue

            # Header was ambiguous; take the path from the ---/+++ lines instead
            if pending_header:
                # git appends a tab to these lines when the path has a space
                line = raw_line.rstrip("\t")
                old_match = OLD_FILE_PATTERN.match(line)
                new_match = NEW_FILE_PATTERN.match(line)
                if old_match:
                    old_path = _strip_side(old_match.group("path"))
                elif new_match:
                    self._add(_strip_side(new_match.group("path")), paths, seen)
                    pending_header = False
                elif raw_line.startswith("+++ /dev/null") and old_path:
                    self._add(old_path, paths, seen)
                    pending_header = False

        if not paths:
            logger.error("Diff contains no file headers", size=len(diff))
            raise DiffParserError("Diff contains no file headers")

        logger.debug("Parsed changed files from diff", num_files=len(paths))
        return paths

    def _path_from_header(self, line: str) -> Optional[str]:
        match = FILE_HEADER_PATTERN.match(line)
        if not match:
            return None

        old_token, new_token = match.group("old"), match.group("new")

        # Unquoted path with " b/" inside it makes the split ambiguous
        if any(
            not token.startswith('"') and " b/" in token
            for token in (old_token, new_token)
        ):
            return None

        return _strip_side(new_token)

    @staticmethod
    def _add(path: str, paths: List[str], seen: set) -> None:
        if path not in seen:
            seen.add(path)
            paths.append(path)


# Singleton instance
_parser_instance: Optional[DiffParser] = None


def get_diff_parser() -> DiffParser:
    """Get the singleton DiffParser instance."""
    global _parser_instance
    if _parser_instance is None:
        _parser_instance = DiffParser()
    return _parser_instance
