"""Glob and regular-expression matchers over relative paths.

Both pattern kinds compile into a PathMatcher, a predicate applied to an
entry's full relative path. Compilation happens before any traversal, so
malformed patterns fail with PatternError without side effects.

Glob syntax:
- ``*`` matches any run of characters except ``/``.
- ``**`` matches any run of characters including ``/``; ``**/`` also
  matches zero leading directories.
- ``?`` matches one character except ``/``.
- ``[abc]`` / ``[!abc]`` match one character from (or not from) a set.
- ``{a,b,c}`` expands to alternation; braces may nest.
- ``\\`` escapes the next character.
"""

import re
from dataclasses import dataclass

from treepack.selection.errors import PatternError
from treepack.selection.models import PatternKind


@dataclass(frozen=True, slots=True)
class PathMatcher:
    """Compiled predicate over relative paths.

    Attributes:
        kind: Pattern kind the matcher was compiled from.
        pattern: Source pattern as supplied by the caller.
        regex: Compiled regular expression doing the matching.
    """

    kind: PatternKind
    pattern: str
    regex: re.Pattern[str]

    def __call__(self, relative_path: str) -> bool:
        if self.kind == PatternKind.GLOB:
            return self.regex.fullmatch(relative_path) is not None
        return self.regex.search(relative_path) is not None


def _find_closing_brace(pattern: str, start: int) -> int:
    """Return the index of the ``}`` matching the ``{`` at ``start``."""
    depth = 0
    i = start
    while i < len(pattern):
        char = pattern[i]
        if char == "\\":
            i += 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    msg = f"Unbalanced '{{' in glob pattern: {pattern!r}"
    raise PatternError(msg)


def _split_alternatives(body: str) -> list[str]:
    """Split a brace body on top-level commas."""
    parts: list[str] = []
    depth = 0
    current = ""
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\" and i + 1 < len(body):
            current += body[i : i + 2]
            i += 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append(current)
            current = ""
            i += 1
            continue
        current += char
        i += 1
    parts.append(current)
    return parts


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternations into separate glob patterns.

    Expansion is left to right and recursive, so ``{a,b{c,d}}`` yields
    ``a``, ``bc`` and ``bd``. Escaped braces are kept literal.

    Args:
        pattern: Glob pattern possibly containing brace groups.

    Returns:
        List of brace-free patterns in expansion order.

    Raises:
        PatternError: If braces are unbalanced.
    """
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\":
            i += 2
            continue
        if char == "}":
            msg = f"Unbalanced '}}' in glob pattern: {pattern!r}"
            raise PatternError(msg)
        if char == "{":
            end = _find_closing_brace(pattern, i)
            head, body, tail = pattern[:i], pattern[i + 1 : end], pattern[end + 1 :]
            expanded: list[str] = []
            for alternative in _split_alternatives(body):
                expanded.extend(expand_braces(head + alternative + tail))
            return expanded
        i += 1
    return [pattern]


def _translate_class(pattern: str, start: int) -> tuple[str, int]:
    """Translate a ``[...]`` character class beginning at ``start``.

    Returns:
        Tuple of (regex fragment, index just past the closing bracket).
    """
    i = start + 1
    negate = i < len(pattern) and pattern[i] in "!^"
    if negate:
        i += 1
    body_start = i
    # A leading ']' is a literal member of the class
    if i < len(pattern) and pattern[i] == "]":
        i += 1
    while i < len(pattern) and pattern[i] != "]":
        i += 1
    if i >= len(pattern):
        msg = f"Unterminated '[' in glob pattern: {pattern!r}"
        raise PatternError(msg)

    body = pattern[body_start:i]
    for special in ("\\", "^", "[", "]"):
        body = body.replace(special, "\\" + special)
    # Character classes never match the path separator
    fragment = f"[^/{body}]" if negate else f"(?!/)[{body}]"
    return fragment, i + 1


def glob_to_regex(pattern: str) -> str:
    """Translate a brace-free glob into an anchored-free regex body.

    Args:
        pattern: Glob pattern without brace groups.

    Returns:
        Regular expression source matching the same paths.

    Raises:
        PatternError: If a character class is unterminated.
    """
    parts: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        char = pattern[i]
        if char == "*":
            if pattern.startswith("**", i):
                i += 2
                while i < n and pattern[i] == "*":
                    i += 1
                if i < n and pattern[i] == "/":
                    parts.append("(?:.*/)?")
                    i += 1
                else:
                    parts.append(".*")
                continue
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        elif char == "[":
            fragment, i = _translate_class(pattern, i)
            parts.append(fragment)
            continue
        elif char == "\\" and i + 1 < n:
            i += 1
            parts.append(re.escape(pattern[i]))
        else:
            parts.append(re.escape(char))
        i += 1
    return "".join(parts)


def compile_glob(pattern: str) -> PathMatcher:
    """Compile a glob pattern into a full-path matcher.

    Args:
        pattern: Glob pattern (see module docstring for syntax).

    Returns:
        PathMatcher that must match the entire relative path.

    Raises:
        PatternError: If the pattern is empty or malformed.
    """
    if not pattern:
        msg = "Glob pattern cannot be empty"
        raise PatternError(msg)

    # Relative paths always use "/", so a backslash stays an escape character
    alternatives = [glob_to_regex(alt) for alt in expand_braces(pattern)]
    source = "|".join(f"(?:{alt})" for alt in alternatives)
    try:
        regex = re.compile(source, re.DOTALL)
    except re.error as e:
        msg = f"Invalid glob pattern {pattern!r}: {e}"
        raise PatternError(msg) from e
    return PathMatcher(kind=PatternKind.GLOB, pattern=pattern, regex=regex)


def compile_regex(pattern: str | re.Pattern[str]) -> PathMatcher:
    """Compile a regular expression into a search matcher.

    The expression may be found anywhere within the relative path. Use
    inline flags such as ``(?i)`` for case-insensitive matching, or pass
    a precompiled pattern carrying its own flags.

    Args:
        pattern: Regular expression source or compiled pattern.

    Returns:
        PathMatcher with search semantics.

    Raises:
        PatternError: If the expression is empty or cannot be compiled.
    """
    if isinstance(pattern, re.Pattern):
        return PathMatcher(kind=PatternKind.REGEX, pattern=pattern.pattern, regex=pattern)

    if not pattern:
        msg = "Regex pattern cannot be empty"
        raise PatternError(msg)

    try:
        regex = re.compile(pattern)
    except re.error as e:
        msg = f"Invalid regex pattern {pattern!r}: {e}"
        raise PatternError(msg) from e
    return PathMatcher(kind=PatternKind.REGEX, pattern=pattern, regex=regex)


def compile_pattern(kind: PatternKind, pattern: str) -> PathMatcher:
    """Compile a pattern of the given kind.

    Args:
        kind: GLOB or REGEX.
        pattern: Pattern source.

    Returns:
        Compiled PathMatcher.

    Raises:
        PatternError: If the pattern is malformed.
    """
    if kind == PatternKind.GLOB:
        return compile_glob(pattern)
    return compile_regex(pattern)
