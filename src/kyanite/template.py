"""Command template expansion.

A template is an ordinary shell command with expansion sites wrapped in the
placeholder delimiters (``{`` and ``}`` by default):

- ``{}``: the whole input line.
- ``{N}``: field ``N`` (1-based) of the line split on the field separator.
- ``{N+}``: fields ``N`` through the last one.
- ``{N-}``: fields 1 through ``N``.
- ``{s/PATTERN/REPLACEMENT/FLAGS}``: sed-like substitution applied to the line
  (``g`` replaces every match, ``i`` ignores case).
- ``{/PATTERN/G}``: capture group ``G`` of the first match of ``PATTERN``.

Expansion never fails. A substitution with a broken pattern stays in the
command verbatim, and a capture that cannot be resolved becomes empty.
"""

from __future__ import annotations

import re
from collections.abc import Callable

_FALLBACK_DELIMITER = "{"

_REPLACEMENT_REFERENCE = re.compile(r"\$\$|\$\{(\w+)\}|\$(\w+)")

# (text, frozen); frozen text came out of an earlier pass and is never re-scanned.
_Segment = tuple[str, bool]


def delimiter_pair(placeholder: str) -> tuple[str, str]:
    """Return the (open, close) delimiter characters of a placeholder."""

    if len(placeholder) >= 2:  # noqa: PLR2004
        return placeholder[0], placeholder[-1]
    if placeholder:
        return placeholder, placeholder
    return _FALLBACK_DELIMITER, _FALLBACK_DELIMITER


def expand_template(
    template: str,
    line: str,
    field_separator: str,
    placeholder: str,
) -> str:
    """Expand ``template`` for one input ``line``.

    Passes run in a fixed order: substitution, field access, regex capture and
    finally the literal placeholder. Every pass reads the original ``line``;
    the text a pass produces is spliced into the command and left alone by the
    passes that follow.
    """

    open_delim, close_delim = delimiter_pair(placeholder)
    opening = re.escape(open_delim)
    closing = re.escape(close_delim)

    segments: list[_Segment] = [(template, False)]
    segments = _rewrite(
        segments,
        re.compile(rf"{opening}\s*s/([^/]+)/([^/]*)/(.*?){closing}"),
        lambda match: _substitute(match, line),
    )
    segments = _rewrite(
        segments,
        re.compile(rf"{opening}\s*(\d+)([+\-]?)\s*{closing}"),
        lambda match: _select_fields(match, line, field_separator),
    )
    segments = _rewrite(
        segments,
        re.compile(rf"{opening}\s*/([^/]+)/(\d+)\s*{closing}"),
        lambda match: _capture_group(match, line),
    )
    if placeholder:
        segments = [
            (text if frozen else text.replace(placeholder, line), frozen)
            for text, frozen in segments
        ]
    return "".join(text for text, _ in segments)


def _rewrite(
    segments: list[_Segment],
    pattern: re.Pattern[str],
    render: Callable[[re.Match[str]], str],
) -> list[_Segment]:
    rewritten: list[_Segment] = []
    for text, frozen in segments:
        if frozen:
            rewritten.append((text, frozen))
            continue

        position = 0
        for match in pattern.finditer(text):
            if match.start() > position:
                rewritten.append((text[position : match.start()], False))
            rewritten.append((render(match), True))
            position = match.end()
        if position < len(text):
            rewritten.append((text[position:], False))
    return rewritten


def _compile(pattern: str, flags: int = 0) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern, flags)
    except (re.error, OverflowError, RecursionError):
        return None


def _parse_index(digits: str) -> int | None:
    try:
        return int(digits)
    except ValueError:
        # More digits than int() accepts; no line has that many fields or groups.
        return None


def _substitute(match: re.Match[str], line: str) -> str:
    pattern, replacement, flags = match.groups()
    compiled = _compile(pattern, re.IGNORECASE if "i" in flags else 0)
    if compiled is None:
        return match.group(0)

    return compiled.sub(
        lambda found: _expand_replacement(found, replacement),
        line,
        count=0 if "g" in flags else 1,
    )


def _expand_replacement(found: re.Match[str], replacement: str) -> str:
    """Resolve ``$N`` and ``${name}`` group references; the rest is literal."""

    def _reference(reference: re.Match[str]) -> str:
        if reference.group(0) == "$$":
            return "$"
        name = reference.group(1) or reference.group(2)
        key: int | str | None = _parse_index(name) if name.isdecimal() else name
        if key is None:
            return ""
        try:
            return found.group(key) or ""
        except IndexError:
            return ""

    return _REPLACEMENT_REFERENCE.sub(_reference, replacement)


def _select_fields(match: re.Match[str], line: str, separator: str) -> str:
    index = _parse_index(match.group(1))
    modifier = match.group(2)
    fields = line.split(separator) if separator else [line]
    if index is None or index == 0 or index > len(fields):
        return ""

    if modifier == "+":
        return separator.join(fields[index - 1 :])
    if modifier == "-":
        return separator.join(fields[:index])
    return fields[index - 1]


def _capture_group(match: re.Match[str], line: str) -> str:
    pattern, group = match.groups()
    compiled = _compile(pattern)
    index = _parse_index(group)
    if compiled is None or index is None:
        return ""

    found = compiled.search(line)
    if found is None:
        return ""
    try:
        return found.group(index) or ""
    except IndexError:
        return ""
