"""
Writes rewrite plans back into workflow files.

Only the `uses:` value on each affected line is replaced, located by the
column the extractor recorded; every other line is written back byte for
byte.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, Union

from actpin.resolver.models import RewritePlan

logger = logging.getLogger(__name__)

_TRAILING_COMMENT = re.compile(r"\s+#.*$")
_QUOTES = ("'", '"')


def splice_value(line: str, column: int, value: str, reference_text: str, annotation: str) -> str:
    """
    Replace the `uses:` value that starts at 1-based `column` in `line`.

    In block style the old trailing comment is dropped and
    '# <annotation>' written in its place. In a flow mapping
    ('- {uses: a/b@v1, with: {...}}') the rest of the mapping is kept
    and the comment goes at the end of the line.

    Raises:
        ValueError: If `value` does not start at `column`.
    """
    start = column - 1
    end = start + len(value)
    if start < 0 or line[start:end] != value:
        # A quoted scalar's position is that of its opening quote
        quote = line[start:start + 1] if start >= 0 else ""
        if quote in _QUOTES and line[start + 1:end + 1] == value and line[end + 1:end + 2] == quote:
            end += 2
        else:
            raise ValueError(f"{value!r} not found at column {column} in: {line!r}")

    rest = _TRAILING_COMMENT.sub("", line[end:])
    if rest.strip():
        return f"{line[:start]}{reference_text}{rest} # {annotation}"
    return f"{line[:start]}{reference_text} # {annotation}"


def apply_plans(file_path: Union[str, Path], plans: Iterable[RewritePlan]) -> int:
    """
    Rewrite the lines named by `plans` in one file.

    A plan whose value is no longer where the extractor saw it is logged
    and left alone.

    Returns:
        The number of lines whose text changed.
    """
    path = Path(file_path)
    # Keep line endings as they are, including a missing final newline
    with open(path, "r", encoding="utf-8", newline="") as f:
        lines = f.read().splitlines(keepends=True)

    changed = 0
    for plan in plans:
        ref = plan.resolved.reference
        i = ref.line - 1
        if not 0 <= i < len(lines):
            logger.warning("%s: not rewritten: line %d is out of range", ref.location, ref.line)
            continue
        original = lines[i]
        body = original.rstrip("\r\n")
        ending = original[len(body):]
        try:
            new_line = splice_value(body, ref.column, str(ref), plan.reference_text, plan.annotation) + ending
        except ValueError as e:
            logger.warning("%s: not rewritten: %s", ref.location, e)
            continue
        if new_line != original:
            logger.debug("%s: %s -> %s", ref.location, ref, plan.replacement)
            lines[i] = new_line
            changed += 1

    if changed:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write("".join(lines))
        logger.info("Updated %d line(s) in %s", changed, path)
    return changed
