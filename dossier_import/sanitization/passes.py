"""Corrective text passes applied by the sanitizer.

Each pass is a pure ``str -> str`` function that leaves already-clean text
unchanged. The scanners below share one notion of a double-quoted string:
it opens at ``"`` or a typographic double quote; a string opened by a plain
quote closes only at a plain quote, one opened by a typographic quote closes
at either kind. Inside a string a backslash always consumes the next char.
"""

import re
from typing import List, Optional

SMART_DOUBLE = "“”"
SMART_SINGLE = "‘’"
DOUBLE_OPENERS = '"' + SMART_DOUBLE
SINGLE_QUOTES = "'" + SMART_SINGLE

# Characters after which a single quote starts a string literal
_VALUE_START = "{[:,"

_LITERAL_TOKENS = (("None", "null"), ("True", "true"), ("False", "false"))

_COMMENT_LINE = re.compile(r"^[ \t]*#.*$", re.MULTILINE)

_STRING_LITERAL = (
    r'"(?:[^"\\]|\\.)*"'
    r'|[“”](?:[^"“”\\]|\\.)*["“”]'
)
_SINGLE_LITERAL = r"['‘’](?:[^'‘’\\\n]|\\.)*['‘’]"

_PARENTHESIZED_SCALAR = re.compile(
    r":\s*\(\s*(" + _STRING_LITERAL + "|" + _SINGLE_LITERAL + r")\s*\)",
    re.DOTALL,
)

_SPLIT_LITERALS = re.compile(
    r"(" + _STRING_LITERAL + r")(?:([ \t\r]*\n\s*)(" + _STRING_LITERAL + r"))?",
    re.DOTALL,
)

_TRAILING_SEPARATOR = re.compile(r",(?:\s*,)*(\s*[}\]])")

_BACKSLASH_RUN = re.compile(r"(\\+)(.?)", re.DOTALL)
_VALID_ESCAPE_TARGETS = frozenset('"\\/bfnrtu')
_MARKDOWN_ESCAPED = frozenset("[]()~_")

_EXCESS_BLANK_LINES = re.compile(r"\n\s*\n\s*\n")


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _last_significant(out: List[str]) -> Optional[str]:
    """Last non-whitespace character already emitted, if any."""
    for chunk in reversed(out):
        stripped = chunk.rstrip()
        if stripped:
            return stripped[-1]
    return None


def _closes(opener: str, ch: str) -> bool:
    if opener == '"':
        return ch == '"'
    return ch in DOUBLE_OPENERS


def rewrite_literal_tokens(text: str) -> str:
    """Rewrite bare ``None``/``True``/``False`` outside quoted spans.

    Explicit state machine over the input with two flags. A quote preceded
    by a backslash never toggles state; identical character sequences inside
    a quoted span are copied untouched.
    """
    out: List[str] = []
    in_double = False
    in_single = False
    double_opener = '"'
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]

        if in_double or in_single:
            if ch == "\\" and i + 1 < n:
                out.append(text[i:i + 2])
                i += 2
                continue
            if in_double and _closes(double_opener, ch):
                in_double = False
            elif in_single and (ch in SINGLE_QUOTES or ch == "\n"):
                in_single = False
            out.append(ch)
            i += 1
            continue

        escaped = i > 0 and text[i - 1] == "\\"
        if ch in DOUBLE_OPENERS and not escaped:
            in_double = True
            double_opener = ch
        elif ch in SINGLE_QUOTES and not escaped:
            previous = _last_significant(out)
            if previous is None or previous in _VALUE_START:
                in_single = True
        else:
            for token, replacement in _LITERAL_TOKENS:
                end = i + len(token)
                if (
                    text.startswith(token, i)
                    and (i == 0 or not _is_word_char(text[i - 1]))
                    and (end >= n or not _is_word_char(text[end]))
                ):
                    out.append(replacement)
                    i = end
                    break
            else:
                out.append(ch)
                i += 1
            continue

        out.append(ch)
        i += 1

    return "".join(out)


def strip_comment_lines(text: str) -> str:
    """Blank out lines whose first non-blank character is ``#``."""
    return _COMMENT_LINE.sub("", text)


def unwrap_parenthesized_scalars(text: str) -> str:
    """``"key": ("value")`` becomes ``"key": "value"``."""
    return _PARENTHESIZED_SCALAR.sub(r": \1", text)


def convert_single_quoted(text: str) -> str:
    """Convert single-quoted keys, values and sequence elements to double quotes.

    A single quote opens a literal only outside double-quoted strings and
    only where a value or key may start (text start or after ``{ [ : ,``).
    The literal must close on the same line, otherwise the quote is left as
    is. Embedded double quotes are escaped, escaped single quotes unescaped.
    """
    out: List[str] = []
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]

        if ch in DOUBLE_OPENERS:
            j = i + 1
            while j < n:
                if text[j] == "\\":
                    j += 2
                    continue
                if _closes(ch, text[j]):
                    break
                j += 1
            out.append(text[i:j + 1])
            i = j + 1
            continue

        if ch in SINGLE_QUOTES:
            previous = _last_significant(out)
            if previous is None or previous in _VALUE_START:
                literal = _read_single_literal(text, i + 1)
                if literal is not None:
                    content, end = literal
                    out.append('"' + content + '"')
                    i = end + 1
                    continue

        out.append(ch)
        i += 1

    return "".join(out)


def _read_single_literal(text: str, start: int):
    """Return (double-quote-safe content, closing index) or None if unterminated."""
    content: List[str] = []
    j = start
    n = len(text)

    while j < n:
        ch = text[j]
        if ch == "\n":
            return None
        if ch == "\\" and j + 1 < n:
            nxt = text[j + 1]
            content.append(nxt if nxt in SINGLE_QUOTES else ch + nxt)
            j += 2
            continue
        if ch in SINGLE_QUOTES:
            return "".join(content), j
        content.append('\\"' if ch == '"' else ch)
        j += 1

    return None


def _literal_body(literal: str) -> str:
    return literal[1:-1]


def _merge_pair(match: "re.Match[str]") -> str:
    first, second = match.group(1), match.group(3)
    if second is None:
        return first
    return '"' + _literal_body(first) + " " + _literal_body(second) + '"'


def merge_split_literals(text: str, rounds: int = 3) -> str:
    """Join string literals separated only by line breaks into one string.

    Each round merges adjacent pairs left to right, so three rounds absorb
    chains of up to four fragments.
    """
    for _ in range(rounds):
        text = _SPLIT_LITERALS.sub(_merge_pair, text)
    return text


def normalize_smart_quotes(text: str) -> str:
    """Replace typographic quotes with plain ones.

    Typographic double quotes that delimit a string become ``"``; those that
    appear as content of a plain-quoted string become ``\\"``. Typographic
    single quotes always become ``'``.
    """
    out: List[str] = []
    opener: Optional[str] = None
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]

        if opener is None:
            if ch in DOUBLE_OPENERS:
                opener = ch
                out.append('"')
            elif ch in SMART_SINGLE:
                out.append("'")
            else:
                out.append(ch)
            i += 1
            continue

        if ch == "\\" and i + 1 < n:
            out.append(text[i:i + 2])
            i += 2
            continue

        if _closes(opener, ch):
            opener = None
            out.append('"')
        elif ch in SMART_DOUBLE:
            out.append('\\"')
        elif ch in SMART_SINGLE:
            out.append("'")
        else:
            out.append(ch)
        i += 1

    return "".join(out)


def remove_trailing_separators(text: str) -> str:
    """Drop commas that directly precede ``}`` or ``]``."""
    return _TRAILING_SEPARATOR.sub(r"\1", text)


def _clean_backslash_run(match: "re.Match[str]") -> str:
    run, target = match.group(1), match.group(2)
    if target and target in _MARKDOWN_ESCAPED:
        return target
    if target and target not in _VALID_ESCAPE_TARGETS and len(run) % 2 == 1:
        return run[:-1] + target
    return run + target


def clean_escape_sequences(text: str) -> str:
    """Remove escapes before characters that are not valid escape targets.

    Markdown escapes such as ``\\[`` or ``\\_`` lose their whole backslash
    run. Before any other invalid target an odd run loses one backslash, so
    every remaining run is a sequence of escaped backslashes.
    """
    return _BACKSLASH_RUN.sub(_clean_backslash_run, text)


def collapse_blank_lines(text: str) -> str:
    """Collapse three or more consecutive line breaks and trim the text."""
    return _EXCESS_BLANK_LINES.sub("\n\n", text).strip()
