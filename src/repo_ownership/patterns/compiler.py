from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum

from ..errors import PatternSyntaxError
from ..paths import normalize_base_dir


class Dialect(StrEnum):
    ownership = "ownership"
    ignore = "ignore"


@dataclass(frozen=True)
class CompiledPattern:
    expression: str
    dialect: Dialect
    base_dir: str
    regex: str
    compiled: re.Pattern[str] = field(repr=False, compare=False)

    def matches(self, path: str) -> bool:
        """``path`` must already be normalized (see ``paths.normalize_path``)."""
        return self.compiled.match(path) is not None


# Atom kinds produced by the lexer.
_SEP = "sep"
_STAR = "star"
_ANY = "any"
_LIT = "lit"
_CLASS = "class"

_ANY_DEPTH = "(?:.*/)?"

REGEX_COMMENT_PREFIX = "# Regex used for the next rule:   "

# Characters that need escaping inside a regex character class.
_CLASS_SPECIALS = set("\\[]^&~|")


@dataclass(frozen=True)
class _Atom:
    kind: str
    value: str = ""


def trim_expression(expression: str) -> str:
    """Drop surrounding whitespace, keeping one escaped trailing space."""
    text = expression.lstrip()
    stripped = text.rstrip()
    if len(stripped) < len(text) and _ends_with_escape(stripped):
        return stripped + text[len(stripped)]
    return stripped


def _ends_with_escape(text: str) -> bool:
    backslashes = len(text) - len(text.rstrip("\\"))
    return backslashes % 2 == 1


def _lex(text: str, expression: str, dialect: Dialect) -> list[_Atom]:
    atoms: list[_Atom] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            if i + 1 < n:
                atoms.append(_Atom(_LIT, text[i + 1]))
                i += 2
            else:
                atoms.append(_Atom(_LIT, ch))
                i += 1
        elif ch == "/":
            atoms.append(_Atom(_SEP))
            i += 1
        elif ch == "*":
            atoms.append(_Atom(_STAR))
            i += 1
        elif ch == "?":
            atoms.append(_Atom(_ANY))
            i += 1
        elif ch == "[":
            regex, i = _lex_class(text, i, expression, dialect)
            atoms.append(_Atom(_CLASS, regex))
        else:
            atoms.append(_Atom(_LIT, ch))
            i += 1
    return atoms


def _lex_class(text: str, start: int, expression: str, dialect: Dialect) -> tuple[str, int]:
    i = start + 1
    n = len(text)
    negate = False
    if i < n and text[i] in "!^":
        negate = True
        i += 1
    members: list[str] = []
    if i < n and text[i] == "]":
        members.append("]")
        i += 1
    while i < n and text[i] != "]":
        if text[i] == "\\" and i + 1 < n:
            members.append(text[i + 1])
            i += 2
            continue
        members.append(text[i])
        i += 1
    if i >= n:
        raise PatternSyntaxError(expression, f"unbalanced '[' at offset {start}")

    raw = "".join(members)
    if dialect is Dialect.ignore and not negate and "," in raw:
        alternatives = [a.strip() for a in raw.split(",")]
        alternatives = [a for a in alternatives if a]
        if len(alternatives) > 1 and any(len(a) > 1 for a in alternatives):
            return "(?:" + "|".join(re.escape(a) for a in alternatives) + ")", i + 1

    body = "".join("\\" + c if c in _CLASS_SPECIALS else c for c in members)
    if negate:
        # A class never matches a separator in the ignore dialect.
        return "[^" + body + ("/" if dialect is Dialect.ignore else "") + "]", i + 1
    return "[" + body + "]", i + 1


def _split_segments(atoms: list[_Atom]) -> list[list[_Atom]]:
    segments: list[list[_Atom]] = [[]]
    for atom in atoms:
        if atom.kind == _SEP:
            segments.append([])
        else:
            segments[-1].append(atom)
    return segments


def _is_globstar(segment: list[_Atom]) -> bool:
    return len(segment) >= 2 and all(a.kind == _STAR for a in segment)


def _starts_with_single_star(segment: list[_Atom]) -> bool:
    if not segment or segment[0].kind != _STAR:
        return False
    return len(segment) == 1 or segment[1].kind != _STAR


def _segment_regex(segment: list[_Atom], dialect: Dialect) -> str:
    out: list[str] = []
    i = 0
    while i < len(segment):
        atom = segment[i]
        if atom.kind == _STAR:
            run = 1
            while i + run < len(segment) and segment[i + run].kind == _STAR:
                run += 1
            out.append("[^/]*" if run == 1 else ".*")
            i += run
            continue
        if atom.kind == _ANY:
            out.append("[^/]" if dialect is Dialect.ignore else ".")
        elif atom.kind == _CLASS:
            out.append(atom.value)
        else:
            out.append(re.escape(atom.value))
        i += 1
    return "".join(out)


def compile_pattern(expression: str, dialect: Dialect, *, base_dir: str = "/") -> CompiledPattern:
    """Translate one glob expression into an anchored regular expression.

    The ``!`` negation prefix is not understood here; rules strip it first.
    """
    text = trim_expression(expression)
    if not text:
        raise PatternSyntaxError(expression, "empty pattern")
    base = normalize_base_dir(base_dir)

    segments = _split_segments(_lex(text, expression, dialect))
    rooted = not segments[0]
    directory_only = len(segments) > 1 and not segments[-1]
    segments = [s for s in segments if s]

    if dialect is Dialect.ownership:
        any_depth = not rooted
    else:
        any_depth = not rooted and len(segments) <= 1

    regex = "^" + re.escape(base)
    if not segments:
        return _build(expression, dialect, base, regex)

    if any_depth and not _is_globstar(segments[0]):
        regex += _ANY_DEPTH

    last = len(segments) - 1
    trailing_globstar = _is_globstar(segments[last])
    for idx, segment in enumerate(segments):
        if _is_globstar(segment):
            if idx == last:
                if idx == 0:
                    regex += ".*"
                break
            regex += _ANY_DEPTH
            continue
        regex += _segment_regex(segment, dialect)
        if idx < last:
            regex += "/"

    if directory_only and not trailing_globstar:
        regex += "/"
    elif trailing_globstar:
        pass
    elif _starts_with_single_star(segments[last]) and (rooted or len(segments) > 1):
        regex += "$"
    else:
        regex += "(?:/|$)"
    return _build(expression, dialect, base, regex)


def _build(expression: str, dialect: Dialect, base: str, regex: str) -> CompiledPattern:
    return CompiledPattern(
        expression=expression,
        dialect=dialect,
        base_dir=base,
        regex=regex,
        compiled=re.compile(regex),
    )
