from __future__ import annotations

import logging
from dataclasses import dataclass

from ..patterns import trim_expression

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedIgnoreRule:
    expression: str
    negate: bool
    line: int


def parse_gitignore(text: str) -> list[ParsedIgnoreRule]:
    out: list[ParsedIgnoreRule] = []
    for idx, raw in enumerate(text.splitlines(), start=1):
        line = trim_expression(raw)
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        expression = line[1:] if negate else line
        if not expression:
            LOG.debug("line %d: skipping bare negation", idx)
            continue
        out.append(ParsedIgnoreRule(expression=expression, negate=negate, line=idx))
    return out
