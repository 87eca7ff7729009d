from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from ..patterns import REGEX_COMMENT_PREFIX, CompiledPattern, Dialect, compile_pattern, trim_expression

LOG = logging.getLogger(__name__)

IMPLICIT_SECTION_NAME = "Implicit Default Section"


def dedupe(values: Iterable[str]) -> tuple[str, ...]:
    """Trim, drop empties and keep the first occurrence of every value."""
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        v = value.strip()
        if not v or v in seen:
            continue
        seen.add(v)
        out.append(v)
    return tuple(out)


@dataclass(frozen=True)
class OwnershipRule:
    expression: str
    pattern: CompiledPattern
    approvers: tuple[str, ...] = ()

    @classmethod
    def from_expression(cls, expression: str, approvers: Iterable[str] = ()) -> OwnershipRule:
        text = trim_expression(expression)
        body = text[1:] if text.startswith("!") else text
        return cls(
            expression=text,
            pattern=compile_pattern(body, Dialect.ownership),
            approvers=dedupe(approvers),
        )

    @property
    def exclude(self) -> bool:
        return self.expression.startswith("!")

    def matches(self, path: str) -> bool:
        return self.pattern.matches(path)

    def render(self, *, verbose: bool = False) -> str:
        line = " ".join((self.expression, *self.approvers))
        if verbose:
            return f"{REGEX_COMMENT_PREFIX}{self.pattern.regex}\n{line}"
        return line


@dataclass(frozen=True)
class Section:
    name: str
    optional: bool = False
    min_approvers: int = 0
    default_approvers: tuple[str, ...] = ()
    rules: tuple[OwnershipRule, ...] = ()

    @property
    def key(self) -> str:
        return self.name.lower()

    @property
    def is_implicit(self) -> bool:
        return self.name == IMPLICIT_SECTION_NAME

    def winning_rule(self, path: str) -> OwnershipRule | None:
        """The last matching rule, or the first matching exclusion.

        An exclusion removes the path from this section for good; rules
        after it cannot include the path again.
        """
        winner: OwnershipRule | None = None
        for rule in self.rules:
            if not rule.matches(path):
                continue
            LOG.debug("section %r: %r matched %s", self.name, rule.expression, path)
            if rule.exclude:
                return rule
            winner = rule
        return winner

    def approvers_for(self, path: str) -> tuple[str, ...]:
        rule = self.winning_rule(path)
        if rule is None or rule.exclude:
            return ()
        return rule.approvers or self.default_approvers

    def duplicate_expressions(self) -> list[str]:
        seen: set[str] = set()
        dupes: list[str] = []
        for rule in self.rules:
            if rule.expression in seen and rule.expression not in dupes:
                dupes.append(rule.expression)
            seen.add(rule.expression)
        return dupes

    def header(self) -> str:
        parts = [f"{'^' if self.optional else ''}[{self.name}]"]
        if self.min_approvers > 0:
            parts[0] += f"[{self.min_approvers}]"
        parts.extend(self.default_approvers)
        return " ".join(parts)

    def render(self, *, verbose: bool = False) -> str:
        lines: list[str] = []
        if not self.is_implicit:
            lines.append(self.header())
        lines.extend(rule.render(verbose=verbose) for rule in self.rules)
        return "\n".join(lines) + "\n"
