from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ..paths import normalize_base_dir
from ..patterns import CompiledPattern, Dialect, compile_pattern


class Verdict(StrEnum):
    ignored = "ignored"
    kept = "kept"
    abstain = "abstain"


@dataclass(frozen=True)
class IgnoreRule:
    expression: str
    negate: bool
    base_dir: str
    pattern: CompiledPattern

    @classmethod
    def from_expression(cls, expression: str, *, negate: bool = False, base_dir: str = "/") -> IgnoreRule:
        base = normalize_base_dir(base_dir)
        return cls(
            expression=expression,
            negate=negate,
            base_dir=base,
            pattern=compile_pattern(expression, Dialect.ignore, base_dir=base),
        )

    @property
    def whole_directory_match(self) -> bool:
        return not self.negate and self.expression.endswith("/")

    @property
    def source(self) -> str:
        return f"!{self.expression}" if self.negate else self.expression

    def matches(self, path: str) -> bool:
        return self.pattern.matches(path)

    def verdict(self, path: str) -> Verdict:
        if not self.matches(path):
            return Verdict.abstain
        return Verdict.kept if self.negate else Verdict.ignored
