from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ..paths import normalize_base_dir, normalize_path, read_text
from ..patterns import REGEX_COMMENT_PREFIX
from .parser import parse_gitignore
from .rules import IgnoreRule, Verdict

LOG = logging.getLogger(__name__)

FILE_HEADER = "# GitIgnore file:\n"


class IgnoreFile:
    """The rules of one ignore file, scoped to ``base_dir``."""

    def __init__(self, text: str, *, base_dir: str = "/", source: Path | None = None) -> None:
        self.base_dir = normalize_base_dir(base_dir)
        self.source = source
        self.rules: tuple[IgnoreRule, ...] = tuple(
            IgnoreRule.from_expression(r.expression, negate=r.negate, base_dir=self.base_dir)
            for r in parse_gitignore(text)
        )

    @classmethod
    def from_file(cls, path: str | Path, *, base_dir: str = "/") -> IgnoreFile:
        p = Path(path)
        return cls(read_text(p), base_dir=base_dir, source=p)

    @classmethod
    def from_lines(cls, lines: Iterable[str], *, base_dir: str = "/") -> IgnoreFile:
        return cls("\n".join(lines), base_dir=base_dir)

    def verdict(self, path: str) -> Verdict:
        target = normalize_path(path)
        if not target.startswith(self.base_dir):
            return Verdict.abstain

        result = Verdict.abstain
        for rule in self.rules:
            if not rule.matches(target):
                continue
            result = Verdict.kept if rule.negate else Verdict.ignored
            LOG.debug("%s: %r -> %s", target, rule.source, result)
            if rule.whole_directory_match:
                # A matched directory cannot be re-included by later rules.
                break
        return result

    def ignored(self, path: str) -> bool:
        return self.verdict(path) is Verdict.ignored

    def kept(self, path: str) -> bool:
        return self.verdict(path) is Verdict.kept

    def to_text(self, *, verbose: bool = False) -> str:
        lines = [FILE_HEADER.rstrip("\n")]
        if self.source is not None:
            lines.append(f"# Source: {self.source}")
        lines.append(f"# Base directory: {self.base_dir}")
        for rule in self.rules:
            if verbose:
                lines.append(f"{REGEX_COMMENT_PREFIX}{rule.pattern.regex}")
            lines.append(rule.source)
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_text()
