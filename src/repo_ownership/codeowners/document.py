from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import UsageError
from ..paths import normalize_path, read_text
from .models import IMPLICIT_SECTION_NAME, OwnershipRule, Section, dedupe
from .parser import ParsedRule, ParsedSection, parse_codeowners
from .problems import ProblemKind, StructuralProblem

LOG = logging.getLogger(__name__)

DOCUMENT_HEADER = "# CODEOWNERS file:\n"
NO_RULES_LINE = "# No CODEOWNER rules were defined.\n"


@dataclass
class _SectionDraft:
    name: str
    optional: bool = False
    min_approvers: int = 0
    default_approvers: list[str] = field(default_factory=list)
    rules: list[OwnershipRule] = field(default_factory=list)

    def freeze(self) -> Section:
        return Section(
            name=self.name,
            optional=self.optional,
            min_approvers=self.min_approvers,
            default_approvers=dedupe(self.default_approvers),
            rules=tuple(self.rules),
        )


class OwnershipDocumentBuilder:
    """Accumulates sections and rules, then freezes them into a document.

    Sections are keyed by lower-cased name. Repeating a header merges into
    the section seen first; a section that never receives a rule is dropped.
    """

    def __init__(self) -> None:
        self._sections: dict[str, _SectionDraft] = {}
        self._current = _SectionDraft(name=IMPLICIT_SECTION_NAME)
        self._problems: list[StructuralProblem] = []

    def start_section(
        self,
        name: str,
        *,
        optional: bool = False,
        min_approvers: int = 0,
        default_approvers: Iterable[str] = (),
    ) -> OwnershipDocumentBuilder:
        self._flush()
        self._current = _SectionDraft(
            name=name.strip(),
            optional=optional,
            min_approvers=min_approvers,
            default_approvers=list(default_approvers),
        )
        return self

    def add_rule(self, expression: str, approvers: Iterable[str] = ()) -> OwnershipDocumentBuilder:
        self._current.rules.append(OwnershipRule.from_expression(expression, approvers))
        return self

    def add_parsed(self, records: Iterable[ParsedSection | ParsedRule]) -> OwnershipDocumentBuilder:
        for record in records:
            if isinstance(record, ParsedSection):
                self.start_section(
                    record.name,
                    optional=record.optional,
                    min_approvers=record.min_approvers,
                    default_approvers=record.default_approvers,
                )
            else:
                self.add_rule(record.expression, record.approvers)
        return self

    def _flush(self) -> None:
        draft = self._current
        if not draft.rules:
            return
        key = draft.name.lower()
        existing = self._sections.get(key)
        if existing is None:
            self._sections[key] = draft
            return

        if existing.optional != draft.optional:
            message = (
                f"section [{existing.name}] is declared both optional and mandatory; "
                f"keeping optional={existing.optional}"
            )
            LOG.error(message)
            self._problems.append(
                StructuralProblem(
                    kind=ProblemKind.optional_conflict,
                    section=existing.name,
                    message=message,
                )
            )
        existing.default_approvers.extend(draft.default_approvers)
        existing.rules.extend(draft.rules)

    def build(self) -> OwnershipDocument:
        self._flush()
        self._current = _SectionDraft(name=IMPLICIT_SECTION_NAME)
        sections = [draft.freeze() for draft in self._sections.values()]
        problems = list(self._problems)
        problems.extend(_section_problems(sections))
        return OwnershipDocument(sections, problems)


def _section_problems(sections: Iterable[Section]) -> list[StructuralProblem]:
    out: list[StructuralProblem] = []
    for section in sections:
        if section.optional and section.min_approvers != 0:
            message = (
                f"optional section [{section.name}] requires {section.min_approvers} "
                "approvers, which has no effect"
            )
            LOG.warning(message)
            out.append(
                StructuralProblem(
                    kind=ProblemKind.optional_with_min_approvers,
                    section=section.name,
                    message=message,
                )
            )
        for expression in section.duplicate_expressions():
            message = f"section [{section.name}] defines {expression!r} more than once"
            LOG.warning(message)
            out.append(
                StructuralProblem(
                    kind=ProblemKind.duplicate_expression,
                    section=section.name,
                    message=message,
                    expression=expression,
                )
            )
    return out


class OwnershipDocument:
    """A parsed CODEOWNERS file.

    Resolution walks the sections in definition order. Inside a section the
    last matching rule wins; a winning rule without approvers falls back to
    the section defaults. The result is de-duplicated in first-seen order.
    """

    def __init__(
        self,
        sections: Iterable[Section] = (),
        problems: Iterable[StructuralProblem] = (),
    ) -> None:
        self._sections: dict[str, Section] = {s.key: s for s in sections if s.rules}
        self._problems = tuple(problems)

    @classmethod
    def from_text(cls, text: str | None) -> OwnershipDocument:
        if text is None:
            raise UsageError("CODEOWNERS content must not be None")
        return OwnershipDocumentBuilder().add_parsed(parse_codeowners(text)).build()

    @classmethod
    def from_file(cls, path: str | Path) -> OwnershipDocument:
        LOG.debug("loading CODEOWNERS from %s", path)
        return cls.from_text(read_text(path))

    @property
    def sections(self) -> tuple[Section, ...]:
        return tuple(self._sections.values())

    @property
    def problems(self) -> tuple[StructuralProblem, ...]:
        return self._problems

    def defined_sections(self) -> tuple[Section, ...]:
        return self.sections

    def section(self, name: str) -> Section | None:
        return self._sections.get(name.strip().lower())

    def has_structural_problems(self) -> bool:
        return bool(self._problems)

    def approvers_for(self, path: str, *, mandatory_only: bool = False) -> list[str]:
        target = normalize_path(path)
        collected: list[str] = []
        for section in self._sections.values():
            if mandatory_only and section.optional:
                continue
            collected.extend(section.approvers_for(target))
        result = list(dedupe(collected))
        LOG.debug("approvers for %s (mandatory_only=%s): %s", target, mandatory_only, result)
        return result

    def all_approvers(self, path: str) -> list[str]:
        return self.approvers_for(path)

    def mandatory_approvers(self, path: str) -> list[str]:
        return self.approvers_for(path, mandatory_only=True)

    def to_canonical_text(self, *, verbose: bool = False) -> str:
        parts = [DOCUMENT_HEADER]
        if not self._sections:
            parts.append(NO_RULES_LINE)
            return "".join(parts)
        implicit = self._sections.get(IMPLICIT_SECTION_NAME.lower())
        if implicit is not None:
            parts.append(implicit.render(verbose=verbose))
            if len(self._sections) > 1:
                parts.append("\n")
        for section in self._sections.values():
            if section is implicit:
                continue
            parts.append(section.render(verbose=verbose))
            parts.append("\n")
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_canonical_text()
