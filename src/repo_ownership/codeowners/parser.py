from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import StrEnum

from ..patterns import trim_expression

LOG = logging.getLogger(__name__)

_SECTION_RE = re.compile(
    r"^(?P<optional>\^)?\[(?P<name>[^\]]*[^\]\s][^\]]*)\](?:\[(?P<min>\s*\d+\s*)\])?(?:\s+(?P<rest>.*))?$"
)

_EMAIL_CHARS = r"[a-zA-Z0-9!#$%&'*+/=?^_`{|}~.-]"
_EMAIL_PREFIX_COMMENT_RE = re.compile(rf"^\({_EMAIL_CHARS}+\)")
_EMAIL_DOMAIN_COMMENT_RE = re.compile(rf"\({_EMAIL_CHARS}+\)@")

_ROLE_RE = re.compile(r"^@@[^@\s]+$")
_TEAM_RE = re.compile(r"^@[^@\s/]+(?:/[^@\s/]+)+$")
_USER_RE = re.compile(r"^@[^@\s/]+$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


class ApproverKind(StrEnum):
    user = "user"
    team = "team"
    role = "role"
    email = "email"


@dataclass(frozen=True)
class ParsedSection:
    name: str
    optional: bool
    min_approvers: int
    default_approvers: list[str]
    line: int


@dataclass(frozen=True)
class ParsedRule:
    expression: str
    approvers: list[str]
    line: int


def strip_email_comments(token: str) -> str:
    """Remove ``(comment)`` decoration from an e-mail approver."""
    token = _EMAIL_PREFIX_COMMENT_RE.sub("", token)
    return _EMAIL_DOMAIN_COMMENT_RE.sub("@", token)


def approver_kind(token: str) -> ApproverKind | None:
    if _ROLE_RE.match(token):
        return ApproverKind.role
    if _TEAM_RE.match(token):
        return ApproverKind.team
    if _USER_RE.match(token):
        return ApproverKind.user
    if _EMAIL_RE.match(token):
        return ApproverKind.email
    return None


def extract_approvers(text: str) -> list[str]:
    """Approver identifiers in first-appearance order, up to an inline comment."""
    seen: set[str] = set()
    out: list[str] = []
    for raw in text.split():
        if raw.startswith("#"):
            break
        token = strip_email_comments(raw)
        if approver_kind(token) is None:
            LOG.debug("ignoring non-approver token %r", raw)
            continue
        if token in seen:
            continue
        seen.add(token)
        out.append(token)
    return out


def split_expression(line: str) -> tuple[str, str]:
    """Split a rule line at the first whitespace that is not escaped."""
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch.isspace():
            return line[:i], line[i:]
        i += 1
    return line, ""


def parse_codeowners(text: str) -> list[ParsedSection | ParsedRule]:
    out: list[ParsedSection | ParsedRule] = []
    for idx, raw in enumerate(text.splitlines(), start=1):
        line = trim_expression(raw)
        if not line or line.startswith("#"):
            continue

        m = _SECTION_RE.match(line)
        if m:
            out.append(
                ParsedSection(
                    name=m.group("name").strip(),
                    optional=m.group("optional") is not None,
                    min_approvers=int(m.group("min")) if m.group("min") else 0,
                    default_approvers=extract_approvers(m.group("rest") or ""),
                    line=idx,
                )
            )
            continue

        expression, rest = split_expression(line)
        out.append(ParsedRule(expression=expression, approvers=extract_approvers(rest), line=idx))
    return out
