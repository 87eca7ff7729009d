from .document import OwnershipDocument, OwnershipDocumentBuilder
from .models import IMPLICIT_SECTION_NAME, OwnershipRule, Section
from .parser import ApproverKind, approver_kind, extract_approvers, parse_codeowners
from .problems import ProblemKind, StructuralProblem

__all__ = [
    "IMPLICIT_SECTION_NAME",
    "ApproverKind",
    "OwnershipDocument",
    "OwnershipDocumentBuilder",
    "OwnershipRule",
    "ProblemKind",
    "Section",
    "StructuralProblem",
    "approver_kind",
    "extract_approvers",
    "parse_codeowners",
]
