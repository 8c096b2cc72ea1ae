"""
Decision result types (``editorial_kernel.domain.decision``).

Responsibility
--------------
The typed result every pure decision function returns.  An accepted
decision carries the next article state; a rejected one carries the
rejection kind and a human-readable reason.  No exceptions are raised
for control flow inside the domain layer.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from editorial_kernel.domain.article import Article, Command


class RejectionKind(str, Enum):
    """Why a command was refused."""

    VALIDATION = "validation"
    ILLEGAL_TRANSITION = "illegal_transition"
    UNAUTHORIZED = "unauthorized"


@dataclass(frozen=True)
class Decision:
    """Outcome of deciding one command against one article.

    Contract: frozen.  Exactly one of ``article`` (accepted) or
    ``rejection`` (refused) is set.
    """

    command: Command
    article: Article | None = None
    rejection: RejectionKind | None = None
    reason: str = ""
    fields: tuple[str, ...] = ()

    @property
    def accepted(self) -> bool:
        return self.rejection is None

    @classmethod
    def accept(cls, command: Command, article: Article) -> Decision:
        return cls(command=command, article=article)

    @classmethod
    def reject(
        cls,
        command: Command,
        kind: RejectionKind,
        reason: str,
        fields: tuple[str, ...] = (),
    ) -> Decision:
        return cls(command=command, rejection=kind, reason=reason, fields=fields)
