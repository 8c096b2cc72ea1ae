"""
Typed Exception Hierarchy for the Editorial Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Client views react differently to each failure of an editorial command:
a missing image is shown next to the form, an unavailable action greys out
a button, a permission error is a banner, and a version conflict forces a
refetch.  Parsing message strings to tell these apart is fragile, so:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example - RIGHT way:
    try:
        service.submit(article_id, expected_version=3)
    except ConcurrencyConflictError as e:
        refetch(e.article_id)
    except ArticleValidationError as e:
        highlight(e.fields)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    EditorialKernelError (base)
    |
    +-- ArticleValidationError
    +-- IllegalTransitionError
    +-- UnauthorizedActionError
    +-- ConcurrencyError
    |   +-- ConcurrencyConflictError
    +-- ArticleNotFoundError
    +-- ArticleInvariantViolationError
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Code                  | When Raised
----------------------|---------------------------------------------------------
VALIDATION_ERROR      | Required content missing, empty feedback, bad decision
ILLEGAL_TRANSITION    | Command not valid from current status / edit request
UNAUTHORIZED          | Actor lacks role or ownership for the command
CONCURRENCY_CONFLICT  | Stored version no longer matches the version read
ARTICLE_NOT_FOUND     | Article id does not resolve
INVARIANT_VIOLATION   | A computed article breaks an aggregate invariant
CONFIGURATION_ERROR   | Editorial YAML configuration is invalid

None of these are retried inside the kernel.  A ConcurrencyConflictError
means the caller must refetch and re-present the decision to the actor.
"""

from __future__ import annotations


class EditorialKernelError(Exception):
    """
    Base exception for all editorial kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "EDITORIAL_KERNEL_ERROR"


class ArticleValidationError(EditorialKernelError):
    """Caller-supplied input is incomplete or malformed."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, reason: str, fields: tuple[str, ...] = ()):
        self.reason = reason
        self.fields = tuple(fields)
        if self.fields:
            super().__init__(f"{reason}: {', '.join(self.fields)}")
        else:
            super().__init__(reason)


class IllegalTransitionError(EditorialKernelError):
    """Command is not available from the article's current state."""

    code: str = "ILLEGAL_TRANSITION"

    def __init__(
        self,
        command: str,
        status: str,
        admin_edit_request: str,
        reason: str = "",
    ):
        self.command = command
        self.status = status
        self.admin_edit_request = admin_edit_request
        self.reason = reason
        message = (
            f"Command '{command}' is not available for an article with "
            f"status={status}, admin_edit_request={admin_edit_request}"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnauthorizedActionError(EditorialKernelError):
    """Actor lacks the role or ownership the command requires."""

    code: str = "UNAUTHORIZED"

    def __init__(self, command: str, actor_id: str, role: str, reason: str = ""):
        self.command = command
        self.actor_id = actor_id
        self.role = role
        self.reason = reason
        message = f"Actor {actor_id} ({role}) may not perform '{command}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


# Concurrency-related exceptions


class ConcurrencyError(EditorialKernelError):
    """Base exception for concurrency-related errors."""

    code: str = "CONCURRENCY_ERROR"


class ConcurrencyConflictError(ConcurrencyError):
    """The article changed between the read and the conditional write."""

    code: str = "CONCURRENCY_CONFLICT"

    def __init__(
        self,
        article_id: str,
        expected_version: int,
        actual_version: int | None = None,
    ):
        self.article_id = article_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Article {article_id} was modified concurrently: expected "
            f"version {expected_version}, found {actual_version}"
        )


class ArticleNotFoundError(EditorialKernelError):
    """Article with given ID was not found."""

    code: str = "ARTICLE_NOT_FOUND"

    def __init__(self, article_id: str):
        self.article_id = article_id
        super().__init__(f"Article not found: {article_id}")


class ConfigurationError(EditorialKernelError):
    """Editorial configuration failed validation."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid configuration '{key}': {reason}")


class ArticleInvariantViolationError(EditorialKernelError):
    """A computed article breaks an aggregate invariant and was not saved."""

    code: str = "INVARIANT_VIOLATION"

    def __init__(self, article_id: str, invariants: tuple[str, ...]):
        self.article_id = article_id
        self.invariants = tuple(invariants)
        super().__init__(
            f"Article {article_id} violates invariants: {', '.join(self.invariants)}"
        )
