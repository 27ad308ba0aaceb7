"""Domain-level exceptions.

All failures are expressed as subclasses of DomainException so the CLI
layer can catch them uniformly.  Each branch of the hierarchy is a distinct
*kind* of failure that callers must be able to tell apart:

- ``ValidationError``        — malformed input
- ``EntityNotFoundError``    — the referenced order does not exist
- ``BusinessRuleViolation``  — the workflow forbids the request
- ``ConflictError``          — a uniqueness race lost at commit time
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Input is malformed or out of range."""


class UnknownActorError(ValidationError):
    """The acting user id does not refer to a known identity."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist (or is soft-deleted)."""


class BusinessRuleViolation(DomainException):
    """Base class for workflow rules checked before any write."""


class EmptyOrderError(BusinessRuleViolation):
    """An order needs at least one line item."""


class InvalidTransitionError(BusinessRuleViolation):
    """The trigger is not legal from the order's current status."""


class ImmutableStateError(BusinessRuleViolation):
    """The order's status forbids editing its contents."""


class MissingCommentError(BusinessRuleViolation):
    """A comment is required for this transition."""


class ConflictError(DomainException):
    """A write lost a uniqueness race and could not be completed."""


class RetryableConflictError(ConflictError):
    """The order number was taken between generation and commit."""
