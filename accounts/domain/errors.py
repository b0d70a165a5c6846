class DomainError(Exception):
    """Base class for all domain-level errors."""

    pass


class UserNotFound(DomainError):
    """No visible user matches the lookup criteria (id or email)."""

    pass


class CertificationCodeMismatch(DomainError):
    """The supplied certification code differs from the one issued at creation."""

    pass


class UserAlreadyExists(DomainError):
    """A user with the same email (or certification code) is already stored."""

    pass
