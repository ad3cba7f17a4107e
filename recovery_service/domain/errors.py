class DomainError(Exception):
    """Base class for all domain-level errors."""

    pass


class TransientError(DomainError):
    """A backing service failed or timed out; the caller may retry."""

    pass


class StoreUnavailable(TransientError):
    """The verification code store could not be reached."""

    pass


class AccountStoreUnavailable(TransientError):
    """The account store could not be reached."""

    pass


class AccountNotFound(DomainError):
    """No account matches the identifier."""

    pass


class InvalidVerificationCode(DomainError):
    """Presented code cannot be accepted. Callers see one message for all subclasses."""

    pass


class CodeNotFound(InvalidVerificationCode):
    """No live code exists for the key."""

    pass


class CodeMismatch(InvalidVerificationCode):
    """A live code exists but the presented value differs."""

    pass


class NotificationFailed(DomainError):
    """A notification transport rejected or could not deliver a message."""

    pass


class CredentialUpdateRejected(DomainError):
    """The password policy refused the new credential."""

    pass


class InvalidConfirmationToken(DomainError):
    """Token failed verification or its grant is gone."""

    pass
