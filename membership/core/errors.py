"""Domain errors raised by the membership services and mapped to HTTP by the API layer."""


class MembershipError(Exception):
    """Base class for membership domain errors; carries a user-facing message."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class DuplicateIdentity(MembershipError):
    """Email or phone already belongs to a non-rejected record. Recoverable: edit input and retry."""


class PermanentlyBlocked(MembershipError):
    """Identity was rejected before and the deployment blocks re-registration."""


class RecordNotFound(MembershipError):
    """No record with the requested id or identifier."""


class StorageUnavailable(MembershipError):
    """Persistence layer is not reachable; raised on writes only."""


class InvalidTransition(MembershipError):
    """Requested status or role change is not allowed from the current value."""


class InvalidCredential(MembershipError):
    """Password breaks the policy, confirmation mismatch, or current password is wrong."""


class ProtectedRecord(MembershipError):
    """Change would break the seeded administrator invariant."""


class AccountNotActive(MembershipError):
    """Credentials matched, but the record's status does not allow a session."""

    status: str = ""


class AccountPending(AccountNotActive):
    status = "pending"


class AccountRejected(AccountNotActive):
    status = "rejected"


class AccountDeactivated(AccountNotActive):
    status = "deactive"
