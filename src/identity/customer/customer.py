"""Customer aggregate root: account, role, status and email ownership.

Tokens for email verification, email change, password reset and account
deletion are issued by the aggregate and delivered by the notifications
context. Each token is single use.
"""

import secrets
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String, ValueObject

from identity.customer.events import (
    AccountDeleted,
    AccountDeletionRequested,
    AccountStatusChanged,
    CustomerRegistered,
    EmailChanged,
    EmailChangeRequested,
    EmailVerificationRequested,
    EmailVerified,
    PasswordResetRequested,
    ProfileUpdated,
    RoleChanged,
)
from identity.domain import identity
from identity.shared.email import EmailAddress, normalize_email

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


class AccountStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BANNED = "banned"


def _new_token() -> str:
    return secrets.token_urlsafe(32)


def _token_matches(expected, supplied) -> bool:
    return bool(expected) and bool(supplied) and secrets.compare_digest(expected, supplied)


@identity.aggregate
class Customer:
    """A person with an account at the bakery, either a shopper or an administrator."""

    name: String(required=True, max_length=255)
    email: ValueObject(EmailAddress, required=True)
    image: String(max_length=1000)
    role: String(choices=Role, default=Role.USER.value)
    status: String(choices=AccountStatus, default=AccountStatus.ACTIVE.value)
    email_verified: Boolean(default=False)

    pending_email: String(max_length=254)
    verification_token: String(max_length=100)
    email_change_token: String(max_length=100)
    password_reset_token: String(max_length=100)
    password_reset_requested_at: DateTime()
    deletion_token: String(max_length=100)

    created_at: DateTime()
    updated_at: DateTime()
    deleted_at: DateTime()

    @classmethod
    def register(cls, name, email, image=None, role=Role.USER.value):
        now = datetime.now(UTC)
        address = normalize_email(email)
        token = _new_token()

        customer = cls(
            name=name,
            email=EmailAddress(address=address),
            image=image,
            role=role,
            status=AccountStatus.ACTIVE.value,
            email_verified=False,
            verification_token=token,
            created_at=now,
            updated_at=now,
        )
        customer.raise_(
            CustomerRegistered(
                customer_id=customer.id,
                name=name,
                email=address,
                role=role,
                registered_at=now,
            )
        )
        customer.raise_(
            EmailVerificationRequested(
                customer_id=customer.id,
                name=name,
                email=address,
                token=token,
                requested_at=now,
            )
        )
        return customer

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def _ensure_not_deleted(self):
        if self.is_deleted:
            raise ValidationError({"customer": ["Account has been deleted"]})

    def _touch(self):
        now = datetime.now(UTC)
        self.updated_at = now
        return now

    # -------------------------------------------------------------------
    # Email ownership
    # -------------------------------------------------------------------
    def verify_email(self, token):
        self._ensure_not_deleted()
        if self.email_verified:
            raise ValidationError({"email": ["Email address is already verified"]})
        if not _token_matches(self.verification_token, token):
            raise ValidationError({"token": ["Invalid verification token"]})

        self.email_verified = True
        self.verification_token = None
        now = self._touch()
        self.raise_(EmailVerified(customer_id=self.id, email=self.email.address, verified_at=now))

    def request_email_change(self, new_email):
        self._ensure_not_deleted()
        address = normalize_email(new_email)
        # Validates structure before anything is stored
        EmailAddress(address=address)

        if address == self.email.address:
            raise ValidationError({"new_email": ["New email must differ from the current email"]})

        token = _new_token()
        self.pending_email = address
        self.email_change_token = token
        now = self._touch()
        self.raise_(
            EmailChangeRequested(
                customer_id=self.id,
                name=self.name,
                current_email=self.email.address,
                new_email=address,
                token=token,
                requested_at=now,
            )
        )

    def confirm_email_change(self, token):
        self._ensure_not_deleted()
        if not self.pending_email:
            raise ValidationError({"email": ["No email change is pending"]})
        if not _token_matches(self.email_change_token, token):
            raise ValidationError({"token": ["Invalid email change token"]})

        previous = self.email.address
        self.email = EmailAddress(address=self.pending_email)
        self.pending_email = None
        self.email_change_token = None
        # The new address was proven by following the approval link
        self.email_verified = True
        now = self._touch()
        self.raise_(
            EmailChanged(
                customer_id=self.id,
                previous_email=previous,
                new_email=self.email.address,
                changed_at=now,
            )
        )

    def request_password_reset(self):
        self._ensure_not_deleted()
        token = _new_token()
        self.password_reset_token = token
        now = self._touch()
        self.password_reset_requested_at = now
        self.raise_(
            PasswordResetRequested(
                customer_id=self.id,
                name=self.name,
                email=self.email.address,
                token=token,
                requested_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Profile and administration
    # -------------------------------------------------------------------
    def update_profile(self, name=_UNSET, image=_UNSET):
        self._ensure_not_deleted()
        if name is not _UNSET:
            if not name:
                raise ValidationError({"name": ["Name cannot be empty"]})
            self.name = name
        if image is not _UNSET:
            self.image = image

        self._touch()
        self.raise_(ProfileUpdated(customer_id=self.id, name=self.name, image=self.image))

    def change_role(self, new_role):
        self._ensure_not_deleted()
        if new_role == self.role:
            raise ValidationError({"role": [f"Customer already has role {new_role}"]})

        previous = self.role
        self.role = new_role
        now = self._touch()
        self.raise_(
            RoleChanged(
                customer_id=self.id,
                previous_role=previous,
                new_role=new_role,
                changed_at=now,
            )
        )

    def change_status(self, new_status, reason=None):
        self._ensure_not_deleted()
        if new_status == self.status:
            raise ValidationError({"status": [f"Account is already {new_status}"]})

        previous = self.status
        self.status = new_status
        now = self._touch()
        self.raise_(
            AccountStatusChanged(
                customer_id=self.id,
                previous_status=previous,
                new_status=new_status,
                reason=reason,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------
    def request_deletion(self):
        self._ensure_not_deleted()
        token = _new_token()
        self.deletion_token = token
        now = self._touch()
        self.raise_(
            AccountDeletionRequested(
                customer_id=self.id,
                name=self.name,
                email=self.email.address,
                token=token,
                requested_at=now,
            )
        )

    def delete(self, token):
        self._ensure_not_deleted()
        if not _token_matches(self.deletion_token, token):
            raise ValidationError({"token": ["Invalid account deletion token"]})

        now = self._touch()
        self.status = AccountStatus.INACTIVE.value
        self.deletion_token = None
        self.password_reset_token = None
        self.deleted_at = now
        self.raise_(
            AccountDeleted(
                customer_id=self.id,
                name=self.name,
                email=self.email.address,
                deleted_at=now,
            )
        )
