"""EmailAddress value object for validated email addresses."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from identity.domain import identity

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


@identity.value_object
class EmailAddress:
    """A structurally valid email address.

    Exactly one @, non-empty local and domain parts, a dotted domain, no
    whitespace, no consecutive dots and none of the characters RFC 5322
    reserves for quoting.
    """

    address: String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        email = self.address
        if not _is_valid(email):
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})


def _is_valid(email: str) -> bool:
    if any(ch.isspace() for ch in email) or email.count("@") != 1:
        return False

    local_part, domain_part = email.split("@", 1)
    if not local_part or not domain_part:
        return False
    if local_part[0] == "." or local_part[-1] == "." or domain_part[0] == "." or domain_part[-1] == ".":
        return False
    if "." not in domain_part or ".." in email:
        return False
    if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
        return False

    return not any(ch in email for ch in _FORBIDDEN)


def normalize_email(email: str) -> str:
    return email.strip().lower()
