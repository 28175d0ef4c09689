"""Randomized, schema-valid form input."""
from dataclasses import dataclass, replace

from faker import Faker


fake = Faker()

INVALID_EMAIL = "invalid-email"
INVALID_CODE = "123456"


@dataclass(frozen=True)
class ContactFormData:
    first_name: str
    last_name: str
    email: str | None
    message: str
    phone: str | None = None


@dataclass(frozen=True)
class PartyData:
    email: str
    guests: int


@dataclass(frozen=True)
class TwoFactorAuthData:
    email: str
    invalid_code: str | None = None


def contact_form() -> dict[str, ContactFormData]:
    base = ContactFormData(
        first_name=fake.first_name(),
        last_name=fake.last_name(),
        email=fake.email(),
        phone=f"+48{fake.numerify('#########')}",
        message=fake.sentence(),
    )
    return {"with_email": base, "without_email": replace(base, email=None)}


def party_data() -> PartyData:
    return PartyData(email=fake.email(), guests=fake.random_int(min=0, max=2))


def two_factor_auth_data() -> TwoFactorAuthData:
    return TwoFactorAuthData(email=fake.email(), invalid_code=INVALID_CODE)
