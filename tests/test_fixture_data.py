import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

import fixture_data  # noqa: E402


def test_contact_form_variants_differ_only_in_email() -> None:
    forms = fixture_data.contact_form()

    with_email, without_email = forms["with_email"], forms["without_email"]
    assert "@" in with_email.email
    assert without_email.email is None
    assert (without_email.first_name, without_email.last_name, without_email.message) == (
        with_email.first_name,
        with_email.last_name,
        with_email.message,
    )
    assert with_email.phone.startswith("+48") and len(with_email.phone) == 12


def test_party_guests_stay_within_the_select_options() -> None:
    for _ in range(20):
        assert fixture_data.party_data().guests in (0, 1, 2)


def test_two_factor_data_carries_the_fixed_invalid_code() -> None:
    data = fixture_data.two_factor_auth_data()

    assert data.invalid_code == "123456"
    assert "@" in data.email
