import pytest

from src import auth


ALLOWED = ["owner@example.com", "Second@Example.com"]


def test_allowed_email_gets_a_session():
    decision = auth.authorize(auth.Identity(email="owner@example.com", name="Jason Day"), ALLOWED)
    assert decision.allowed
    assert decision.session.user_id == "owner@example.com"
    assert decision.session.display_name == "Jason Day"
    assert decision.session.initials == "JD"


@pytest.mark.parametrize("email", ["  OWNER@example.com ", "second@example.com"])
def test_match_ignores_case_and_whitespace(email):
    assert auth.is_allowed(email, ALLOWED)


def test_other_email_is_denied():
    decision = auth.authorize(auth.Identity(email="intruder@example.com"), ALLOWED)
    assert not decision.allowed
    assert decision.session is None
    assert decision.message == auth.ACCESS_DENIED_MESSAGE


def test_partial_match_is_not_enough():
    assert not auth.is_allowed("owner@example.com.evil", ALLOWED)
    assert not auth.is_allowed("", ALLOWED)


def test_missing_identity_asks_to_sign_in():
    for identity in (None, auth.Identity(email=None), auth.Identity(email="  ")):
        decision = auth.authorize(identity, ALLOWED)
        assert not decision.allowed
        assert decision.message == "Please sign in to continue."


def test_display_name_falls_back_to_local_part():
    session = auth.authorize(auth.Identity(email="owner@example.com"), ALLOWED).session
    assert session.display_name == "owner"
    assert session.initials == "O"
