"""Signup form validation — field messages keyed by form field name."""

from datetime import date

from taskhive.core.signup_validation import (
    AGE_RANGE_MESSAGE,
    validate_signup_form,
)

TODAY = date(2026, 10, 17)


def _form(**overrides):
    form = {
        "name": "Alice O'Neil",
        "email": "alice@example.com",
        "password": "Secret1!",
        "confirmPassword": "Secret1!",
        "dateOfBirth": "1995-04-12",
    }
    form.update(overrides)
    return form


def test_valid_form_has_no_errors():
    assert validate_signup_form(_form(), today=TODAY) == {}


def test_short_name():
    errors = validate_signup_form(_form(name="A"), today=TODAY)
    assert errors == {"name": "Name must be at least 2 characters"}


def test_long_name():
    errors = validate_signup_form(_form(name="A" * 51), today=TODAY)
    assert errors["name"] == "Name must be less than 50 characters"


def test_name_with_digits_rejected():
    errors = validate_signup_form(_form(name="R2D2"), today=TODAY)
    assert errors["name"].startswith("Name can only contain letters")


def test_invalid_email():
    errors = validate_signup_form(_form(email="alice@"), today=TODAY)
    assert errors == {"email": "Please enter a valid email"}


def test_short_password_meeting_composition_reports_length():
    errors = validate_signup_form(
        _form(password="Ab1!", confirmPassword="Ab1!"), today=TODAY,
    )
    assert errors == {"password": "Password must be at least 8 characters"}


def test_password_without_special_character():
    errors = validate_signup_form(
        _form(password="Secret123", confirmPassword="Secret123"), today=TODAY,
    )
    assert "special character" in errors["password"]


def test_under_eighteen_rejected():
    errors = validate_signup_form(_form(dateOfBirth="2008-10-18"), today=TODAY)
    assert errors == {"dateOfBirth": AGE_RANGE_MESSAGE}


def test_exactly_ninety_accepted():
    assert validate_signup_form(_form(dateOfBirth="1936-10-17"), today=TODAY) == {}


def test_over_ninety_rejected():
    errors = validate_signup_form(_form(dateOfBirth="1935-10-17"), today=TODAY)
    assert errors["dateOfBirth"] == AGE_RANGE_MESSAGE


def test_missing_date_of_birth_rejected():
    errors = validate_signup_form(_form(dateOfBirth=""), today=TODAY)
    assert errors["dateOfBirth"] == AGE_RANGE_MESSAGE


def test_password_mismatch():
    errors = validate_signup_form(_form(confirmPassword="Other1!x"), today=TODAY)
    assert errors == {"confirmPassword": "Passwords do not match"}


def test_collects_every_failing_field():
    errors = validate_signup_form(
        {"name": "", "email": "nope", "password": "x", "confirmPassword": "y"},
        today=TODAY,
    )
    assert set(errors) == {
        "name", "email", "password", "dateOfBirth", "confirmPassword",
    }


def test_empty_name_reports_character_rule():
    errors = validate_signup_form(_form(name=""), today=TODAY)
    assert errors["name"] == (
        "Name can only contain letters, spaces, hyphens, and apostrophes"
    )


def test_short_weak_password_reports_composition_rule():
    errors = validate_signup_form(
        _form(password="short", confirmPassword="short"), today=TODAY,
    )
    assert errors == {
        "password": "Password must contain uppercase letter, lowercase letter, "
        "number, and special character (@$!%*?&)",
    }


def test_single_letter_top_level_domain_rejected():
    errors = validate_signup_form(_form(email="a@b.c"), today=TODAY)
    assert errors == {"email": "Please enter a valid email"}


def test_subdomain_email_accepted():
    assert validate_signup_form(
        _form(email="bob.smith+hive@mail.example.co"), today=TODAY,
    ) == {}
