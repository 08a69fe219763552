"""Presentational components — conditional rendering and escaping."""

from markupsafe import Markup

from taskhive.components import (
    age_verification,
    footer,
    form_error,
    form_input,
    terms_agreement,
)


# --- form_error ---------------------------------------------------------------

def test_form_error_renders_nothing_for_empty_string():
    assert form_error("") == ""


def test_form_error_renders_literal_message():
    html = form_error("Invalid login credentials")
    assert "Invalid login credentials" in html
    assert 'role="alert"' in html


def test_form_error_escapes_markup_in_message():
    html = form_error("<script>alert(1)</script>")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_components_return_markup():
    assert isinstance(form_error("x"), Markup)
    assert isinstance(footer(2025), Markup)


# --- form_input ---------------------------------------------------------------

def test_form_input_renders_label_and_value():
    html = form_input(
        id="email", name="email", label="Email", type="email",
        placeholder="you@example.com", value="a@example.com",
    )
    assert '<label for="email">Email</label>' in html
    assert 'type="email"' in html
    assert 'value="a@example.com"' in html
    assert "disabled" not in html
    assert "text-red-500" not in html


def test_form_input_shows_error_only_when_given():
    html = form_input(
        id="name", name="name", label="Name", placeholder="",
        error="Name must be at least 2 characters",
    )
    assert '<p class="text-sm text-red-500">Name must be at least 2 characters</p>' in html


def test_form_input_disabled():
    html = form_input(id="n", name="n", label="N", placeholder="", disabled=True)
    assert " disabled" in html


def test_form_input_escapes_value():
    html = form_input(id="n", name="n", label="N", placeholder="", value='"><b>')
    assert '"><b>' not in html


# --- terms_agreement / age_verification / footer ------------------------------

def test_terms_agreement_unchecked_by_default():
    html = terms_agreement()
    assert 'id="terms"' in html
    assert "checked" not in html
    assert 'href="/terms"' in html
    assert 'href="/privacy"' in html
    assert "at least 18 years old" in html


def test_terms_agreement_checked():
    assert " checked" in terms_agreement(True)


def test_age_verification_is_date_input():
    html = age_verification("2000-01-02", error="Too young")
    assert 'id="dateOfBirth"' in html
    assert 'name="dateOfBirth"' in html
    assert 'type="date"' in html
    assert 'value="2000-01-02"' in html
    assert "Too young" in html


def test_footer_contains_product_and_links():
    html = footer(2025)
    assert "&copy; 2025 TaskHived - AI-Verified Microtask Marketplace" in html
    for label in ("Terms", "Privacy", "Contact"):
        assert f">{label}</a>" in html
