"""Component rendering — Jinja2 environment and one function per component."""

from datetime import date

from fastapi import Request
from fastapi.templating import Jinja2Templates
from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup

from taskhive.config import get_settings
from taskhive.core.domain_types import PRODUCT_NAME, PRODUCT_TAGLINE

jinja_env = Environment(
    loader=PackageLoader("taskhive", "templates"),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def _render(template_name: str, **context) -> Markup:
    html = jinja_env.get_template(template_name).render(**context)
    return Markup(html.strip())


def form_input(
    id: str,
    name: str,
    label: str,
    placeholder: str,
    value: str = "",
    type: str = "text",
    error: str | None = None,
    disabled: bool = False,
) -> Markup:
    """Labelled input; the field error line appears only when error is set."""
    return _render(
        "components/form_input.html",
        id=id, name=name, label=label, placeholder=placeholder,
        value=value, type=type, error=error, disabled=disabled,
    )


def form_error(error: str) -> Markup:
    """Destructive alert banner, or empty markup when there is no error."""
    if not error:
        return Markup("")
    return _render("components/form_error.html", error=error)


def terms_agreement(checked: bool = False) -> Markup:
    return _render("components/terms_agreement.html", checked=checked)


def footer(year: int | None = None) -> Markup:
    return _render(
        "components/footer.html",
        year=year or date.today().year,
        product_name=PRODUCT_NAME,
        tagline=PRODUCT_TAGLINE,
    )


def age_verification(
    date_of_birth: str = "", error: str | None = None, disabled: bool = False,
) -> Markup:
    """Date-of-birth field (a date-typed form_input)."""
    return form_input(
        id="dateOfBirth",
        name="dateOfBirth",
        label="Date of Birth",
        type="date",
        placeholder="Select your date of birth",
        value=date_of_birth,
        error=error,
        disabled=disabled,
    )


jinja_env.globals.update(
    form_input=form_input,
    form_error=form_error,
    terms_agreement=terms_agreement,
    footer=footer,
    age_verification=age_verification,
)

templates = Jinja2Templates(env=jinja_env)


def render_page(
    request: Request, name: str, context: dict, status_code: int = 200,
):
    """Render a page template with the app name in scope."""
    context = {"app_name": get_settings().app_name, **context}
    return templates.TemplateResponse(
        request, name, context, status_code=status_code,
    )
