"""Presentational Components — server-rendered HTML fragments for the auth pages.

Invariants:
    - Components hold no state and call nothing external
    - All values are autoescaped; results are Markup (safe to embed once)
    - form_error("") renders nothing at all

Design Decisions:
    - Jinja2 templates under templates/components/, one per component
    - Component functions registered as Jinja globals so pages compose them
"""

from taskhive.components.rendering import (  # noqa: F401
    age_verification,
    footer,
    form_error,
    form_input,
    jinja_env,
    render_page,
    templates,
    terms_agreement,
)
