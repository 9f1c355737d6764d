from __future__ import annotations

import re
from django.core.exceptions import ValidationError
from django.utils.translation import gettext as _


class PasswordComplexityValidator:
    """Require a mix of character classes for stronger passwords.

    Checked in addition to the minimum length configured separately in
    `AUTH_PASSWORD_VALIDATORS`.
    """

    rules = (
        (re.compile(r"[A-Z]"), "Password must contain an uppercase letter."),
        (re.compile(r"[a-z]"), "Password must contain a lowercase letter."),
        (re.compile(r"\d"), "Password must contain a digit."),
        (re.compile(r"[^A-Za-z0-9]"), "Password must contain a symbol."),
    )

    def validate(self, password: str, user=None):  # noqa: D401
        missing = [_(message) for pattern, message in self.rules if not pattern.search(password)]
        if missing:
            raise ValidationError(missing, code="password_too_simple")

    def get_help_text(self):  # noqa: D401
        return _("Password must include uppercase, lowercase, digit, and symbol.")
