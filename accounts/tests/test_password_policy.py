from __future__ import annotations

import pytest
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError

from accounts.validators import PasswordComplexityValidator


@pytest.mark.parametrize(
    "password,missing",
    [
        ("lowercase-only-1", "uppercase"),
        ("UPPERCASE-ONLY-1", "lowercase"),
        ("No-Digits-Here", "digit"),
        ("NoSymbols123abc", "symbol"),
    ],
)
def test_complexity_reports_each_missing_class(password, missing):
    with pytest.raises(ValidationError) as exc:
        PasswordComplexityValidator().validate(password)
    assert any(missing in m for m in exc.value.messages)


def test_complexity_lists_every_missing_class_at_once():
    with pytest.raises(ValidationError) as exc:
        PasswordComplexityValidator().validate("abc")
    assert len(exc.value.messages) == 3


@pytest.mark.django_db
def test_configured_validators_require_length_and_mix():
    with pytest.raises(ValidationError):
        validate_password("Sh0rt#Pw")
    validate_password("Long-Enough#Passw0rd")
