import pytest

from oficina.exceptions import InvalidArgumentError
from oficina.models.client import Address
from oficina.services import validation


@pytest.mark.parametrize("email,ok", [
    ("a@b.co", True),
    ("joao.silva-1@oficina.com.br", True),
    ("not-an-email", False),
    ("a@b.c", False),
    ("a@b.toolong", False),
    ("", False),
    (None, False),
])
def test_email(email, ok):
    assert validation.is_valid_email(email) is ok


@pytest.mark.parametrize("phone,ok", [
    ("1234567890", True),
    ("12345678901", True),
    ("123456789012", False),
    ("123", False),
    ("123456789a1", False),
    ("(11) 98765-4321", False),
])
def test_phone(phone, ok):
    assert validation.is_valid_phone(phone) is ok


@pytest.mark.parametrize("cep,ok", [
    ("12345-678", True),
    ("123456789", False),
    ("1234-567", False),
    ("12345-6789", False),
])
def test_postal_code(cep, ok):
    assert validation.is_valid_postal_code(cep) is ok


def test_require_text_rejects_blank():
    with pytest.raises(InvalidArgumentError, match="obrigatório"):
        validation.require_text("  \t", "Campo obrigatório.")
    assert validation.require_text(" x ", "m") == " x "


def test_validate_address_none_is_fine():
    validation.validate_address(None)


def test_validate_address_checks_street_first():
    with pytest.raises(InvalidArgumentError, match="rua"):
        validation.validate_address(Address(street=None, city=None, postal_code="bad"))
