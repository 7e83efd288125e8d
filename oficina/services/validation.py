from __future__ import annotations

import re
from typing import Optional

from oficina.exceptions import InvalidArgumentError
from oficina.models.client import Address

EMAIL_RE = re.compile(r"^[\w\-.]+@([\w\-]+\.)+[\w\-]{2,4}$", re.ASCII)
PHONE_RE = re.compile(r"\d{10,11}", re.ASCII)
POSTAL_CODE_RE = re.compile(r"\d{5}-\d{3}", re.ASCII)


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def require_text(value: Optional[str], message: str) -> str:
    if is_blank(value):
        raise InvalidArgumentError(message)
    return str(value)


def is_valid_email(email: Optional[str]) -> bool:
    return not is_blank(email) and EMAIL_RE.fullmatch(email) is not None


def is_valid_phone(phone: Optional[str]) -> bool:
    return not is_blank(phone) and PHONE_RE.fullmatch(phone) is not None


def is_valid_postal_code(postal_code: Optional[str]) -> bool:
    return postal_code is not None and POSTAL_CODE_RE.fullmatch(postal_code) is not None


# ---------- Règles composées (ordre = ordre des messages) ---------- #

def validate_name(name: Optional[str]) -> None:
    require_text(name, "O nome do cliente é obrigatório.")


def validate_email(email: Optional[str]) -> None:
    require_text(email, "O e-mail do cliente é obrigatório.")
    if not is_valid_email(email):
        raise InvalidArgumentError("O e-mail informado é inválido.")


def validate_phone(phone: Optional[str]) -> None:
    require_text(phone, "O telefone do cliente é obrigatório.")
    if not is_valid_phone(phone):
        raise InvalidArgumentError("O telefone deve conter 10 ou 11 dígitos.")


def validate_address(address: Optional[Address]) -> None:
    if address is None:
        return
    require_text(address.street, "A rua do endereço é obrigatória.")
    require_text(address.city, "A cidade do endereço é obrigatória.")
    if address.postal_code is not None and not is_valid_postal_code(address.postal_code):
        raise InvalidArgumentError("O CEP informado é inválido.")
