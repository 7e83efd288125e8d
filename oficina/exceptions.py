"""
Erreurs typées de l'atelier.

    OficinaError
    +-- InvalidArgumentError      champ manquant/mal formé, quantité <= 0,
    |                             e-mail en double, référence imbriquée absente
    +-- NotFoundError             entité absente pour un id fourni directement
    +-- ForbiddenError            ni auteur ni admin
    +-- IntegrityViolationError   contrainte d'unicité côté stockage
    +-- UnexpectedError           toute autre panne de stockage / runtime

Chaque classe porte un ``code`` stable, exploitable par la couche transport.
"""
from __future__ import annotations

from typing import Any, Optional


class OficinaError(Exception):
    code: str = "OFICINA_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidArgumentError(OficinaError):
    code = "INVALID_ARGUMENT"


class NotFoundError(OficinaError):
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any, message: Optional[str] = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message or f"{entity} com ID {entity_id} não encontrado.")


class ForbiddenError(OficinaError):
    code = "FORBIDDEN"


class IntegrityViolationError(OficinaError):
    code = "INTEGRITY_VIOLATION"

    def __init__(self, entity: str, field: str, value: Any):
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(f"{entity}: valor duplicado para '{field}': {value}")


class UnexpectedError(OficinaError):
    code = "UNEXPECTED"
