from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from oficina.exceptions import (
    ForbiddenError,
    IntegrityViolationError,
    InvalidArgumentError,
    NotFoundError,
    OficinaError,
    UnexpectedError,
)
from oficina.models.account import Actor
from oficina.models.client import Client, ClientUpdate
from oficina.services import validation
from oficina.services.authorization import can_mutate
from oficina.services.identity_service import IdentityService
from oficina.storage.page import Page
from oficina.storage.repo import JsonRepository

logger = logging.getLogger(__name__)


class ClientService:
    def __init__(
        self,
        repo: JsonRepository,
        identity: IdentityService,
        budgets_repo: Optional[JsonRepository] = None,
    ):
        self.repo = repo
        self.identity = identity
        # devis qui référencent les clients (clé étrangère client_id)
        self.budgets_repo = budgets_repo

    # ---------- Création ---------- #

    def _validate_new(self, client: Optional[Client]) -> None:
        if client is None:
            raise InvalidArgumentError("Cliente não pode ser nulo.")
        validation.validate_name(client.name)
        validation.validate_email(client.email)
        if self.repo.exists_by("email", client.email):
            raise InvalidArgumentError("Já existe um cliente cadastrado com este e-mail.")
        validation.validate_phone(client.phone)
        validation.validate_address(client.address)

    def create(self, client: Optional[Client], author_id: str) -> Client:
        self._validate_new(client)

        author = self.identity.find_by_id(author_id)
        if author is None:
            raise NotFoundError("Usuário", author_id, "Usuário não encontrado.")
        stamped = client.model_copy(update={"author_id": author.id})

        try:
            # insert strict : un id existant ne remplace jamais un autre client
            saved = Client.model_validate(self.repo.insert(stamped))
        except IntegrityViolationError as exc:
            # doublon apparu entre la vérification et l'écriture
            raise InvalidArgumentError(
                "Erro ao salvar cliente: dados inválidos ou violação de integridade."
            ) from exc
        except OficinaError:
            raise
        except Exception as exc:
            logger.exception("Échec inattendu à l'enregistrement du client %s", stamped.id)
            raise UnexpectedError("Erro inesperado ao salvar o cliente.") from exc

        logger.info("Client %s créé par %s", saved.id, saved.author_id)
        return saved

    # ---------- Lecture ---------- #

    def get(self, client_id: str) -> Client:
        row = self.repo.find_by_id(client_id)
        if row is None:
            raise NotFoundError("Cliente", client_id)
        return Client.model_validate(row)

    def list(self, page: int = 0, size: int = 20, sort_by: str = "name") -> Page[Client]:
        return self.repo.find_all(page, size, sort_by).map(Client.model_validate)

    def list_by_author(self, author_id: str, page: int = 0, size: int = 20, sort_by: str = "name") -> Page[Client]:
        result = self.repo.find_all(
            page, size, sort_by, predicate=lambda r: str(r.get("author_id")) == str(author_id)
        )
        return result.map(Client.model_validate)

    def list_by_ids(self, ids: Sequence[str]) -> List[Client]:
        clients = [Client.model_validate(r) for r in self.repo.find_by_ids(ids)]
        found = {c.id for c in clients}
        missing = [i for i in dict.fromkeys(ids) if str(i) not in found]
        if missing:
            raise InvalidArgumentError(f"IDs não encontrados: {missing}")
        return clients

    # ---------- Modification / suppression ---------- #

    _ACTIONS = {"atualizar": "modifier", "excluir": "supprimer"}

    def _load_for_mutation(self, client_id: str, actor: Actor, action: str) -> Client:
        client = self.get(client_id)
        if not can_mutate(actor, client.author_id):
            logger.warning("Refus: %s ne peut pas %s le client %s", actor.id, self._ACTIONS[action], client_id)
            raise ForbiddenError(f"Você não tem permissão para {action} este cliente.")
        return client

    def update(self, client_id: str, fields: ClientUpdate, caller_id: str, caller_is_admin: bool = False) -> Client:
        client = self._load_for_mutation(client_id, Actor(caller_id, caller_is_admin), "atualizar")

        validation.validate_name(fields.name)
        validation.validate_phone(fields.phone)
        validation.validate_address(fields.address)

        # e-mail et auteur ne changent jamais par ce chemin
        client.name = fields.name
        client.phone = fields.phone
        client.address = fields.address
        saved = Client.model_validate(self.repo.save(client))
        logger.info("Client %s mis à jour par %s", client_id, caller_id)
        return saved

    def delete(self, client_id: str, caller_id: str, caller_is_admin: bool = False) -> None:
        client = self._load_for_mutation(client_id, Actor(caller_id, caller_is_admin), "excluir")
        if self.budgets_repo is not None and self.budgets_repo.exists_by("client_id", client.id):
            logger.warning("Suppression refusée: le client %s a des devis", client_id)
            raise InvalidArgumentError(
                "Não é possível excluir o cliente: existem orçamentos vinculados."
            ) from IntegrityViolationError("orçamento", "client_id", client.id)
        self.repo.delete(client)
        logger.info("Client %s supprimé par %s", client_id, caller_id)
