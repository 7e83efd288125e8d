from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Tuple

import requests
from pydantic import ValidationError

from oficina.exceptions import UnexpectedError
from oficina.models.account import Account
from oficina.storage.repo import JsonRepository

logger = logging.getLogger(__name__)


class IdentityService(Protocol):
    def find_by_id(self, account_id: str) -> Optional[Account]: ...


# ---------- Annuaire local (JSON) ---------- #

class AccountDirectory:
    """Comptes stockés localement (accounts.json)."""

    def __init__(self, repo: JsonRepository) -> None:
        self.repo = repo

    def find_by_id(self, account_id: str) -> Optional[Account]:
        if account_id is None:
            return None
        row = self.repo.find_by_id(account_id)
        return Account.model_validate(row) if row else None

    def add_account(self, account: Account) -> Account:
        return Account.model_validate(self.repo.save(account))

    def list_accounts(self) -> List[Account]:
        out: List[Account] = []
        for d in self.repo.list_all():
            try:
                out.append(Account.model_validate(d))
            except ValidationError:
                logger.warning("Compte invalide ignoré: %s", d.get("id"))
        return out


# ---------- Service distant (HTTP) ---------- #

class HttpIdentityService:
    """
    GET {base_url}/accounts/{id}
    - 404 -> None
    - autre erreur HTTP / réseau -> UnexpectedError (pas de retry)
    """

    def __init__(
        self,
        base_url: str,
        timeout: Tuple[float, float] = (5.0, 5.0),
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def find_by_id(self, account_id: str) -> Optional[Account]:
        if account_id is None:
            return None
        url = f"{self.base_url}/accounts/{account_id}"
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Service d'identité injoignable (%s): %s", url, exc)
            raise UnexpectedError("Falha ao consultar o serviço de identidade.") from exc

        if resp.status_code == 404:
            return None
        try:
            resp.raise_for_status()
            return Account.model_validate(resp.json())
        except (requests.RequestException, ValueError) as exc:
            logger.error("Réponse invalide du service d'identité (%s): %s", url, exc)
            raise UnexpectedError("Resposta inválida do serviço de identidade.") from exc
