"""
Assemblage explicite des services à partir d'un ``Settings``.

    services = create_services(Settings.from_env())
    services.clients.create(client, author_id)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from oficina.config import Settings
from oficina.logging_config import setup_logging
from oficina.services.budget_service import BudgetService
from oficina.services.catalog_service import CatalogService
from oficina.services.client_service import ClientService
from oficina.services.identity_service import AccountDirectory, HttpIdentityService, IdentityService
from oficina.services.pricing import PercentageDiscount, no_discount
from oficina.storage.repo import JsonRepository

logger = logging.getLogger(__name__)


@dataclass
class Services:
    clients: ClientService
    budgets: BudgetService
    catalog: CatalogService
    identity: IdentityService


def _repo(settings: Settings, filename: str, entity: str, **kw) -> JsonRepository:
    return JsonRepository(
        Path(settings.data_dir) / filename,
        entity_name=entity,
        key="id",
        backup_enabled=settings.backup_enabled,
        backup_keep=settings.backup_keep,
        **kw,
    )


def build_identity(settings: Settings) -> IdentityService:
    if settings.identity_base_url:
        return HttpIdentityService(settings.identity_base_url, timeout=settings.http_timeout)
    return AccountDirectory(_repo(settings, "accounts.json", "account"))


def create_services(settings: Optional[Settings] = None, identity: Optional[IdentityService] = None) -> Services:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, settings.log_file)

    clients_repo = _repo(settings, "clients.json", "client", unique=("email",))
    catalog = CatalogService(
        _repo(settings, "services.json", "service"),
        _repo(settings, "parts.json", "part"),
    )
    identity = identity or build_identity(settings)
    discount = PercentageDiscount(settings.discount_percent) if settings.discount_percent else no_discount

    budgets_repo = _repo(settings, "budgets.json", "budget")

    logger.info("Données dans %s", settings.data_dir)
    return Services(
        clients=ClientService(clients_repo, identity, budgets_repo),
        budgets=BudgetService(budgets_repo, clients_repo, catalog, discount),
        catalog=catalog,
        identity=identity,
    )
