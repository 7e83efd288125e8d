"""
Fixtures communes : dépôts JSON dans un répertoire temporaire, annuaire de
comptes et catalogue pré-remplis.
"""

import pytest

from oficina.models.account import Account
from oficina.models.client import Address, Client
from oficina.models.part import Part
from oficina.models.service import Service
from oficina.services.budget_service import BudgetService
from oficina.services.catalog_service import CatalogService
from oficina.services.client_service import ClientService
from oficina.services.identity_service import AccountDirectory
from oficina.storage.repo import JsonRepository


def _repo(tmp_path, name, **kw):
    return JsonRepository(tmp_path / f"{name}.json", entity_name=name, backup_enabled=False, **kw)


@pytest.fixture
def clients_repo(tmp_path):
    return _repo(tmp_path, "client", unique=("email",))


@pytest.fixture
def directory(tmp_path):
    d = AccountDirectory(_repo(tmp_path, "account"))
    d.add_account(Account(id="author-1", username="joao"))
    d.add_account(Account(id="other-1", username="maria"))
    d.add_account(Account(id="admin-1", username="chefe", roles=["ADMIN"]))
    return d


@pytest.fixture
def catalog(tmp_path):
    c = CatalogService(_repo(tmp_path, "service"), _repo(tmp_path, "part"))
    c.add_service(Service(id="svc-oil", ref="S01", name="Troca de óleo", price_cents=1000))
    c.add_service(Service(id="svc-align", ref="S02", name="Alinhamento", price_cents=500))
    c.add_part(Part(id="part-filter", ref="P01", name="Filtro de óleo", price_cents=2000))
    c.add_part(Part(id="part-pad", ref="P02", name="Pastilha de freio", price_cents=3500))
    return c


@pytest.fixture
def client_service(clients_repo, directory, budgets_repo):
    return ClientService(clients_repo, directory, budgets_repo)


@pytest.fixture
def budgets_repo(tmp_path):
    return _repo(tmp_path, "budget")


@pytest.fixture
def budget_service(budgets_repo, clients_repo, catalog):
    return BudgetService(budgets_repo, clients_repo, catalog)


@pytest.fixture
def make_client():
    def _make(**overrides):
        data = dict(
            name="Carlos Souza",
            email="carlos@oficina.com",
            phone="11987654321",
            address=Address(street="Rua das Flores", number="10", city="São Paulo", postal_code="01234-567"),
        )
        data.update(overrides)
        return Client(**data)
    return _make


@pytest.fixture
def stored_client(client_service, make_client):
    return client_service.create(make_client(), "author-1")
