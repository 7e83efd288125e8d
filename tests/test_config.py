import logging
from pathlib import Path

from oficina.bootstrap import build_identity, create_services
from oficina.config import Settings
from oficina.logging_config import setup_logging
from oficina.models.account import Account
from oficina.models.budget import BudgetRequest
from oficina.models.client import Client
from oficina.models.service import Service
from oficina.services.identity_service import AccountDirectory, HttpIdentityService


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("OFICINA_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("OFICINA_BACKUP_ENABLED", "no")
    monkeypatch.setenv("OFICINA_IDENTITY_URL", "http://auth.local/")
    monkeypatch.setenv("OFICINA_HTTP_READ_TIMEOUT", "2.5")
    monkeypatch.setenv("OFICINA_DISCOUNT_PERCENT", "5")

    s = Settings.from_env()

    assert s.data_dir == Path(tmp_path)
    assert s.backup_enabled is False
    assert s.identity_base_url == "http://auth.local"
    assert s.http_timeout == (5.0, 2.5)
    assert s.discount_percent == 5.0


def test_settings_defaults(monkeypatch):
    for name in ("OFICINA_LOG_LEVEL", "OFICINA_IDENTITY_URL", "OFICINA_BACKUP_KEEP"):
        monkeypatch.delenv(name, raising=False)
    s = Settings.from_env()
    assert s.log_level == "INFO"
    assert s.backup_keep == 5
    assert s.identity_base_url == ""


def test_build_identity_picks_backend(tmp_path):
    assert isinstance(build_identity(Settings(data_dir=tmp_path)), AccountDirectory)
    remote = build_identity(Settings(data_dir=tmp_path, identity_base_url="http://auth.local", http_connect_timeout=1))
    assert isinstance(remote, HttpIdentityService)
    assert remote.timeout == (1, 5.0)


def test_create_services_end_to_end(tmp_path):
    services = create_services(Settings(data_dir=tmp_path, backup_enabled=False, discount_percent=10))
    services.identity.add_account(Account(id="u1", username="ana"))
    services.catalog.add_service(Service(id="s1", name="Revisão", price_cents=10000))

    client = services.clients.create(Client(name="Ana", email="ana@x.com", phone="1199998888"), "u1")
    budget = services.budgets.create(BudgetRequest(client_id=client.id, services=[{"service_id": "s1", "quantity": 1}]))

    assert budget.total_cents == 10000
    assert budget.discount_cents == 1000
    assert (tmp_path / "clients.json").exists()
    assert (tmp_path / "budgets.json").exists()


def test_setup_logging_is_idempotent(monkeypatch, tmp_path):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    setup_logging("debug", str(tmp_path / "logs" / "oficina.log"))
    setup_logging("info")
    assert len(root.handlers) == 2
    assert root.level == logging.DEBUG
    for h in root.handlers:
        h.close()
