from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Sequence

from oficina.exceptions import InvalidArgumentError, NotFoundError
from oficina.models.budget import (
    Budget,
    BudgetPartLine,
    BudgetRequest,
    BudgetResponse,
    BudgetServiceLine,
    PartQuantity,
    ServiceQuantity,
)
from oficina.services.catalog_service import CatalogService
from oficina.services.pricing import DiscountPolicy, compute_totals, no_discount
from oficina.storage.repo import JsonRepository

logger = logging.getLogger(__name__)


class BudgetService:
    """
    Orçamentos : un client + lignes de services + lignes de pièces.
    - Les lignes sont résolues contre le catalogue (prix jamais fourni par l'appelant)
    - Total / remise recalculés avant chaque écriture
    - create/update : agrégat construit en mémoire puis écrit en une transaction
    """

    def __init__(
        self,
        repo: JsonRepository,
        clients_repo: JsonRepository,
        catalog: CatalogService,
        discount_policy: DiscountPolicy = no_discount,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.repo = repo
        self.clients_repo = clients_repo
        self.catalog = catalog
        self.discount_policy = discount_policy
        self.clock = clock

    # ----- Composition des lignes ----- #

    @staticmethod
    def _check_quantity(quantity: int, what: str, item_id: str) -> None:
        if quantity is None or quantity <= 0:
            raise InvalidArgumentError(f"Quantidade {what} deve ser maior que zero: ID {item_id}")

    def _service_lines(self, items: Sequence[ServiceQuantity], budget: Budget) -> List[BudgetServiceLine]:
        lines: List[BudgetServiceLine] = []
        for it in items:
            service = self.catalog.get_service(it.service_id)
            if service is None:
                raise InvalidArgumentError(f"Serviço não encontrado com ID: {it.service_id}")
            self._check_quantity(it.quantity, "do serviço", it.service_id)
            lines.append(BudgetServiceLine(
                budget_id=budget.id,
                service_id=service.id,
                quantity=it.quantity,
                unit_price_cents=service.price_cents,
            ))
        return lines

    def _part_lines(self, items: Sequence[PartQuantity], budget: Budget) -> List[BudgetPartLine]:
        lines: List[BudgetPartLine] = []
        for it in items:
            part = self.catalog.get_part(it.part_id)
            if part is None:
                raise InvalidArgumentError(f"Peça não encontrada com ID: {it.part_id}")
            self._check_quantity(it.quantity, "da peça", it.part_id)
            lines.append(BudgetPartLine(
                budget_id=budget.id,
                part_id=part.id,
                quantity=it.quantity,
                unit_price_cents=part.price_cents,
            ))
        return lines

    def _compose(self, budget: Budget, request: BudgetRequest) -> Budget:
        # remplace intégralement les lignes existantes
        budget.service_lines = self._service_lines(request.services, budget)
        budget.part_lines = self._part_lines(request.parts, budget)
        budget.apply_totals(compute_totals(budget.service_lines, budget.part_lines, self.discount_policy))
        return budget

    # ----- Projection ----- #

    @staticmethod
    def to_response(budget: Budget) -> BudgetResponse:
        return BudgetResponse(
            id=budget.id,
            client_id=budget.client_id,
            created_on=budget.created_on,
            total_cents=budget.total_cents,
            discount_cents=budget.discount_cents,
            net_cents=budget.net_cents,
            services=[ServiceQuantity(service_id=ln.service_id, quantity=ln.quantity) for ln in budget.service_lines],
            parts=[PartQuantity(part_id=ln.part_id, quantity=ln.quantity) for ln in budget.part_lines],
        )

    def _load(self, budget_id: str) -> Budget:
        row = self.repo.find_by_id(budget_id)
        if row is None:
            raise NotFoundError("Orçamento", budget_id)
        return Budget.model_validate(row)

    # ----- CRUD ----- #

    def create(self, request: BudgetRequest) -> BudgetResponse:
        with self.repo.transaction():
            if self.clients_repo.find_by_id(request.client_id) is None:
                raise InvalidArgumentError(f"Cliente não encontrado com ID: {request.client_id}")

            budget = Budget(client_id=request.client_id, created_on=self.clock())
            self._compose(budget, request)
            saved = Budget.model_validate(self.repo.insert(budget))

        logger.info("Devis %s créé pour le client %s (total %s cents)", saved.id, saved.client_id, saved.total_cents)
        return self.to_response(saved)

    def get(self, budget_id: str) -> BudgetResponse:
        return self.to_response(self._load(budget_id))

    def list(self) -> List[BudgetResponse]:
        return [self.to_response(Budget.model_validate(r)) for r in self.repo.list_all()]

    def list_by_client(self, client_id: str) -> List[BudgetResponse]:
        rows = self.repo.find(lambda r: str(r.get("client_id")) == str(client_id))
        return [self.to_response(Budget.model_validate(r)) for r in rows]

    def list_by_ids(self, ids: Sequence[str]) -> List[BudgetResponse]:
        rows = self.repo.find_by_ids(ids)
        if not rows:
            raise InvalidArgumentError("Nenhum orçamento encontrado para os IDs fornecidos.")
        return [self.to_response(Budget.model_validate(r)) for r in rows]

    def update(self, budget_id: str, request: BudgetRequest) -> BudgetResponse:
        with self.repo.transaction():
            budget = self._load(budget_id)
            if self.clients_repo.find_by_id(request.client_id) is None:
                raise NotFoundError("Cliente", request.client_id)

            budget.client_id = request.client_id
            self._compose(budget, request)
            saved = Budget.model_validate(self.repo.save(budget))

        logger.info("Devis %s mis à jour (total %s cents)", budget_id, saved.total_cents)
        return self.to_response(saved)

    def delete(self, budget_id: str) -> None:
        with self.repo.transaction():
            if self.repo.find_by_id(budget_id) is None:
                raise NotFoundError("Orçamento", budget_id)
            self.repo.delete_by_id(budget_id)
        logger.info("Devis %s supprimé", budget_id)
