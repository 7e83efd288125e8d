from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from oficina.models.part import Part
from oficina.models.service import Service
from oficina.storage.repo import JsonRepository

logger = logging.getLogger(__name__)

T = TypeVar("T", Service, Part)


# ---------- Helpers (prix & normalisation) ---------- #

def parse_price_to_cents(payload: Dict[str, Any]) -> int:
    """
    Accepte:
      - price_cents (int)
      - price / price_brl (str/float, ex "R$ 18,50" → 1850)
    Retourne un int >= 0
    """
    v = payload.get("price_cents")
    if v not in (None, ""):
        return max(0, int(v))

    for k in ("price", "price_brl"):
        v = payload.get(k)
        if v in (None, ""):
            continue
        s = re.sub(r"[^0-9,.\-]", "", str(v))
        # "1.234,56" -> "1234.56" ; "18,50" -> "18.50"
        if "," in s:
            s = s.replace(".", "").replace(",", ".")
        try:
            amount = Decimal(s)
        except InvalidOperation:
            continue
        return max(0, int((amount * 100).quantize(Decimal(1))))

    return 0


class CatalogService:
    """
    Données de référence : services (main d'oeuvre) et pièces.
    - Normalise: label <- name ; price_cents int >= 0
    - Lecture seule pour les devis ; add_* sert à alimenter le catalogue
    """

    def __init__(self, services_repo: JsonRepository, parts_repo: JsonRepository) -> None:
        self.services_repo = services_repo
        self.parts_repo = parts_repo

    def _ensure_defaults(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not payload.get("label"):
            payload["label"] = payload.get("name") or ""
        payload["price_cents"] = parse_price_to_cents(payload)
        for k in ("price", "price_brl"):
            payload.pop(k, None)
        return payload

    @staticmethod
    def _payload(item: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
        return item.model_dump() if isinstance(item, BaseModel) else dict(item)

    def _add(self, repo: JsonRepository, item: Union[BaseModel, Dict[str, Any]], model: Type[T]) -> T:
        payload = self._ensure_defaults(self._payload(item))
        obj = model.model_validate(payload)
        saved = model.model_validate(repo.save(obj))
        logger.info("%s ajouté au catalogue: %s (%s cents)", repo.entity_name, saved.id, saved.price_cents)
        return saved

    @staticmethod
    def _get(repo: JsonRepository, obj_id: str, model: Type[T]) -> Optional[T]:
        row = repo.find_by_id(obj_id)
        return model.model_validate(row) if row else None

    @staticmethod
    def _by_ref(repo: JsonRepository, ref: str, model: Type[T]) -> Optional[T]:
        ref = (ref or "").strip()
        if not ref:
            return None
        row = repo.find_one(lambda r: (r.get("ref") or "").strip() == ref)
        return model.model_validate(row) if row else None

    # ---------- Services ---------- #

    def list_services(self, active_only: bool = False) -> List[Service]:
        out = [Service.model_validate(d) for d in self.services_repo.list_all()]
        return [s for s in out if s.active] if active_only else out

    def get_service(self, service_id: str) -> Optional[Service]:
        return self._get(self.services_repo, service_id, Service)

    def find_service_by_ref(self, ref: str) -> Optional[Service]:
        return self._by_ref(self.services_repo, ref, Service)

    def add_service(self, s: Union[Service, Dict[str, Any]]) -> Service:
        return self._add(self.services_repo, s, Service)

    # ---------- Pièces ---------- #

    def list_parts(self, active_only: bool = False) -> List[Part]:
        out = [Part.model_validate(d) for d in self.parts_repo.list_all()]
        return [p for p in out if p.active] if active_only else out

    def get_part(self, part_id: str) -> Optional[Part]:
        return self._get(self.parts_repo, part_id, Part)

    def find_part_by_ref(self, ref: str) -> Optional[Part]:
        return self._by_ref(self.parts_repo, ref, Part)

    def add_part(self, p: Union[Part, Dict[str, Any]]) -> Part:
        return self._add(self.parts_repo, p, Part)
