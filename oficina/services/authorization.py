from __future__ import annotations

from typing import Optional

from oficina.models.account import Actor


def can_mutate(actor: Actor, resource_author_id: Optional[str]) -> bool:
    """Admin, ou auteur de la ressource."""
    if actor.is_admin:
        return True
    return resource_author_id is not None and str(actor.id) == str(resource_author_id)
