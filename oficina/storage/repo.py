from __future__ import annotations

import glob
import json
import logging
import shutil
import threading
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
from uuid import uuid4

from pydantic import BaseModel

from oficina.exceptions import IntegrityViolationError, InvalidArgumentError
from oficina.storage.page import Page

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
Predicate = Callable[[Row], bool]


def _json_default(o: Any) -> Any:
    if isinstance(o, (date, datetime)):
        return o.isoformat()
    return str(o)


class JsonRepository:
    """
    Repo JSON générique avec clé primaire configurable.
    - Contraintes d'unicité (``unique``) -> IntegrityViolationError
    - Transactions : écritures sur une copie de travail, un seul flush au commit
    - Rotation de backups (backup_enabled, backup_keep)
    - N'écrit pas si le contenu ne change pas (réduction du bruit et des .bak)
    """

    def __init__(
        self,
        filepath: Union[str, Path],
        entity_name: str = "entity",
        key: str = "id",
        *,
        unique: Iterable[str] = (),
        backup_enabled: bool = True,
        backup_keep: int = 5,
    ) -> None:
        self.filepath = Path(filepath)
        self.entity_name = entity_name
        self.key = key
        self.unique: Tuple[str, ...] = tuple(unique)
        self._lock = threading.RLock()
        self._tx_rows: Optional[List[Row]] = None
        self.backup_enabled = backup_enabled
        self.backup_keep = max(0, int(backup_keep))

        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        if not self.filepath.exists():
            self._write_raw([])

    # ---------------- I/O bas niveau ---------------- #

    def _read_raw(self) -> List[Row]:
        try:
            with self.filepath.open("r", encoding="utf-8") as f:
                data = json.load(f)
            return data if isinstance(data, list) else []
        except FileNotFoundError:
            return []
        except json.JSONDecodeError:
            # Fichier corrompu → mise de côté et repart sur liste vide
            backup = self.filepath.with_suffix(".corrupt.json")
            logger.warning("%s: fichier corrompu, copie vers %s", self.filepath, backup)
            try:
                shutil.copy2(self.filepath, backup)
            except OSError as exc:
                logger.warning("%s: copie impossible: %s", backup, exc)
            return []

    def _rotate_backups(self) -> None:
        if not self.backup_enabled or self.backup_keep <= 0:
            return
        pattern = str(self.filepath.with_suffix(".*.bak.json"))
        files = sorted(glob.glob(pattern))
        # garde les plus récents
        for old in files[: max(0, len(files) - self.backup_keep)]:
            Path(old).unlink(missing_ok=True)

    def _write_raw(self, data: Iterable[Mapping[str, Any]]) -> None:
        with self._lock:
            new_dump = json.dumps(list(data), ensure_ascii=False, indent=2, default=_json_default)

            # si contenu identique → ne rien faire
            if self.filepath.exists() and self.filepath.read_text(encoding="utf-8") == new_dump:
                return

            if self.backup_enabled and self.filepath.exists():
                ts = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
                shutil.copy2(self.filepath, self.filepath.with_suffix(f".{ts}.bak.json"))
                self._rotate_backups()

            with self.filepath.open("w", encoding="utf-8") as f:
                f.write(new_dump)

    def _rows(self) -> List[Row]:
        if self._tx_rows is not None:
            return list(self._tx_rows)
        return self._read_raw()

    def _commit(self, rows: List[Row]) -> None:
        if self._tx_rows is not None:
            self._tx_rows = rows
        else:
            self._write_raw(rows)

    # ---------------- Helpers ---------------- #

    @staticmethod
    def _to_dict(item: Union[BaseModel, Mapping[str, Any]]) -> Row:
        if isinstance(item, BaseModel):
            return item.model_dump(mode="json")
        return json.loads(json.dumps(dict(item), default=_json_default))

    def _same_key(self, row: Row, obj_id: Any) -> bool:
        return str(row.get(self.key)) == str(obj_id)

    def _check_unique(self, rows: List[Row], record: Row) -> None:
        for field in self.unique:
            value = record.get(field)
            if value is None:
                continue
            for r in rows:
                if r.get(field) == value and not self._same_key(r, record[self.key]):
                    raise IntegrityViolationError(self.entity_name, field, value)

    @staticmethod
    def _sort_key(field: str) -> Callable[[Row], Tuple[bool, Any]]:
        def key(row: Row) -> Tuple[bool, Any]:
            v = row.get(field)
            if isinstance(v, (dict, list)):
                raise InvalidArgumentError(f"Campo de ordenação inválido: {field}")
            return (v is None, "" if v is None else v)
        return key

    # ---------------- Transactions ---------------- #

    @contextmanager
    def transaction(self) -> Iterator["JsonRepository"]:
        """Tout ou rien : rien n'est écrit sur disque si le bloc lève."""
        with self._lock:
            if self._tx_rows is not None:  # réentrant
                yield self
                return
            self._tx_rows = self._read_raw()
            try:
                yield self
            except BaseException:
                self._tx_rows = None
                logger.debug("%s: transaction annulée", self.entity_name)
                raise
            rows, self._tx_rows = self._tx_rows, None
            self._write_raw(rows)

    # ---------------- Lecture ---------------- #

    def list_all(self) -> List[Row]:
        with self._lock:
            return self._rows()

    def count(self) -> int:
        return len(self.list_all())

    def find_by_id(self, obj_id: Any) -> Optional[Row]:
        with self._lock:
            for it in self._rows():
                if self._same_key(it, obj_id):
                    return it
        return None

    def find_by_ids(self, ids: Iterable[Any]) -> List[Row]:
        wanted = {str(i) for i in ids}
        return self.find(lambda r: str(r.get(self.key)) in wanted)

    def exists_by(self, field: str, value: Any) -> bool:
        return self.find_one(lambda r: r.get(field) == value) is not None

    def find(self, predicate: Predicate) -> List[Row]:
        with self._lock:
            return [r for r in self._rows() if predicate(r)]

    def find_one(self, predicate: Predicate) -> Optional[Row]:
        with self._lock:
            for r in self._rows():
                if predicate(r):
                    return r
        return None

    def find_all(
        self,
        page: int = 0,
        size: int = 20,
        sort_by: Optional[str] = None,
        predicate: Optional[Predicate] = None,
    ) -> Page[Row]:
        if page < 0:
            raise InvalidArgumentError("O número da página não pode ser negativo.")
        if size < 1:
            raise InvalidArgumentError("O tamanho da página deve ser maior que zero.")
        rows = self.find(predicate) if predicate else self.list_all()
        if sort_by:
            try:
                rows.sort(key=self._sort_key(sort_by))
            except TypeError as exc:
                # types mélangés sur le champ (ex. str et int)
                raise InvalidArgumentError(f"Campo de ordenação inválido: {sort_by}") from exc
        start = page * size
        return Page(items=rows[start:start + size], page=page, size=size, total_elements=len(rows))

    # ---------------- Écriture ---------------- #

    def save(self, item: Union[BaseModel, Mapping[str, Any]]) -> Row:
        """Insert si la clé est nouvelle, remplacement complet sinon."""
        record = self._to_dict(item)
        k = self.key
        if not record.get(k):
            record[k] = uuid4().hex
        with self._lock:
            rows = self._rows()
            self._check_unique(rows, record)
            for idx, existing in enumerate(rows):
                if self._same_key(existing, record[k]):
                    rows[idx] = record
                    break
            else:
                rows.append(record)
            self._commit(rows)
        return record

    def insert(self, item: Union[BaseModel, Mapping[str, Any]]) -> Row:
        """Insert strict : lève si la clé existe déjà."""
        record = self._to_dict(item)
        k = self.key
        if not record.get(k):
            record[k] = uuid4().hex
        with self._lock:
            rows = self._rows()
            if any(self._same_key(r, record[k]) for r in rows):
                raise IntegrityViolationError(self.entity_name, k, record[k])
            self._check_unique(rows, record)
            rows.append(record)
            self._commit(rows)
        return record

    def delete_by_id(self, obj_id: Any) -> bool:
        with self._lock:
            rows = self._rows()
            new_rows = [d for d in rows if not self._same_key(d, obj_id)]
            changed = len(new_rows) != len(rows)
            if changed:
                self._commit(new_rows)
        return changed

    def delete(self, item: Union[BaseModel, Mapping[str, Any]]) -> bool:
        record = self._to_dict(item)
        return self.delete_by_id(record.get(self.key))
