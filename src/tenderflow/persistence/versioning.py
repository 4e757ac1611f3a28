"""
Versioned entity repository.

Tenders and bids share one mutation pattern: before the live row's
editable fields change, the current values are appended to a history
table tagged with the current version, and the live version is bumped by
exactly one. Rolling back replays a history snapshot as a new version.

All methods expect to run inside a single session transaction (see
``persistence.db.get_session``); nothing here commits.
"""

from __future__ import annotations

from typing import Any, ClassVar, Generic, Mapping, Sequence, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from tenderflow.errors import NotFoundError, VersionNotFoundError

from .models import Base

EntityT = TypeVar("EntityT", bound=Base)
HistoryT = TypeVar("HistoryT", bound=Base)


class VersionedRepository(Generic[EntityT, HistoryT]):
    """Append-history-then-update repository.

    Subclasses set:
        model: live ORM model
        history_model: snapshot ORM model
        history_key: name of the history column holding the entity id
        editable_fields: fields captured in history and touched by edits
        entity_label: human name used in error messages
    """

    model: ClassVar[type[Base]]
    history_model: ClassVar[type[Base]]
    history_key: ClassVar[str]
    editable_fields: ClassVar[tuple[str, ...]]
    entity_label: ClassVar[str] = "entity"

    def __init__(self, session: Session):
        self.session = session

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_by_id(self, entity_id: str) -> EntityT | None:
        """Get a live row by id."""
        return self.session.get(self.model, entity_id)  # type: ignore[return-value]

    def get(self, entity_id: str) -> EntityT:
        """Get a live row by id or raise NotFoundError."""
        entity = self.get_by_id(entity_id)
        if entity is None:
            raise NotFoundError(f"{self.entity_label} {entity_id} does not exist")
        return entity

    def lock(self, entity_id: str) -> EntityT:
        """Read a live row with a row lock held until the transaction ends."""
        stmt = (
            select(self.model)
            .where(self.model.id == entity_id)  # type: ignore[attr-defined]
            .with_for_update()
        )
        entity = self.session.execute(stmt).scalar_one_or_none()
        if entity is None:
            raise NotFoundError(f"{self.entity_label} {entity_id} does not exist")
        return entity  # type: ignore[return-value]

    def history(self, entity_id: str) -> Sequence[HistoryT]:
        """Get all history entries of an entity, oldest version first."""
        key = getattr(self.history_model, self.history_key)
        stmt = (
            select(self.history_model)
            .where(key == entity_id)
            .order_by(self.history_model.version.asc())  # type: ignore[attr-defined]
        )
        return self.session.execute(stmt).scalars().all()  # type: ignore[return-value]

    def get_snapshot(self, entity_id: str, version: int) -> HistoryT | None:
        """Get the history entry of an entity at a given version."""
        key = getattr(self.history_model, self.history_key)
        stmt = select(self.history_model).where(
            key == entity_id,
            self.history_model.version == version,  # type: ignore[attr-defined]
        )
        return self.session.execute(stmt).scalars().first()  # type: ignore[return-value]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _append_history(self, entity: EntityT) -> HistoryT:
        """Snapshot the entity's current editable fields at its current version."""
        values: dict[str, Any] = {f: getattr(entity, f) for f in self.editable_fields}
        values[self.history_key] = entity.id  # type: ignore[attr-defined]
        values["version"] = entity.version  # type: ignore[attr-defined]

        snapshot = self.history_model(**values)
        self.session.add(snapshot)
        self.session.flush()
        return snapshot  # type: ignore[return-value]

    def edit(self, entity_id: str, changes: Mapping[str, Any]) -> EntityT:
        """Apply a partial update as a new version.

        Args:
            entity_id: Live row id
            changes: Field -> new value; only editable fields are applied

        Returns:
            The updated live row

        Raises:
            NotFoundError: If the entity does not exist
        """
        entity = self.lock(entity_id)
        self._append_history(entity)

        for field in self.editable_fields:
            if field in changes:
                setattr(entity, field, changes[field])
        entity.version = entity.version + 1  # type: ignore[attr-defined]

        self.session.flush()
        return entity

    def rollback(self, entity_id: str, target_version: int) -> EntityT:
        """Restore a historical snapshot as a new version.

        The state being replaced is appended to history first, so it can be
        restored later as well.

        Raises:
            NotFoundError: If the entity does not exist
            VersionNotFoundError: If history has no entry at target_version
        """
        entity = self.lock(entity_id)
        self._append_history(entity)

        snapshot = self.get_snapshot(entity_id, target_version)
        if snapshot is None:
            raise VersionNotFoundError(
                f"{self.entity_label} {entity_id} has no version {target_version}"
            )

        for field in self.editable_fields:
            setattr(entity, field, getattr(snapshot, field))
        entity.version = entity.version + 1  # type: ignore[attr-defined]

        self.session.flush()
        return entity

    def change_status(self, entity_id: str, status: str) -> EntityT:
        """Overwrite the status field. Does not create a version."""
        entity = self.lock(entity_id)
        entity.status = status  # type: ignore[attr-defined]
        self.session.flush()
        return entity
