import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy.orm import Session

from models import Member, MemberClass

# Seeded on first start so members have classes to belong to
DEFAULT_MEMBER_CLASSES = [
    {"id": "website-manager",  "name": "Website Manager",
     "description": "Manages the website and digital presence", "display_order": 1},
    {"id": "officer",          "name": "Officer",
     "description": "Executive leadership positions",           "display_order": 2},
    {"id": "active-member",    "name": "Active Member",
     "description": "Regular participating members",            "display_order": 3},
    {"id": "faculty-advisors", "name": "Faculty Advisors",
     "description": "Faculty members providing guidance",       "display_order": 4},
]


class MemberRepository(Protocol):
    def list(self, active_only: bool = False) -> List[Member]: ...
    def get(self, member_id: str) -> Optional[Member]: ...
    def create(self, fields: Dict[str, Any]) -> Member: ...
    def update(self, member_id: str, fields: Dict[str, Any]) -> Member: ...
    def delete(self, member_id: str) -> None: ...
    def commit(self) -> None: ...


class MemberClassRepository(Protocol):
    def list(self, active_only: bool = False) -> List[MemberClass]: ...
    def get(self, class_id: str) -> Optional[MemberClass]: ...
    def create(self, fields: Dict[str, Any]) -> MemberClass: ...
    def update(self, class_id: str, fields: Dict[str, Any]) -> MemberClass: ...
    def delete(self, class_id: str) -> None: ...
    def commit(self) -> None: ...


class _SqlRepository:
    model: Any = None

    def __init__(self, db: Session):
        self.db = db

    def list(self, active_only: bool = False):
        query = self.db.query(self.model)
        if active_only:
            query = query.filter(self.model.is_active.is_(True))
        return query.order_by(self.model.display_order.asc(), self.model.name.asc()).all()

    def get(self, row_id: str):
        return self.db.get(self.model, row_id)

    def create(self, fields: Dict[str, Any]):
        row = self.model(**fields)
        self.db.add(row)
        self.db.flush()
        return row

    def update(self, row_id: str, fields: Dict[str, Any]):
        row = self.get(row_id)
        if row is None:
            raise KeyError(row_id)
        for key, value in fields.items():
            setattr(row, key, value)
        self.db.flush()
        return row

    def delete(self, row_id: str) -> None:
        row = self.get(row_id)
        if row is not None:
            self.db.delete(row)
            self.db.flush()

    def commit(self) -> None:
        self.db.commit()


class SqlMemberRepository(_SqlRepository):
    model = Member


class SqlMemberClassRepository(_SqlRepository):
    model = MemberClass


class _InMemoryRepository:
    """Dict-backed stand-in used by tests and local experiments."""

    model: Any = None

    def __init__(self):
        self.rows: Dict[str, Any] = {}

    def list(self, active_only: bool = False):
        rows = [r for r in self.rows.values() if r.is_active or not active_only]
        return sorted(rows, key=lambda r: (r.display_order, r.name))

    def get(self, row_id: str):
        return self.rows.get(row_id)

    def create(self, fields: Dict[str, Any]):
        now    = datetime.utcnow()
        values = {"is_active": True, "display_order": 0, **fields}
        values.setdefault("id", str(uuid.uuid4()))
        row = self.model(created_at=now, updated_at=now, **values)
        self.rows[row.id] = row
        return row

    def update(self, row_id: str, fields: Dict[str, Any]):
        row = self.rows.get(row_id)
        if row is None:
            raise KeyError(row_id)
        for key, value in fields.items():
            setattr(row, key, value)
        row.updated_at = datetime.utcnow()
        return row

    def delete(self, row_id: str) -> None:
        self.rows.pop(row_id, None)

    def commit(self) -> None:
        pass


class InMemoryMemberRepository(_InMemoryRepository):
    model = Member


class InMemoryMemberClassRepository(_InMemoryRepository):
    model = MemberClass


def seed_member_classes(repo: MemberClassRepository) -> int:
    created = 0
    for fields in DEFAULT_MEMBER_CLASSES:
        if repo.get(fields["id"]) is None:
            repo.create(dict(fields))
            created += 1
    repo.commit()
    return created
