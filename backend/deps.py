import secrets
from typing import Iterator, Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from config import ADMIN_TOKEN
from database import SessionLocal
from repository import (
    MemberClassRepository,
    MemberRepository,
    SqlMemberClassRepository,
    SqlMemberRepository,
)
from utils.pipeline import ImagePipeline
from utils.storage import LocalStorage

_pipeline = ImagePipeline(LocalStorage())


def get_db() -> Iterator[Session]:
    db: Session = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_member_repo(db: Session = Depends(get_db)) -> MemberRepository:
    return SqlMemberRepository(db)


def get_member_class_repo(db: Session = Depends(get_db)) -> MemberClassRepository:
    return SqlMemberClassRepository(db)


def get_pipeline() -> ImagePipeline:
    return _pipeline


def get_admin_token() -> Optional[str]:
    return ADMIN_TOKEN


def require_admin(
    x_admin_token: Optional[str] = Header(None),
    expected: Optional[str]      = Depends(get_admin_token),
) -> None:
    if not expected or not x_admin_token or not secrets.compare_digest(x_admin_token, expected):
        raise HTTPException(status_code=401, detail="Admin access required")
