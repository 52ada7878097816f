import uuid
from datetime import datetime
from typing import Dict, Mapping, Optional

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from database import Base
from utils.variant_plan import VariantSet

# VariantSet field → Member column
VARIANT_COLUMNS = {
    "original_webp": "image_webp",
    "original_avif": "image_avif",
    "original_jpg":  "image",
    "thumb_webp":    "thumbnail_webp",
    "thumb_avif":    "thumbnail_avif",
    "thumb_jpg":     "thumbnail",
}


def variant_columns(variants: Optional[VariantSet]) -> Dict[str, Optional[str]]:
    return {
        column: getattr(variants, field) if variants else None
        for field, column in VARIANT_COLUMNS.items()
    }


def variants_from_columns(values: Mapping[str, Optional[str]]) -> Optional[VariantSet]:
    urls = {field: values.get(column) for field, column in VARIANT_COLUMNS.items()}
    if not all(urls.values()):
        return None
    return VariantSet(**urls)


class MemberClass(Base):
    __tablename__ = "member_classes"
    id            = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name          = Column(String, nullable=False)
    description   = Column(Text)
    display_order = Column(Integer, default=0, nullable=False)
    is_active     = Column(Boolean, default=True, nullable=False)
    created_at    = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at    = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class Member(Base):
    __tablename__ = "members"
    id              = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name            = Column(String, nullable=False)
    role            = Column(String)
    member_class_id = Column(String(36), ForeignKey("member_classes.id"))
    bio             = Column(Text)
    linked_in       = Column(String)
    year            = Column(String)
    is_active       = Column(Boolean, default=True, nullable=False)
    display_order   = Column(Integer, default=0, nullable=False)
    # Primary image URLs (jpg) plus their webp/avif siblings
    image           = Column(String)
    image_webp      = Column(String)
    image_avif      = Column(String)
    thumbnail       = Column(String)
    thumbnail_webp  = Column(String)
    thumbnail_avif  = Column(String)
    created_at      = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at      = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def image_columns(self) -> Dict[str, Optional[str]]:
        return {column: getattr(self, column) for column in VARIANT_COLUMNS.values()}

    def variant_set(self) -> Optional[VariantSet]:
        return variants_from_columns(self.image_columns())

    @property
    def images(self):
        variants = self.variant_set()
        return variants.as_dict() if variants else None
