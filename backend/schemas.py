from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict


class MemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id:              str
    name:            str
    role:            Optional[str] = None
    member_class_id: Optional[str] = None
    bio:             Optional[str] = None
    linked_in:       Optional[str] = None
    year:            Optional[str] = None
    is_active:       bool
    display_order:   int
    # Primary URLs (jpg); every format is listed under images
    image:           Optional[str] = None
    thumbnail:       Optional[str] = None
    images:          Optional[Dict[str, Dict[str, str]]] = None
    created_at:      datetime
    updated_at:      datetime


class MemberCreate(BaseModel):
    name:            str
    role:            Optional[str] = None
    member_class_id: Optional[str] = None
    bio:             Optional[str] = None
    linked_in:       Optional[str] = None
    year:            Optional[str] = None
    is_active:       bool = True
    display_order:   int  = 0
    # data:<mime>;base64,... is processed; any other string is kept as a link
    image:           Optional[str] = None


class MemberUpdate(BaseModel):
    name:            Optional[str]  = None
    role:            Optional[str]  = None
    member_class_id: Optional[str]  = None
    bio:             Optional[str]  = None
    linked_in:       Optional[str]  = None
    year:            Optional[str]  = None
    is_active:       Optional[bool] = None
    display_order:   Optional[int]  = None
    image:           Optional[str]  = None


class MemberClassOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id:            str
    name:          str
    description:   Optional[str] = None
    display_order: int
    is_active:     bool
    created_at:    datetime
    updated_at:    datetime


class MemberClassCreate(BaseModel):
    # Slug ids such as "officer" are allowed; a uuid is generated when omitted
    id:            Optional[str] = None
    name:          str
    description:   Optional[str] = None
    display_order: int  = 0
    is_active:     bool = True


class MemberClassUpdate(BaseModel):
    name:          Optional[str]  = None
    description:   Optional[str]  = None
    display_order: Optional[int]  = None
    is_active:     Optional[bool] = None
