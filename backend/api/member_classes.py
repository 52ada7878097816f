from fastapi import APIRouter, Depends, HTTPException

from config import logger
from deps import get_member_class_repo, get_member_repo, require_admin
from repository import MemberClassRepository, MemberRepository
from schemas import MemberClassCreate, MemberClassOut, MemberClassUpdate

router = APIRouter()
admin  = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


@router.get("/member-classes", response_model=list[MemberClassOut])
def list_member_classes(repo: MemberClassRepository = Depends(get_member_class_repo)):
    return repo.list(active_only=True)


@admin.get("/member-classes", response_model=list[MemberClassOut])
def list_all_member_classes(repo: MemberClassRepository = Depends(get_member_class_repo)):
    return repo.list()


@admin.post("/member-classes", response_model=MemberClassOut, status_code=201)
def create_member_class(
    payload: MemberClassCreate,
    repo: MemberClassRepository = Depends(get_member_class_repo),
):
    fields = payload.model_dump()
    if not fields["id"]:
        fields.pop("id")
    elif repo.get(fields["id"]) is not None:
        raise HTTPException(status_code=409, detail="A member class with this id already exists")

    member_class = repo.create(fields)
    logger.info("Created member class id=%s name=%s", member_class.id, member_class.name)
    return member_class


@admin.put("/member-classes/{class_id}", response_model=MemberClassOut)
def update_member_class(
    class_id: str,
    payload: MemberClassUpdate,
    repo: MemberClassRepository = Depends(get_member_class_repo),
):
    if repo.get(class_id) is None:
        raise HTTPException(status_code=404, detail="Member class not found")

    fields = payload.model_dump(exclude_unset=True)
    for key in ("name", "is_active", "display_order"):
        if key in fields and fields[key] is None:
            raise HTTPException(status_code=422, detail=f"{key} cannot be null")
    return repo.update(class_id, fields)


@admin.delete("/member-classes/{class_id}", status_code=204)
def delete_member_class(
    class_id: str,
    repo: MemberClassRepository = Depends(get_member_class_repo),
    members: MemberRepository   = Depends(get_member_repo),
):
    if repo.get(class_id) is None:
        raise HTTPException(status_code=404, detail="Member class not found")
    if any(m.member_class_id == class_id for m in members.list()):
        raise HTTPException(status_code=409, detail="Member class still has members")

    repo.delete(class_id)
    logger.info("Removed member class id=%s", class_id)


router.include_router(admin)
