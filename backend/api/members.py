import uuid
from typing import Dict, Mapping, Optional

from fastapi import APIRouter, Depends, HTTPException

from config import logger
from deps import get_member_class_repo, get_member_repo, get_pipeline, require_admin
from models import variant_columns, variants_from_columns
from repository import MemberClassRepository, MemberRepository
from schemas import MemberCreate, MemberOut, MemberUpdate
from utils.pipeline import ImagePipeline

router = APIRouter()
admin  = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


def _image_fields(image: Optional[str], owner_id: str, pipeline: ImagePipeline) -> Dict[str, Optional[str]]:
    """Column values for a new photo: six variants for uploads, a bare link otherwise."""
    if image and image.startswith("data:"):
        return variant_columns(pipeline.process_image(image, owner_id))
    # links into the upload directory would let cleanup delete files another record owns
    if image and image.startswith(pipeline.storage.url_prefix + "/"):
        raise HTTPException(status_code=422, detail="image cannot link to an uploaded file; send a data URL")
    columns = variant_columns(None)
    columns["image"] = image or None
    return columns


def _check_member_class(member_class_id: Optional[str], classes: MemberClassRepository) -> None:
    if member_class_id is not None and classes.get(member_class_id) is None:
        raise HTTPException(status_code=422, detail=f"Unknown member class: {member_class_id}")


def _discard_images(columns: Mapping[str, Optional[str]], pipeline: ImagePipeline) -> None:
    variants = variants_from_columns(columns)
    if variants is not None:
        pipeline.storage.remove_variants(variants)
    else:
        pipeline.cleanup_old_images(columns.get("image"), columns.get("thumbnail"))


@router.get("/members", response_model=list[MemberOut])
def list_members(repo: MemberRepository = Depends(get_member_repo)):
    return repo.list(active_only=True)


@admin.get("/members", response_model=list[MemberOut])
def list_all_members(repo: MemberRepository = Depends(get_member_repo)):
    return repo.list()


@admin.get("/members/{member_id}", response_model=MemberOut)
def get_member(member_id: str, repo: MemberRepository = Depends(get_member_repo)):
    member = repo.get(member_id)
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")
    return member


@admin.post("/members", response_model=MemberOut, status_code=201)
def create_member(
    payload: MemberCreate,
    repo: MemberRepository         = Depends(get_member_repo),
    classes: MemberClassRepository = Depends(get_member_class_repo),
    pipeline: ImagePipeline        = Depends(get_pipeline),
):
    _check_member_class(payload.member_class_id, classes)
    member_id = str(uuid.uuid4())
    images    = _image_fields(payload.image, member_id, pipeline)
    try:
        member = repo.create({"id": member_id, **payload.model_dump(exclude={"image"}), **images})
        repo.commit()
    except Exception:
        _discard_images(images, pipeline)
        raise

    logger.info("Created member id=%s name=%s", member.id, member.name)
    return member


@admin.put("/members/{member_id}", response_model=MemberOut)
def update_member(
    member_id: str,
    payload: MemberUpdate,
    repo: MemberRepository         = Depends(get_member_repo),
    classes: MemberClassRepository = Depends(get_member_class_repo),
    pipeline: ImagePipeline        = Depends(get_pipeline),
):
    member = repo.get(member_id)
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")

    fields = payload.model_dump(exclude_unset=True)
    for key in ("name", "is_active", "display_order"):
        if key in fields and fields[key] is None:
            raise HTTPException(status_code=422, detail=f"{key} cannot be null")
    if "member_class_id" in fields:
        _check_member_class(fields["member_class_id"], classes)

    previous: Optional[Dict[str, Optional[str]]] = None
    if "image" in fields:
        image = fields.pop("image")
        if image != member.image:
            previous = member.image_columns()
            fields.update(_image_fields(image, member.id, pipeline))

    try:
        member = repo.update(member_id, fields)
        repo.commit()
    except Exception:
        if previous is not None:
            _discard_images(fields, pipeline)
        raise

    # the previous photo goes only once the new one is committed
    if previous is not None:
        _discard_images(previous, pipeline)
    logger.info("Updated member id=%s fields=%s", member.id, sorted(fields))
    return member


@admin.delete("/members/{member_id}", status_code=204)
def delete_member(
    member_id: str,
    repo: MemberRepository  = Depends(get_member_repo),
    pipeline: ImagePipeline = Depends(get_pipeline),
):
    member = repo.get(member_id)
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")

    previous = member.image_columns()
    repo.delete(member_id)
    repo.commit()
    _discard_images(previous, pipeline)
    logger.info("Removed member id=%s name=%s", member_id, member.name)


router.include_router(admin)
