from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from api.member_classes import router as member_classes_router
from api.members import router as members_router
from config import PUBLIC_UPLOAD_PREFIX, UPLOAD_ROOT, logger
from database import SessionLocal, init_db
from errors import DecodeError, EncodeError, StorageError
from repository import SqlMemberClassRepository, seed_member_classes

# Bootstrap tables, seed rows and the upload root (no-op if already present)
init_db()
with SessionLocal() as db:
    seed_member_classes(SqlMemberClassRepository(db))
UPLOAD_ROOT.mkdir(parents=True, exist_ok=True)

app = FastAPI(title="Member API")
app.include_router(members_router)
app.include_router(member_classes_router)
app.mount(PUBLIC_UPLOAD_PREFIX, StaticFiles(directory=UPLOAD_ROOT), name="uploads")


@app.exception_handler(DecodeError)
@app.exception_handler(EncodeError)
async def invalid_image_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("Rejected image on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Failed to store image"})
