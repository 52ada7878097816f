import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DB_URL       = os.getenv("DATABASE_URL", "sqlite:///members.db")
UPLOAD_ROOT  = Path(os.getenv("UPLOAD_ROOT", "uploads"))
ADMIN_TOKEN  = os.getenv("ADMIN_TOKEN")
LOG_LEVEL    = os.getenv("LOG_LEVEL", "INFO").upper()

# Public URLs are served from UPLOAD_ROOT, member photos live one level down
PUBLIC_UPLOAD_PREFIX = "/uploads"
MEMBER_UPLOAD_DIR    = UPLOAD_ROOT / "members"
MEMBER_URL_PREFIX    = f"{PUBLIC_UPLOAD_PREFIX}/members"

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("member_service")
