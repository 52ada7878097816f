import os
import secrets
from pathlib import Path
from typing import Optional

from config import MEMBER_UPLOAD_DIR, MEMBER_URL_PREFIX, logger
from errors import StaleReferenceWarning, StorageError
from utils.variant_plan import VARIANT_KEYS, VariantSet, filename, parse_variant_url


class LocalStorage:
    def __init__(self, upload_dir: Path = MEMBER_UPLOAD_DIR, url_prefix: str = MEMBER_URL_PREFIX):
        self.upload_dir = Path(upload_dir).resolve()
        self.url_prefix = url_prefix.rstrip("/")

    def path_for_url(self, url: str) -> Optional[Path]:
        if not url or not url.startswith(self.url_prefix + "/"):
            return None
        name = url[len(self.url_prefix) + 1:]
        if not name or "/" in name or name.startswith("."):
            return None
        return self.upload_dir / name

    # ── writer ─────────────────────────────────────────────────────────────
    def ensure_directory(self) -> None:
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create upload directory {self.upload_dir}: {e}") from e

    def write(self, path: Path, data: bytes) -> None:
        try:
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed writing {path.name}: {e}") from e

    def write_atomic(self, path: Path, data: bytes) -> Path:
        """Stage ``data`` next to ``path``; :meth:`publish` moves it into place."""
        tmp = path.with_name(f".{path.name}.{secrets.token_hex(4)}.tmp")
        try:
            self.write(tmp, data)
        except StorageError:
            self.discard(tmp)
            raise
        return tmp

    def publish(self, tmp: Path, path: Path) -> None:
        try:
            os.replace(tmp, path)
        except OSError as e:
            raise StorageError(f"Failed publishing {path.name}: {e}") from e

    def discard(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove %s: %s", path.name, e)

    # ── garbage collector ──────────────────────────────────────────────────
    def delete_file(self, path: Path) -> bool:
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning(
                "%s: %s already missing, skipping",
                StaleReferenceWarning.__name__, path.name,
            )
            return False
        except OSError as e:
            raise StorageError(f"Failed deleting {path.name}: {e}") from e
        return True

    def remove_variant_set(self, any_known_url: str) -> int:
        base_prefix = parse_variant_url(any_known_url, self.url_prefix)
        if base_prefix is None:
            logger.info("Leaving unmanaged image reference untouched: %s", any_known_url)
            return 0

        logger.info("Deleting variant set %s", base_prefix)
        deleted = 0
        for size, fmt in VARIANT_KEYS:
            if self.delete_file(self.upload_dir / filename(base_prefix, size, fmt)):
                deleted += 1
        return deleted

    def remove_variants(self, variants: VariantSet) -> int:
        deleted = 0
        for url in variants.urls():
            path = self.path_for_url(url)
            if path is None:
                logger.info("Leaving unmanaged image reference untouched: %s", url)
                continue
            if self.delete_file(path):
                deleted += 1
        return deleted
