from pathlib import Path
from typing import Callable, List, Optional, Tuple

from config import logger
from utils.data_url import ImageSource, load_image_source
from utils.image_variants import FormatVariant, SizeClass, encode_raster, open_image, resize
from utils.storage import LocalStorage
from utils.variant_plan import VariantSet, current_timestamp, parse_variant_url, plan


def _check_owner_id(owner_id: str) -> None:
    if not owner_id or "/" in owner_id or "\\" in owner_id or owner_id.startswith("."):
        raise ValueError(f"Unusable owner id for a filename: {owner_id!r}")


class ImagePipeline:
    """Turns one uploaded photo into six published variant files.

    Nothing becomes visible under the final names until all six encodes and
    writes have succeeded; a failure removes everything this run produced.
    """

    def __init__(self, storage: LocalStorage, clock: Callable[[], int] = current_timestamp):
        self.storage = storage
        self.clock   = clock

    def process_image(self, source: ImageSource, owner_id: str) -> VariantSet:
        _check_owner_id(owner_id)
        image = open_image(load_image_source(source))

        self.storage.ensure_directory()
        variant_plan = plan(
            owner_id,
            self.clock(),
            upload_dir=self.storage.upload_dir,
            url_prefix=self.storage.url_prefix,
        )

        staged: List[Tuple[Path, Path]] = []
        published: List[Path] = []
        try:
            for size in SizeClass:
                raster = resize(image, size)
                for fmt in FormatVariant:
                    path = variant_plan.disk_paths[(size, fmt)]
                    data = encode_raster(raster, size, fmt)
                    staged.append((self.storage.write_atomic(path, data), path))
            for tmp, path in staged:
                self.storage.publish(tmp, path)
                published.append(path)
        except Exception:
            logger.exception("Image processing failed for owner=%s, discarding %s", owner_id, variant_plan.base_prefix)
            for tmp, _ in staged:
                self.storage.discard(tmp)
            for path in published:
                self.storage.discard(path)
            raise

        logger.info("Stored 6 variants for owner=%s as %s", owner_id, variant_plan.base_prefix)
        return variant_plan.variant_set()

    def cleanup_old_images(self, *previous_urls: Optional[str]) -> int:
        seen: set[str] = set()
        deleted = 0
        for url in previous_urls:
            if not url:
                continue
            key = parse_variant_url(url, self.storage.url_prefix) or url
            if key in seen:
                continue
            seen.add(key)
            deleted += self.storage.remove_variant_set(url)
        return deleted
