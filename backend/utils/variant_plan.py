"""
Naming scheme for member photo variants.

Every upload produces six files that share one ``{owner_id}_{timestamp}``
prefix::

    /uploads/members/{owner_id}_{timestamp}_{original|thumb}.{webp|avif|jpg}

The planner and the garbage collector both build names through
:func:`filename`, so a single URL is enough to find its siblings.
"""

import re
import time
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

from utils.image_variants import FormatVariant, SizeClass

VariantKey = Tuple[SizeClass, FormatVariant]

VARIANT_KEYS: Tuple[VariantKey, ...] = tuple(
    (size, fmt) for size in SizeClass for fmt in FormatVariant
)

_NAME_RE = re.compile(
    r"^(?P<prefix>.+_\d+)_(?P<size>original|thumb)\.(?P<ext>webp|avif|jpg)$"
)


def current_timestamp() -> int:
    """Wall clock in epoch milliseconds."""
    return int(time.time() * 1000)


def filename(base_prefix: str, size: SizeClass, fmt: FormatVariant) -> str:
    return f"{base_prefix}_{size.tag}.{fmt.ext}"


@dataclass(frozen=True)
class VariantSet:
    """The six public URLs produced by one pipeline run."""

    original_webp: str
    original_avif: str
    original_jpg:  str
    thumb_webp:    str
    thumb_avif:    str
    thumb_jpg:     str

    @classmethod
    def from_mapping(cls, urls: Dict[VariantKey, str]) -> "VariantSet":
        return cls(**{f"{s.tag}_{f.ext}": urls[(s, f)] for s, f in VARIANT_KEYS})

    def get(self, size: SizeClass, fmt: FormatVariant) -> str:
        return getattr(self, f"{size.tag}_{fmt.ext}")

    def urls(self) -> Iterator[str]:
        for field in fields(self):
            yield getattr(self, field.name)

    def as_dict(self) -> Dict[str, Dict[str, str]]:
        return {
            size.tag: {fmt.ext: self.get(size, fmt) for fmt in FormatVariant}
            for size in SizeClass
        }


@dataclass(frozen=True)
class VariantPlan:
    base_prefix: str
    urls:        Dict[VariantKey, str]
    disk_paths:  Dict[VariantKey, Path]

    def variant_set(self) -> VariantSet:
        return VariantSet.from_mapping(self.urls)


def plan(owner_id: str, timestamp: int, *, upload_dir: Path, url_prefix: str) -> VariantPlan:
    base_prefix = f"{owner_id}_{timestamp}"
    url_prefix  = url_prefix.rstrip("/")
    upload_dir  = Path(upload_dir)

    urls: Dict[VariantKey, str] = {}
    disk_paths: Dict[VariantKey, Path] = {}
    for size, fmt in VARIANT_KEYS:
        name = filename(base_prefix, size, fmt)
        urls[(size, fmt)]       = f"{url_prefix}/{name}"
        disk_paths[(size, fmt)] = upload_dir / name
    return VariantPlan(base_prefix=base_prefix, urls=urls, disk_paths=disk_paths)


def parse_variant_url(url: str, url_prefix: str) -> Optional[str]:
    """Return the base prefix of a managed variant URL, else ``None``.

    Accepts any of the six names of a set, ``_original`` and ``_thumb``
    anchors alike. A query string or fragment is ignored.
    """
    namespace = url_prefix.rstrip("/") + "/"
    if not url or not url.startswith(namespace):
        return None
    name = re.split(r"[?#]", url[len(namespace):], maxsplit=1)[0]
    if "/" in name:
        return None
    match = _NAME_RE.match(name)
    return match.group("prefix") if match else None
