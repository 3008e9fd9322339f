"""
Skin-tone face region heuristic.

Used as the fallback face detector when no cascade or ML analyzer is usable:

1. block scan: tile the image into BLOCK_SIZE squares and keep blocks whose
   skin-pixel ratio and skin-pixel count both clear their thresholds
2. merge: union overlapping candidate blocks into face regions
3. filter: keep regions that are confident and large enough

Everything here is a pure function of the input image and thresholds.
"""
from __future__ import annotations
from typing import List
import logging

from core.image import RasterImage
from core.models import Region
from core.skin import skin_mask

logger = logging.getLogger(__name__)

BLOCK_SIZE = 50
MIN_SKIN_RATIO = 0.3
MIN_SKIN_PIXELS = 100
MIN_FACE_CONFIDENCE = 0.4
MIN_FACE_AREA = 1000


def block_scan(image: RasterImage,
               block_size: int = BLOCK_SIZE,
               min_skin_ratio: float = MIN_SKIN_RATIO,
               min_skin_pixels: int = MIN_SKIN_PIXELS) -> List[Region]:
    """
    Find candidate face blocks, in row-major order.

    Block origins stop while a block would still reach the right/bottom edge
    (``y < height - block_size``), so trailing partial blocks are never scanned.
    """
    mask = skin_mask(image.pixels)
    height, width = mask.shape
    candidates: List[Region] = []

    for y in range(0, height - block_size, block_size):
        for x in range(0, width - block_size, block_size):
            block = mask[y:min(y + block_size, height), x:min(x + block_size, width)]
            total = block.size
            skin = int(block.sum())
            ratio = skin / total
            if ratio > min_skin_ratio and skin > min_skin_pixels:
                candidates.append(Region(x=x, y=y, width=block_size, height=block_size,
                                         confidence=ratio))

    logger.debug(f"[heuristic] block_scan size={width}x{height} block={block_size} candidates={len(candidates)}")
    return candidates


def regions_overlap(a: Region, b: Region) -> bool:
    """Axis-aligned overlap test; touching edges count as overlapping."""
    return not (a.right < b.x or
                b.right < a.x or
                a.bottom < b.y or
                b.bottom < a.y)


def union_region(a: Region, b: Region) -> Region:
    x = min(a.x, b.x)
    y = min(a.y, b.y)
    return Region(
        x=x,
        y=y,
        width=max(a.right, b.right) - x,
        height=max(a.bottom, b.bottom) - y,
        confidence=max(a.confidence, b.confidence),
    )


def merge_overlapping_regions(regions: List[Region], strategy: str = "single_pass") -> List[Region]:
    """
    Merge overlapping regions into union boxes carrying the max confidence.

    strategy:
      - "single_pass": greedy, one forward scan per accumulator. A region that
        only starts to overlap after the accumulator has grown past it is not
        revisited, so chains may stay split.
      - "connected": keep merging until no two output regions overlap.
    """
    if len(regions) <= 1:
        return list(regions)
    if strategy == "connected":
        return _merge_connected(regions)

    merged: List[Region] = []
    used = [False] * len(regions)
    for i, region in enumerate(regions):
        if used[i]:
            continue
        current = region
        used[i] = True
        for j in range(i + 1, len(regions)):
            if used[j]:
                continue
            if regions_overlap(current, regions[j]):
                current = union_region(current, regions[j])
                used[j] = True
        merged.append(current)
    return merged


def _merge_connected(regions: List[Region]) -> List[Region]:
    merged = list(regions)
    changed = True
    while changed:
        changed = False
        out: List[Region] = []
        for region in merged:
            for k, acc in enumerate(out):
                if regions_overlap(acc, region):
                    out[k] = union_region(acc, region)
                    changed = True
                    break
            else:
                out.append(region)
        merged = out
    return merged


def filter_regions(regions: List[Region],
                   min_confidence: float = MIN_FACE_CONFIDENCE,
                   min_area: int = MIN_FACE_AREA) -> List[Region]:
    """Keep regions strictly above both the confidence and area thresholds."""
    return [r for r in regions if r.confidence > min_confidence and r.area > min_area]


def detect_face_regions(image: RasterImage,
                        block_size: int = BLOCK_SIZE,
                        min_skin_ratio: float = MIN_SKIN_RATIO,
                        min_skin_pixels: int = MIN_SKIN_PIXELS,
                        min_confidence: float = MIN_FACE_CONFIDENCE,
                        min_area: int = MIN_FACE_AREA,
                        merge_strategy: str = "single_pass") -> List[Region]:
    """
    Run block scan -> merge -> filter and return the surviving face regions.

    Never raises: any failure is logged and reported as "no regions", which
    callers treat as "no face detected".
    """
    try:
        candidates = block_scan(image, block_size, min_skin_ratio, min_skin_pixels)
        merged = merge_overlapping_regions(candidates, merge_strategy)
        faces = filter_regions(merged, min_confidence, min_area)
    except Exception:
        logger.exception("[heuristic] detection failed; returning no regions")
        return []
    logger.debug(f"[heuristic] merged={len(merged)} faces={len(faces)}")
    return faces
