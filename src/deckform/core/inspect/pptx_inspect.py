from __future__ import annotations

from pathlib import Path
from typing import Any

from pptx import Presentation
from pptx.enum.shapes import MSO_SHAPE_TYPE


def summarize_pptx(path: Path) -> dict[str, Any]:
    """Count shapes per slide of a .pptx and collect slide names and texts."""
    prs = Presentation(str(path))

    per_slide: list[dict[str, Any]] = []
    totals = {"text_shapes": 0, "picture_shapes": 0, "other_shapes": 0}

    for si, slide in enumerate(prs.slides):
        counts = {"text_shapes": 0, "picture_shapes": 0, "other_shapes": 0}
        texts: list[str] = []

        for shp in slide.shapes:
            if shp.shape_type == MSO_SHAPE_TYPE.PICTURE:
                counts["picture_shapes"] += 1
            elif getattr(shp, "has_text_frame", False) and shp.has_text_frame:
                counts["text_shapes"] += 1
                texts.append(shp.text_frame.text or "")
            else:
                counts["other_shapes"] += 1

        for k, v in counts.items():
            totals[k] += v
        per_slide.append({"index": si, "name": slide.name, **counts, "texts": texts})

    return {"slides": len(prs.slides), **totals, "per_slide": per_slide}
