from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from app.data.security_tips import CATEGORIES, get_tips

router = APIRouter(prefix="/guide", tags=["Security Guide"])

CATEGORY_IDS = {c["id"] for c in CATEGORIES}


@router.get("/categories")
def list_categories():
    return {"data": [{"id": "all", "label": "All Tips"}] + CATEGORIES}


@router.get("/tips")
def list_tips(category: Optional[str] = Query(None)):
    if category and category != "all" and category not in CATEGORY_IDS:
        raise HTTPException(status_code=404, detail="Unknown category")

    tips = get_tips(category)
    return {
        "count": len(tips),
        "by_priority": {
            level: sum(1 for t in tips if t["priority"] == level)
            for level in ("high", "medium", "low")
        },
        "data": tips,
    }
