"""Page/per_page slicing for list endpoints."""
import math
from typing import Any, Dict, List

from sqlalchemy.orm import Query

from feedback_board.config import settings


def clamp_per_page(per_page: int) -> int:
    return max(1, min(per_page, settings.MAX_PER_PAGE))


def page_meta(total: int, page: int, per_page: int) -> Dict[str, int]:
    return {
        "current_page": page,
        "per_page": per_page,
        "total": total,
        "last_page": max(1, math.ceil(total / per_page)),
    }


def paginate(query: Query, page: int, per_page: int) -> Dict[str, Any]:
    """Run ``query`` for one page and return the rows with the page envelope fields."""
    page = max(1, page)
    per_page = clamp_per_page(per_page)
    total = query.order_by(None).count()
    rows: List[Any] = query.offset((page - 1) * per_page).limit(per_page).all()
    return {"data": rows, **page_meta(total, page, per_page)}
