"""
Nutrition API Router.

`GET /search` proxies FatSecret `foods.search` and returns its JSON verbatim.
"""

import logging
from typing import Any, Dict, Optional, Protocol

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import JSONResponse

from salus_libs.fatsecret.client import NutritionAPIError

logger = logging.getLogger(__name__)


class FoodSearchClient(Protocol):
    async def search_foods(
        self, query: str, page_number: Optional[int] = None, max_results: Optional[int] = None
    ) -> Dict[str, Any]: ...


def build_nutrition_router(client: FoodSearchClient) -> APIRouter:
    router = APIRouter()

    @router.get("/search")
    async def search_foods(
        query: str = "",
        page_number: Optional[int] = Query(default=None, ge=0),
        max_results: Optional[int] = Query(default=None, ge=1, le=50),
    ):
        if not query.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing 'query' parameter")

        try:
            result = await client.search_foods(query.strip(), page_number=page_number, max_results=max_results)
        except NutritionAPIError as e:
            logger.error("Food search failed for %r: %s", query, e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error searching foods: {e}",
            ) from e
        return JSONResponse(content=result)

    return router
