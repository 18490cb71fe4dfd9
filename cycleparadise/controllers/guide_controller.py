from fastapi import APIRouter, Depends, Query
from typing import Optional

from cycleparadise.core.dependencies import get_guide_repository
from cycleparadise.core.errors import NotFoundError
from cycleparadise.repositories.catalog import CyclingGuideRepository
from cycleparadise.schemas import GuideResponse, GuideListResponse, GuideSummary

router = APIRouter(prefix="/api/guides", tags=["guides"])


@router.get("", response_model=GuideListResponse)
def get_guides(
	guides: CyclingGuideRepository = Depends(get_guide_repository),
	page: int = Query(1, ge=1),
	per_page: int = Query(20, ge=1, le=100, alias="perPage"),
	region: Optional[str] = None,
):
	rows, total = guides.find_published(page=page, per_page=per_page, region=region)
	return GuideListResponse(
		guides=[GuideSummary.model_validate(g) for g in rows],
		total=total,
		page=page,
		per_page=per_page,
	)


@router.get("/{slug}", response_model=GuideResponse)
def get_guide(slug: str, guides: CyclingGuideRepository = Depends(get_guide_repository)):
	guide = guides.find_by_slug(slug)
	if guide is None:
		raise NotFoundError("Guide not found", code="GUIDE_NOT_FOUND")
	return GuideResponse.model_validate(guide)
