from fastapi import APIRouter, Depends, Query
from typing import Optional

from cycleparadise.core.dependencies import get_package_repository
from cycleparadise.core.errors import NotFoundError
from cycleparadise.repositories.catalog import TourPackageRepository
from cycleparadise.schemas import PackageResponse, PackageListResponse, PackageSummary

router = APIRouter(prefix="/api/packages", tags=["packages"])


@router.get("", response_model=PackageListResponse)
def get_packages(
	packages: TourPackageRepository = Depends(get_package_repository),
	page: int = Query(1, ge=1),
	per_page: int = Query(20, ge=1, le=100, alias="perPage"),
	region: Optional[str] = None,
	featured: Optional[bool] = None,
):
	"""Active tour packages, featured first"""
	rows, total = packages.find_active(page=page, per_page=per_page, region=region, featured=featured)
	return PackageListResponse(
		packages=[PackageSummary.model_validate(p) for p in rows],
		total=total,
		page=page,
		per_page=per_page,
	)


@router.get("/{slug}", response_model=PackageResponse)
def get_package(slug: str, packages: TourPackageRepository = Depends(get_package_repository)):
	tour_package = packages.find_by_slug(slug)
	if tour_package is None or not tour_package.is_active:
		raise NotFoundError("Package not found", code="PACKAGE_NOT_FOUND")
	return PackageResponse.model_validate(tour_package)
