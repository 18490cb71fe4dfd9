from fastapi import FastAPI

from cycleparadise.controllers.auth_controller import router as auth_router
from cycleparadise.controllers.booking_controller import router as booking_router
from cycleparadise.controllers.package_controller import router as package_router
from cycleparadise.controllers.guide_controller import router as guide_router
from cycleparadise.controllers.admin_booking_controller import router as admin_booking_router
from cycleparadise.controllers.dashboard_controller import router as dashboard_router


def include_app_routes(app: FastAPI) -> None:
	app.include_router(package_router)
	app.include_router(guide_router)
	app.include_router(booking_router)
	app.include_router(auth_router)
	app.include_router(admin_booking_router)
	app.include_router(dashboard_router)
