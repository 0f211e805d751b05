from .assets_api import router as assets_api_router
from .auth_api import router as auth_api_router
from .borrowers_api import router as borrowers_api_router
from .dashboard_api import router as dashboard_api_router
from .loans_api import router as loans_api_router
from .maintenance_api import router as maintenance_api_router

ALL_ROUTERS = (
    auth_api_router,
    assets_api_router,
    borrowers_api_router,
    loans_api_router,
    maintenance_api_router,
    dashboard_api_router,
)
