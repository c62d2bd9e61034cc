"""
Central API router for the form builder.

Every resource router is mounted on ``main_router``, which the application
factory includes under the configured API prefix.
"""

from typing import Dict

from fastapi import APIRouter

from formbuilder.common.logger import get_logger
from formbuilder.controllers.forms_controller import router as forms_router
from formbuilder.controllers.responses_controller import router as responses_router

logger = get_logger("api")

# Create main API router
main_router = APIRouter()

# Routers mounted on the main router, by resource name
registered_routers: Dict[str, APIRouter] = {}


def register_router(name: str, router: APIRouter) -> None:
    """
    Mount a resource router on the main API router.

    Args:
        name: Resource name, used as the path prefix and the OpenAPI tag
        router: Router holding the resource's endpoints
    """
    if name in registered_routers:
        logger.warning(f"Router '{name}' already registered, overwriting")

    main_router.include_router(router, prefix=f"/{name}", tags=[name])
    registered_routers[name] = router
    logger.debug(f"Registered router '{name}' with {len(router.routes)} routes")


register_router("forms", forms_router)
register_router("responses", responses_router)
