"""Tech-stack info route.

Every pet store implementation exposes `/api/infos` so the shared front-end
can show which runtime, framework and database served the page, plus the
instance identity used during blue/green deployments.
"""

import platform

import fastapi
from fastapi import APIRouter, Request

from ..schemas import TechStack, TechStackInfo

router = APIRouter()


@router.get("/infos", response_model=TechStackInfo)
def get_infos(request: Request):
    """Describe this instance and the stack it runs on.

    The database name comes from the descriptor resolved at startup, not from
    probing the connection.

    Returns:
        TechStackInfo: uuid, version, deploymentColor and techStack.
    """
    settings = request.app.state.settings
    descriptor = request.app.state.descriptor
    python_version = platform.python_version()

    return TechStackInfo(
        uuid=settings.instance_uuid,
        version=settings.app_version,
        deployment_color=settings.app_color,
        tech_stack=TechStack(
            framework="FastAPI",
            version=fastapi.__version__,
            language="Python",
            language_version=python_version,
            runtime=f"{platform.python_implementation()} {python_version}",
            database=descriptor.driver_kind.display_name,
        ),
    )
