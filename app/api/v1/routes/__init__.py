from fastapi import APIRouter

# Import all the individual routers
from . import core, network

api_router = APIRouter()
api_router.include_router(core.router, prefix="/core", tags=["core"])
api_router.include_router(network.router, prefix="/network", tags=["network"])
