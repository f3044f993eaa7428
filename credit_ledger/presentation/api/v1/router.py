from fastapi import APIRouter

from .buyer import buyer_router
from .credit import credit_router
from .health import health_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(credit_router, tags=["Credits"])
router.include_router(buyer_router, tags=["Buyers"])
