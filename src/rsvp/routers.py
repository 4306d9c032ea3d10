from fastapi import APIRouter

from .features.admin_list.router import router as admin_list_router
from .features.get_party.router import router as get_party_router
from .features.get_rsvp_status.router import router as get_rsvp_status_router
from .features.submit_general_rsvp.router import router as submit_general_rsvp_router
from .features.submit_rsvp.router import router as submit_rsvp_router

router = APIRouter()

router.include_router(get_party_router)
router.include_router(get_rsvp_status_router)
router.include_router(submit_rsvp_router)
router.include_router(submit_general_rsvp_router)
router.include_router(admin_list_router)
