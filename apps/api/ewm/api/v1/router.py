from fastapi import APIRouter

from ewm.api.v1 import admin_events, admin_users, categories, comments, events, private_events, requests

router = APIRouter()
router.include_router(events.router)
router.include_router(private_events.router)
router.include_router(requests.router)
router.include_router(admin_events.router)
router.include_router(admin_users.router)
router.include_router(categories.router)
router.include_router(categories.admin_router)
router.include_router(comments.router)
router.include_router(comments.admin_router)
router.include_router(comments.public_router)
