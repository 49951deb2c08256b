"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from fairpass.backend.api.v1.endpoints import (
    analytics,
    auth,
    events,
    geo,
    integrations,
    portal,
    public,
    registrations,
    scanner,
    templates,
    universities,
    users,
)

router = APIRouter()

# Unauthenticated
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(public.router, prefix="/public", tags=["public"])

# Admin
router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(registrations.router, prefix="/registrations", tags=["registrations"])
router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
router.include_router(scanner.router, prefix="/scanner", tags=["scanner"])
router.include_router(universities.router, prefix="/universities", tags=["universities"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(templates.router, prefix="/templates", tags=["templates"])
router.include_router(geo.router, prefix="/geo", tags=["geo"])
router.include_router(integrations.router, prefix="/integrations", tags=["integrations"])

# University portal
router.include_router(portal.router, prefix="/portal", tags=["portal"])
