"""
API routes.
"""

from fastapi import APIRouter

from portfolio_api.api.routes import auth, comments, forums, projects, search

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(forums.router, prefix="/forums", tags=["Forums"])
router.include_router(comments.router, prefix="/comments", tags=["Comments"])
router.include_router(search.router, tags=["Search"])
