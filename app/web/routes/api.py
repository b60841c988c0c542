"""JSON API routes."""
from __future__ import annotations

from fastapi import APIRouter

from app.web.routes import auth
from app.web.routes import parents

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(parents.router, prefix="/parents", tags=["parents"])
