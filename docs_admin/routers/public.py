from fastapi import APIRouter, Depends, Response

from docs_admin.dependencies import get_diagnostics, get_user_store
from docs_admin.services.diagnostics import Diagnostics
from docs_admin.services.users import UserStore

router = APIRouter(tags=["public"])


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.post("/init")
def initialize(users: UserStore = Depends(get_user_store)) -> dict:
    created = users.seed_demo_users()
    message = "Default users initialized successfully" if created else "Users already exist"
    return {"success": True, "message": message, "created": created}


@router.get("/public/stats")
def public_stats(
    response: Response, diagnostics: Diagnostics = Depends(get_diagnostics)
) -> dict:
    response.headers["Cache-Control"] = "public, max-age=60"
    return diagnostics.public_stats()
