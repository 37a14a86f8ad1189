from typing import Optional

from fastapi import APIRouter, Depends, status

from docs_admin.dependencies import get_diagnostics, get_directory, get_identity, require_admin
from docs_admin.schemas.tokens import SessionClaim
from docs_admin.schemas.users import UserCreate, UserStatusUpdate
from docs_admin.services.diagnostics import Diagnostics
from docs_admin.services.directory import DirectoryService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/users")
def list_users(
    caller: Optional[SessionClaim] = Depends(get_identity),
    directory: DirectoryService = Depends(get_directory),
) -> dict:
    users = directory.list_users(caller)
    return {
        "success": True,
        "message": "Users retrieved successfully.",
        "data": {"users": [user.model_dump() for user in users]},
    }


@router.post("/users", status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    caller: Optional[SessionClaim] = Depends(get_identity),
    directory: DirectoryService = Depends(get_directory),
) -> dict:
    user = directory.create_user(caller, payload)
    return {
        "success": True,
        "message": "User created successfully.",
        "data": {"user": user.model_dump()},
    }


@router.patch("/users/{user_id}")
def update_user_status(
    user_id: str,
    payload: UserStatusUpdate,
    caller: Optional[SessionClaim] = Depends(get_identity),
    directory: DirectoryService = Depends(get_directory),
) -> dict:
    user = directory.set_active(caller, user_id, payload.is_active)
    state = "activated" if payload.is_active else "deactivated"
    return {
        "success": True,
        "message": f"User {state} successfully.",
        "data": {"user": user.model_dump()},
    }


@router.delete("/users/{user_id}")
def delete_user(
    user_id: str,
    caller: Optional[SessionClaim] = Depends(get_identity),
    directory: DirectoryService = Depends(get_directory),
) -> dict:
    directory.delete_user(caller, user_id)
    return {"success": True, "message": "User deleted successfully"}


@router.get("/database")
def database_view(
    diagnostics: Diagnostics = Depends(get_diagnostics),
) -> dict:
    return {"success": True, "data": diagnostics.database_view()}


@router.get("/database/json")
def database_dump(
    diagnostics: Diagnostics = Depends(get_diagnostics),
) -> dict:
    return diagnostics.database_dump()
