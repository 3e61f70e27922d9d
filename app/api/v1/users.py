"""Admin user management endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.api.v1.auth import get_user_store, page_params, require_admin
from app.models import RoleName
from app.schemas.auth import AuthClaims
from app.schemas.common import Page
from app.schemas.user import UserResponse, UserUpdateRequest
from app.services import users as user_service
from app.stores import UserStore

router = APIRouter()

AdminClaims = Annotated[AuthClaims, Depends(require_admin)]
Store = Annotated[UserStore, Depends(get_user_store)]
Paging = Annotated[tuple[int, int], Depends(page_params)]


def _page(items, page: int, size: int, total: int) -> Page[UserResponse]:
    return Page[UserResponse].build(
        [UserResponse.model_validate(u) for u in items], page, size, total
    )


@router.get("", response_model=Page[UserResponse])
def list_users(_admin: AdminClaims, store: Store, paging: Paging) -> Page[UserResponse]:
    """List all users (admin only)."""
    page, size = paging
    items, total = store.find_all(page, size)
    return _page(items, page, size, total)


@router.get("/active", response_model=Page[UserResponse])
def list_active_users(_admin: AdminClaims, store: Store, paging: Paging) -> Page[UserResponse]:
    page, size = paging
    items, total = store.find_active(page, size)
    return _page(items, page, size, total)


@router.get("/search", response_model=Page[UserResponse])
def search_users(
    q: Annotated[str, Query(min_length=1, max_length=100)],
    _admin: AdminClaims,
    store: Store,
    paging: Paging,
) -> Page[UserResponse]:
    page, size = paging
    items, total = store.search(q, page, size)
    return _page(items, page, size, total)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, _admin: AdminClaims, store: Store) -> UserResponse:
    return UserResponse.model_validate(user_service.get_user(store, user_id))


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int, body: UserUpdateRequest, _admin: AdminClaims, store: Store
) -> UserResponse:
    return UserResponse.model_validate(user_service.update_user(store, user_id, body))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_user(
    user_id: int,
    _admin: AdminClaims,
    store: Store,
    permanent: Annotated[bool, Query(description="Hard-delete instead of deactivating")] = False,
) -> None:
    """Deactivate a user; with permanent=true delete the account and its orders."""
    if permanent:
        user_service.delete_user_permanently(store, user_id)
    else:
        user_service.set_active(store, user_id, False)


@router.patch("/{user_id}/activate", response_model=UserResponse)
def activate_user(user_id: int, _admin: AdminClaims, store: Store) -> UserResponse:
    return UserResponse.model_validate(user_service.set_active(store, user_id, True))


@router.post("/{user_id}/roles/{role_name}", response_model=UserResponse)
def assign_role(
    user_id: int, role_name: RoleName, _admin: AdminClaims, store: Store
) -> UserResponse:
    return UserResponse.model_validate(user_service.assign_role(store, user_id, role_name))


@router.delete("/{user_id}/roles/{role_name}", response_model=UserResponse)
def remove_role(
    user_id: int, role_name: RoleName, _admin: AdminClaims, store: Store
) -> UserResponse:
    return UserResponse.model_validate(user_service.remove_role(store, user_id, role_name))
