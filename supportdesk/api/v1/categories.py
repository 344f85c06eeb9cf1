"""Category registry routes: list for everyone signed in, add/remove for admins."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from supportdesk.api.v1.auth import get_current_user, require_admin
from supportdesk.api.v1.dashboard import get_categories
from supportdesk.schemas.auth import CurrentUser
from supportdesk.schemas.category import CategoryCreate, CategoryOut
from supportdesk.schemas.task import MessageResponse
from supportdesk.services.categories import CategoryRegistry

router = APIRouter()


@router.get("", response_model=list[CategoryOut])
def list_categories(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    categories: Annotated[CategoryRegistry, Depends(get_categories)],
) -> list[CategoryOut]:
    return [CategoryOut(id=c.id, title=c.title) for c in categories.all()]


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryCreate,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    categories: Annotated[CategoryRegistry, Depends(get_categories)],
) -> CategoryOut:
    created = categories.add(body.id, body.title)
    if created is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Category already exists",
        )
    return CategoryOut(id=created.id, title=created.title)


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: str,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    categories: Annotated[CategoryRegistry, Depends(get_categories)],
) -> MessageResponse:
    """Remove a category from the registry. Existing tasks are kept but become unreachable."""
    if not categories.remove(category_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return MessageResponse(message="Category deleted successfully")
