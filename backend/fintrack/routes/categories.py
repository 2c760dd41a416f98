from fastapi import APIRouter, Depends, HTTPException, Response
from typing import List

from fintrack.dependencies import get_storage
from fintrack.schemas import Category, CategoryCreate, CategoryUpdate
from fintrack.storage import StorageInterface
from fintrack.validation import check_category_deletable

router = APIRouter()


@router.get("/", response_model=List[Category])
def list_categories(storage: StorageInterface = Depends(get_storage)):
    """List all categories."""
    return storage.list_categories()


@router.get("/{category_id}", response_model=Category)
def get_category(category_id: str, storage: StorageInterface = Depends(get_storage)):
    """Get a specific category by ID."""
    category = storage.get_category(category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.post("/", response_model=Category, status_code=201)
def create_category(category: CategoryCreate, storage: StorageInterface = Depends(get_storage)):
    """Create a new category."""
    return storage.create_category(category)


@router.api_route("/{category_id}", methods=["PUT", "PATCH"], response_model=Category)
def update_category(
    category_id: str,
    updates: CategoryUpdate,
    storage: StorageInterface = Depends(get_storage),
):
    """Update a category."""
    category = storage.update_category(category_id, updates)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: str, storage: StorageInterface = Depends(get_storage)):
    """Delete a category. Default categories are protected."""
    category = storage.get_category(category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    check_category_deletable(category)

    if not storage.delete_category(category_id):
        raise HTTPException(status_code=404, detail="Category not found")
    return Response(status_code=204)
