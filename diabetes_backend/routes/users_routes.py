from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from diabetes_backend.auth.deps import require_admin
from diabetes_backend.db.deps import get_store
from diabetes_backend.schemas.users import UserCreate, UserOut
from diabetes_backend.services.store import DataStore

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserOut])
def list_users(store: DataStore = Depends(get_store)):
    return store.list_users()


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, store: DataStore = Depends(get_store)):
    return store.create_user(payload.name.strip(), age=payload.age, sex=payload.sex)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, store: DataStore = Depends(get_store)):
    user = store.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    store: DataStore = Depends(get_store),
    _admin: dict = Depends(require_admin),
):
    """Delete a user together with their diagnoses."""
    if not store.delete_user(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return None
