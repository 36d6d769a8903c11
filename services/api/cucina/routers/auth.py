from fastapi import APIRouter, Depends, HTTPException, status

from ..deps import get_current_user_id, get_kitchen
from ..schemas import Credentials, UserOut
from ..services.kitchen import Kitchen

router = APIRouter()


@router.post("/signup", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def signup(creds: Credentials, kitchen: Kitchen = Depends(get_kitchen)):
    return kitchen.signup(creds.username, creds.password)


@router.post("/login", response_model=UserOut)
def login(creds: Credentials, kitchen: Kitchen = Depends(get_kitchen)):
    user = kitchen.login(creds.username, creds.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(kitchen: Kitchen = Depends(get_kitchen)):
    kitchen.logout()


@router.get("/me", response_model=UserOut)
def me(
    user_id: str = Depends(get_current_user_id),
    kitchen: Kitchen = Depends(get_kitchen),
):
    return kitchen.get_user(user_id)
