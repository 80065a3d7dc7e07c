from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from taskdesk.core.exceptions import bad_request
from taskdesk.database import get_db
from taskdesk.schemas.user import User, UserRegister, UserLogin, RegistrationResponse
from taskdesk.services.activity import ActivityService
from taskdesk.services.auth import AuthService

router = APIRouter()


@router.post("/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
def register(form: UserRegister, db: Session = Depends(get_db)):
    """Self-registration with the default role and group"""
    result = AuthService(db).register(
        form.first_name, form.last_name, form.email, form.password, form.confirm_password
    )
    if not result.success:
        raise bad_request(result.message)
    return RegistrationResponse(success=result.success, message=result.message)


@router.post("/login", response_model=User)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    user = AuthService(db).authenticate(credentials.email, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )
    ActivityService(db).log_login(user.id)
    return user


@router.post("/logout/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def logout(user_id: int, db: Session = Depends(get_db)):
    ActivityService(db).log_logout(user_id)
    return None
