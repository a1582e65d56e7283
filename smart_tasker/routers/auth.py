from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db, require_store_ready
from ..schemas.user import Credentials, LoginResponse, MessageResponse
from ..services import auth as auth_service

router = APIRouter(dependencies=[Depends(require_store_ready)])


@router.post("/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def signup(credentials: Credentials, db: Session = Depends(get_db)):
    """Create a new user account."""
    auth_service.signup(db, credentials.email, credentials.password)
    return {"message": "User registered successfully"}


@router.post("/login", response_model=LoginResponse)
def login(credentials: Credentials, db: Session = Depends(get_db)):
    """Verify credentials. No token or session is issued."""
    user = auth_service.login(db, credentials.email, credentials.password)
    return {"message": "Login successful", "email": user.email}
