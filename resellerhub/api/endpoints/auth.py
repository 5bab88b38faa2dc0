import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from resellerhub.db.session import get_db
from resellerhub.crud import crud_user
from resellerhub.core.security import verify_password, create_access_token
from resellerhub.schemas.token import Token

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/login", response_model=Token)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """
    OAuth2 compatible token login, get an access token for future requests.
    """
    incorrect = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Incorrect email or password", # Keep generic for security
        headers={"WWW-Authenticate": "Bearer"},
    )
    user = crud_user.get_user_by_email(db, email=form_data.username)
    if not user or not user.hashed_password:
        logger.info(f"Login rejected for {form_data.username}: unknown user or no password set")
        raise incorrect
    if not verify_password(form_data.password, user.hashed_password):
        logger.info(f"Login rejected for {form_data.username}: wrong password")
        raise incorrect

    access_token = create_access_token(
        data={"sub": user.email, "role": user.role} # "sub" is the standard subject claim
    )
    return {"access_token": access_token, "token_type": "bearer"}
