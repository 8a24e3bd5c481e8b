from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import ValidationError
from app.core.database import SessionLocal
from app.core.security import decode_access_token
from app.schemas.token import TokenPayload
from app.schemas.user import CurrentUser

http_bearer = HTTPBearer()
optional_http_bearer = HTTPBearer(auto_error=False)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def _user_from_token(token: str) -> CurrentUser:
    try:
        payload = decode_access_token(token)
        token_data = TokenPayload(**payload)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token. Please log in again.",
        )
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    if token_data.user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return CurrentUser(id=token_data.user_id)

def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(http_bearer)
) -> CurrentUser:
    return _user_from_token(credentials.credentials)

def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_http_bearer)
) -> Optional[CurrentUser]:
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials)
