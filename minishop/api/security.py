# minishop/api/security.py
import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from minishop.data.database import get_db
from minishop.data.models.user import UserModel
from minishop.domain.roles import is_authorized
from minishop.repos.user_repo import UserRepo
from minishop.utils.settings import ACCESS_TOKEN_SECRET, JWT_ALGORITHM
from minishop.utils.logging import get_logger

logger = get_logger(__name__)

security = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, ACCESS_TOKEN_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> UserModel:
    if not creds:
        raise HTTPException(status_code=401, detail="Unauthorized")
    payload = decode_access_token(creds.credentials)
    public_id = payload.get("sub")
    if not public_id:
        raise HTTPException(status_code=401, detail="Invalid or corrupt access token")
    user = UserRepo(db).get_user(public_id)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid or corrupt access token")
    return user


def require_roles(*required: str):
    """
    Dependency factory: the caller's role set is read from the database on
    every request and must intersect ``required``.
    """

    def dependency(
        user: UserModel = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> UserModel:
        granted = UserRepo(db).get_role_names(user.public_id)
        if not is_authorized(granted, required):
            logger.info(f"User {user.public_id} with roles {sorted(granted)} denied, needs one of {required}")
            raise HTTPException(
                status_code=403,
                detail="Access denied! You do not have access to this resource.",
            )
        return user

    return dependency
