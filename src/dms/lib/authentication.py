import logging
import os
from datetime import datetime
from enum import Enum
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, Security
from fastapi.security import APIKeyCookie, APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from dms import deps
from dms.lib.logging.context import format_raised_exception_info_as_dict, logging_context, save_to_logging_context
from dms.lib.types.authentication import UserData
from dms.models.access_key import AccessKey
from dms.models.enums.user_role import UserRole
from dms.models.user import User

JWT_SIGNING_KEY = os.getenv("JWT_SIGNING_KEY")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM") or "RS256"

ACCESS_TOKEN_NAME = "X-API-key"

logger = logging.getLogger(__name__)


class AuthenticationMethod(str, Enum):
    api_key = "api_key"
    jwt = "jwt"


####################################################################################################
# JWT authentication
####################################################################################################


def decode_jwt(token: str) -> dict:
    if not JWT_SIGNING_KEY:
        logger.warning(msg="Failed to authenticate user; No JWT signing key is configured.", extra=logging_context())
        return {}

    try:
        return jwt.decode(token, JWT_SIGNING_KEY, algorithms=[JWT_ALGORITHM], audience=JWT_AUDIENCE)
    except JWTError as ex:
        save_to_logging_context(format_raised_exception_info_as_dict(ex))
        logger.debug(msg="Failed to authenticate user; Could not decode user token.", extra=logging_context())
        return {}


class JWTBearer(HTTPBearer):
    def __init__(self, auto_error: bool = True):
        super(JWTBearer, self).__init__(auto_error=auto_error)

    async def __call__(self, request: Request):
        credentials: Optional[HTTPAuthorizationCredentials]
        try:
            credentials = await super(JWTBearer, self).__call__(request)
        except HTTPException:
            credentials = None

        if credentials:
            if not credentials.scheme == "Bearer":
                save_to_logging_context({"scheme": credentials.scheme})
                logger.info(msg="Failed to authenticate user; Invalid authentication scheme.", extra=logging_context())
                raise HTTPException(status_code=403, detail="Invalid authentication scheme.")

            token_payload = decode_jwt(credentials.credentials)

            if not token_payload:
                logger.info(msg="Failed to authenticate user; Invalid or expired token.", extra=logging_context())
                raise HTTPException(status_code=403, detail="Invalid token or expired token.")

            logger.debug(msg="Successfully acquired JWT.", extra=logging_context())
            return token_payload

        else:
            logger.debug(msg="Failed to authenticate user; No credentials were provided.", extra=logging_context())
            return None


####################################################################################################
# API key authentication
####################################################################################################

access_token_header = APIKeyHeader(name=ACCESS_TOKEN_NAME, auto_error=False)
access_token_cookie = APIKeyCookie(name=ACCESS_TOKEN_NAME, auto_error=False)


async def get_access_token(
    access_token_header: Optional[str] = Security(access_token_header),
    access_token_cookie: Optional[str] = Security(access_token_cookie),
) -> Optional[str]:
    return access_token_header or access_token_cookie


async def get_current_user_data_from_api_key(
    db: Session = Depends(deps.get_db), access_token: Optional[str] = Depends(get_access_token)
) -> Optional[UserData]:
    """
    Authenticate the owner of an unexpired API key. The key holder acts only in the role stored on the key.
    """
    access_key = _unexpired_access_key(db, access_token) if access_token is not None else None
    if access_key is None or not access_key.user.is_active:
        logger.debug(msg="Failed to authenticate user via API key.", extra=logging_context())
        return None

    user = access_key.user
    roles = [access_key.role] if access_key.role is not None else []
    save_to_logging_context(
        {
            "user": user.id,
            "active_roles": [role.name for role in roles],
            "available_roles": [role.name for role in user.roles],
        }
    )

    logger.debug(msg="Successfully authenticated API key for user.", extra=logging_context())
    return UserData(user, roles)


def _unexpired_access_key(db: Session, key_id: str) -> Optional[AccessKey]:
    access_key = db.query(AccessKey).filter(AccessKey.key_id == key_id).one_or_none()
    if access_key is not None and access_key.is_expired():
        logger.info(msg="Failed to authenticate user via API key; The key has expired.", extra=logging_context())
        return None

    return access_key


####################################################################################################
# Main authentication methods
####################################################################################################


async def get_current_user(
    api_key_user_data: Optional[UserData] = Depends(get_current_user_data_from_api_key),
    token_payload: Optional[dict] = Depends(JWTBearer()),
    db: Session = Depends(deps.get_db),
    # Custom header for the role the authenticated user would like to assume.
    # Namespaced with x_ to indicate this is a custom application header.
    x_active_roles: Optional[str] = Header(default=None),
) -> Optional[UserData]:
    save_to_logging_context({"requested_roles": x_active_roles})

    if api_key_user_data is not None:
        save_to_logging_context({"auth_method": AuthenticationMethod.api_key, "user_authenticated": True})
        logger.info(msg="Successfully authenticated user via API key.", extra=logging_context())
        return api_key_user_data

    if token_payload is None:
        save_to_logging_context({"auth_method": None, "user_authenticated": False})
        logger.info(
            msg="Failed to authenticate user; Could not acquire credentials via API key or JWT.",
            extra=logging_context(),
        )
        return None

    username: Optional[str] = token_payload.get("sub")
    save_to_logging_context({"auth_method": AuthenticationMethod.jwt})
    if username is None:
        save_to_logging_context({"user_authenticated": False})
        logger.info(msg="Failed to authenticate user; Username not present in token payload.", extra=logging_context())
        return None

    user = _active_user(db, username)
    if user is None:
        save_to_logging_context({"user_authenticated": False})
        logger.info(msg="Failed to authenticate user; No active user matches the token.", extra=logging_context())
        return None

    save_to_logging_context({"user": user.id, "user_authenticated": True})
    logger.info(msg="Successfully authenticated user via JWT.", extra=logging_context())

    active_roles = _requested_roles(user, x_active_roles)
    save_to_logging_context({"active_roles": [role.name for role in active_roles]})
    return UserData(user, active_roles)


def _active_user(db: Session, username: str) -> Optional[User]:
    # Accounts are provisioned by administrators, so an unknown subject is not signed up here.
    user = db.query(User).filter(User.username == username).one_or_none()
    if user is None or not user.is_active:
        return None

    user.last_login = datetime.now()
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _requested_roles(user: User, x_active_roles: Optional[str]) -> list[UserRole]:
    """
    Resolve the roles *user* acts in. Without an ``X-Active-Roles`` header, the user acts in every assigned role.

    :raises HTTPException: If the user requests a role they are not assigned.
    """
    save_to_logging_context({"available_roles": [role.name for role in user.roles]})
    if x_active_roles is None:
        return user.roles

    active_roles: list[UserRole] = []
    # Header lists are comma separated strings.
    for requested_role in x_active_roles.split(","):
        if requested_role not in UserRole.__members__:
            logger.debug(msg=f"Ignoring unknown requested role {requested_role}.", extra=logging_context())
            continue

        role = UserRole[requested_role]
        if role not in user.roles:
            logger.warning(msg="User requested role to which they do not belong.", extra=logging_context())
            raise HTTPException(status_code=403, detail="This user is not a member of the requested acting role.")

        active_roles.append(role)

    return active_roles
