# fleet_manager/routers/deps.py
"""
Shared router dependencies: bearer-token session, capability gate, and the
mapping from service failures to HTTP errors.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from fleet_manager.database import get_db
from fleet_manager.services.auth_service import AuthSession, open_session
from fleet_manager.services.authorization import Capability, authorize
from fleet_manager.services.outcomes import Failure, Unauthenticated, is_failure

bearer_scheme = HTTPBearer(auto_error=False)


def raise_for_failure(result):
    """Return `result` unchanged, or raise the HTTPException for a failure."""
    if is_failure(result):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(result, Unauthenticated) else None
        raise HTTPException(status_code=result.status_code, detail=result.message, headers=headers)
    return result


def get_session(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
):
    """AuthSession for the request, None without a bearer token, or the
    Unauthenticated failure explaining why the token was rejected."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None
    return open_session(db, credentials.credentials)


def require(capability: Capability):
    """Route dependency: resolves the session and checks `capability`."""
    def dependency(session: AuthSession = Depends(get_session)) -> AuthSession:
        if isinstance(session, Failure):
            raise_for_failure(session)
        decision = authorize(session.principal if session else None, capability)
        if not decision.allowed:
            raise_for_failure(decision.reason)
        return session

    return dependency


def require_session(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthSession:
    """Like get_session, but reports why the token was rejected (401)."""
    if credentials is None:
        raise_for_failure(Unauthenticated("No token, authorization denied"))
    return raise_for_failure(open_session(db, credentials.credentials))
