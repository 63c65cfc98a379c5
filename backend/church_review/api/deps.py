"""API Dependencies - Common dependencies for routes"""
from typing import Optional
from fastapi import Header, HTTPException, Request, status
from pydantic import ValidationError

from ..domain.models import Actor
from ..services.church_review_service import ChurchReviewService
from ..utils.logger import set_correlation_id
from ..utils.idgen import generate_correlation_id


async def get_correlation_id_dep(
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-Id")
) -> str:
    """
    Get or generate correlation ID for request tracing

    If client provides X-Correlation-Id, use it.
    Otherwise generate a new one.
    """
    correlation_id = x_correlation_id or generate_correlation_id()
    set_correlation_id(correlation_id)
    return correlation_id


async def get_actor_dep(
    x_actor_uid: Optional[str] = Header(None, alias="X-Actor-Uid"),
    x_actor_email: Optional[str] = Header(None, alias="X-Actor-Email"),
    x_actor_name: Optional[str] = Header(None, alias="X-Actor-Name"),
    x_actor_role: Optional[str] = Header(None, alias="X-Actor-Role"),
    x_actor_diocese: Optional[str] = Header(None, alias="X-Actor-Diocese"),
) -> Actor:
    """
    Build the acting user from gateway headers

    Authentication happens upstream; the gateway forwards the verified
    identity in X-Actor-* headers.

    Raises:
        HTTPException: 401 if identity headers are missing or malformed
    """
    if not (x_actor_uid and x_actor_email and x_actor_role and x_actor_diocese):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": {"code": "AUTHENTICATION_ERROR", "message": "Actor identity headers are missing"}},
        )

    try:
        return Actor(
            uid=x_actor_uid,
            email=x_actor_email,
            name=x_actor_name,
            role=x_actor_role,
            diocese=x_actor_diocese,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": {
                    "code": "AUTHENTICATION_ERROR",
                    "message": "Actor identity headers are invalid",
                    "details": {"errors": e.errors(include_url=False, include_context=False)}
                }
            },
        )


def get_review_service_dep(request: Request) -> ChurchReviewService:
    """Review service built once at startup"""
    return request.app.state.review_service
