import logging

from fastapi import APIRouter, Depends, Request

from app.core.config import Settings
from app.core.errors import RateLimitedError
from app.core.logging_config import anonymise
from app.core.rate_limit import RateLimiter
from app.domain.parents.services import serialize_parent
from app.domain.verification.schemas import (
    SendVerificationRequest,
    SendVerificationResponse,
    VerifyCodeRequest,
    VerifyCodeResponse,
)
from app.domain.verification.services import ChallengeIssuer, ChallengeVerifier

router = APIRouter()

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_challenge_issuer(request: Request) -> ChallengeIssuer:
    return request.app.state.challenge_issuer


def get_challenge_verifier(request: Request) -> ChallengeVerifier:
    return request.app.state.challenge_verifier


async def enforce_issue_rate_limit(request: Request) -> None:
    """Reject the request before any other work once the client hits the cap."""
    limiter: RateLimiter = request.app.state.rate_limiter
    client_host = request.client.host if request.client else "unknown"

    if not await limiter.allow(client_host):
        logger.warning("Verification rate limit exceeded for identifier %s", anonymise(client_host))
        raise RateLimitedError()


@router.post(
    "/send-verification",
    response_model=SendVerificationResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(enforce_issue_rate_limit)],
)
async def send_verification(
    payload: SendVerificationRequest,
    issuer: ChallengeIssuer = Depends(get_challenge_issuer),
    settings: Settings = Depends(get_settings),
):
    """Email a fresh one-time code to a registered parent."""
    challenge = await issuer.issue(payload.email)

    return SendVerificationResponse(
        message="Verification code sent",
        expires_in_minutes=settings.CODE_TTL_MINUTES,
        dev_code=challenge.code if settings.is_development else None,
    )


@router.post("/verify-code", response_model=VerifyCodeResponse)
async def verify_code(
    payload: VerifyCodeRequest,
    verifier: ChallengeVerifier = Depends(get_challenge_verifier),
):
    """Exchange a valid code for a session token."""
    grant = await verifier.verify(payload.email, payload.code)

    return {
        "success": True,
        "token": grant.token,
        "expires_at": grant.expires_at,
        "identity": serialize_parent(grant.parent),
    }
