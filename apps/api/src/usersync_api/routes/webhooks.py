"""Clerk webhook routes."""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from usersync.infra.clerk import WebhookVerificationError, WebhookVerifier
from usersync.services import WebhookConfigurationError, WebhookIngestionService, ingest_webhook
from usersync_api.config import Settings
from usersync_api.models.responses import ErrorResponse, WebhookResponse
from usersync_api.services import get_app_settings, get_ingestion_service, get_webhook_verifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post(
    "/clerk",
    response_model=WebhookResponse,
    summary="Handle Clerk webhooks",
    description=(
        "Verifies the Svix signature of a Clerk event and upserts the local user "
        "record for user.created and user.updated. Other event types are acknowledged "
        "without changes."
    ),
    responses={400: {"model": ErrorResponse, "description": "Secret not configured or verification failed"}},
)
async def clerk_webhook(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    verifier: WebhookVerifier = Depends(get_webhook_verifier),
    service: WebhookIngestionService = Depends(get_ingestion_service),
) -> WebhookResponse | JSONResponse:
    # Signatures cover the exact bytes sent, so the body must not be re-serialized
    payload = await request.body()

    try:
        result = await run_in_threadpool(
            ingest_webhook,
            payload,
            request.headers,
            settings.clerk_webhook_secret,
            verifier,
            service,
        )
    except (WebhookConfigurationError, WebhookVerificationError) as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)})

    logger.debug("Webhook %s handled: %s", result.event_type, result.status)
    return WebhookResponse(success=True)
