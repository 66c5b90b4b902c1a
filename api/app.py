"""
HTTP Gateway

FastAPI application exposing post content retrieval and two operational
endpoints for the shared access token. Endpoints are plain `def`
functions, so each request runs on its own worker thread.
"""

import hmac
import time
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.schemas import ContentRequest, ContentResponse, TokenRefreshResponse, TokenStatusResponse
from config import settings
from services.protocols import ContentFetcher, TokenProvider
from utils.exceptions import GatewayError, TokenError
from utils.helpers import format_duration, normalize_content
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


# =============================================================================
# Dependencies
# =============================================================================

def get_token_manager(request: Request) -> TokenProvider:
    return request.app.state.token_manager


def get_content_client(request: Request) -> ContentFetcher:
    return request.app.state.content_client


def require_admin_key(
    request: Request,
    x_admin_key: Optional[str] = Header(None, alias=settings.ADMIN_KEY_HEADER)
) -> None:
    """Reject the request unless it carries the admin key. No-op when no key is configured."""
    expected = request.app.state.admin_api_key
    if not expected:
        return
    if not x_admin_key or not hmac.compare_digest(x_admin_key, expected):
        raise HTTPException(status_code=401, detail="Unauthorized")


# =============================================================================
# Routes
# =============================================================================

@router.post(
    "/content",
    response_model=ContentResponse,
    response_model_exclude_none=True,
    tags=["content"],
    summary="Get content from the content platform",
    responses={400: {"description": "Bad request"}, 500: {"description": "Internal server error"}},
)
def get_content(
    body: ContentRequest = Body(...),
    content_client: ContentFetcher = Depends(get_content_client)
) -> Any:
    """Retrieves the value of the post's `content` mapping field, as HTML or plain text."""
    if not body.post_id:
        raise HTTPException(status_code=400, detail="Post ID is required")

    output_format = body.format or settings.DEFAULT_FORMAT
    if output_format not in settings.SUPPORTED_FORMATS:
        raise HTTPException(status_code=400, detail="Format must be 'html' or 'text'")

    try:
        post = content_client.fetch_content(body.post_id)
    except GatewayError as e:
        logger.error(f"Error fetching content for post {body.post_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching content: {e}")

    processed = normalize_content(post.content, output_format)

    return ContentResponse(
        content=processed,
        format=output_format,
        post_id=body.post_id,
        title=post.title or None,
        char_count=len(processed),
    )


@router.get(
    "/token/refresh",
    response_model=TokenRefreshResponse,
    tags=["token"],
    summary="Force a token refresh",
    dependencies=[Depends(require_admin_key)],
)
def handle_token_refresh(token_manager: TokenProvider = Depends(get_token_manager)) -> Any:
    try:
        token_manager.refresh_token()
    except TokenError as e:
        raise HTTPException(status_code=500, detail=f"Failed to refresh token: {e}")

    return TokenRefreshResponse(status="success", message="Token refreshed successfully")


@router.get(
    "/token/status",
    response_model=TokenStatusResponse,
    tags=["token"],
    summary="Show the current token state",
    dependencies=[Depends(require_admin_key)],
)
def handle_token_status(token_manager: TokenProvider = Depends(get_token_manager)) -> Any:
    status = token_manager.status()
    return TokenStatusResponse(
        status="success",
        token_preview=status.token_preview,
        expiry=status.expiry,
        is_valid=status.is_valid,
        expires_in=format_duration(status.expires_in),
    )


# =============================================================================
# Application Factory
# =============================================================================

def create_app(
    token_manager: TokenProvider,
    content_client: ContentFetcher,
    admin_api_key: Optional[str] = None,
    base_path: Optional[str] = None
) -> FastAPI:
    """
    Build the gateway application.

    Args:
        token_manager: The shared token manager
        content_client: Client used to fetch post content
        admin_api_key: Key required on the /token endpoints, defaults to settings.ADMIN_API_KEY
        base_path: Prefix for all API routes, defaults to settings.API_BASE_PATH

    Returns:
        FastAPI: The configured application
    """
    app = FastAPI(
        title="Post Content Gateway",
        version="1.0",
        description="A server that retrieves post content from the content platform API",
        docs_url="/swagger",
        openapi_url="/swagger/openapi.json",
        redoc_url=None,
    )

    app.state.token_manager = token_manager
    app.state.content_client = content_client
    app.state.admin_api_key = admin_api_key if admin_api_key is not None else settings.ADMIN_API_KEY

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOWED_ORIGINS,
        allow_methods=settings.CORS_ALLOWED_METHODS,
        allow_headers=settings.CORS_ALLOWED_HEADERS,
        expose_headers=settings.CORS_EXPOSED_HEADERS,
        allow_credentials=False,
        max_age=settings.CORS_MAX_AGE,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=True)
            response = PlainTextResponse("Internal server error", status_code=500)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)")
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        logger.warning(f"Invalid request body on {request.url.path}: {exc.errors()}")
        return PlainTextResponse("Invalid request body", status_code=400)

    @app.get("/swagger/index.html", include_in_schema=False)
    def swagger_index():
        return RedirectResponse(url=app.docs_url)

    app.include_router(router, prefix=base_path if base_path is not None else settings.API_BASE_PATH)
    return app
