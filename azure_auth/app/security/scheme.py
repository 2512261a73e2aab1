"""
FastAPI security dependency backed by the Azure AD token verifier.
"""

import inspect
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from shared.errors import ValidationCallbackError
from shared.logging import get_logger, request_id_var
from ..validation import TokenVerifier, VerificationOutcome, Verified, VerifyOptions
from .extract import extract_token


@dataclass
class ErrorContext:
    """Everything needed to build the HTTP error for a rejected request."""

    status_code: int
    message: Optional[str]
    headers: Dict[str, str] = field(default_factory=dict)
    outcome: Optional[VerificationOutcome] = None


ErrorFunc = Callable[[ErrorContext], Optional[ErrorContext]]
ResponseFunc = Callable[[Request, Response], Any]


class AzureADBearer:
    """Dependency that authenticates a request or raises HTTPException.

    Usage::

        bearer = AzureADBearer(verifier, options)

        @app.get("/me")
        async def me(auth: Verified = Depends(bearer)):
            return auth.credentials

    When a ``response_func`` is given, call ``install(app)`` so it runs on
    every response to an authenticated request. It may be sync or async and
    may return a replacement response; if it raises, the client gets a 500.
    """

    def __init__(
        self,
        verifier: TokenVerifier,
        options: VerifyOptions,
        *,
        error_func: Optional[ErrorFunc] = None,
        response_func: Optional[ResponseFunc] = None,
        header_key: Optional[str] = "authorization",
        cookie_key: Optional[str] = "token",
        url_key: Optional[str] = "token",
        token_type: str = "Bearer",
    ):
        self.verifier = verifier
        self.options = options
        self.error_func = error_func
        self.response_func = response_func
        self.header_key = header_key
        self.cookie_key = cookie_key
        self.url_key = url_key
        self.token_type = token_type
        self.logger = get_logger("azure_auth.security")

    async def __call__(self, request: Request) -> Verified:
        token = extract_token(
            request,
            header_key=self.header_key,
            cookie_key=self.cookie_key,
            url_key=self.url_key,
            token_type=self.token_type,
        )
        if not token:
            raise self._build_error(ErrorContext(status_code=401, message=None))

        outcome = await self.verifier.verify(token, self.options)
        if isinstance(outcome, Verified):
            request.state.auth_credentials = outcome.credentials
            request.state.auth_token = outcome.token
            return outcome

        error = outcome.to_error()
        self.logger.info("Request rejected", path=request.url.path, code=error.code)
        raise self._build_error(
            ErrorContext(status_code=error.status_code, message=error.message, outcome=outcome)
        )

    def _build_error(self, context: ErrorContext) -> HTTPException:
        """Build the HTTPException, letting error_func rewrite it first."""
        if context.status_code == 401:
            context.headers.setdefault("WWW-Authenticate", self.token_type)

        if self.error_func is not None:
            custom = self.error_func(replace(context, headers=dict(context.headers)))
            if custom is not None:
                context = custom

        return HTTPException(
            status_code=context.status_code,
            detail=context.message or "Unauthorized",
            headers=context.headers or None,
        )

    def install(self, app: FastAPI) -> None:
        """Register the response hook on ``app``."""

        @app.middleware("http")
        async def run_response_func(request: Request, call_next):
            response = await call_next(request)
            if self.response_func is None or getattr(request.state, "auth_credentials", None) is None:
                return response
            return await self._apply_response_func(request, response)

    async def _apply_response_func(self, request: Request, response: Response) -> Response:
        try:
            result = self.response_func(request, response)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            error = ValidationCallbackError(exc)
            self.logger.error("Response hook failed", path=request.url.path, error=str(exc))
            return JSONResponse(
                status_code=error.status_code,
                content=error.to_response(request_id_var.get()).model_dump(),
            )
        return result if isinstance(result, Response) else response
