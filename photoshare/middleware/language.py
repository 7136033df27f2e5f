"""
PhotoShare Backend - Language Middleware
==========================================

What:  Resolves the response language from Accept-Language (ko, en or ja;
       default from settings) and stores it in `language_var` for
       `i18n.translate()`. The chosen language is echoed in
       Content-Language.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from photoshare.i18n import language_var, resolve_language


class LanguageMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        lang = resolve_language(request.headers.get("Accept-Language"))
        language_var.set(lang)
        request.state.language = lang

        response = await call_next(request)
        response.headers["Content-Language"] = lang
        return response
