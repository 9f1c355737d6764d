from __future__ import annotations

from django.utils.deprecation import MiddlewareMixin

SWAGGER_CDN = "https://cdn.jsdelivr.net"


class ContentSecurityPolicyMiddleware(MiddlewareMixin):
    """Add a strict Content-Security-Policy header.

    The service renders JSON and the browsable API only, so no inline
    scripts or styles are allowed. The Swagger UI at /docs/ loads its
    bundle from the jsDelivr CDN and injects one small inline <style>
    block, so that path alone allows the CDN and the style hash.
    """

    def process_response(self, request, response):  # noqa: D401
        script_src = "'self'"
        style_src = "'self'"
        img_src = "'self' data:"

        if request.path == "/docs/":
            script_src = f"'self' {SWAGGER_CDN}"
            # Hash taken from the browser CSP error suggestion
            style_src = (
                f"'self' {SWAGGER_CDN} "
                "'sha256-RL3ie0nH+Lzz2YNqQN83mnU0J1ot4QL7b99vMdIX99w=' "
                "'unsafe-hashes'"
            )
            img_src = f"{img_src} {SWAGGER_CDN}"

        csp = (
            "default-src 'self'; "
            f"img-src {img_src}; "
            f"script-src {script_src}; "
            f"style-src {style_src}; "
            "connect-src 'self'; "
            "frame-ancestors 'none'"
        )
        response["Content-Security-Policy"] = csp
        return response
