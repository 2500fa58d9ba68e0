"""MPN Resolver MCP Server - classify part numbers and check drop-in replacements."""

import json
import logging
import time
from collections import Counter
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from . import __version__
from .capabilities import AttributeKindMismatch
from .config import (
    HTTP_PORT,
    LOG_LEVEL,
    MAX_BOM_PARTS,
    MAX_MPN_LENGTH,
    MAX_TEXT_LENGTH,
    RATE_LIMIT_REQUESTS,
)
from .engine import get_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    """Build the rule set on startup (not on first request)."""
    engine = get_engine()
    logger.info(f"Loaded {len(engine.classifier.registry)} matching rules")
    yield


# Create MCP server
mcp = FastMCP(
    name="mpn-resolver",
    instructions="Classifies electronic component manufacturer part numbers (MPNs) and decides whether one part is an admissible drop-in replacement for another. Pure rule-based lookups: no datasheets are fetched. Use mpn_classify_bom for many parts at once and mpn_find_in_text for free-text BOM lines.",
    lifespan=lifespan,
)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limiting middleware - requests/minute per IP.

    Tracked IPs are capped and stale entries cleaned periodically.
    """

    MAX_TRACKED_IPS = 10_000

    def __init__(self, app, requests_per_minute: int = RATE_LIMIT_REQUESTS):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.request_counts: dict[str, list[float]] = {}
        self._last_cleanup = time.time()

    def _get_client_ip(self, request) -> str:
        """Extract client IP, preferring the rightmost X-Forwarded-For entry (set by our proxy)."""
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            ips = [ip.strip() for ip in forwarded.split(",")]
            return ips[-1] if ips else "unknown"
        return request.client.host if request.client else "unknown"

    def _cleanup_stale_ips(self, now: float) -> None:
        window_start = now - 60
        stale_ips = [
            ip for ip, timestamps in self.request_counts.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for ip in stale_ips:
            del self.request_counts[ip]

    def _check_rate_limit(self, client_ip: str) -> bool:
        """True if this request should be rejected."""
        now = time.time()
        window_start = now - 60

        if now - self._last_cleanup > 60:
            self._cleanup_stale_ips(now)
            self._last_cleanup = now

        if len(self.request_counts) >= self.MAX_TRACKED_IPS:
            self._cleanup_stale_ips(now)
            if len(self.request_counts) >= self.MAX_TRACKED_IPS:
                return True

        recent = [t for t in self.request_counts.get(client_ip, []) if t > window_start]
        if len(recent) >= self.requests_per_minute:
            self.request_counts[client_ip] = recent
            return True
        recent.append(now)
        self.request_counts[client_ip] = recent
        return False

    async def dispatch(self, request, call_next):
        if request.url.path == "/health":
            return await call_next(request)

        client_ip = self._get_client_ip(request)
        if self._check_rate_limit(client_ip):
            return JSONResponse(
                status_code=429,
                content={"error": "Rate limit exceeded", "retry_after": 60},
                headers={"Retry-After": "60"},
            )
        return await call_next(request)


# Helpers to handle JSON string arrays from MCP clients
def _parse_list_param(value: list[str] | str | None) -> list[str] | None:
    """Parse a list parameter that may arrive as a JSON string like '["a", "b"]'.

    A JSON string is a single item. Any other plain string is split on
    commas and newlines.
    """
    if value is None:
        return None
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
            if isinstance(parsed, list):
                return parsed
            if isinstance(parsed, str):
                return [parsed.strip()] if parsed.strip() else []
        except json.JSONDecodeError:
            logger.debug(f"List parameter is not JSON, splitting: {value[:100]!r}")
        return [part.strip() for part in value.replace("\n", ",").split(",") if part.strip()]
    return None


def _check_mpn(mpn: str | None, field: str = "mpn") -> dict | None:
    """Error dict for an unusable MPN argument, else None."""
    if not mpn or not mpn.strip():
        return {"error": f"{field} is required"}
    if len(mpn) > MAX_MPN_LENGTH:
        return {"error": f"{field} too long (max {MAX_MPN_LENGTH} characters)"}
    return None


# Tools

@mcp.tool(
    annotations=ToolAnnotations(
        title="Classify MPN",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
def mpn_classify(mpn: str, component_type: str | None = None) -> dict:
    """Classify a manufacturer part number.

    Returns the component type (and its base type), the owning manufacturer
    rule set, series, package, mounting type and the capability attributes
    used for replacement checks. claimed_by lists every rule set that
    recognises the MPN, best match first.

    Args:
        mpn: Manufacturer part number (e.g., "STM32F103C8T6", "GRM188R71H104KA93D")
        component_type: Optionally also check the MPN against a type (e.g., "opamp", "memory_flash")

    Returns:
        Classification, or {"found": false} if no rule set recognises the MPN
    """
    if error := _check_mpn(mpn):
        return error
    engine = get_engine()
    result = engine.describe(mpn)
    if component_type:
        try:
            result["matches_type"] = engine.matches_type(mpn, component_type)
        except ValueError as e:
            return {"error": str(e), "mpn": mpn}
    return result


@mcp.tool(
    annotations=ToolAnnotations(
        title="Check Replacement",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
def mpn_check_replacement(required: str, candidate: str) -> dict:
    """Check whether candidate is an admissible drop-in replacement for required.

    Not symmetric: a better part can replace a lesser one but not the other
    way round. The candidate must be in the same (or a higher-ranked) series
    and match or exceed every capability of the required part.

    Args:
        required: MPN on the BOM
        candidate: MPN proposed as its substitute

    Returns:
        compatible, reason (identical, compatible, cross_reference, excluded,
        unclassified, provider_mismatch, series_unrelated, series_downgrade,
        attribute_failed), attributes_verified and both classifications
    """
    for value, field in ((required, "required"), (candidate, "candidate")):
        if error := _check_mpn(value, field):
            return error
    try:
        verdict = get_engine().explain(required, candidate)
    except AttributeKindMismatch as e:
        logger.error(f"Rule configuration error comparing {required} / {candidate}: {e}")
        return {"error": f"Rule configuration error: {e}", "attribute": e.name}
    return verdict.to_dict()


@mcp.tool(
    annotations=ToolAnnotations(
        title="Classify BOM",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
def mpn_classify_bom(mpns: list[str] | str) -> dict:
    """Classify a list of MPNs in one call.

    Args:
        mpns: List of MPNs (JSON array or comma/newline separated string)

    Returns:
        results in input order, a per-type summary and the unclassified MPNs
    """
    parsed = _parse_list_param(mpns)
    if not parsed:
        return {"error": "mpns must be a non-empty list of part numbers"}
    if len(parsed) > MAX_BOM_PARTS:
        return {"error": f"Too many parts ({len(parsed)}); max {MAX_BOM_PARTS} per call"}

    engine = get_engine()
    results: list[dict[str, Any]] = []
    unclassified: list[str] = []
    by_type: Counter[str] = Counter()
    for mpn in parsed:
        mpn = str(mpn).strip()
        if len(mpn) > MAX_MPN_LENGTH:
            results.append({"mpn": mpn[:MAX_MPN_LENGTH], "found": False, "error": "MPN too long"})
            unclassified.append(mpn[:MAX_MPN_LENGTH])
            continue
        result = engine.classify(mpn)
        if result is None:
            results.append({"mpn": mpn, "found": False})
            unclassified.append(mpn)
            continue
        results.append({"found": True, **result.to_dict()})
        by_type[result.matched_type.name] += 1

    return {
        "total": len(parsed),
        "classified": len(parsed) - len(unclassified),
        "by_type": dict(by_type.most_common()),
        "unclassified": unclassified,
        "results": results,
    }


@mcp.tool(
    annotations=ToolAnnotations(
        title="Find MPN in Text",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
def mpn_find_in_text(text: str) -> dict:
    """Pull the first recognised MPN out of a free-text BOM line or description.

    Words are split on whitespace, ";", "," and "|". Labels such as "MPN:",
    "P/N:" or "key=" and suffixes such as "-ROHS" or "-SMD" are stripped
    before each word is classified.

    Args:
        text: Free text (e.g., "U3 op-amp MPN:LM358DR qty 2")

    Returns:
        found, the cleaned MPN and its classification, or {"found": false}
    """
    if not text or not text.strip():
        return {"error": "text is required"}
    if len(text) > MAX_TEXT_LENGTH:
        return {"error": f"text too long (max {MAX_TEXT_LENGTH} characters)"}
    engine = get_engine()
    mpn = engine.find_mpn_in_text(text)
    if mpn is None:
        return {"found": False}
    return engine.describe(mpn)


@mcp.tool(
    annotations=ToolAnnotations(
        title="List Rule Sets",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=False,
    )
)
def mpn_list_providers(component_type: str | None = None) -> dict:
    """List the manufacturer rule sets, optionally only those that can produce a component type.

    Args:
        component_type: Optional type filter (e.g., "opamp", "voltage_regulator")

    Returns:
        providers with owner, name, priority and supported types, in dispatch order
    """
    engine = get_engine()
    try:
        providers = (
            engine.providers_for_type(component_type) if component_type
            else list(engine.classifier.providers)
        )
    except ValueError as e:
        return {"error": str(e)}
    return {
        "component_type": component_type,
        "providers": [
            {
                "owner": p.owner_id,
                "name": p.name,
                "priority": p.priority,
                "types": sorted(t.name for t in p.supported_types()),
            }
            for p in providers
        ],
    }


# Health check endpoint
async def health(request):
    return JSONResponse({
        "status": "healthy",
        "service": "mpn-resolver",
        "version": __version__,
    })


# Create ASGI app
def create_app():
    """Create the ASGI application."""
    middleware = [
        Middleware(RateLimitMiddleware, requests_per_minute=RATE_LIMIT_REQUESTS),
    ]

    # Stateless: MCP clients do not all forward session cookies
    app = mcp.http_app(
        path="/mcp",
        middleware=middleware,
        transport="streamable-http",
        stateless_http=True,
    )

    app.routes.append(Route("/health", health))

    return app


app = create_app()


class _HealthFilterLog(logging.Filter):
    """Suppress noisy /health access logs from container healthchecks."""

    def filter(self, record: logging.LogRecord) -> bool:
        return "/health" not in record.getMessage()


def main():
    """Run the server."""
    import uvicorn

    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("uvicorn.access").addFilter(_HealthFilterLog())

    uvicorn.run(
        "mpn_resolver.server:app",
        host="0.0.0.0",
        port=HTTP_PORT,
        lifespan="on",
    )


if __name__ == "__main__":
    main()
