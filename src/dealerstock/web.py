"""aiohttp application exposing the inventory over HTTP."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable

from aiohttp import web

from dealerstock._constants import TEMPORARILY_UNAVAILABLE
from dealerstock.client import StockClient
from dealerstock.config import StockConfig
from dealerstock.exceptions import DealerStockError, InvalidVehicleIdError, VehicleNotFoundError

_logger = logging.getLogger(__name__)

CLIENT_KEY: web.AppKey[StockClient] = web.AppKey("client", StockClient)
ORIGINS_KEY: web.AppKey[frozenset[str]] = web.AppKey("allowed_origins", frozenset)

_ALLOW_METHODS = "GET,OPTIONS"
_ALLOW_HEADERS = (
    "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
    "Content-MD5, Content-Type, Date, X-Api-Version"
)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _cors_headers(request: web.Request) -> dict[str, str]:
    headers = {
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": _ALLOW_METHODS,
        "Access-Control-Allow-Headers": _ALLOW_HEADERS,
    }
    origin = request.headers.get("Origin")
    if origin and origin in request.app[ORIGINS_KEY]:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return headers


@web.middleware
async def cors_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Answer preflights, reject non-GET methods and attach CORS headers."""
    headers = _cors_headers(request)
    if request.method == "OPTIONS":
        return web.Response(status=200, headers=headers)
    if request.method != "GET":
        return web.json_response(
            {"success": False, "error": "Method not allowed. Please use GET."},
            status=405,
            headers={**headers, "Allow": _ALLOW_METHODS},
        )
    response = await handler(request)
    response.headers.update(headers)
    return response


async def handle_vehicles(request: web.Request) -> web.Response:
    response = await request.app[CLIENT_KEY].get_vehicles()
    return web.json_response(response.to_wire(), status=200 if response.success else 500)


async def handle_vehicle_detail(request: web.Request) -> web.Response:
    vid = request.query.get("vid")
    try:
        detail = await request.app[CLIENT_KEY].get_vehicle_detail(vid)
    except InvalidVehicleIdError:
        return web.json_response({"error": "Missing or invalid vid parameter"}, status=400)
    except VehicleNotFoundError:
        return web.json_response({"error": "Vehicle not found", "vid": vid}, status=404)
    except DealerStockError as exc:
        _logger.warning("Detail lookup for vid=%s failed: %s", vid, exc)
        return web.json_response({"error": TEMPORARILY_UNAVAILABLE, "vid": vid}, status=500)
    return web.json_response(detail.to_wire())


def create_app(client: StockClient, allowed_origins: Iterable[str] = ()) -> web.Application:
    """Build the application around an entered :class:`StockClient`.

    The caller owns the client's lifecycle; see :func:`create_server_app`
    for an application that manages it.
    """
    app = web.Application(middlewares=[cors_middleware])
    app[CLIENT_KEY] = client
    app[ORIGINS_KEY] = frozenset(allowed_origins)
    # "*" so every method reaches the middleware instead of the router's 405.
    app.router.add_route("*", "/api/vehicles", handle_vehicles)
    app.router.add_route("*", "/api/vehicle-details", handle_vehicle_detail)
    return app


def create_server_app(config: StockConfig) -> web.Application:
    """Application that opens and closes its own client with the server."""
    client = StockClient(config)
    app = create_app(client, config.allowed_origins)

    async def client_context(_app: web.Application) -> AsyncIterator[None]:
        async with client:
            yield

    app.cleanup_ctx.append(client_context)
    return app
