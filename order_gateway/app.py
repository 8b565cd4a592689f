import logging
import time
from typing import Optional

from quart import Quart, jsonify, request
from quart_cors import cors

from .admin.controller import bp as admin_bp
from .common.config import Settings, settings as default_settings
from .common.errors import ApiError
from .common.locks import SheetLocks
from .common.redis_client import close_redis
from .common.sheets_client import SheetsClient
from .links.controller import bp as links_bp
from .links.service import provision_at_startup
from .orders.controller import bp as orders_bp
from .products.controller import bp as products_bp

# Prometheus metrics
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST


log = logging.getLogger(__name__)

REQUEST_COUNT = Counter("http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"])
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["endpoint"],
    buckets=(0.05, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0, 30.0, float("inf"))
)

# Dynamic path segments collapsed to keep label cardinality bounded
_DYNAMIC_PREFIXES = (
    ("/api/order-link/", "/api/order-link/<linkId>"),
    ("/api/product/", "/api/product/<productId>"),
    ("/api/order/", "/api/order/<orderId>"),
)


def _metrics_endpoint(path: str) -> str:
    for prefix, label in _DYNAMIC_PREFIXES:
        if path.startswith(prefix):
            return label
    return path


def create_app(settings: Optional[Settings] = None, sheets=None) -> Quart:
    settings = settings or default_settings
    if sheets is None:
        sheets = SheetsClient.from_settings(settings)

    origins = settings.cors_origins()
    app = Quart(__name__)
    app = cors(
        app,
        allow_origin=origins[0] if len(origins) == 1 else origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.settings = settings
    app.sheets = sheets
    app.sheet_locks = SheetLocks(settings)
    app.provisioned_sheets = set()

    # Blueprints
    app.register_blueprint(admin_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(links_bp)
    app.register_blueprint(orders_bp)

    @app.errorhandler(ApiError)
    async def api_error(error: ApiError):
        return jsonify(error.to_dict()), error.status_code

    @app.before_request
    async def before_request():
        request._start_time = time.time()
        log.info(f"[Instance {settings.INSTANCE_ID}] {request.method} {request.path}")

    @app.after_request
    async def after_request(response):
        try:
            if hasattr(request, "_start_time"):
                duration = time.time() - request._start_time
                endpoint = _metrics_endpoint(request.path)
                REQUEST_LATENCY.labels(endpoint=endpoint).observe(duration)
                REQUEST_COUNT.labels(
                    method=request.method,
                    endpoint=endpoint,
                    status=str(response.status_code)
                ).inc()
            response.headers['X-Instance-ID'] = settings.INSTANCE_ID
        except Exception as e:
            log.error(f"Error recording metrics: {e}")
        return response

    @app.get("/metrics")
    async def metrics():
        data = generate_latest()
        return app.response_class(data, mimetype=CONTENT_TYPE_LATEST)

    @app.get("/health")
    async def health():
        return jsonify({"status": "ok"})

    @app.before_serving
    async def startup():
        logging.basicConfig(level=settings.LOG_LEVEL.upper())
        log.info("Provisioning OrderLinks sheet...")
        try:
            await provision_at_startup()
            log.info("OrderLinks sheet ready.")
        except Exception as e:
            # generate-link retries provisioning before its first write
            log.error(f"OrderLinks provisioning failed at startup: {e}")

    @app.after_serving
    async def shutdown():
        await close_redis()
        log.info("Shutdown complete.")

    return app
