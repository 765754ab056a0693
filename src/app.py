"""Commerce back-office FastAPI application.

Every request runs inside the commerce domain context, so routes can reach
repositories through ``current_domain``.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from commerce.domain import commerce
from commerce.utils.logging import configure_logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

configure_logging()
commerce.init()

app = FastAPI(
    title="Commerce API",
    description="Back office for stock, coupons, orders and accounts",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the commerce domain context for each request."""
    with commerce.domain_context():
        response = await call_next(request)
    return response


register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from commerce.api import account_router, coupon_router, order_router, product_router  # noqa: E402

app.include_router(product_router)
app.include_router(coupon_router)
app.include_router(order_router)
app.include_router(account_router)


@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": commerce.name})
