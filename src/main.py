from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import governance_settings as settings
from src.dao_cooperative.identity import JsonRpcIdentityProvider
from src.routers.fastapi_router import router as api_router
from src.utils.logger import logger
from src.utils.startup_validation import validate_startup

# Run startup validation
logger.info("DAO Cooperative Backend starting up...")
if not validate_startup():
    logger.error("Startup validation failed. Please check configuration.")
    # Don't exit here so health checks still report what is missing

app = FastAPI(title="DAO Cooperative Backend", version="0.1.0")

allowed_origins = [origin.strip() for origin in settings.ALLOWED_ORIGINS.split(",") if origin.strip()]
logger.info(f"Allowed origins: {allowed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    # Cannot combine "*" with credentials
    allow_credentials="*" not in allowed_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)
logger.info("✅ CORS middleware configured")

app.state.governance_client = None


@app.get("/healthz")
def healthz() -> dict:
    """Health check with configuration and client status."""
    client = app.state.governance_client
    health_status = {
        "status": "ok",
        "client": "ready" if client is not None else "not initialized",
        "identity": client.session.identity if client is not None else None,
    }
    if not settings.GOVERNANCE_GATEWAY_URL:
        health_status["config"] = "missing: GOVERNANCE_GATEWAY_URL"
        health_status["status"] = "error"
    else:
        health_status["config"] = "ok"
    if client is None:
        health_status["status"] = "error"
    return health_status


@app.on_event("startup")
async def startup_event():
    """Create the governance client and load the initial identity."""
    from src.dao_cooperative.factory import build_client

    logger.info("Starting DAO Cooperative Backend...")
    try:
        client = build_client()
    except ValueError as e:
        logger.error(f"Governance client not created: {e}")
        return

    await client.start()
    if isinstance(client.identity_provider, JsonRpcIdentityProvider):
        client.identity_provider.start()
    app.state.governance_client = client
    logger.info(f"✅ Governance client started (identity={client.identity})")


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources on application shutdown."""
    logger.info("Shutting down DAO Cooperative Backend...")
    client = app.state.governance_client
    if client is not None:
        await client.close()
        app.state.governance_client = None
        logger.info("✅ Governance client closed")


# Mount API routes
app.include_router(api_router)
