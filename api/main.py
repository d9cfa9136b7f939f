"""
Polytrade Ops - Main FastAPI Application.

REST surface over the platform tool service: minting, wrapping,
metadata enrichment and verification of ERC-6960 dual-ID assets.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from api.routes import health, tools


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Polytrade Ops - Asset Workflow API",
    description="""
    Workflow orchestration for the Polytrade ERC-6960 platform on XDC.

    Every tool answers with a workflow report; check its `success` field.
    """,
    version="1.0.0",
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Answer in the report shape even when a tool crashes outside a workflow."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": {"code": "InternalError", "message": "Internal server error"},
            "path": request.url.path,
        },
    )


app.include_router(health.router, tags=["Health"])
app.include_router(tools.router, prefix="/api/v1/tools", tags=["Tools"])


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Polytrade Ops - Asset Workflow API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
