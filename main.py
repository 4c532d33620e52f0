#!/usr/bin/env python3

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import settings  # noqa: F401  configures sentry before the app starts
from infrastructure.container import container
from shared.util import logger

app = FastAPI(
    title="Meeting Network API",
    description="Meeting aggregation, force-directed layout and relationship analytics",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers from the container
for router in container.get_all_routers():
    app.include_router(router)


@app.get("/")
async def root():
    return {"message": "Meeting Network API", "status": "healthy"}


@app.get("/health")
async def health_check():
    """Detailed health check"""
    redis_info = container.cache.get_info()
    if not container.cache.ping():
        logger.warning("Health check: Redis unavailable")
        return {"status": "degraded", "redis": redis_info, "message": "Redis unavailable"}

    return {
        "status": "healthy",
        "redis": redis_info,
        "subscriptions": container.notifier.get_subscriptions_info(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
