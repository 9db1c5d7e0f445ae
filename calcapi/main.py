"""calcdesk API — FastAPI application entry point."""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from calcapi.routes import agriculture, finance, formulas, mathematics, network
from calcapi.middleware.rate_limit import RateLimitMiddleware

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="calcdesk API",
    description="Formula, subnet and loan calculators",
    version="0.1.0",
)

# CORS: allow frontend origins
_frontend_url = os.getenv("FRONTEND_URL")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[_frontend_url] if _frontend_url else [],
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    RateLimitMiddleware,
    requests_per_minute=int(os.getenv("RATE_LIMIT_PER_MINUTE", "120")),
)

# Register route modules
app.include_router(formulas.router, prefix="/api", tags=["Formulas"])
app.include_router(network.router, prefix="/api", tags=["Network"])
app.include_router(finance.router, prefix="/api", tags=["Finance"])
app.include_router(mathematics.router, prefix="/api", tags=["Math"])
app.include_router(agriculture.router, prefix="/api", tags=["Agriculture"])


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "calcdesk-api"}
