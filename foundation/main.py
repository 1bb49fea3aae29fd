from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from foundation.api.teams import router as teams_router
from foundation.api.people import router as people_router
from foundation.config import get_app_env, get_cors_origins
from foundation.errors import register_exception_handlers
from foundation.logging import RequestIdMiddleware, configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)

app = FastAPI(
    title="Foundation Backend",
    description="Sports foundation management - teams, rosters and coaches",
    version="0.1.0",
    openapi_tags=[
        {
            "name": "Teams",
            "description": "Team management - create, update and soft-delete teams with their rosters",
        },
        {
            "name": "People",
            "description": "Athletes and coaches that can be assigned to teams",
        },
    ],
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=[
        "Accept",
        "Accept-Language",
        "Content-Language",
        "Content-Type",
        "Authorization",
        "X-Request-ID",
        "X-Requested-With",
        "Cache-Control",
    ],
    expose_headers=[
        "Content-Length",
        "Content-Type",
        "X-Request-ID",
    ],
)
app.add_middleware(RequestIdMiddleware)

register_exception_handlers(app)

app.include_router(teams_router)
app.include_router(people_router)

logger.info("application_configured", environment=get_app_env())


@app.get("/")
async def root():
    return {"message": "Foundation Backend API"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
