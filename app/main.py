import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware

from app.api.v1.routes import api_router
from app.core.config import settings
from app.middleware import ErrorHandlingMiddleware, LoggingMiddleware

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    API for sizing compressed-gas distribution networks

    ## Usage

    1. Fetch an example input with `GET /network/example`
    2. Adjust the system inputs, header geometry, candidate pipes and drops
    3. Submit it to `POST /network/calculate`

    Compressed air flows are entered in SCFM and fuel gas flows in SCFH.
    Pressures are gauge (psig) unless a field name says otherwise.
    """,
    version="1.0.0",
    root_path=settings.API_V1_STR,
    docs_url="/docs" if settings.DEBUG else None,  # Disable docs in production
    redoc_url="/redoc" if settings.DEBUG else None,  # Disable redoc in production
)

# Add CORS middleware with settings from config
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept"],
    expose_headers=["X-Process-Time"],
)

# Add GZip compression middleware
app.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MINIMUM_SIZE)

# Error envelope (sizing errors and anything unexpected) and request logging
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(LoggingMiddleware)

app.include_router(api_router)
logger.info(f"{settings.PROJECT_NAME} configured for {settings.ENV}")

@app.get("/")
def read_root():
    return {"message": f"Welcome to the {settings.PROJECT_NAME}"}

@app.get("/health")
def health_check():
    """Health check endpoint for monitoring"""
    return {"status": "healthy"}
