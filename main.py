from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from app.database import create_tables
from app.routers import added_emails
from app.core.errors import register_exception_handlers
from app.core.rate_limit import limiter
from app.logging_config import get_logger

logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Create database tables
    create_tables()
    logger.info("AddedEmail backend started")

    yield

    logger.info("AddedEmail backend shutting down")


app = FastAPI(title="AddedEmail Backend", version="1.0.0", lifespan=lifespan)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
register_exception_handlers(app)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(added_emails.router, prefix="/api", tags=["added-emails"])


@app.get("/")
async def root():
    return {"message": "AddedEmail Backend API is running!"}
