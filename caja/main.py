from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

# Import database components
from caja.database.database import engine, Base

# Import middleware and envelopes
from caja.common.responses import ErrorResponse
from caja.common.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware

# Import routers
from caja.modules.customers.router import router as customers_router
from caja.modules.account_movements.router import router as account_movements_router
from caja.modules.commissions.router import router as commissions_router
from caja.modules.sales.router import router as sales_router
from caja.modules.withdrawals.router import router as withdrawals_router
from caja.modules.summary.router import router as summary_router
from caja.modules.business.router import router as business_router

# Import models for table creation
import caja.modules.customers.models
import caja.modules.account_movements.models
import caja.modules.commissions.models
import caja.modules.sales.models
import caja.modules.withdrawals.models
import caja.modules.business.models

from caja.core.config import settings

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL or (logging.INFO if settings.ENVIRONMENT == "production" else logging.DEBUG),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(
    title="Caja API",
    description="Ventas, retiros, cuentas corrientes y comisiones para comercios",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None
)

# Add middleware (order matters!)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ===== ERROR HANDLERS =====

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error="Datos inválidos", details=details).model_dump(),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Error no controlado en {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Error interno del servidor").model_dump(exclude_none=True),
    )


# Include routers
app.include_router(customers_router, prefix="/api")
app.include_router(account_movements_router, prefix="/api")
app.include_router(commissions_router, prefix="/api")
app.include_router(sales_router, prefix="/api")
app.include_router(withdrawals_router, prefix="/api")
app.include_router(summary_router, prefix="/api")
app.include_router(business_router, prefix="/api")

# Create database tables (only for development - use migrations in production)
if settings.ENVIRONMENT == "development":
    Base.metadata.create_all(bind=engine)


@app.get("/")
async def read_root():
    return {
        "message": "Caja API is running",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}


@app.on_event("startup")
async def startup_event():
    logger.info("Caja API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Caja API shutting down...")
