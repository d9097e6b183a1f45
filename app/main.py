# app/main.py
# Точка входа FastAPI. Создание таблиц выполняется в lifespan с повторными попытками.

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api import admin as admin_router
from app.api import auth as auth_router
from app.api import orders as orders_router
from app.api import products as products_router
from app.core.config import settings
from app.core.errors import ShopError
from app.db.base import Base
from app.db.session import engine, get_db

# Импорт моделей, чтобы SQLAlchemy видел их определения
import app.models.user
import app.models.category
import app.models.product
import app.models.address
import app.models.cart
import app.models.order

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def try_create_tables(retries: int = 5, delay: int = 2) -> bool:
    """create_all с повторами: БД может подняться позже API. False, если она так и не ответила."""
    for attempt in range(1, retries + 1):
        try:
            logger.info(f"Creating tables ({attempt}/{retries})...")
            Base.metadata.create_all(bind=engine)
            logger.info("✅ Database tables created (or already exist).")
            return True
        except SQLAlchemyError as e:
            logger.warning(f"❌ Attempt {attempt}/{retries} failed to create tables: {e}")
            if attempt < retries:
                logger.info(f"⏳ Waiting {delay}s before retry...")
                time.sleep(delay)
    logger.error(f"❌ Could not create tables after {retries} retries.")
    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Bakery API starting up...")
    if not try_create_tables(retries=5, delay=2):
        # В production без схемы стартовать нельзя, в разработке продолжаем
        if settings.is_production:
            raise RuntimeError("Cannot start application: database tables creation failed")
        logger.error("⚠️ Failed to create database tables. Application may not work correctly.")

    yield

    logger.info("🛑 Bakery API shutting down...")
    engine.dispose()


app = FastAPI(
    title="Bakery Shop API",
    description="Каталог, заказы и админка интернет-пекарни",
    version="1.0.0",
    lifespan=lifespan
)

# В development фронтенд может жить на любом порту
cors_origins = ["*"] if settings.ENVIRONMENT == "development" else settings.CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)

app.include_router(auth_router.router, prefix="/api/auth", tags=["auth"])
app.include_router(orders_router.router, prefix="/api", tags=["orders"])
app.include_router(products_router.router, prefix="/api", tags=["products"])
app.include_router(admin_router.router, prefix="/api", tags=["admin"])


@app.get("/", tags=["health"])
async def root():
    return {"status": "ok", "service": app.title, "environment": settings.ENVIRONMENT}


@app.get("/health", tags=["health"])
def health(db: Session = Depends(get_db)):
    """Health check с реальным запросом к БД."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check: database unavailable: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": "unavailable", "version": app.version},
        )
    return {"status": "healthy", "database": "connected", "version": app.version}


@app.exception_handler(ShopError)
async def shop_error_handler(request: Request, exc: ShopError):
    """Доменные ошибки: статус и сообщение берутся из исключения, детали остаются в логах."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Некорректное тело запроса — 400, как у остального API."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Всё непредвиденное: трейсбек в лог, клиенту только общий текст в формате остального API."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000,
                reload=settings.ENVIRONMENT == "development", log_level=settings.LOG_LEVEL.lower())
