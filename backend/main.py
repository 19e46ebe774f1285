# backend/main.py
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

load_dotenv()

from config import settings
from database import init_db
import models.registry  # noqa: F401
from utils.errors import ServiceError, PersistenceError
from utils.logging_setup import setup_logging

# Routers
from routes.auth import router as auth_router
from routes.admin import router as admin_router
from routes.checkout import router as checkout_router
from routes.customers import router as customers_router
from routes.logs import router as logs_router
from routes.marketing import router as marketing_router
from routes.orders import router as orders_router
from routes.products import router as products_router
from routes.promotions import router as promotions_router
from routes.reviews import router as reviews_router
from routes.settings import router as settings_router
from routes.shop import router as shop_router
from routes.stats import router as stats_router
from routes.stock import router as stock_router

setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Storefront API started")
    yield


app = FastAPI(title="Storefront API", version="1.0.0", lifespan=lifespan)

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Error responses: always {"error": "<message>"} ===

@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if isinstance(exc, PersistenceError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# First violated constraint only; custom errors keep their own wording
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return JSONResponse(status_code=400, content={"error": "Invalid request"})
    first = errors[0]
    message = first.get("msg", "Invalid value")
    if first.get("type") == "cart_empty":
        return JSONResponse(status_code=400, content={"error": message})
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path", "header"))
    return JSONResponse(status_code=400, content={"error": f"{field}: {message}" if field else message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Router registration
app.include_router(shop_router)
app.include_router(checkout_router)
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(orders_router)
app.include_router(products_router)
app.include_router(stock_router)
app.include_router(customers_router)
app.include_router(promotions_router)
app.include_router(marketing_router)
app.include_router(reviews_router)
app.include_router(settings_router)
app.include_router(stats_router)
app.include_router(logs_router)


@app.get("/")
def read_root():
    return {"message": "Storefront API is running"}
