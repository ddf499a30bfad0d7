# src/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from auth.routes import router as auth_router
from subscription.routes import router as subscription_router, callback_router as subscription_callback_router
from payment.routes import router as payment_router
from payment.client import get_flow_client
from admin.routes import router as admin_router
from config import settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Aula Digital Plus Backend",
    description="API for family accounts and Flow subscriptions",
    version="0.1.0",
)

# Configure CORS
origins = [settings.APP_URL, "http://localhost:3000", "http://127.0.0.1:3000"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(subscription_router)
app.include_router(subscription_callback_router)
app.include_router(payment_router)
app.include_router(admin_router)


@app.on_event("startup")
async def startup_event():
    """Build the gateway client so missing credentials stop the process at boot."""
    client = get_flow_client()
    logger.info(f"Flow gateway client ready: {client.base_url}")


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Welcome to Aula Digital Plus Backend!"}
