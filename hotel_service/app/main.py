import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import hotel_engine, Base
from shared.helpers.exception_handler import setup_exception_handlers
from shared.wrappers.response_wrapper import JsonResponseMiddleware
from .models.hospitality import rooms, reservations, service_requests, feedback
from .models.financials import bills
from .models.system import notifications, system_settings
from .models.messaging import conversations
from .router.hospitality import rooms_router, reservations_router, service_requests_router, feedback_router
from .router.financials import bills_router
from .router.system import notifications_router, system_settings_router
from .router.messaging import messages_router
from .router.overview import reports_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

# Create tables
Base.metadata.create_all(bind=hotel_engine)

app = FastAPI(title="Hotel Management API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(JsonResponseMiddleware)

setup_exception_handlers(app)

app.include_router(rooms_router.router)
app.include_router(reservations_router.router)
app.include_router(bills_router.router)
app.include_router(service_requests_router.router)
app.include_router(feedback_router.router)
app.include_router(notifications_router.router)
app.include_router(system_settings_router.router)
app.include_router(messages_router.router)
app.include_router(reports_router.router)


@app.get("/api/health")
def health():
    return {"status": "healthy"}
