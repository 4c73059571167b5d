"""Motor client and Beanie registration shared by the app and scripts."""

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient
import certifi

from ....core.config import DatabaseSettings
from .models.doctor_m import DoctorMongo
from .models.queue_m import ActivityLogMongo, AppointmentMongo, TokenCounterMongo, VisitMongo

DOCUMENT_MODELS = [
    DoctorMongo,
    VisitMongo,
    AppointmentMongo,
    ActivityLogMongo,
    TokenCounterMongo,
]


def create_client(settings: DatabaseSettings) -> AsyncIOMotorClient:
    # Enable TLS only for Atlas SRV URIs
    if settings.uri.startswith("mongodb+srv://"):
        return AsyncIOMotorClient(
            settings.uri,
            serverSelectionTimeoutMS=15000,
            tls=True,
            tlsCAFile=certifi.where(),
            tlsAllowInvalidCertificates=False,
        )
    return AsyncIOMotorClient(settings.uri, serverSelectionTimeoutMS=15000)


async def init_database(settings: DatabaseSettings) -> AsyncIOMotorClient:
    """Connect and register the document models; returns the client."""
    client = create_client(settings)
    await init_beanie(database=client[settings.db_name], document_models=DOCUMENT_MODELS)
    return client
