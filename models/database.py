"""Database models and connection setup."""

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from typing import Optional
from config.settings import settings
from utils.logger import setup_logger

logger = setup_logger(__name__)

USERS_COLLECTION = "users"
PROFILE_COLLECTION = "profiles"
WORKOUT_LOG_COLLECTION = "workout_log"
NUTRITION_LOG_COLLECTION = "nutrition_log"


class Database:
    """Database connection manager."""

    client: Optional[AsyncIOMotorClient] = None


db = Database()


def get_database_name(url: str) -> str:
    """Database name is the last path segment of the connection URL."""
    name = url.rsplit("/", 1)[-1].split("?", 1)[0]
    return name or "training_diary"


async def connect_to_mongo():
    """Create database connection."""
    db.client = AsyncIOMotorClient(settings.mongodb_url)
    logger.info(f"Connected to MongoDB database: {get_database_name(settings.mongodb_url)}")


async def close_mongo_connection():
    """Close database connection."""
    if db.client:
        db.client.close()
        db.client = None
        logger.info("Disconnected from MongoDB")


async def init_mongo():
    """Initialize MongoDB connection and all collections with indexes."""
    await connect_to_mongo()

    database = get_database()

    # Accounts
    await database[USERS_COLLECTION].create_index([("email", ASCENDING)], unique=True)

    # Log collections are always read per user, newest first
    await database[WORKOUT_LOG_COLLECTION].create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
    await database[NUTRITION_LOG_COLLECTION].create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])

    logger.info("MongoDB initialized: All collections created with indexes")


def get_database():
    """Get database instance."""
    if db.client is None:
        raise RuntimeError("MongoDB not connected. Call connect_to_mongo() first.")
    return db.client[get_database_name(settings.mongodb_url)]


# Helper function to get collections
def get_users_collection():
    """Get users collection."""
    return get_database()[USERS_COLLECTION]
