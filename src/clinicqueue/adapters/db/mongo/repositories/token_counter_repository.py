"""
MongoDB implementation of TokenCounterRepository using atomic ``$inc``.
"""

from datetime import datetime

from pymongo import ReturnDocument

from clinicqueue.application.ports.repositories.token_counter_repo import TokenCounterRepository

from ..models.queue_m import TokenCounterMongo


class MongoTokenCounterRepository(TokenCounterRepository):
    """MongoDB implementation of TokenCounterRepository."""

    async def increment(self, scope_key: str) -> int:
        collection = TokenCounterMongo.get_motor_collection()
        document = await collection.find_one_and_update(
            {"scope_key": scope_key},
            {"$inc": {"sequence": 1}, "$set": {"updated_at": datetime.utcnow()}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(document["sequence"])

    async def current(self, scope_key: str) -> int:
        counter = await TokenCounterMongo.find_one(TokenCounterMongo.scope_key == scope_key)
        return counter.sequence if counter else 0
