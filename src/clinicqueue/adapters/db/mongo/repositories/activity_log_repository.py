"""
MongoDB implementation of ActivityLogRepository (insert-only).
"""

from typing import List, Optional

from pymongo.errors import DuplicateKeyError

from clinicqueue.application.ports.repositories.activity_log_repo import ActivityLogRepository
from clinicqueue.domain.entities.activity_log import ActivityLogEntry
from clinicqueue.domain.enums.statuses import ActivityAction, ActivityTargetType

from ..models.queue_m import ActivityLogMongo


class MongoActivityLogRepository(ActivityLogRepository):
    """MongoDB implementation of ActivityLogRepository."""

    async def append(self, entry: ActivityLogEntry) -> bool:
        existing = await ActivityLogMongo.find_one(ActivityLogMongo.entry_id == entry.entry_id)
        if existing:
            return False
        try:
            await self._domain_to_mongo(entry).insert()
        except DuplicateKeyError:
            # Concurrent retry of the same entry won the insert
            return False
        return True

    async def find_by_id(self, entry_id: str) -> Optional[ActivityLogEntry]:
        entry_mongo = await ActivityLogMongo.find_one(ActivityLogMongo.entry_id == entry_id)
        if not entry_mongo:
            return None
        return self._mongo_to_domain(entry_mongo)

    async def list_by_clinic(self, clinic_id: str, limit: Optional[int] = None) -> List[ActivityLogEntry]:
        query = ActivityLogMongo.find(ActivityLogMongo.clinic_id == clinic_id).sort(
            [("timestamp", -1), ("_id", -1)]
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._mongo_to_domain(e) for e in await query.to_list()]

    @staticmethod
    def _domain_to_mongo(entry: ActivityLogEntry) -> ActivityLogMongo:
        return ActivityLogMongo(
            entry_id=entry.entry_id,
            handler_id=entry.handler_id,
            handler_name=entry.handler_name,
            action=entry.action.value,
            target_type=entry.target_type.value,
            target_id=entry.target_id,
            target_name=entry.target_name,
            details=entry.details,
            clinic_id=entry.clinic_id,
            old_value=entry.old_value,
            new_value=entry.new_value,
            timestamp=entry.timestamp,
        )

    @staticmethod
    def _mongo_to_domain(entry_mongo: ActivityLogMongo) -> ActivityLogEntry:
        return ActivityLogEntry(
            handler_id=entry_mongo.handler_id,
            handler_name=entry_mongo.handler_name,
            action=ActivityAction(entry_mongo.action),
            target_type=ActivityTargetType(entry_mongo.target_type),
            target_id=entry_mongo.target_id,
            target_name=entry_mongo.target_name,
            details=entry_mongo.details,
            clinic_id=entry_mongo.clinic_id,
            old_value=entry_mongo.old_value,
            new_value=entry_mongo.new_value,
            entry_id=entry_mongo.entry_id,
            timestamp=entry_mongo.timestamp,
        )
