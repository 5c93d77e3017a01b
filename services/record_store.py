import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

logger = logging.getLogger('uvicorn.error')

POSTS_COLLECTION = "posts"
COMMENTS_COLLECTION = "comments"


class StoreError(Exception):
    """Raised when the document store rejects or fails an operation."""


@dataclass
class UpdateOutcome:
    matched_count: int
    modified_count: int


def _object_id(record_id: str) -> ObjectId:
    try:
        return ObjectId(record_id)
    except (InvalidId, TypeError) as e:
        raise StoreError(f"Malformed record id '{record_id}'") from e


def _to_record(doc: Dict[str, Any]) -> Dict[str, Any]:
    record = dict(doc)
    record['id'] = str(record.pop('_id'))
    return record


class RecordStore:
    """
    Thin adapter over one MongoDB collection.

    Every method awaits the driver and returns plain dicts with the ObjectId
    rendered as an ``id`` string. Driver failures surface as StoreError;
    unique_fields get a unique index so the store itself rejects duplicates.
    """

    def __init__(self, collection: AsyncIOMotorCollection, unique_fields: Sequence[str] = ()):
        self.collection = collection
        self.unique_fields = tuple(unique_fields)

    @property
    def name(self) -> str:
        return self.collection.name

    async def ensure_indexes(self) -> None:
        for field in self.unique_fields:
            try:
                await self.collection.create_index(field, unique=True)
                logger.info(f"Unique index on '{self.name}.{field}' ensured.")
            except PyMongoError as e:
                raise StoreError(f"Could not create unique index on '{self.name}.{field}'") from e

    async def find_all(self) -> List[Dict[str, Any]]:
        try:
            docs = await self.collection.find({}).to_list(length=None)
        except PyMongoError as e:
            raise StoreError(f"Could not list '{self.name}'") from e
        return [_to_record(doc) for doc in docs]

    async def find_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        oid = _object_id(record_id)
        try:
            doc = await self.collection.find_one({'_id': oid})
        except PyMongoError as e:
            raise StoreError(f"Could not read '{self.name}' record {record_id}") from e
        return _to_record(doc) if doc is not None else None

    async def insert(self, data: Dict[str, Any]) -> str:
        # Driver mutates the inserted document with its _id
        document = dict(data)
        try:
            result = await self.collection.insert_one(document)
        except PyMongoError as e:
            raise StoreError(f"Could not insert into '{self.name}'") from e
        return str(result.inserted_id)

    async def update_by_id(self, record_id: str, changes: Dict[str, Any]) -> UpdateOutcome:
        oid = _object_id(record_id)
        try:
            result = await self.collection.update_one({'_id': oid}, {'$set': changes})
        except PyMongoError as e:
            raise StoreError(f"Could not update '{self.name}' record {record_id}") from e
        return UpdateOutcome(matched_count=result.matched_count, modified_count=result.modified_count)

    async def delete_by_id(self, record_id: str) -> int:
        oid = _object_id(record_id)
        try:
            result = await self.collection.delete_one({'_id': oid})
        except PyMongoError as e:
            raise StoreError(f"Could not delete '{self.name}' record {record_id}") from e
        return result.deleted_count
