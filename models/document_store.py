"""Document store over MongoDB with snapshot streams.

Reads are exposed two ways: one-shot lookups and streams that yield a full
snapshot first and then a fresh snapshot after every change the store
reports. Streams are built on MongoDB change streams, which require a
replica set (a single-node replica set is enough).
"""

import uuid
from typing import Any, AsyncIterator, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from utils.errors import ReadError, WriteError
from utils.logger import setup_logger

logger = setup_logger(__name__)


class DocumentStore:
    """Async document operations on a motor database."""

    def __init__(self, database):
        self.database = database

    async def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a single document by id, or None."""
        try:
            return await self.database[collection].find_one({"_id": doc_id})
        except PyMongoError as e:
            logger.error(f"Error reading {collection}/{doc_id}: {e}", exc_info=True)
            raise ReadError("Could not read data. Please try again.", cause=e) from e

    async def create_if_absent(self, collection: str, doc_id: str, data: Dict[str, Any]) -> bool:
        """Insert ``data`` under ``doc_id`` unless a document already exists.

        Single atomic upsert keyed by id. Returns True when this call created
        the document; losing a concurrent race returns False.
        """
        try:
            result = await self.database[collection].update_one(
                {"_id": doc_id},
                {"$setOnInsert": data},
                upsert=True
            )
        except DuplicateKeyError:
            logger.info(f"Document {collection}/{doc_id} created concurrently")
            return False
        except PyMongoError as e:
            logger.error(f"Error creating {collection}/{doc_id}: {e}", exc_info=True)
            raise WriteError("Could not save data. Please try again.", cause=e) from e

        return result.upserted_id is not None

    async def replace_document(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        """Overwrite the whole document, creating it if needed."""
        try:
            await self.database[collection].replace_one({"_id": doc_id}, data, upsert=True)
        except PyMongoError as e:
            logger.error(f"Error replacing {collection}/{doc_id}: {e}", exc_info=True)
            raise WriteError("Could not save data. Please try again.", cause=e) from e

    async def add_document(self, collection: str, data: Dict[str, Any]) -> str:
        """Insert a new document with a generated id and return the id."""
        doc_id = uuid.uuid4().hex
        try:
            await self.database[collection].insert_one({"_id": doc_id, **data})
        except PyMongoError as e:
            logger.error(f"Error adding document to {collection}: {e}", exc_info=True)
            raise WriteError("Could not save data. Please try again.", cause=e) from e
        return doc_id

    async def delete_document(self, collection: str, doc_id: str, owner: Dict[str, Any]) -> bool:
        """Delete ``doc_id`` if it matches ``owner``. Returns whether it existed."""
        try:
            result = await self.database[collection].delete_one({"_id": doc_id, **owner})
        except PyMongoError as e:
            logger.error(f"Error deleting {collection}/{doc_id}: {e}", exc_info=True)
            raise WriteError("Could not delete data. Please try again.", cause=e) from e
        return result.deleted_count > 0

    async def find_documents(
        self,
        collection: str,
        query: Dict[str, Any],
        sort_field: str,
        descending: bool = True
    ) -> List[Dict[str, Any]]:
        """Run an ordered query and return every matching document."""
        try:
            cursor = self.database[collection].find(query).sort(
                sort_field, DESCENDING if descending else ASCENDING
            )
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Error querying {collection}: {e}", exc_info=True)
            raise ReadError("Could not read data. Please try again.", cause=e) from e

    async def watch_document(self, collection: str, doc_id: str) -> AsyncIterator[Optional[Dict[str, Any]]]:
        """Yield the document (or None) now and after every change to it."""
        coll = self.database[collection]
        pipeline = [{"$match": {"documentKey._id": doc_id}}]
        try:
            # Open the stream before the first read so no change is missed
            async with coll.watch(pipeline, full_document="updateLookup") as stream:
                yield await coll.find_one({"_id": doc_id})
                async for change in stream:
                    if change.get("operationType") == "delete":
                        yield None
                    else:
                        yield change.get("fullDocument")
        except PyMongoError as e:
            logger.error(f"Error watching {collection}/{doc_id}: {e}", exc_info=True)
            raise ReadError("Lost connection to live updates.", cause=e) from e

    async def watch_query(
        self,
        collection: str,
        query: Dict[str, Any],
        sort_field: str,
        descending: bool = True
    ) -> AsyncIterator[List[Dict[str, Any]]]:
        """Yield the ordered query result now and after every relevant change."""
        coll = self.database[collection]
        # Deletes carry no document body; they are matched here and filtered
        # below against the ids of the last snapshot
        pipeline = [{"$match": {"$or": [
            {f"fullDocument.{key}": value for key, value in query.items()},
            {"operationType": "delete"},
        ]}}]
        try:
            async with coll.watch(pipeline) as stream:
                documents = await self.find_documents(collection, query, sort_field, descending)
                known_ids = {document["_id"] for document in documents}
                yield documents
                async for change in stream:
                    if change.get("operationType") == "delete" and \
                            change.get("documentKey", {}).get("_id") not in known_ids:
                        continue
                    documents = await self.find_documents(collection, query, sort_field, descending)
                    known_ids = {document["_id"] for document in documents}
                    yield documents
        except PyMongoError as e:
            logger.error(f"Error watching {collection}: {e}", exc_info=True)
            raise ReadError("Lost connection to live updates.", cause=e) from e
