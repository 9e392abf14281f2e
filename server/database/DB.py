import logging
from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, ReturnDocument

from config.config import MONGODB_URI, DATABASE_NAME
from helpers.DocumentSerializer import DocumentSerializerVisitor

logger = logging.getLogger(__name__)


def get_db(request: Request):
    """Dependency to get database instance from app state"""
    return request.app.state.db


def object_id(value):
    """Parse a string id into an ObjectId, or None when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class Database:
    def __init__(self, uri=MONGODB_URI, database_name=DATABASE_NAME, client=None):
        self.MONGO_URI = uri
        self.database_name = database_name
        self.client = client
        self.db = None
        # an injected client is closed by whoever created it
        self._owns_client = client is None

    def connect(self):
        if self.client is None:
            self.client = AsyncIOMotorClient(self.MONGO_URI)
        self.db = self.client[self.database_name]
        logger.info("Connected to MongoDB database %s", self.database_name)

    async def ensure_indexes(self):
        """Create the indexes the application relies on for lookups and uniqueness."""
        await self.db["users"].create_index([("email", ASCENDING)], unique=True)
        await self.db["events"].create_index([("ngo", ASCENDING)])
        await self.db["registrations"].create_index([("event", ASCENDING)])
        # one registration per (event, volunteer), enforced by the store
        await self.db["registrations"].create_index(
            [("event", ASCENDING), ("volunteer", ASCENDING)],
            unique=True,
        )
        logger.info("Database indexes ensured")

    def close(self):
        if self.client is not None and self._owns_client:
            self.client.close()
            self.client = None
            logger.info("MongoDB connection closed")
        self.db = None

    def serializer(self, obj):
        visitor = DocumentSerializerVisitor()
        return visitor.visit(obj)

    def _serialize_document(self, document):
        document = self.serializer(document)
        if "_id" in document:
            document["id"] = document["_id"]
        return document

    async def add(self, collection_name, data):
        collection = self.db[collection_name]
        result = await collection.insert_one(data)

        data["_id"] = result.inserted_id
        return {
            "status": 201,
            "data": self._serialize_document(data),
            "message": "Document added successfully"
        }

    async def find_many(self, collection_name, query=None, projection=None, sort=None):
        """Find multiple documents matching query"""
        collection = self.db[collection_name]
        cursor = collection.find(query or {}, projection)

        if sort:
            cursor = cursor.sort(sort)

        documents = []
        async for doc in cursor:
            documents.append(self._serialize_document(doc))

        return {
            "status": 200,
            "data": documents,
            "message": "Documents retrieved successfully"
        }

    async def find_one(self, collection_name, query, projection=None):
        """Find a single document (returns document directly or None)"""
        collection = self.db[collection_name]
        document = await collection.find_one(query, projection)

        if document:
            document = self._serialize_document(document)

        return document

    async def populate(self, documents, field, collection_name, projection=None):
        """
        Replace the id stored under `field` in each document with the referenced
        document from `collection_name`. Unresolvable references become None.
        """
        ids = {object_id(doc.get(field)) for doc in documents if isinstance(doc.get(field), str)}
        ids.discard(None)
        if not ids:
            return documents

        result = await self.find_many(collection_name, {"_id": {"$in": list(ids)}}, projection)
        by_id = {doc["_id"]: doc for doc in result["data"]}
        for doc in documents:
            if isinstance(doc.get(field), str):
                doc[field] = by_id.get(doc[field])
        return documents

    async def count(self, collection_name, query):
        collection = self.db[collection_name]
        return await collection.count_documents(query)

    async def update(self, collection_name, query, update_string):
        """Update a single document and return it as it is after the update (or None)"""
        collection = self.db[collection_name]
        document = await collection.find_one_and_update(
            query,
            update_string,
            return_document=ReturnDocument.AFTER
        )

        if document:
            document = self._serialize_document(document)

        return document

    async def delete(self, collection_name, query):
        collection = self.db[collection_name]
        result = await collection.delete_one(query)

        return {
            "status": 200 if result.deleted_count > 0 else 404,
            "deleted_count": result.deleted_count,
            "message": "Document deleted successfully" if result.deleted_count > 0 else "Document not found"
        }

    async def delete_many(self, collection_name, query):
        """Delete every document matching query"""
        collection = self.db[collection_name]
        result = await collection.delete_many(query)

        return {
            "status": 200,
            "deleted_count": result.deleted_count,
            "message": f"Deleted {result.deleted_count} documents"
        }
