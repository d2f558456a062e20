from datetime import datetime, timezone
from typing import Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument

from ideaforge.models.idea import GenerationResult
from ideaforge.utils.logger import logger

IDEA_STATUSES = ("draft", "published", "archived")


def _object_id(idea_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(idea_id)
    except (InvalidId, TypeError):
        logger.warning(f"Invalid idea id: {idea_id}")
        return None


def _serialize(document: Optional[Dict]) -> Optional[Dict]:
    """Replace the ObjectId with a string ``id`` so documents can be printed as JSON."""
    if document is None:
        return None
    document = dict(document)
    document["id"] = str(document.pop("_id"))
    return document


class MongoDBClient:
    def __init__(self, mongo_uri: str, db_name: str = "ideaforge"):
        self.mongo_uri = mongo_uri
        self.client = MongoClient(self.mongo_uri)

        self.db = self.client[db_name]
        self.ideas = self.db.project_ideas
        self.create_indexes()

    def create_indexes(self):
        """Create necessary indexes for collections."""
        # Per-user history, newest first
        self.ideas.create_index([("ownerId", ASCENDING), ("createdAt", DESCENDING)])

        # Public listings
        self.ideas.create_index([("isPublic", ASCENDING), ("status", ASCENDING)])

        # Full-text search over the idea content
        self.ideas.create_index(
            [("title", "text"), ("description", "text"), ("keywords", "text")],
            name="idea_text",
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def insert_ideas(self, owner_id: str, prompt: str, result: GenerationResult, is_public: bool = True) -> List[str]:
        """
        Store every idea of a generation result for one owner.

        Returns:
            The new document ids, in the order of ``result.ideas``
        """
        if not result.ideas:
            return []

        now = datetime.now(timezone.utc)
        documents = []
        for idea in result.ideas:
            doc = idea.model_dump()
            doc.update({
                "ownerId": owner_id,
                "prompt": prompt,
                "keywords": list(result.keywords),
                "degraded": result.degraded,
                "isPublic": is_public,
                "status": "published",
                "likes": 0,
                "views": 0,
                "plan": None,
                "createdAt": now,
                "updatedAt": now,
            })
            documents.append(doc)

        inserted = self.ideas.insert_many(documents)
        logger.info(f"Stored {len(inserted.inserted_ids)} ideas for owner {owner_id}")
        return [str(_id) for _id in inserted.inserted_ids]

    def fetch_ideas_by_owner(self, owner_id: str, limit: int = 20) -> List[Dict]:
        """Fetch an owner's ideas, newest first, leaving out archived ones."""
        cursor = (
            self.ideas.find({"ownerId": owner_id, "status": {"$ne": "archived"}})
            .sort("createdAt", DESCENDING)
            .limit(limit)
        )
        return [_serialize(doc) for doc in cursor]

    def fetch_idea(self, idea_id: str, count_view: bool = True) -> Optional[Dict]:
        """Fetch one idea by id, counting a view unless ``count_view`` is False."""
        object_id = _object_id(idea_id)
        if object_id is None:
            return None

        if not count_view:
            return _serialize(self.ideas.find_one({"_id": object_id}))

        document = self.ideas.find_one_and_update(
            {"_id": object_id},
            {"$inc": {"views": 1}},
            return_document=ReturnDocument.AFTER,
        )
        return _serialize(document)

    def _update(self, idea_id: str, update: Dict) -> bool:
        object_id = _object_id(idea_id)
        if object_id is None:
            return False
        update.setdefault("$set", {})["updatedAt"] = datetime.now(timezone.utc)
        result = self.ideas.update_one({"_id": object_id}, update)
        return result.matched_count > 0

    def update_plan(self, idea_id: str, plan: str) -> bool:
        """Store a generated plan on an idea."""
        updated = self._update(idea_id, {"$set": {"plan": plan}})
        if updated:
            logger.info(f"Stored plan for idea {idea_id}")
        return updated

    def update_status(self, idea_id: str, status: str) -> bool:
        if status not in IDEA_STATUSES:
            raise ValueError(f"Unknown status: {status}")
        return self._update(idea_id, {"$set": {"status": status}})

    def like_idea(self, idea_id: str) -> bool:
        return self._update(idea_id, {"$inc": {"likes": 1}})

    def delete_idea(self, idea_id: str) -> bool:
        object_id = _object_id(idea_id)
        if object_id is None:
            return False
        result = self.ideas.delete_one({"_id": object_id})
        logger.info(f"Deleted {result.deleted_count} idea(s) with id {idea_id}")
        return result.deleted_count > 0

    def close(self):
        """Close the MongoDB connection."""
        if self.client:
            self.client.close()
