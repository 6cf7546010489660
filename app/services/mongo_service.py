"""
MongoDB Service - resume files and AI resume analyses.

Collections in this database:
1. resumes.files / resumes.chunks - uploaded resume files (GridFS)
2. resume_analyses                - AI resume reviews

WHY MongoDB for these?
- Files are opaque blobs addressed by an object name
- AI outputs have nested, flexible schemas
- No joins needed - documents are self-contained

Object names mirror a storage path: "<user_id>/<epoch_ms>.<ext>". A user
can only read or delete objects under their own prefix.
"""

import time
from datetime import datetime, timezone
from typing import Optional, List, Tuple

from bson import ObjectId
from gridfs import GridFSBucket
from gridfs.errors import NoFile
from loguru import logger
from pymongo.collection import Collection

from app.db.mongodb import get_collection, get_resume_bucket, COLLECTIONS


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict with an "id" key."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def build_object_name(user_id: str, filename: str) -> str:
    """Object name for a new upload, keeping the original extension."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
    return f"{user_id}/{int(time.time() * 1000)}.{ext}"


def owns_object(user_id: str, object_name: str) -> bool:
    return bool(object_name) and object_name.startswith(f"{user_id}/")


# ============================================================
# RESUME FILES (GridFS)
# ============================================================

class ResumeFileService:
    """
    Stores uploaded resume files in a GridFS bucket.
    """

    def __init__(self, bucket: GridFSBucket = None):
        self.bucket = bucket or get_resume_bucket()

    def upload(self, user_id: str, filename: str, content: bytes, content_type: str = None) -> str:
        """
        Store a file and return its object name (kept in resumes.file_url).
        """
        object_name = build_object_name(user_id, filename)
        self.bucket.upload_from_stream(
            object_name,
            content,
            metadata={
                "user_id": user_id,
                "original_filename": filename,
                "content_type": content_type or "application/octet-stream"
            }
        )
        logger.info("Stored resume file {} ({} bytes)", object_name, len(content))
        return object_name

    def download(self, user_id: str, object_name: str) -> Optional[Tuple[bytes, str, str]]:
        """
        Read an owned file.
        Returns (content, content_type, original_filename) or None.
        """
        if not owns_object(user_id, object_name):
            return None
        try:
            grid_out = self.bucket.open_download_stream_by_name(object_name)
        except NoFile:
            return None
        metadata = grid_out.metadata or {}
        return (
            grid_out.read(),
            metadata.get("content_type", "application/octet-stream"),
            metadata.get("original_filename", object_name.rsplit("/", 1)[-1])
        )

    def delete(self, user_id: str, object_name: str) -> bool:
        """Delete an owned file. Returns False when there was nothing to delete."""
        if not owns_object(user_id, object_name):
            return False
        deleted = False
        for grid_out in self.bucket.find({"filename": object_name, "metadata.user_id": user_id}):
            self.bucket.delete(grid_out._id)
            deleted = True
        return deleted


# ============================================================
# RESUME ANALYSES COLLECTION
# Stores AI reviews of resumes
# ============================================================

class ResumeAnalysisService:
    """
    Handles resume analysis storage.
    """

    def __init__(self, collection: Collection = None):
        self.collection: Collection = collection if collection is not None else get_collection(COLLECTIONS["resume_analyses"])

    def insert(self, user_id: str, analysis: dict, target_role: str = None, source: str = "text") -> dict:
        """
        Insert an analysis.

        Args:
            user_id: owner (PostgreSQL users.id)
            analysis: validated analysis JSON
            target_role: role the review was tailored to
            source: "text" for pasted text, otherwise the uploaded filename
        """
        doc = {
            "user_id": user_id,
            "target_role": target_role,
            "source": source,
            "analysis": analysis,
            "created_at": datetime.now(timezone.utc)
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def list_for_user(self, user_id: str, limit: int = 20) -> List[dict]:
        """Newest analyses first."""
        docs = self.collection.find({"user_id": user_id}).sort("created_at", -1).limit(limit)
        return [serialize_doc(doc) for doc in docs]

    def delete(self, user_id: str, analysis_id: str) -> bool:
        if not ObjectId.is_valid(analysis_id):
            return False
        result = self.collection.delete_one({"_id": ObjectId(analysis_id), "user_id": user_id})
        return result.deleted_count > 0


# ============================================================
# DEPENDENCY GETTERS
# ============================================================

def get_resume_file_service() -> ResumeFileService:
    return ResumeFileService()


def get_resume_analysis_service() -> ResumeAnalysisService:
    return ResumeAnalysisService()
