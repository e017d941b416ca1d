"""Object storage uploads."""

from notes_app.storage.upload import S3Uploader, UploadFile, build_object_key

__all__ = ["S3Uploader", "UploadFile", "build_object_key"]
