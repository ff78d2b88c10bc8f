"""
Module 'uploads' (feature-first): adaptateur Cloudinary et validation des images.
"""

from .cloudinary_client import (
    UploadOptions,
    upload_image,
    upload_from_url,
    delete_image,
    get_image_details,
    transformation_url,
    optimized_url,
    ping,
)
from .service import is_image, read_image, upload_single, upload_many, delete, details

__all__ = [
    # cloudinary
    "UploadOptions",
    "upload_image",
    "upload_from_url",
    "delete_image",
    "get_image_details",
    "transformation_url",
    "optimized_url",
    "ping",
    # services
    "is_image",
    "read_image",
    "upload_single",
    "upload_many",
    "delete",
    "details",
]
