"""
Couche service des uploads d'images.
Rôles:
- Valider chaque fichier (type MIME image/*, taille max) avant tout appel Cloudinary.
- Valider un lot (au moins 1 fichier, au plus UPLOAD_MAX_FILES): un lot trop grand est refusé, jamais tronqué.
- Traduire les ServiceResult Cloudinary en réponses ou en erreurs de la taxonomie (400/404/500).
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from fastapi import UploadFile

from backend.config import UPLOAD_MAX_BYTES, UPLOAD_MAX_FILES
from backend.utils.errors import ValidationError, VendorError, NotFoundError
from . import cloudinary_client

logger = logging.getLogger(__name__)

IMAGE_MIME_PREFIX = "image/"

def is_image(content_type: Optional[str]) -> bool:
    return (content_type or "").lower().startswith(IMAGE_MIME_PREFIX)

def _max_size_label() -> str:
    return f"{UPLOAD_MAX_BYTES // (1024 * 1024)} MB" if UPLOAD_MAX_BYTES >= 1024 * 1024 else f"{UPLOAD_MAX_BYTES} bytes"

async def read_image(upload: UploadFile) -> bytes:
    """
    Lit un fichier multipart après contrôle:
    - type MIME image/* sinon ValidationError
    - taille <= UPLOAD_MAX_BYTES sinon ValidationError (lecture bornée à max+1 octets)
    """
    if not is_image(upload.content_type):
        raise ValidationError("Only image files are allowed!")
    data = await upload.read(UPLOAD_MAX_BYTES + 1)
    if len(data) > UPLOAD_MAX_BYTES:
        raise ValidationError(f"File too large (max {_max_size_label()})")
    if not data:
        raise ValidationError("Empty image file")
    return data

def _present(files: Optional[Sequence[UploadFile]]) -> List[UploadFile]:
    return [f for f in (files or []) if f is not None and f.filename]

async def upload_single(upload: Optional[UploadFile]) -> Dict[str, Any]:
    if upload is None or not upload.filename:
        raise ValidationError("No image file provided")
    data = await read_image(upload)
    result = await cloudinary_client.upload_image(data)
    if not result.success:
        raise VendorError(result.error or "Failed to upload image")
    logger.info("uploads.image uploaded public_id=%s bytes=%s", result.get("public_id"), result.get("bytes"))
    return result.data

async def upload_many(uploads: Optional[Sequence[UploadFile]]) -> List[Dict[str, Any]]:
    """
    Upload d'un lot: tous les fichiers sont validés avant le premier envoi,
    puis envoyés un par un (un appel Cloudinary en vol à la fois).
    """
    files = _present(uploads)
    if not files:
        raise ValidationError("No image files provided")
    if len(files) > UPLOAD_MAX_FILES:
        raise ValidationError(f"Too many files (max {UPLOAD_MAX_FILES})")

    payloads = [await read_image(f) for f in files]
    images: List[Dict[str, Any]] = []
    for data in payloads:
        result = await cloudinary_client.upload_image(data)
        if not result.success:
            raise VendorError(result.error or "Failed to upload images")
        images.append(result.data)
    logger.info("uploads.images uploaded count=%s", len(images))
    return images

async def delete(public_id: str) -> None:
    """
    Suppression idempotente du point de vue appelant:
    - "ok" => succès
    - toute autre réponse Cloudinary ("not found", ...) => NotFoundError (404)
    - erreur réseau/SDK => VendorError (500)
    """
    result = await cloudinary_client.delete_image(public_id)
    if result.success:
        return
    if result.not_found:
        raise NotFoundError("Image not found or already deleted")
    raise VendorError(result.error or "Failed to delete image")

async def details(public_id: str) -> Dict[str, Any]:
    result = await cloudinary_client.get_image_details(public_id)
    if result.success:
        return result.get("image")
    if result.not_found:
        raise NotFoundError("Image not found")
    raise VendorError(result.error or "Failed to get image details")
