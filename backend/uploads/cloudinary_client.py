"""
Adaptateur Cloudinary: configuration du SDK, upload/suppression/lecture d'images, URLs transformées.
- Les appels réseau du SDK (bloquants) passent par run_in_threadpool.
- Aucune exception ne traverse cette frontière: tout est normalisé en ServiceResult.
"""
import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import cloudinary
import cloudinary.api
import cloudinary.uploader
import cloudinary.utils
from cloudinary.exceptions import NotFound
from fastapi.concurrency import run_in_threadpool

from backend.config import (
    CLOUDINARY_CLOUD_NAME,
    CLOUDINARY_API_KEY,
    CLOUDINARY_API_SECRET,
    UPLOAD_FOLDER,
)
from backend.utils.result import ServiceResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadOptions:
    """
    Options d'upload explicites (remplacent la fusion de dicts par défaut/surcharge).
    - folder: espace de nommage Cloudinary (UPLOAD_FOLDER)
    - resource_type: "image"
    - max_width/max_height + crop="limit": réduit sans jamais agrandir (1200x1200)
    - quality: "auto" (compression choisie par Cloudinary)
    Surcharge: dataclasses.replace(UploadOptions(), folder="...").
    """
    folder: str = UPLOAD_FOLDER
    resource_type: str = "image"
    max_width: int = 1200
    max_height: int = 1200
    crop: str = "limit"
    quality: str = "auto"

    def to_params(self) -> Dict[str, Any]:
        return {
            "folder": self.folder,
            "resource_type": self.resource_type,
            "transformation": [
                {"width": self.max_width, "height": self.max_height, "crop": self.crop},
                {"quality": self.quality},
            ],
        }


DEFAULT_UPLOAD_OPTIONS = UploadOptions()

# module backend.uploads.cloudinary_client
def configure() -> None:
    """Applique les identifiants du compte au SDK (appelé au démarrage et avant chaque appel)."""
    if CLOUDINARY_CLOUD_NAME:
        cloudinary.config(
            cloud_name=CLOUDINARY_CLOUD_NAME,
            api_key=CLOUDINARY_API_KEY,
            api_secret=CLOUDINARY_API_SECRET,
            secure=True,
        )

def is_configured() -> bool:
    return bool(CLOUDINARY_CLOUD_NAME and CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET)

def _error_message(e: Exception) -> str:
    return str(e) or e.__class__.__name__

def summarize_asset(result: Dict[str, Any]) -> Dict[str, Any]:
    """Champs exposés d'une ressource Cloudinary: URL sécurisée, public_id, format, poids, dimensions."""
    return {
        "url": result.get("secure_url"),
        "public_id": result.get("public_id"),
        "format": result.get("format"),
        "bytes": result.get("bytes"),
        "width": result.get("width"),
        "height": result.get("height"),
    }

async def upload_image(data: bytes, options: UploadOptions = DEFAULT_UPLOAD_OPTIONS) -> ServiceResult:
    """Envoie le binaire d'une image; retour ServiceResult(url, public_id, format, bytes, width, height)."""
    configure()
    try:
        result = await run_in_threadpool(cloudinary.uploader.upload, io.BytesIO(data), **options.to_params())
        return ServiceResult.ok(**summarize_asset(result))
    except Exception as e:
        logger.exception("cloudinary_client.upload_image failed size=%s", len(data or b""))
        return ServiceResult.fail(_error_message(e))

async def upload_from_url(url: str, options: UploadOptions = DEFAULT_UPLOAD_OPTIONS) -> ServiceResult:
    """Laisse Cloudinary récupérer l'image distante (import par URL)."""
    configure()
    try:
        result = await run_in_threadpool(cloudinary.uploader.upload, url, **options.to_params())
        return ServiceResult.ok(**summarize_asset(result))
    except Exception as e:
        logger.exception("cloudinary_client.upload_from_url failed url=%s", url)
        return ServiceResult.fail(_error_message(e))

async def delete_image(public_id: str) -> ServiceResult:
    """
    Supprime une ressource.
    - success uniquement si Cloudinary répond result == "ok"
    - data.result porte la réponse brute ("ok", "not found", ...) pour distinguer d'une erreur réseau
    """
    configure()
    try:
        result = await run_in_threadpool(cloudinary.uploader.destroy, public_id)
    except Exception as e:
        logger.exception("cloudinary_client.delete_image failed public_id=%s", public_id)
        return ServiceResult.fail(_error_message(e))
    outcome = (result or {}).get("result")
    if outcome == "ok":
        return ServiceResult.ok(result=outcome)
    return ServiceResult.fail(f"Cloudinary destroy returned {outcome!r}", not_found=True, result=outcome)

async def get_image_details(public_id: str) -> ServiceResult:
    """
    Métadonnées d'une ressource.
    - NotFound (exception typée du SDK) => not_found=True
    - toute autre erreur => échec simple
    """
    configure()
    try:
        result = await run_in_threadpool(cloudinary.api.resource, public_id)
    except NotFound as e:
        logger.info("cloudinary_client.get_image_details not found public_id=%s", public_id)
        return ServiceResult.fail(_error_message(e), not_found=True)
    except Exception as e:
        logger.exception("cloudinary_client.get_image_details failed public_id=%s", public_id)
        return ServiceResult.fail(_error_message(e))
    image = {"public_id": result.get("public_id"), **summarize_asset(result), "created_at": result.get("created_at")}
    return ServiceResult.ok(image=image)

def transformation_url(public_id: str, transformations: List[Dict[str, Any]]) -> ServiceResult:
    configure()
    try:
        url, _ = cloudinary.utils.cloudinary_url(public_id, transformation=transformations, secure=True)
        return ServiceResult.ok(url=url)
    except Exception as e:
        logger.exception("cloudinary_client.transformation_url failed public_id=%s", public_id)
        return ServiceResult.fail(_error_message(e))

def optimized_url(public_id: str, width: int = 800, height: int = 600, quality: str = "auto") -> Optional[str]:
    """URL recadrée (crop fill) et compressée pour l'affichage catalogue; None si le SDK n'est pas configuré."""
    result = transformation_url(
        public_id,
        [{"width": width, "height": height, "crop": "fill"}, {"quality": quality}],
    )
    return result.get("url") if result.success else None

async def ping() -> ServiceResult:
    configure()
    try:
        result = await run_in_threadpool(cloudinary.api.ping)
        return ServiceResult.ok(status=(result or {}).get("status"))
    except Exception as e:
        logger.exception("cloudinary_client.ping failed")
        return ServiceResult.fail(_error_message(e))
