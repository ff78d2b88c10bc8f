# module backend.uploads.views

"""Endpoints d'upload d'images (Cloudinary).
- POST /image: un fichier (champ 'image'), image/* uniquement, 5 MB max.
- POST /images: jusqu'à 5 fichiers (champ 'images'); un lot plus grand est refusé (400).
- DELETE /image/{public_id}: suppression idempotente (404 si déjà supprimée).
- GET /image/{public_id}: métadonnées (404 si absente côté Cloudinary).
- GET /health: ping Cloudinary.
Les public_id contenant un dossier ("exotic-3d-printing/abc") sont acceptés via le convertisseur :path.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from backend.utils.rate_limit import optional_rate_limit
from backend.uploads import cloudinary_client
from backend.uploads import service as uploads_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/uploads", tags=["Uploads API"])


@router.post("/image", dependencies=[Depends(optional_rate_limit(times=20, seconds=60))])
async def upload_image(image: Optional[UploadFile] = File(None)):
    asset = await uploads_service.upload_single(image)
    return {"success": True, "message": "Image uploaded successfully", **asset}


@router.post("/images", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def upload_images(images: Optional[List[UploadFile]] = File(None)):
    uploaded = await uploads_service.upload_many(images)
    return {
        "success": True,
        "message": f"{len(uploaded)} images uploaded successfully",
        "images": uploaded,
    }


@router.delete("/image/{public_id:path}")
async def delete_image(public_id: str):
    await uploads_service.delete(public_id)
    return {"success": True, "message": "Image deleted successfully"}


@router.get("/image/{public_id:path}")
async def get_image(public_id: str):
    image = await uploads_service.details(public_id)
    return {"success": True, "image": image}


@router.get("/health")
async def uploads_health():
    """Vérifie la connexion Cloudinary (api.ping)."""
    result = await cloudinary_client.ping()
    if not result.success:
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Cloudinary connection failed", "error": result.error},
        )
    return {"success": True, "message": "Cloudinary connection successful", "status": result.get("status")}
