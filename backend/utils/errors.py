"""
Taxonomie d'erreurs de l'API.
- ValidationError: entrée absente/invalide -> 400
- VendorError: Stripe ou Cloudinary refuse l'appel -> 500
- NotFoundError: ressource absente côté fournisseur -> 404
Les handlers (backend.app_setup.exceptions) les convertissent en {"success": false, "message": ...}.
"""
from typing import Optional


class ApiError(Exception):
    status_code = 500
    default_message = "Erreur interne"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ApiError):
    status_code = 400
    default_message = "Requête invalide"


class VendorError(ApiError):
    status_code = 500
    default_message = "Erreur du fournisseur"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Ressource introuvable"
