from typing import Any, Dict, Optional


class ServiceResult:
    """
    Enveloppe uniforme retournée par les adaptateurs fournisseurs (Stripe, Cloudinary).
    - success: l'appel a abouti côté fournisseur
    - data: charge utile normalisée (jamais l'objet SDK brut)
    - error: message du fournisseur si échec
    - not_found: le fournisseur a explicitement signalé une ressource absente
    Les appelants doivent tester success avant de lire data.
    """

    def __init__(
        self,
        success: bool,
        data: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        not_found: bool = False,
    ):
        self.success = success
        self.data = data or {}
        self.error = error
        self.not_found = not_found

    @classmethod
    def ok(cls, **data: Any) -> "ServiceResult":
        return cls(True, data=data)

    @classmethod
    def fail(cls, error: str, not_found: bool = False, **data: Any) -> "ServiceResult":
        return cls(False, data=data, error=error, not_found=not_found)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, **self.data}
        return {"success": False, "error": self.error, **self.data}

    def __repr__(self) -> str:
        return f"ServiceResult(success={self.success!r}, data={self.data!r}, error={self.error!r})"
