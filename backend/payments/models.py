from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class CreateIntentRequest(BaseModel):
    # amount reste optionnel ici: l'absence est une erreur métier (400) gérée par le service
    amount: Optional[int] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    metadata: Dict[str, Any] = Field(default_factory=dict)
