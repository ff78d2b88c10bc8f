"""
Lance l'API de la boutique en local: `python -m backend`.

Variables d'environnement:
- PORT: port d'écoute (8000)
- HOST: interface d'écoute (0.0.0.0)
- UVICORN_RELOAD: "1"/"true"/"yes" pour le rechargement automatique
- LOG_LEVEL: niveau de logs uvicorn ("info")
"""
import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "backend.asgi:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", 8000)),
        reload=os.environ.get("UVICORN_RELOAD", "").lower() in ("1", "true", "yes"),
        log_level=os.environ.get("LOG_LEVEL", "info"),
    )


if __name__ == "__main__":
    main()
