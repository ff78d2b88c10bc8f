from typing import Dict, Any, List
from fastapi import Request, Response, HTTPException
import os
import time
import hashlib

def _client_key(req: Request) -> str:
    # Priorité: jeton Bearer (hashé) puis IP, toujours par chemin
    path = req.url.path
    auth_header = req.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        h = hashlib.sha256(auth_header[7:].strip().encode("utf-8")).hexdigest()[:16]
        return f"user:{h}:{path}"
    ip = req.client.host if req.client else "local"
    return f"ip:{ip}:{path}"

def _sweep(bucket: Dict[str, List[float]], now: float, seconds: int) -> None:
    # Retire les clients sans requête dans la fenêtre
    for key in [k for k, hits in bucket.items() if not hits or now - hits[-1] >= seconds]:
        del bucket[key]

def optional_rate_limit(times: int, seconds: int):
    """
    Dépendance FastAPI de limitation de débit.
    - LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire (app.state._rl_store, un compartiment par durée
      de fenêtre, balayé au plus une fois par fenêtre pour oublier les clients inactifs)
    - app.state.rate_limit_enabled is False: désactivée
    - sinon fastapi-limiter (Redis) si initialisé; un limiter indisponible ne bloque pas la requête
    """
    async def _dep(request: Request, response: Response):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _client_key(request)
            state = request.app.state
            store = getattr(state, "_rl_store", None)
            if store is None:
                store = state._rl_store = {}
            bucket = store.setdefault(seconds, {})
            swept = getattr(state, "_rl_swept", None)
            if swept is None:
                swept = state._rl_swept = {}
            if now - swept.get(seconds, 0.0) >= seconds:
                _sweep(bucket, now, seconds)
                swept[seconds] = now

            hits = [t for t in bucket.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                bucket[key] = hits
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            bucket[key] = hits
            return

        if getattr(request.app.state, "rate_limit_enabled", None) is False:
            return

        try:
            from fastapi_limiter.depends import RateLimiter

            async def _identifier(req: Request) -> str:
                return _client_key(req)
            return await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
        except HTTPException:
            raise
        except Exception:
            # Limiter non initialisé (Redis absent): pas de 429, voir LOCAL_RATE_LIMIT_FALLBACK
            return
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)

    limiter_ready = False
    try:
        from fastapi_limiter import FastAPILimiter
        limiter_ready = getattr(FastAPILimiter, "redis", None) is not None
    except ImportError:
        limiter_ready = False

    return {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": "redis" if limiter_ready else ("memory" if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1" else None),
    }
