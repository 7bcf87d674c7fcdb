from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from guidari.config import settings
import time
import logging
from collections import defaultdict
from datetime import datetime, timedelta

# Rutas que aceptan credenciales y por lo tanto se limitan por IP
RATE_LIMITED_PATHS = {"/auth/login", "/auth/setup"}


def setup_middlewares(app: FastAPI):
    # GZIP Compression - comprime respuestas > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()] or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    logger = logging.getLogger("guidari.http")

    # Rate limiting simple en memoria
    login_attempts = defaultdict(list)

    @app.middleware("http")
    async def rate_limit_and_timing(request: Request, call_next):
        limit = settings.login_attempts_per_minute
        if limit and request.url.path in RATE_LIMITED_PATHS and request.method == "POST":
            client_ip = request.client.host if request.client else "unknown"
            now = datetime.now()

            # Limpiar intentos viejos (> 1 minuto)
            login_attempts[client_ip] = [
                attempt for attempt in login_attempts[client_ip]
                if now - attempt < timedelta(minutes=1)
            ]

            if len(login_attempts[client_ip]) >= limit:
                return JSONResponse(
                    status_code=429,
                    content={
                        "error": True,
                        "message": "Demasiados intentos. Intente nuevamente en 1 minuto.",
                        "type": "rate_limited",
                    },
                )

            login_attempts[client_ip].append(now)

        # Timing middleware
        start = time.time()
        resp = await call_next(request)
        dur = (time.time() - start) * 1000
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, resp.status_code, dur)
        return resp
