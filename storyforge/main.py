import time
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storyforge.core.config import settings
from storyforge.core.logger import logger, log_api_request, log_error
from storyforge.web import routes as web_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pooled client for all provider calls
    app.state.http_client = httpx.AsyncClient()
    logger.info(f"🚀 {settings.PROJECT_NAME} starting (port {settings.PORT})")
    yield
    await app.state.http_client.aclose()


app = FastAPI(title=f"{settings.PROJECT_NAME} API", version=settings.VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_timing(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    log_api_request(request.method, request.url.path, response.status_code, (time.perf_counter() - start) * 1000)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log_error("Server error", exc, {"path": request.url.path})
    return JSONResponse(status_code=500, content={"error": "Internal server error", "message": str(exc)})


#Include Routers
app.include_router(web_routes.router)


def run():
    import uvicorn

    uvicorn.run("storyforge.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
