import time
import uuid
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables from .env file before anything else
load_dotenv()

from app.core.config import settings
from app.core.logging import setup_logging, request_id_ctx
from app.core.errors import register_exception_handlers
from app.core.redis import redis_manager
from app.api.router import api_router
from app.core.db import init_models


setup_logging()
app = FastAPI(title=settings.APP_NAME)

logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = (time.time() - start_time) * 1000
    formatted_process_time = f"{process_time:.2f}ms"

    logger.info(
        f"Request: {request.method} {request.url.path} - Response: {response.status_code} - Time: {formatted_process_time}"
    )

    return response

# registered last so it runs first and the request log line carries the id
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
    token = request_id_ctx.set(rid)
    # left set when call_next raises: the 500 handler runs after this and logs with the id
    response = await call_next(request)
    request_id_ctx.reset(token)
    response.headers["x-request-id"] = rid
    return response


register_exception_handlers(app)


@app.on_event("startup")
async def on_startup():
    await init_models()
    await redis_manager.connect()

@app.on_event("shutdown")
async def on_shutdown():
    await redis_manager.close()


app.include_router(api_router, prefix=settings.API_PREFIX)
