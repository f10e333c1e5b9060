import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.chain.base import RevertedError
from app.chain.network import Web3Network
from app.chain.normalize import normalize_chain
from app.config import settings
from app.errors import GatewayError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    network = Web3Network(settings.rpc_url, request_timeout=settings.rpc_request_timeout_seconds)
    await network.initialize()
    app.state.network = network
    logger.info(f"Connected executor to {settings.rpc_url}")
    yield
    try:
        await network.close()
    except Exception as e:
        logger.warning(f"Failed to close RPC provider: {e}")


app = FastAPI(
    title="Libretyverse API",
    description="Backend gateway for the Libretyverse book publishing, marketplace and rights contracts.",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    content = {"error": exc.message}
    if isinstance(exc, RevertedError):
        content["receipt"] = normalize_chain(exc.receipt)
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{field}: {err.get('msg')}" if field else err.get("msg", "Invalid request"))
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


from app.routes import admin, auth, book, marketplace, payment_splitter, rights_manager  # noqa: E402

app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
app.include_router(book.router, prefix="/book", tags=["Book"])
app.include_router(payment_splitter.router, prefix="/payment-splitter", tags=["Payment Splitter"])
app.include_router(marketplace.router, prefix="/marketplace", tags=["Marketplace"])
app.include_router(rights_manager.router, prefix="/rights-manager", tags=["Rights Manager"])


@app.get("/")
async def root():
    return {"message": "Libretyverse API is running"}


@app.get("/health")
async def health():
    return {"status": "ok"}
