from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from lending_library.core.config import logger
from lending_library.core.database import Base, engine
from lending_library.api import routes
from lending_library.services.errors import LibraryError

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Creating database tables (if not present)...")
    Base.metadata.create_all(bind=engine)
    yield

app = FastAPI(title="Lending Library", lifespan=lifespan)
app.include_router(routes.router)

@app.exception_handler(LibraryError)
def library_error_handler(request: Request, exc: LibraryError):
    logger.info(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

@app.get("/health")
def health():
    return {"status": "ok"}
