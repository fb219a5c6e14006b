"""
Question Paper Generator API — Main Application
Uploads a spreadsheet question bank, generates six-question mid/special papers
under unit and BTL constraints, and proxies question images as data URLs.
"""

from dotenv import load_dotenv
load_dotenv()

import logging
import os

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from routers import generation, images, upload
from routers.upload import UPLOAD_DIR

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s  %(levelname)s  %(message)s")


app = FastAPI(
    title="Question Paper Generator API",
    description="Spreadsheet question bank upload, BTL-constrained paper generation and image proxy",
    version="1.0.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Error envelope ────────────────────────────────────────────────────────────

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request: " + "; ".join(messages)},
    )


# ─── Routers ───────────────────────────────────────────────────────────────────

app.include_router(upload.router)       # /api/upload
app.include_router(generation.router)   # /api/generate
app.include_router(images.router)       # /api/image-proxy-base64

# Static files — serve the upload directory
os.makedirs(UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=UPLOAD_DIR), name="uploads")


@app.get("/")
def root():
    return {
        "name": "Question Paper Generator API",
        "version": "1.0.0",
        "endpoints": {
            "docs": "/docs",
            "upload": "/api/upload",
            "generate": "/api/generate",
            "image_proxy": "/api/image-proxy-base64",
        },
    }


@app.get("/health")
def health_check():
    return {"status": "healthy", "service": "question-paper-generator"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "3000")))
