from fastapi import FastAPI, Request, status, HTTPException
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
import logging

from app.config import LOG_LEVEL, PORT
from app.database import init_db
from app.api.routes import router

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="String Analyzer Service",
    description="Analyze, store and query string properties, including natural language filters",
    version="1.0.0"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize database on startup
@app.on_event("startup")
def on_startup():
    logger.info("Initializing database...")
    init_db()

# Include routers
app.include_router(router, tags=["strings"])

@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "String Analyzer Service",
        "version": "1.0.0",
        "endpoints": {
            "POST /strings": "Analyze and store a string",
            "GET /strings/{string_value}": "Get specific string analysis",
            "GET /strings": "Get all strings with optional filters",
            "GET /strings/filter-by-natural-language": "Filter using natural language",
            "DELETE /strings/{string_value}": "Delete a string"
        }
    }

@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}

# Validation error handler
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = {}
    wrong_type = False
    for error in exc.errors():
        field = error['loc'][-1] if error['loc'] else "request"
        errors[str(field)] = error['msg']
        if error['type'].endswith("_type") and field != "body":
            wrong_type = True

    # a value of the wrong type is unprocessable, anything else is a bad request
    if wrong_type:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "Invalid data type for request field",
                "code": "VALIDATION_ERROR",
                "details": errors
            }
        )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation failed",
            "code": "INVALID_INPUT",
            "details": errors
        }
    )

# HTTPException handler
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    # If detail is already a dict with 'error' key, return as is
    if isinstance(exc.detail, dict) and 'error' in exc.detail:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.detail
        )
    # Otherwise wrap it
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)}
    )

# Generic error handler
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "code": "INTERNAL_SERVER_ERROR"
        }
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=PORT, reload=True)
