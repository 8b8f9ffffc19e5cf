from fastapi import FastAPI, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv
import os
from datetime import datetime
from loguru import logger

# ==================== IMPORTS ====================
from models import Base
from db import engine, get_db
from errors import MalformedRequestError, SurveyError
from schemas import ErrorResponse
import analytics
import surveys
import validation

# Carregar variáveis de ambiente
load_dotenv()

LOG_FILE = os.getenv("LOG_FILE", "logs/info.log")
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

if LOG_FILE:
    logger.add(LOG_FILE, rotation="1 week", retention="4 weeks", level="INFO")

# Criar aplicação FastAPI
app = FastAPI(
    title="Culture Assessment Survey API",
    description="API de coleta e análise da avaliação de cultura organizacional",
    version="1.0.0"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rotas fixas (/questions, /validate) antes de /api/surveys/{survey_id}
app.include_router(validation.router)
app.include_router(analytics.router)
app.include_router(surveys.router)

# ==================== ROTAS BÁSICAS ====================

@app.get("/", tags=["Health Check"])
async def root():
    return {
        "message": "✅ Culture Assessment Survey API está rodando!",
        "status": "online",
        "timestamp": datetime.now().isoformat()
    }

@app.get("/health", tags=["Health Check"])
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as e:
        logger.error(f"❌ Banco de dados indisponível: {str(e)}")
        database = "unavailable"

    return JSONResponse(
        status_code=status.HTTP_200_OK if database == "connected" else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if database == "connected" else "degraded",
            "database": database,
            "timestamp": datetime.now().isoformat(),
            "version": "1.0.0"
        },
    )

# ==================== STARTUP/SHUTDOWN ====================

@app.on_event("startup")
async def startup_event():
    logger.info("🚀 API iniciando...")
    Base.metadata.create_all(bind=engine)
    logger.info("✅ API pronta para receber requisições!")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("🛑 API encerrando...")

# ==================== TRATAMENTO DE ERROS ====================

def error_response(status_code: int, message: str, error=None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body.model_dump(by_alias=True)))


REQUIRED_LOCATIONS = {("body",), ("body", "userDetails"), ("body", "questionResponses")}


def describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        return "Invalid JSON in request body"
    if not all(err.get("loc", ("body",))[0] == "body" for err in errors):
        return "Invalid request parameters"
    for err in errors:
        loc = tuple(err.get("loc", ()))
        # null em userDetails/questionResponses conta como campo ausente
        if loc in REQUIRED_LOCATIONS and (err.get("type") == "missing" or err.get("input") is None):
            return "Missing required fields: userDetails and questionResponses"
    return "Invalid survey data"


@app.exception_handler(SurveyError)
async def survey_exception_handler(request, exc: SurveyError):
    if exc.status_code >= 500:
        logger.error(f"❌ {exc.message}: {exc.error}")
    else:
        logger.warning(f"⚠️ {exc.message}")
    return error_response(exc.status_code, exc.message, exc.error)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    error = MalformedRequestError(describe_validation_error(exc), details)
    logger.warning(f"⚠️ Requisição inválida em {request.url.path}: {error.message}")
    return error_response(error.status_code, error.message, error.error)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    logger.error(f"HTTP Error: {exc.status_code} - {exc.detail}")
    return error_response(exc.status_code, str(exc.detail))

@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    logger.exception(f"Erro não tratado: {str(exc)}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", str(exc))

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True, log_level="info")
