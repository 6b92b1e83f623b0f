"""
FastAPI application for national ID MRZ scanning
"""
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator, model_validator

from config import config, setup_logging
from models import ScanCode, ScanResult, Validation, ValidationStatus
from mrz_parser import parse_mrz
from scanner import MRZScanner

logger = logging.getLogger(__name__)


# Request models
class ScanRequest(BaseModel):
    """Request model for ID card scanning"""
    image_type: str = Field(..., description="Type of input: 'file' for URL, 'base64' for base64 encoded image")
    documents_image_url: Optional[str] = Field(None, description="URL of the ID card image (required if image_type='file')")
    image_base64: Optional[str] = Field(None, description="Base64 encoded image or data URL (required if image_type='base64')")
    timeout: Optional[float] = Field(None, gt=0, description="Wall-clock budget in seconds for the whole scan")

    @field_validator('image_type')
    @classmethod
    def validate_image_type(cls, v):
        if v not in ['file', 'base64']:
            raise ValueError('image_type must be either "file" or "base64"')
        return v

    @model_validator(mode="after")
    def check_image_source(self):
        """Validate that the appropriate image source is provided based on image_type"""
        if self.image_type == 'file' and not self.documents_image_url:
            raise ValueError('documents_image_url is required when image_type is "file"')
        return self


class ParseRequest(BaseModel):
    """Request model for parsing OCR lines that were recognized elsewhere"""
    lines: List[str] = Field(..., description="Raw OCR lines in reading order")
    allow_td3: bool = Field(False, description="Also accept passport (2 x 44) MRZ blocks")


def _result_response(result: ScanResult):
    # Nothing usable found: 422 with the full result body
    if result.code in (ScanCode.NO_IMAGE, ScanCode.NO_MRZ_DETECTED):
        return JSONResponse(status_code=422, content=result.model_dump(mode="json"))
    return result


def create_app(scanner: Optional[MRZScanner] = None) -> FastAPI:
    """
    Build the API around one long-lived scanner

    The scanner (and the OCR engine it owns) is released once when the
    application shuts down.
    """
    mrz_scanner = scanner if scanner is not None else MRZScanner()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("MRZ scanner API starting")
        yield
        mrz_scanner.close()
        logger.info("MRZ scanner API stopped, OCR engine released")

    app = FastAPI(
        title=config.API_TITLE,
        version=config.API_VERSION,
        description=config.API_DESCRIPTION,
        lifespan=lifespan
    )
    app.state.scanner = mrz_scanner

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": config.API_TITLE,
            "version": config.API_VERSION,
            "td3_enabled": mrz_scanner.allow_td3
        }

    @app.post("/scan", response_model=ScanResult)
    def scan_document(request: ScanRequest):
        """
        Scan a photographed national ID card and decode its MRZ

        Returns 200 for ok/partial results (check validation.status) and 422
        when no image could be read or no MRZ was detected.

        Example:
            ```json
            {
                "image_type": "base64",
                "image_base64": "data:image/jpeg;base64,/9j/4AAQ..."
            }
            ```
        """
        source = request.documents_image_url if request.image_type == "file" else request.image_base64

        try:
            result = mrz_scanner.scan(source, timeout=request.timeout)
        except Exception as e:
            logger.exception("Unexpected scan failure")
            raise HTTPException(
                status_code=500,
                detail=f"Error processing document: {str(e)}"
            )

        return _result_response(result)

    @app.post("/parse", response_model=ScanResult)
    def parse_lines(request: ParseRequest):
        """
        Decode MRZ lines produced by an external OCR step (no image work)
        """
        identity = parse_mrz(request.lines, allow_td3=request.allow_td3)

        if identity is None:
            result = ScanResult(
                code=ScanCode.NO_MRZ_DETECTED,
                strategy="parse",
                validation=Validation(status=ValidationStatus.ERROR, messages=["No MRZ detected"])
            )
        else:
            code = ScanCode.OK if identity.status == ValidationStatus.OK else ScanCode.PARTIAL
            result = ScanResult(
                code=code,
                data=identity,
                strategy="parse",
                validation=Validation(status=identity.status, messages=identity.messages),
                raw_ocr="\n".join(request.lines)
            )

        return _result_response(result)

    return app


app = create_app()


# Run the application
if __name__ == "__main__":
    import uvicorn
    setup_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000)
