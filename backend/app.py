# backend/app.py

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from config.settings import settings
from .model import EditRequest, GenerateRequest, ServiceResponse, ErrorResponse, EndpointInfo
from .replicate_client import run_model

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Image Studio Service")


def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    if details is None:
        return JSONResponse(status_code=status_code, content={"error": error})
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.post("/api/image-edit", response_model=ServiceResponse)
async def image_edit(req: EditRequest):
    if not req.image or not req.prompt:
        return _error(400, "Image and prompt are required")

    model_input = {
        "prompt": req.prompt,
        "image_input": req.image if isinstance(req.image, list) else [req.image],
    }

    logger.info("[Service] Processing %d image(s) with %s", len(model_input["image_input"]), settings.EDIT_MODEL)
    try:
        output_url = await run_model(settings.EDIT_MODEL, model_input)
    except Exception as e:
        logger.exception("[Service] Edit failed")
        return _error(500, "Failed to process image", str(e))

    return ServiceResponse(success=True, output=output_url, message="Image processed successfully")


@app.post("/api/image-generate", response_model=ServiceResponse)
async def image_generate(req: GenerateRequest):
    if not req.prompt:
        return _error(400, "Prompt is required")

    model_input = {
        "prompt": req.prompt,
        "output_format": req.output_format,
    }

    logger.info("[Service] Generating image with %s", settings.GENERATE_MODEL)
    try:
        output_url = await run_model(settings.GENERATE_MODEL, model_input)
    except Exception as e:
        logger.exception("[Service] Generate failed")
        return _error(500, "Failed to generate image", str(e))

    return ServiceResponse(success=True, output=output_url, message="Image generated successfully")


@app.get("/api/image-edit", response_model=EndpointInfo)
async def image_edit_info():
    return EndpointInfo(
        message="Image editing API endpoint is running",
        model=settings.EDIT_MODEL,
        description="Edits one or more input images from a text instruction",
        expectedInput={
            "prompt": "string - Description of desired changes",
            "image_input": "array - Array of image URLs or base64 strings",
        },
    )


@app.get("/api/image-generate", response_model=EndpointInfo)
async def image_generate_info():
    return EndpointInfo(
        message="Image generation API endpoint is running",
        model=settings.GENERATE_MODEL,
        description="Generates an image from a text prompt",
        expectedInput={
            "prompt": "string - Description of the image to generate",
            "output_format": "string - Output format (jpg, png, webp)",
        },
    )
