"""
FastAPI wrapper for Content Spark - Vercel Serverless Function.

This module exposes content generation, rendering, scoring and export
as a REST API and serves the browser UI from the public/ directory.
"""

from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from content_spark import __version__
from content_spark.app_state import INVALID_INPUT, AppState, ContentController, CredentialStore
from content_spark.block_renderer import fragment_to_dict, render_blocks
from content_spark.config import AppConfig
from content_spark.errors import GenerationErrorKind, GenerationInProgressError
from content_spark.filename_generator import export_filename
from content_spark.llm_client import ContentGenerator
from content_spark.models import (
    ContentType,
    GeneratedContent,
    GenerationRequest,
    ImageData,
    LanguageStyle,
)
from content_spark.seo_scorer import score_seo_document
from content_spark.serializer import clipboard_field, to_html, to_plain_dump


# Path to public directory for static files
PUBLIC_DIR = Path(__file__).parent.parent / "public"


class CredentialInput(BaseModel):
    """API key submitted from the setup screen."""
    api_key: str = Field(..., min_length=1, description="Anthropic API key")


class CredentialStatus(BaseModel):
    """Whether a credential is configured."""
    configured: bool


class SeoScoreResponse(BaseModel):
    """SEO quality gauge."""
    score: int
    label: str


class GenerateResponse(BaseModel):
    """Response model for a generation result."""
    success: bool
    message: str
    content_type: Optional[str] = None
    content: Optional[dict] = None
    fragments: Optional[list[dict]] = None
    html: Optional[str] = None
    plain_text: Optional[str] = None
    seo: Optional[SeoScoreResponse] = None
    suggested_filename: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


def _default_controller(config: AppConfig) -> ContentController:
    def factory(api_key: str):
        return ContentGenerator(api_key, config=config.generator).generate

    return ContentController(CredentialStore(config.credentials_path), factory)


def build_result_response(content: GeneratedContent, config: AppConfig) -> GenerateResponse:
    """Render a generation result for the browser UI."""
    response = GenerateResponse(
        success=True,
        message="Content generated successfully",
        content_type=content.kind.value,
        content=content.to_dict(),
        plain_text=to_plain_dump(content),
        suggested_filename=export_filename(content),
    )
    if content.is_seo:
        sections = content.data.sections
        response.fragments = [fragment_to_dict(f) for f in render_blocks(sections)]
        response.html = to_html(sections)
        score = score_seo_document(content.data, config.scoring)
        response.seo = SeoScoreResponse(score=score.score, label=score.label)
    return response


def _raise_for_state(state: AppState, config: AppConfig) -> None:
    """Convert a failed generation state into an HTTP error."""
    if state.error is None:
        return
    if state.error_kind == GenerationErrorKind.AUTH.value:
        raise HTTPException(
            status_code=401,
            detail={
                "message": state.error,
                "kind": state.error_kind,
                "reauth": True,
                "redirect_after_ms": int(config.auth_redirect_delay * 1000),
            },
        )
    status = 400 if state.error_kind == INVALID_INPUT else 502
    raise HTTPException(
        status_code=status,
        detail={"message": state.error, "kind": state.error_kind, "reauth": False},
    )


def create_app(
    controller: Optional[ContentController] = None,
    config: Optional[AppConfig] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        controller: State holder to use. Built from config if None.
        config: Application settings. Read from the environment if None.

    Returns:
        Configured FastAPI app with the controller on app.state.
    """
    config = config or AppConfig.from_env()
    controller = controller or _default_controller(config)
    controller.load_credentials()

    app = FastAPI(
        title="Content Spark API",
        description="Product copy generation with SEO scoring and text/HTML export",
        version=__version__,
    )
    app.state.controller = controller
    app.state.config = config

    # Enable CORS for all origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_controller(request: Request) -> ContentController:
        return request.app.state.controller

    @app.get("/", response_class=HTMLResponse)
    async def root():
        """Serve the main UI."""
        index_path = PUBLIC_DIR / "index.html"
        if index_path.exists():
            return FileResponse(index_path, media_type="text/html")
        return HTMLResponse(content="<h1>Content Spark API</h1><p>Visit <a href='/docs'>/docs</a> for API documentation.</p>")

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    @app.get("/api/info")
    async def api_info():
        """Get API information and usage instructions."""
        return {
            "name": "Content Spark API",
            "version": __version__,
            "description": "Product copy generation for websites and social media",
            "endpoints": {
                "GET /": "Browser UI",
                "GET /api/health": "Health check",
                "GET /api/credentials": "Whether an API key is configured",
                "POST /api/credentials": "Store an API key",
                "DELETE /api/credentials": "Forget the API key",
                "POST /api/generate": "Generate website SEO copy or a social media post",
                "GET /api/result": "Current generation result",
                "GET /api/result/copy/{field}": "Copy text for one field (full, meta_title, meta_description, html)",
                "GET /api/result/download": "Download the current result as .txt",
                "GET /api/info": "This endpoint",
            },
            "documentation": "/docs",
            "openapi": "/openapi.json",
        }

    @app.get("/api/credentials", response_model=CredentialStatus)
    def credential_status(request: Request):
        """Report whether an API key is configured."""
        return CredentialStatus(configured=not get_controller(request).state.needs_credential)

    @app.post("/api/credentials", response_model=CredentialStatus)
    def submit_credentials(body: CredentialInput, request: Request):
        """Store an API key."""
        try:
            state = get_controller(request).submit_api_key(body.api_key)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return CredentialStatus(configured=not state.needs_credential)

    @app.delete("/api/credentials", response_model=CredentialStatus)
    def clear_credentials(request: Request):
        """Forget the API key and the current result."""
        state = get_controller(request).change_api_key()
        return CredentialStatus(configured=not state.needs_credential)

    @app.post("/api/generate", response_model=GenerateResponse)
    async def generate_content(
        request: Request,
        content_type: str = Form(ContentType.WEBSITE.value, description="'website' or 'social'"),
        product_name: str = Form(""),
        product_details: str = Form(""),
        language_style: str = Form(LanguageStyle.BANGLISH.value),
        source_url: str = Form(""),
        image: Optional[UploadFile] = File(None, description="Optional product image"),
    ):
        """
        Generate content from the submitted form.

        Only one generation runs at a time; a request made while another
        is in flight gets a 409 and is not queued.
        """
        try:
            kind = ContentType(content_type)
            style = LanguageStyle(language_style)
        except ValueError as e:
            raise HTTPException(status_code=400, detail={"message": str(e), "reauth": False})

        image_data = None
        if image is not None and image.filename:
            try:
                image_data = ImageData.from_bytes(await image.read(), image.content_type or "")
            except ValueError as e:
                raise HTTPException(status_code=400, detail={"message": str(e), "reauth": False})

        generation_request = GenerationRequest(
            content_type=kind,
            product_name=product_name,
            product_details=product_details,
            image=image_data,
            language_style=style,
            source_url=source_url.strip() or None,
        )

        controller = get_controller(request)
        try:
            # generation blocks on network I/O
            state = await run_in_threadpool(controller.generate, generation_request)
        except GenerationInProgressError as e:
            raise HTTPException(status_code=409, detail={"message": str(e), "reauth": False})

        _raise_for_state(state, app.state.config)
        return build_result_response(state.result, app.state.config)

    @app.get("/api/result", response_model=GenerateResponse)
    def current_result(request: Request):
        """Return the current generation result."""
        state = get_controller(request).state
        if state.result is None:
            raise HTTPException(status_code=404, detail="No generated content yet")
        return build_result_response(state.result, app.state.config)

    @app.get("/api/result/copy/{field_name}", response_class=PlainTextResponse)
    def copy_field(field_name: str, request: Request):
        """Return the verbatim text for one copy button."""
        state = get_controller(request).state
        if state.result is None:
            raise HTTPException(status_code=404, detail="No generated content yet")
        try:
            return PlainTextResponse(clipboard_field(state.result, field_name))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.get("/api/result/download")
    def download_result(request: Request):
        """Download the current result as a .txt file."""
        state = get_controller(request).state
        if state.result is None:
            raise HTTPException(status_code=404, detail="No generated content yet")
        filename = export_filename(state.result)
        return PlainTextResponse(
            to_plain_dump(state.result),
            media_type="text/plain; charset=utf-8",
            headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
        )

    @app.get("/styles.css")
    async def serve_css():
        """Serve CSS file."""
        css_path = PUBLIC_DIR / "styles.css"
        if css_path.exists():
            return FileResponse(css_path, media_type="text/css")
        raise HTTPException(status_code=404, detail="CSS file not found")

    @app.get("/app.js")
    async def serve_js():
        """Serve JavaScript file."""
        js_path = PUBLIC_DIR / "app.js"
        if js_path.exists():
            return FileResponse(js_path, media_type="application/javascript")
        raise HTTPException(status_code=404, detail="JavaScript file not found")

    return app


app = create_app()
