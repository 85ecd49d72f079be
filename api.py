"""
FastAPI web application for SEO Workspace
"""
from fastapi import FastAPI, HTTPException, Depends, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, HttpUrl, field_validator
from typing import Dict, Any, Optional
import logging
from datetime import datetime
import uvicorn

from app import SEOWorkspaceApp
from ai_client import AIServiceError, MissingCredentialError
from content_analyzer import ContentFetchError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# Pydantic models for API requests
class KeywordResearchRequest(BaseModel):
    seed: str


class ContentAuditRequest(BaseModel):
    text: str


class URLAuditRequest(BaseModel):
    url: HttpUrl


class TrackRankingRequest(BaseModel):
    url: str
    keyword: str


class SettingsUpdateRequest(BaseModel):
    settings: Dict[str, Any]

    @field_validator('settings')
    @classmethod
    def settings_must_not_be_empty(cls, v):
        if not v:
            raise ValueError('Settings update cannot be empty')
        return v


# Response models
class APIResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Any] = None
    timestamp: datetime


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    components: Dict[str, Any]


# Initialize FastAPI app
app = FastAPI(
    title="SEO Workspace API",
    description="Keyword research, content audits, ranking simulation and workspace analytics",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global workspace app instance
workspace_app = None


@app.on_event("startup")
async def startup_event():
    """Initialize the workspace app on startup"""
    global workspace_app
    workspace_app = SEOWorkspaceApp()
    logger.info("SEO Workspace API started successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up on shutdown"""
    global workspace_app
    if workspace_app:
        workspace_app.shutdown()
        logger.info("SEO Workspace API shut down successfully")


def get_workspace_app():
    """Dependency to get the workspace app instance"""
    if workspace_app is None:
        raise HTTPException(status_code=500, detail="Workspace app not initialized")
    return workspace_app


def _response(message: str, data: Any = None, success: bool = True) -> APIResponse:
    return APIResponse(success=success, message=message, data=data, timestamp=datetime.now())


# API Endpoints

@app.get("/", response_model=Dict[str, str])
async def root():
    """Root endpoint"""
    return {
        "message": "SEO Workspace API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check(app: SEOWorkspaceApp = Depends(get_workspace_app)):
    """Health check endpoint"""
    health = app.get_system_status()["health"]
    return HealthResponse(
        status=health["overall_status"],
        timestamp=datetime.now(),
        components=health["components"],
    )


@app.get("/metrics", response_model=APIResponse)
async def get_metrics(app: SEOWorkspaceApp = Depends(get_workspace_app)):
    """Get usage metrics"""
    return _response("Metrics retrieved successfully", {"metrics": app.metrics_collector.get_metrics()})


@app.post("/keywords/research", response_model=APIResponse)
async def research_keywords(
    request: KeywordResearchRequest,
    app: SEOWorkspaceApp = Depends(get_workspace_app)
):
    """Research keyword ideas for a seed topic"""
    logger.info(f"Researching keywords for: {request.seed}")
    ideas = await app.research_keywords(request.seed)

    if not ideas:
        return _response("No keywords returned. Please check your topic or API configuration.",
                         {"keywords": []}, success=False)

    return _response(f"Found {len(ideas)} keyword ideas", {"keywords": [idea.to_dict() for idea in ideas]})


@app.get("/keywords", response_model=APIResponse)
async def get_keywords(app: SEOWorkspaceApp = Depends(get_workspace_app)):
    """Get stored keyword ideas"""
    keywords = [idea.to_dict() for idea in app.get_keywords()]
    return _response(f"Retrieved {len(keywords)} keywords", {"keywords": keywords, "total": len(keywords)})


@app.delete("/keywords", response_model=APIResponse)
async def clear_keywords(app: SEOWorkspaceApp = Depends(get_workspace_app)):
    """Clear stored keyword ideas"""
    app.clear_keywords()
    return _response("Keyword results cleared")


@app.get("/keywords/export", response_model=APIResponse)
async def export_keywords(app: SEOWorkspaceApp = Depends(get_workspace_app)):
    """Stored keywords as newline-separated text"""
    return _response("Keywords exported", {"text": app.export_keywords()})


# Sync endpoints run in the threadpool; page fetches and AI calls block
@app.post("/audit", response_model=APIResponse)
def audit_content(
    request: ContentAuditRequest,
    app: SEOWorkspaceApp = Depends(get_workspace_app)
):
    """Audit a block of content"""
    audit = app.audit_content(request.text)
    return _response("Content audit completed", audit.to_dict())


@app.post("/audit/url", response_model=APIResponse)
def audit_url(
    request: URLAuditRequest,
    app: SEOWorkspaceApp = Depends(get_workspace_app)
):
    """Fetch and audit a web page"""
    logger.info(f"Auditing URL: {request.url}")
    audit = app.audit_url(str(request.url))
    return _response("URL audit completed", audit.to_dict())


@app.get("/audits", response_model=APIResponse)
async def get_audits(app: SEOWorkspaceApp = Depends(get_workspace_app)):
    """Get stored content audits, newest first"""
    audits = [audit.to_dict() for audit in app.get_audits()]
    return _response(f"Retrieved {len(audits)} audits", {"audits": audits, "total": len(audits)})


@app.post("/rankings", response_model=APIResponse)
async def track_ranking(
    request: TrackRankingRequest,
    app: SEOWorkspaceApp = Depends(get_workspace_app)
):
    """Track the ranking of a domain for a keyword"""
    record = app.track_ranking(request.url, request.keyword)
    return _response(f"Position #{record.position} detected", record.to_dict())


@app.get("/rankings", response_model=APIResponse)
async def get_rankings(app: SEOWorkspaceApp = Depends(get_workspace_app)):
    """Get tracked rankings, newest first"""
    rankings = [record.to_dict() for record in app.get_rankings()]
    return _response(f"Retrieved {len(rankings)} rankings", {"rankings": rankings, "total": len(rankings)})


@app.delete("/rankings/{ranking_id}", response_model=APIResponse)
async def remove_ranking(
    ranking_id: str,
    app: SEOWorkspaceApp = Depends(get_workspace_app)
):
    """Stop tracking a ranking"""
    if not app.remove_ranking(ranking_id):
        raise HTTPException(status_code=404, detail=f"Ranking {ranking_id} not found")
    return _response(f"Ranking {ranking_id} removed", {"id": ranking_id})


@app.get("/analytics", response_model=APIResponse)
async def get_analytics(app: SEOWorkspaceApp = Depends(get_workspace_app)):
    """Get the workspace analytics snapshot"""
    return _response("Analytics retrieved", app.get_analytics().to_dict())


@app.post("/analytics/refresh", response_model=APIResponse)
async def refresh_analytics(app: SEOWorkspaceApp = Depends(get_workspace_app)):
    """Recalculate analytics from stored keywords and rankings"""
    return _response("Analytics recalculated", app.get_analytics(refresh=True).to_dict())


@app.delete("/analytics", response_model=APIResponse)
async def clear_analytics(app: SEOWorkspaceApp = Depends(get_workspace_app)):
    """Reset analytics to the zeroed snapshot"""
    return _response("Analytics cleared", app.clear_analytics().to_dict())


@app.get("/settings", response_model=APIResponse)
async def get_settings(app: SEOWorkspaceApp = Depends(get_workspace_app)):
    """Get user settings"""
    return _response("Settings retrieved", app.get_settings().to_dict())


@app.put("/settings", response_model=APIResponse)
async def update_settings(
    request: SettingsUpdateRequest,
    app: SEOWorkspaceApp = Depends(get_workspace_app)
):
    """Change user settings"""
    return _response("Settings saved", app.update_settings(request.settings).to_dict())


# Exception handlers
@app.exception_handler(ValueError)
async def precondition_exception_handler(request, exc):
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": str(exc), "timestamp": datetime.now().isoformat()}
    )


@app.exception_handler(MissingCredentialError)
async def missing_credential_exception_handler(request, exc):
    logger.error(f"AI service not configured: {exc}")
    return JSONResponse(
        status_code=503,
        content={"success": False, "message": str(exc), "timestamp": datetime.now().isoformat()}
    )


@app.exception_handler(AIServiceError)
@app.exception_handler(ContentFetchError)
async def upstream_exception_handler(request, exc):
    logger.error(f"Upstream failure: {exc}")
    return JSONResponse(
        status_code=502,
        content={"success": False, "message": str(exc), "timestamp": datetime.now().isoformat()}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "timestamp": datetime.now().isoformat()
        }
    )


if __name__ == "__main__":
    uvicorn.run(
        "api:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
