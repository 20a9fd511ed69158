"""
API Models - Request and Response schemas
Using Pydantic for automatic validation and documentation
"""

from pydantic import BaseModel, Field
from typing import List, Optional


# ─── Geometry ─────────────────────────────────────────────────────────────────

class PointModel(BaseModel):
    """Image coordinate in source-photo pixels."""
    x: float = Field(..., description="Horizontal position (0 = left edge)")
    y: float = Field(..., description="Vertical position (0 = top edge)")


# ─── Pipeline Models ──────────────────────────────────────────────────────────

class DetectResponse(BaseModel):
    """Page detection result with corners for the adjustment step."""
    status: str        = Field("success", description="Response status")
    filename: str      = Field(...,       description="Processed filename")
    detected: bool     = Field(...,       description="Whether a page quadrilateral was found")
    corners: Optional[List[PointModel]] = Field(
        None, description="Corners ordered top-left, top-right, bottom-right, bottom-left"
    )
    image_width: int   = Field(...,       description="Decoded photo width")
    image_height: int  = Field(...,       description="Decoded photo height")
    processing_time_ms: int = Field(...,  description="Processing time in milliseconds")


class ProcessResponse(BaseModel):
    """Rectified, equalized and split picture."""
    status: str        = Field("success", description="Response status")
    filename: str      = Field(...,       description="Processed filename")
    rectified: bool    = Field(...,       description="Whether perspective correction was applied")
    corners_used: Optional[List[PointModel]] = Field(
        None, description="Ordered corners used for rectification"
    )
    left_image: str    = Field(...,       description="Left half as PNG data URL")
    right_image: str   = Field(...,       description="Right half as PNG data URL")
    left_width: int    = Field(...,       description="Left half width")
    right_width: int   = Field(...,       description="Right half width")
    height: int        = Field(...,       description="Height of both halves")
    applied: List[str] = Field(default_factory=list, description="Steps applied, in order")
    processing_time_ms: int = Field(...,  description="Processing time in milliseconds")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "success",
                "filename": "puzzle.jpg",
                "rectified": True,
                "corners_used": [
                    {"x": 100, "y": 50}, {"x": 1100, "y": 80},
                    {"x": 1150, "y": 750}, {"x": 80, "y": 720},
                ],
                "left_image": "data:image/png;base64,iVBORw0KGgo...",
                "right_image": "data:image/png;base64,iVBORw0KGgo...",
                "left_width": 535,
                "right_width": 536,
                "height": 672,
                "applied": ["perspective_correction", "histogram_equalization", "split"],
                "processing_time_ms": 85,
            }
        }


# ─── Health & Error Models ────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    """Health check response."""
    status: str  = Field("healthy",         description="Health status")
    service: str = Field("spotdiff-api",    description="Service name")
    version: str = Field("1.0.0",           description="API version")


class ErrorResponse(BaseModel):
    """Error body, as produced by HTTPException."""
    detail: str = Field(..., description="What went wrong")
