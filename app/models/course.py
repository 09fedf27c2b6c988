"""
Pydantic Models for Course Data

The course document itself is stored and merged as loosely typed JSON; these
models cover the typed pieces the API reads or produces directly.
"""

from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime


class ReviewSchedule(BaseModel):
    """Spaced repetition state for one lesson"""
    topicName: str = Field(..., min_length=1, description="Topic the lesson belongs to")
    lessonIndex: int = Field(..., ge=0, description="Lesson position inside the topic")
    lastReviewed: int = Field(..., description="Epoch ms of the last review")
    nextReview: int = Field(..., description="Epoch ms when the lesson is due again")
    interval: float = Field(..., gt=0, description="Days until the next review")
    ease: float = Field(..., ge=1.3, description="Difficulty multiplier (higher = easier)")
    reviews: int = Field(..., ge=1, description="Number of reviews so far")


class ReviewRequest(BaseModel):
    """Request model for grading a lesson review"""
    topicName: str = Field(..., min_length=1, max_length=200)
    lessonIndex: int = Field(..., ge=0)
    quality: int = Field(..., ge=0, le=5, description="0 = forgot, 3 = okay, 5 = perfect")


class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Current environment")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Check timestamp")
    uptime: Optional[float] = Field(None, description="Uptime in seconds")
