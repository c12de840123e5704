# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ClassifierScore(BaseModel):
    """Score assigned to an image by one classifier"""
    model_config = ConfigDict(extra="allow")

    classifier_id: Optional[str] = Field(None, description="Classifier id (equals name for builtin classifiers)")
    name: str = Field(..., description="Classifier or keyword name")
    score: float = Field(..., description="Confidence score")


class ImageScores(BaseModel):
    """Scores for a single image"""
    model_config = ConfigDict(extra="allow")

    scores: List[ClassifierScore] = Field(default_factory=list)


class ClassificationResult(BaseModel):
    """Uniform classification result returned by /api/classify"""
    images: List[ImageScores] = Field(default_factory=list)

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "images": [
                    {
                        "image": "a3b5c1.jpg",
                        "scores": [
                            {"classifier_id": "Animal", "name": "Animal", "score": 0.91},
                            {"classifier_id": "Test01_1000695352", "name": "Test01", "score": 0.66}
                        ]
                    }
                ]
            }
        }
    )
