# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class TrainingRequest(BaseModel):
    """Validated classifier training request"""
    positives: List[str] = Field(..., description="Base64 data URIs or images/... paths")
    negatives: List[str] = Field(..., description="Base64 data URIs or images/... paths")
    name: str = Field(..., description="Classifier name")


class ClassifierDescriptor(BaseModel):
    """Classifier as returned by the remote training API"""
    model_config = ConfigDict(extra="allow")

    classifier_id: Optional[str] = None
    name: Optional[str] = None
    owner: Optional[str] = None
    created: Optional[str] = None
