# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

from .classification import (
    ClassifierScore,
    ImageScores,
    ClassificationResult
)
from .training import (
    TrainingRequest,
    ClassifierDescriptor
)

__all__ = [
    # Classification
    "ClassifierScore",
    "ImageScores",
    "ClassificationResult",
    # Training
    "TrainingRequest",
    "ClassifierDescriptor",
]
