# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from fastapi import APIRouter

logger = logging.getLogger(__name__)


def load_datasets(path: Union[str, Path]) -> Dict[str, Any]:
    """Load the dataset context shared by all views; missing file means empty context"""
    path = Path(path)
    if not path.exists():
        logger.warning(f"Datasets file not found: {path}")
        return {}
    with open(path) as f:
        return json.load(f)


def create_views_api(datasets: Dict[str, Any]) -> APIRouter:
    """Create the page routes. Each returns its view name and the dataset context."""
    router = APIRouter(tags=["views"])

    def render(view: str) -> Dict[str, Any]:
        return {"view": view, **datasets}

    @router.get("/")
    async def index():
        return render("use")

    @router.get("/use")
    async def use():
        return render("use")

    @router.get("/train")
    async def train():
        return render("train")

    @router.get("/test")
    async def test():
        return render("test")

    return router
