# Copyright AGNTCY Contributors
# SPDX-License-Identifier: Apache-2.0

import re
from typing import Any, Dict, Optional, Sequence

NO_TAGS = "NO_TAGS"
UNKNOWN_KEYWORD = "Unknown"
NUMBER_PREFIX = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def filter_user_created_classifiers(
    result: Optional[Dict[str, Any]],
    classifier_ids: Optional[Sequence[str]] = None
) -> Optional[Dict[str, Any]]:
    """
    Drop scores from classifiers the caller did not ask for.

    Builtin classifiers have classifier_id == name and are always kept;
    user-created ones are kept only if listed in classifier_ids.

    Args:
        result: Result of a classify call, modified in place
        classifier_ids: Allowed user-created classifier ids

    Returns:
        The same result object
    """
    ids = set(classifier_ids or [])
    if not result or "images" not in result:
        return result

    for image in result["images"] or []:
        scores = image.get("scores") if isinstance(image, dict) else None
        if isinstance(scores, list):
            image["scores"] = [
                score for score in scores
                if score.get("classifier_id") == score.get("name")
                or score.get("classifier_id") in ids
            ]
    return result


def _parse_score(value: Any) -> float:
    """Leading-number parse: "0.95abc" is 0.95, anything without a number is 0"""
    if isinstance(value, (int, float)):
        return float(value)
    match = NUMBER_PREFIX.match(str(value or ""))
    return float(match.group(0)) if match else 0.0


def normalize_keyword(item: Dict[str, Any]) -> Dict[str, Any]:
    """Map one keyword entry to a score entry"""
    return {
        "name": item.get("text") or UNKNOWN_KEYWORD,
        "score": _parse_score(item.get("score")),
    }


def normalize_keyword_result(result: Dict[str, Any]) -> Dict[str, Any]:
    """
    Reshape a keyword-extraction result into the classification result shape.

    ``{"imageKeywords": [{"text", "score"}]}`` becomes
    ``{"images": [{"scores": [{"name", "score"}]}]}``, with NO_TAGS entries removed.
    """
    keywords = (result or {}).get("imageKeywords") or []
    scores = [normalize_keyword(item) for item in keywords]
    return {
        "images": [{
            "scores": [score for score in scores if score["name"] != NO_TAGS]
        }]
    }
