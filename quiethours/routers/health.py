from __future__ import annotations

from fastapi import APIRouter

from quiethours.config import settings
from quiethours.normalizers.registry import list_topics

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Liveness plus which topic artifacts are present on disk."""
    artifacts = {}
    for topic in list_topics():
        if (settings.data_dir / topic.json_filename).exists():
            artifacts[topic.topic_id] = "json"
        elif (settings.data_dir / topic.csv_filename).exists():
            artifacts[topic.topic_id] = "csv"
        else:
            artifacts[topic.topic_id] = "missing"
    status = "ok" if "missing" not in artifacts.values() else "degraded"
    return {"status": status, "artifacts": artifacts}
