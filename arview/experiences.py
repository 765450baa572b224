"""
AR experience lookup: id -> marker image + overlay video.
"""
from __future__ import annotations
import json
import logging
import os
from typing import Dict, List, Optional

from arview.errors import ExperienceNotFoundError, MissingExperienceIdError
from arview.models import Experience

logger = logging.getLogger(__name__)


class ExperienceStore:
    """
    Read-only catalog of experiences.

    File format:
        {"<id>": {"marker_url": "...", "video_url": "...", "title": "..."}, ...}

    Relative marker/video paths are resolved against the file's directory.
    """
    def __init__(self, experiences: Optional[Dict[str, Experience]] = None):
        self._items: Dict[str, Experience] = dict(experiences or {})

    @classmethod
    def from_path(cls, path: str) -> "ExperienceStore":
        if not os.path.exists(path):
            logger.warning(f"[experiences] catalog not found: {path}; using empty store")
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)

        base = os.path.dirname(os.path.abspath(path))
        items: Dict[str, Experience] = {}
        for exp_id, rec in raw.items():
            rec = dict(rec)
            for key in ("marker_url", "video_url"):
                val = rec.get(key)
                if val and "://" not in val and not os.path.isabs(val):
                    rec[key] = os.path.join(base, val)
            items[exp_id] = Experience(id=exp_id, **rec)
        logger.debug(f"[experiences] loaded {len(items)} from {path}")
        return cls(items)

    def get(self, experience_id: Optional[str]) -> Experience:
        if not experience_id:
            raise MissingExperienceIdError()
        try:
            return self._items[experience_id]
        except KeyError:
            raise ExperienceNotFoundError(experience_id) from None

    def all(self) -> List[Experience]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)
