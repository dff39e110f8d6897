"""Outcome records for synchronization and fetch operations.

Background operations never raise to their callers; they report what
happened through these records instead, so a caller can tell "nothing new"
apart from "sync failed".
"""

from typing import Literal

from pydantic import BaseModel


class SyncResult(BaseModel):
    """Outcome of an archive index synchronization.

    Attributes:
        status: "success" or "failed"
        new_articles: Numbers of the articles inserted by this run
        migrated_legacy_flags: Whether legacy read/favorite flags were applied
        error: Failure reason when status is "failed"
    """

    status: Literal["success", "failed"] = "success"
    new_articles: list[int] = []
    migrated_legacy_flags: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


class FetchResult(BaseModel):
    """Outcome of downloading one article for offline reading.

    Attributes:
        number: Article number
        status: "success" when the document and every image were stored,
            "partial" when the document was stored but some images failed,
            "failed" when the document itself could not be fetched
        images_saved: 1-based asset indices written to the cache
        images_failed: 1-based asset indices that could not be stored
        error: Failure reason when status is "failed"
    """

    number: int
    status: Literal["success", "partial", "failed"] = "success"
    images_saved: list[int] = []
    images_failed: list[int] = []
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"
