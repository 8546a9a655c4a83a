"""Persistence collaborator contract for the aggregation engine.

The engine only needs a handful of operations from the surrounding document
store:

  list_approved(match_id)          submissions with matching id AND status "approved"
  get(collection, id)              full document, or None
  put(collection, id, record)      idempotent full-document write
  patch(collection, id, changes)   dotted-path partial update; siblings untouched

The submission methods below them serve the review flow that triggers
aggregation (create / approve / reject).

Implementations:
  InMemoryStore  (scoutmerge.store.memory) — dicts, for local runs and tests
  SqlStore       (scoutmerge.store.sql)    — SQLAlchemy async, two tables
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from scoutmerge.schemas import Submission, SubmissionStatus


class StatsStore(ABC):
    """Abstract persistence backend for submissions and aggregate documents."""

    # -- aggregate documents -------------------------------------------------

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Return a copy of the stored document, or None if absent."""

    @abstractmethod
    async def put(self, collection: str, doc_id: str, record: dict[str, Any]) -> None:
        """Create or fully replace a document."""

    @abstractmethod
    async def patch(self, collection: str, doc_id: str, changes: dict[str, Any]) -> None:
        """Apply ``{"dotted.path": value}`` changes to an existing document.

        Raises:
            KeyError: If the document does not exist.
        """

    @abstractmethod
    async def list_documents(self, collection: str) -> list[dict[str, Any]]:
        """Return every document in a collection, ordered by id."""

    # -- submissions ---------------------------------------------------------

    @abstractmethod
    async def add_submission(self, submission: Submission) -> None:
        """Insert a new submission."""

    @abstractmethod
    async def get_submission(self, submission_id: str) -> Submission | None:
        """Return one submission, or None if absent."""

    @abstractmethod
    async def update_submission(self, submission: Submission) -> None:
        """Persist status and approval metadata of an existing submission.

        Raises:
            KeyError: If the submission does not exist.
        """

    @abstractmethod
    async def list_submissions(
        self,
        status: SubmissionStatus | None = None,
        match_id: str | None = None,
        created_by: str | None = None,
    ) -> list[Submission]:
        """Return submissions filtered by status, match and/or creator, oldest first."""

    async def list_approved(self, match_id: str) -> list[Submission]:
        """Approved submissions for a match, in creation order."""
        return await self.list_submissions(status="approved", match_id=match_id)
