"""Dict-backed StatsStore for local runs and tests.

Documents are deep-copied on the way in and out so callers can never mutate
stored state without going through put/patch.
"""

from __future__ import annotations

import copy
from typing import Any

from scoutmerge.fields.paths import set_nested
from scoutmerge.schemas import Submission, SubmissionStatus
from scoutmerge.store.base import StatsStore


class InMemoryStore(StatsStore):
    def __init__(self) -> None:
        self.documents: dict[str, dict[str, dict[str, Any]]] = {}
        self.submissions: dict[str, Submission] = {}

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        doc = self.documents.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def put(self, collection: str, doc_id: str, record: dict[str, Any]) -> None:
        self.documents.setdefault(collection, {})[doc_id] = copy.deepcopy(record)

    async def patch(self, collection: str, doc_id: str, changes: dict[str, Any]) -> None:
        doc = self.documents.get(collection, {}).get(doc_id)
        if doc is None:
            raise KeyError(f"{collection}/{doc_id}")
        for path, value in changes.items():
            set_nested(doc, path, copy.deepcopy(value))

    async def list_documents(self, collection: str) -> list[dict[str, Any]]:
        docs = self.documents.get(collection, {})
        return [copy.deepcopy(docs[key]) for key in sorted(docs)]

    async def add_submission(self, submission: Submission) -> None:
        if submission.id in self.submissions:
            raise ValueError(f"Submission {submission.id} already exists")
        self.submissions[submission.id] = submission.model_copy(deep=True)

    async def get_submission(self, submission_id: str) -> Submission | None:
        sub = self.submissions.get(submission_id)
        return sub.model_copy(deep=True) if sub is not None else None

    async def update_submission(self, submission: Submission) -> None:
        existing = self.submissions.get(submission.id)
        if existing is None:
            raise KeyError(submission.id)
        self.submissions[submission.id] = existing.model_copy(
            update={
                "status": submission.status,
                "approved_by": submission.approved_by,
                "approved_at": submission.approved_at,
            }
        )

    async def list_submissions(
        self,
        status: SubmissionStatus | None = None,
        match_id: str | None = None,
        created_by: str | None = None,
    ) -> list[Submission]:
        matching = [
            sub
            for sub in self.submissions.values()
            if (status is None or sub.status == status)
            and (match_id is None or sub.match_id == match_id)
            and (created_by is None or sub.created_by == created_by)
        ]
        matching.sort(key=lambda s: (s.created_at, s.id))
        return [sub.model_copy(deep=True) for sub in matching]
