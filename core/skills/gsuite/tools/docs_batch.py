"""Fetch snapshots and submit operation batches.

A command performs at most one fetch followed by at most one batchUpdate.
Nothing here retries: an ``HttpError`` becomes a ``RemoteError`` carrying the
intent of the call and the command fails.
"""
from __future__ import annotations

from typing import Any

from googleapiclient.errors import HttpError

from docs_errors import EmptyBatch, RemoteError
from docs_ops import OperationBatch
from utils import debug


def _reason(e: HttpError) -> str:
    return getattr(e, "reason", None) or str(e)


def fetch_document(service, doc_id: str) -> dict[str, Any]:
    """Fetch a document including the content of every tab."""
    debug(f"fetching document {doc_id}")
    try:
        return service.documents().get(documentId=doc_id, includeTabsContent=True).execute()
    except HttpError as e:
        raise RemoteError(f"failed to get document: {_reason(e)}") from e


def fetch_presentation(service, presentation_id: str) -> dict[str, Any]:
    debug(f"fetching presentation {presentation_id}")
    try:
        return service.presentations().get(presentationId=presentation_id).execute()
    except HttpError as e:
        raise RemoteError(f"failed to get presentation: {_reason(e)}") from e


def create_document(service, title: str) -> dict[str, Any]:
    try:
        return service.documents().create(body={"title": title}).execute()
    except HttpError as e:
        raise RemoteError(f"failed to create document: {_reason(e)}") from e


def trash_file(drive_service, file_id: str, permanent: bool = False) -> None:
    """Move a Drive file to the trash, or delete it for good."""
    try:
        if permanent:
            drive_service.files().delete(fileId=file_id, supportsAllDrives=True).execute()
        else:
            drive_service.files().update(
                fileId=file_id,
                body={"trashed": True},
                supportsAllDrives=True,
            ).execute()
    except HttpError as e:
        action = "delete" if permanent else "trash"
        raise RemoteError(f"failed to {action} document: {_reason(e)}") from e


def submit_batch(
    service,
    resource_id: str,
    batch: OperationBatch,
    intent: str,
    api: str = "docs",
) -> list[dict[str, Any]]:
    """Send ``batch`` in one batchUpdate call and return its replies.

    The reply list always has one entry per operation, so reply ``i``
    belongs to operation ``i``; operations that produce no reply get ``{}``.

    Args:
        service: Authenticated Docs (or Slides, with ``api="slides"``) service.
        resource_id: Document or presentation ID.
        batch: Operations to apply, in order.
        intent: What the batch does, e.g. "delete table row". Used in errors.
        api: "docs" or "slides".

    Raises:
        EmptyBatch: ``batch`` has no operations.
        RemoteError: The API rejected the call. Nothing was applied.
    """
    if not len(batch):
        raise EmptyBatch(f"nothing to submit for {intent}")

    debug(f"submitting {len(batch)} operation(s) to {resource_id}: {', '.join(batch.kinds)}")
    try:
        if api == "slides":
            result = service.presentations().batchUpdate(
                presentationId=resource_id,
                body=batch.to_body(),
            ).execute()
        else:
            result = service.documents().batchUpdate(
                documentId=resource_id,
                body=batch.to_body(),
            ).execute()
    except HttpError as e:
        raise RemoteError(f"failed to {intent}: {_reason(e)}") from e

    replies = list((result or {}).get("replies", []))
    replies.extend({} for _ in range(len(batch) - len(replies)))
    return replies


def reply_for(replies: list[dict[str, Any]], index: int, kind: str) -> dict[str, Any]:
    """The ``kind`` part of reply ``index``, or {} when absent."""
    if index >= len(replies):
        return {}
    return replies[index].get(kind, {}) or {}


def created_tab_id(replies: list[dict[str, Any]], index: int = 0) -> str:
    return reply_for(replies, index, "addDocumentTab").get("tabProperties", {}).get("tabId", "")


def created_object_id(replies: list[dict[str, Any]], index: int, kind: str) -> str:
    """Object ID from a create reply (createHeader, createShape, ...)."""
    reply = reply_for(replies, index, kind)
    for key in ("objectId", "headerId", "footerId", "footnoteId", "namedRangeId"):
        if key in reply:
            return reply[key]
    return ""


def occurrences_changed(replies: list[dict[str, Any]], index: int = 0) -> int:
    return reply_for(replies, index, "replaceAllText").get("occurrencesChanged", 0)
