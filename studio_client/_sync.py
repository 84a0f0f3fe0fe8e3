"""Project sync sub-client.

Pushes a project's files to the build/preview server. Every file is passed
through the source sanitizer first, and every failure is reported as a
SyncResult instead of an exception.

This is an internal module. Import from `studio_client` instead.
"""

import logging
from typing import TYPE_CHECKING, Mapping

from studio.sanitizer import clean_files
from studio_client._base import AsyncBaseClient, BaseClient, encode_segment
from studio_client.exceptions import APIError, StudioClientError
from studio_client.models import SyncResult

if TYPE_CHECKING:
    from studio_client._http import AsyncHTTPClient, HTTPClient


logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "Unknown network error"


def sync_path(project_id: str) -> str:
    return f"/projects/{encode_segment(project_id)}/update-code"


def _failure_from(error: Exception) -> SyncResult:
    if isinstance(error, APIError):
        detail = error.response_text or error.reason_phrase
        return SyncResult.failure(f"Server error ({error.status_code}): {detail}")
    return SyncResult.failure(str(error) or UNKNOWN_ERROR_MESSAGE)


class SyncClient(BaseClient):
    """Synchronous client for the project sync endpoint.

    Example:
        result = client.sync.sync(store.loaded_files(), "todo-app")
        if result is not None and not result.success:
            print(result.message)
    """

    def sync(self, files: Mapping[str, str], project_id: str) -> SyncResult | None:
        """Push cleaned files to the server.

        Args:
            files: Mapping of path to content. Not modified.
            project_id: Target project. Empty means there is nothing to
                sync to.

        Returns:
            None when ``project_id`` is empty (no request is made),
            otherwise a success or failure SyncResult.
        """
        if not project_id:
            return None

        payload = {"files": clean_files(files)}
        try:
            self._post(sync_path(project_id), json=payload)
        except StudioClientError as e:
            logger.error(f"Sync of {project_id} failed: {e}")
            return _failure_from(e)
        except Exception as e:
            logger.exception(f"Unexpected error syncing {project_id}")
            return _failure_from(e)

        logger.info(f"Synced {len(payload['files'])} files to {project_id}")
        return SyncResult.ok()


class AsyncSyncClient(AsyncBaseClient):
    """Asynchronous client for the project sync endpoint."""

    async def sync(self, files: Mapping[str, str], project_id: str) -> SyncResult | None:
        """Push cleaned files to the server.

        See SyncClient.sync.
        """
        if not project_id:
            return None

        payload = {"files": clean_files(files)}
        try:
            await self._post(sync_path(project_id), json=payload)
        except StudioClientError as e:
            logger.error(f"Sync of {project_id} failed: {e}")
            return _failure_from(e)
        except Exception as e:
            logger.exception(f"Unexpected error syncing {project_id}")
            return _failure_from(e)

        logger.info(f"Synced {len(payload['files'])} files to {project_id}")
        return SyncResult.ok()
