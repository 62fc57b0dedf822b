"""
Shared API utility functions.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status

from adapters.ai.anthropic_adapter import ContentGenerationError
from adapters.ai.replicate_adapter import ImageGenerationError
from adapters.feeds.rss_adapter import FeedError, FeedValidationError
from core.interfaces.repositories import DirectoryStoreError
from services.admin_workspace import DraftValidationError, QueueItemNotFoundError

logger = logging.getLogger(__name__)


@contextmanager
def dashboard_errors(action: str) -> Iterator[None]:
    """
    Translate dashboard failures into HTTP errors.

    Upstream generation failures are reported as ``"{action}: {message}"``
    so the admin sees which step failed.
    """
    try:
        yield
    except (DraftValidationError, FeedValidationError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except QueueItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (ContentGenerationError, ImageGenerationError) as e:
        logger.warning("%s: %s", action, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"{action}: {e}")
    except FeedError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except DirectoryStoreError as e:
        logger.error("%s: %s", action, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
