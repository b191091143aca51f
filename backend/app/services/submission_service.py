"""
FormDrop Backend: Submission Service (Intake Workflow Orchestrator)
=====================================================================

What:  Runs the intake workflow behind POST /addUser and the read behind
       GET /collectionData.
Why:   Keeps the ordering and error contract in one place, away from HTTP.
How:   Composes UploadService, validate_submission, SubmissionRepository
       and Notifier, all received through the constructor.
Who:   Built per request by get_submission_service(); called by routes.

Orchestration Flow (POST /addUser):
    ┌───────────┐    ┌────────────┐    ┌────────────┐    ┌───────────┐
    │ RECEIVING │───▶│ VALIDATING │───▶│ PERSISTING │───▶│ NOTIFYING │───▶ DONE
    │ (uploads) │    │ (validator)│    │ (repo)     │    │ (notifier)│
    └───────────┘    └────────────┘    └────────────┘    └───────────┘
          │                 │                 │                 │
          └─────────────────┴────────┬────────┴─────────────────┘
                                     ▼
                                  FAILED

    Single pass, no retries. The first raised FormDropError ends the
    workflow and reaches the global exception handlers.

    PERSISTING and NOTIFYING are not one transaction: a NotificationError
    leaves the stored submission in place, and nothing deletes it.
"""

import enum
import logging
from typing import List, Optional, Sequence

from fastapi import Depends

from app.exceptions import FormDropError
from app.models.submission import Submission
from app.schemas.submission import IntakeResponse, SubmissionResponse
from app.services.notifier import Notifier, get_notifier
from app.services.repository import SubmissionRepository, get_repository
from app.services.upload_service import IncomingFile, UploadService, get_upload_service
from app.services.validator import validate_submission

logger = logging.getLogger(__name__)


class IntakeStage(str, enum.Enum):
    RECEIVING = "receiving"
    VALIDATING = "validating"
    PERSISTING = "persisting"
    NOTIFYING = "notifying"
    DONE = "done"
    FAILED = "failed"


class SubmissionService:
    """
    Business logic for form submissions.

    Responsibilities:
        - submit(): upload → validate → persist → notify
        - list_all(): every stored submission, unfiltered
    """

    def __init__(
        self,
        repository: SubmissionRepository,
        uploads: UploadService,
        notifier: Notifier,
    ):
        self.repository = repository
        self.uploads = uploads
        self.notifier = notifier

    async def submit(
        self,
        *,
        name: Optional[str],
        age: Optional[str],
        message: Optional[str],
        email: Optional[str],
        files: Sequence[IncomingFile],
        base_url: str,
    ) -> IntakeResponse:
        """
        Complete intake workflow for one form post.

        Error Recovery:
            RECEIVING fails  → UploadError (500); earlier files stay on disk
            VALIDATING fails → ValidationError (400); nothing stored, no email
            PERSISTING fails → StorageError (500); no email
            NOTIFYING fails  → NotificationError (500); submission stays stored

        Returns:
            IntakeResponse carrying the stored submission.
        """
        stage = IntakeStage.RECEIVING
        try:
            images = await self.uploads.store_uploads(files, base_url)

            stage = self._advance(stage, IntakeStage.VALIDATING)
            record = validate_submission(name, age, message, email, images)

            stage = self._advance(stage, IntakeStage.PERSISTING)
            stored = await self.repository.save(record)

            stage = self._advance(stage, IntakeStage.NOTIFYING)
            await self.notifier.notify(stored)

            self._advance(stage, IntakeStage.DONE)
        except FormDropError as e:
            e.context.setdefault("stage", stage.value)
            self._advance(stage, IntakeStage.FAILED)
            logger.warning(
                "Intake failed while %s: %s (%s)", stage.value, e.message, type(e).__name__
            )
            raise

        return IntakeResponse(
            message="User added and email sent",
            data=SubmissionResponse.model_validate(stored),
        )

    async def list_all(self) -> List[SubmissionResponse]:
        """
        Every stored submission, verbatim and in insertion order.

        Raises:
            StorageError on store failure (propagated from the repository).
        """
        submissions: List[Submission] = await self.repository.find_all()
        return [SubmissionResponse.model_validate(s) for s in submissions]

    @staticmethod
    def _advance(current: IntakeStage, nxt: IntakeStage) -> IntakeStage:
        logger.debug("Intake stage %s -> %s", current.value, nxt.value)
        return nxt


def get_submission_service(
    repository: SubmissionRepository = Depends(get_repository),
    uploads: UploadService = Depends(get_upload_service),
    notifier: Notifier = Depends(get_notifier),
) -> SubmissionService:
    """FastAPI dependency wiring the workflow to its collaborators."""
    return SubmissionService(repository=repository, uploads=uploads, notifier=notifier)
