# frontend/orchestrator.py

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Literal, Optional, Protocol, Sequence

from config.settings import settings

from .encoder import encode_all
from .errors import BusyError, CollaboratorError, StudioError
from .history import ResultHistory
from .job_request import build, validate
from .model import ImageSource, JobRequest, JobResult, Mode
from .progress import ProgressSimulator

logger = logging.getLogger(__name__)


class ImageService(Protocol):
    async def submit(self, request: JobRequest) -> str:
        """Send the built request to the operation for its mode; return the output URL."""
        ...


class SubmissionState(str, Enum):
    IDLE = "idle"
    ENCODING = "encoding"  # slot already claimed, files still being read
    SUBMITTING = "submitting"


@dataclass(frozen=True)
class Notice:
    level: Literal["success", "error", "info"]
    message: str


class SubmissionOrchestrator:
    """
    Owns the single in-flight job.

    submit() validates, encodes, calls the image service and races it against
    the progress simulator. A second submit while a job is being encoded or is
    in flight is rejected here, whatever the UI does with its button. Every
    failure ends back in IDLE with one user-visible notice; history is touched
    only on success.
    """

    def __init__(
        self,
        service: ImageService,
        history: Optional[ResultHistory] = None,
        progress: Optional[ProgressSimulator] = None,
        submit_timeout: Optional[float] = settings.SUBMIT_TIMEOUT,
        on_notice: Optional[Callable[[Notice], None]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.service = service
        self.history = history if history is not None else ResultHistory()
        self.progress = progress if progress is not None else ProgressSimulator()
        self.submit_timeout = submit_timeout
        self.on_notice = on_notice
        self.clock = clock
        self._state = SubmissionState.IDLE

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state is not SubmissionState.IDLE

    async def submit(self, mode: Mode, prompt: str, files: Sequence[ImageSource] = ()) -> Optional[JobResult]:
        try:
            self._claim()
        except BusyError as e:
            logger.info("[Orchestrator] Rejected submit while %s", self._state.value)
            self._notify("error", str(e))
            return None

        try:
            request = await self._prepare(mode, prompt, files)
        except StudioError as e:
            self._state = SubmissionState.IDLE
            logger.info("[Orchestrator] Submission rejected: %s", e)
            self._notify("error", str(e))
            return None
        except asyncio.CancelledError:
            self._state = SubmissionState.IDLE
            raise
        except Exception as e:
            self._state = SubmissionState.IDLE
            logger.exception("[Orchestrator] Unexpected error while preparing submission")
            self._notify("error", f"Error: {str(e) or 'Failed to prepare images'}")
            return None

        self._state = SubmissionState.SUBMITTING
        self._notify("info", _start_message(request))
        handle = self.progress.start()
        logger.info(
            "[Orchestrator] Submitting %s job (generation %d), prompt=%s...",
            request.mode, handle.generation, request.prompt[:50],
        )

        try:
            url = await self._call(request)
        except asyncio.CancelledError:
            # the caller went away; free the slot and let the cancellation through
            self.progress.stop(handle)
            self._state = SubmissionState.IDLE
            self.progress.schedule_reset(handle)
            raise
        except Exception as e:
            self.progress.stop(handle)
            self._state = SubmissionState.IDLE
            self.progress.schedule_reset(handle)
            if isinstance(e, CollaboratorError):
                logger.error("[Orchestrator] Job failed: %s", e)
            else:
                logger.exception("[Orchestrator] Unexpected error from image service")
            self._notify("error", f"Error: {str(e) or f'Failed to {request.mode} image'}")
            return None

        self.progress.complete(handle)
        result = JobResult(
            url=url,
            prompt=request.prompt,
            timestamp=self.clock(),
            mode=request.mode,
            image_count=len(request.images) if request.mode == "edit" else None,
        )
        self.history.prepend(result)
        self._state = SubmissionState.IDLE
        self.progress.schedule_reset(handle)
        logger.info("[Orchestrator] Job completed: %s", url)
        self._notify("success", f"Image {'edited' if request.mode == 'edit' else 'generated'} successfully!")
        return result

    def _claim(self) -> None:
        # runs before the first await, so two submits cannot both pass
        if self.busy:
            raise BusyError()
        self._state = SubmissionState.ENCODING

    async def _prepare(self, mode: Mode, prompt: str, files: Sequence[ImageSource]) -> JobRequest:
        # cheap checks first so a bad prompt never costs a file read
        validate(mode, prompt, len(files))
        images = await encode_all(files) if mode == "edit" else []
        return build(mode, prompt, images)

    async def _call(self, request: JobRequest) -> str:
        try:
            url = await asyncio.wait_for(self.service.submit(request), timeout=self.submit_timeout)
        except asyncio.TimeoutError as e:
            raise CollaboratorError(f"Image service did not answer within {self.submit_timeout:g}s") from e

        if not url:
            raise CollaboratorError("Image service returned no output image")
        return url

    def _notify(self, level: str, message: str) -> None:
        if self.on_notice is not None:
            self.on_notice(Notice(level, message))


def _start_message(request: JobRequest) -> str:
    if request.mode == "edit":
        return f"Processing {len(request.images)} image(s) with {settings.EDIT_MODEL}..."
    return f"Generating image with {settings.GENERATE_MODEL}..."
