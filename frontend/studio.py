# frontend/studio.py

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import requests

from config.settings import settings

from .downloads import save_image
from .history import ResultHistory
from .model import ImageSource, JobResult, Mode
from .orchestrator import ImageService, Notice, SubmissionOrchestrator, SubmissionState
from .progress import ProgressSimulator
from .service_client import ImageServiceClient

logger = logging.getLogger(__name__)


class Studio:
    """
    The one object a display layer holds: history, submission state and
    progress live here, and the UI only talks to the entry points below.
    """

    def __init__(
        self,
        service: Optional[ImageService] = None,
        progress: Optional[ProgressSimulator] = None,
        submit_timeout: Optional[float] = settings.SUBMIT_TIMEOUT,
        clipboard: Optional[Callable[[str], None]] = None,
        on_notice: Optional[Callable[[Notice], None]] = None,
    ):
        self.history = ResultHistory()
        self.clipboard = clipboard
        self.on_notice = on_notice
        self._notices: List[Notice] = []
        self.orchestrator = SubmissionOrchestrator(
            service if service is not None else ImageServiceClient(),
            history=self.history,
            progress=progress,
            submit_timeout=submit_timeout,
            on_notice=self._notify,
        )

    @property
    def state(self) -> SubmissionState:
        return self.orchestrator.state

    @property
    def busy(self) -> bool:
        return self.orchestrator.busy

    @property
    def progress(self) -> ProgressSimulator:
        return self.orchestrator.progress

    def results(self) -> list[JobResult]:
        return self.history.list()

    async def submit(
        self,
        mode: Mode,
        prompt: str,
        files: Sequence[ImageSource] = (),
        settle: bool = True,
    ) -> Optional[JobResult]:
        """
        Run one job. With settle=True this also waits for the delayed progress
        reset, so a caller that wraps each job in its own asyncio.run() still
        sees the value return to 0 before that loop shuts down.
        """
        result = await self.orchestrator.submit(mode, prompt, files)
        if settle:
            await self.progress.settle()
        return result

    def clear_history(self) -> None:
        self.history.clear()
        self._notify(Notice("info", "Results cleared"))

    def download(self, ref: str, filename: str, dest_dir: Union[str, Path] = ".") -> Optional[Path]:
        try:
            path = save_image(ref, filename, dest_dir)
        except (requests.RequestException, OSError) as e:
            logger.error("[Studio] Download of %s failed: %s", ref, e)
            self._notify(Notice("error", "Failed to download image"))
            return None
        self._notify(Notice("success", "Image downloaded successfully!"))
        return path

    def copy_reference(self, ref: str) -> None:
        if self.clipboard is not None:
            self.clipboard(ref)
        self._notify(Notice("success", "Copied to clipboard!"))

    def drain_notices(self) -> List[Notice]:
        notices, self._notices = self._notices, []
        return notices

    def _notify(self, notice: Notice) -> None:
        self._notices.append(notice)
        if self.on_notice is not None:
            self.on_notice(notice)
