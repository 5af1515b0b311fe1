"""Concurrent extraction of the six cube faces from a skybox texture."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from .layout import FACE_ORDER, FaceName, Region
from ..utils.image import crop_to_file

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
Backend = Callable[[Path, Region, Path], None]


class ExtractionError(RuntimeError):
    """A face could not be read, cropped or written."""

    def __init__(self, face: FaceName, original: BaseException):
        self.face = face
        self.original = original
        super().__init__(f"Failed to extract {face.value} face: {original}")


class FailurePolicy(Enum):
    """How the pipeline joins its jobs when one of them fails."""

    WAIT_ALL = "wait-all"
    FAIL_FAST = "fail-fast"


@dataclass
class ExtractionConfig:
    """Configuration for face extraction."""

    failure_policy: FailurePolicy = FailurePolicy.WAIT_ALL
    max_workers: int = len(FACE_ORDER)
    # Remove faces written by successful jobs when the batch fails
    cleanup_on_failure: bool = False

    def __post_init__(self):
        """Validate configuration parameters."""
        if isinstance(self.failure_policy, str):
            self.failure_policy = FailurePolicy(self.failure_policy)

        if not 1 <= self.max_workers <= len(FACE_ORDER):
            raise ValueError(
                f"max_workers must be between 1 and {len(FACE_ORDER)}, got {self.max_workers}"
            )

        if self.cleanup_on_failure and self.failure_policy is FailurePolicy.FAIL_FAST:
            raise ValueError(
                "cleanup_on_failure requires the wait-all policy; "
                "fail-fast leaves sibling jobs writing in the background"
            )


@dataclass(frozen=True)
class ExtractionJob:
    """One crop-and-save operation."""

    face: FaceName
    source_path: Path
    region: Region
    destination_path: Path


@dataclass
class FaceResult:
    """Settled state of a single job."""

    face: FaceName
    destination_path: Path
    error: Optional[BaseException] = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ExtractionOutcome:
    """Aggregate result of one extraction batch."""

    success: bool
    elapsed_ms: float
    saved_directory: Path
    cause: Optional[BaseException] = None
    failed_face: Optional[FaceName] = None
    results: List[FaceResult] = field(default_factory=list)
    removed: List[Path] = field(default_factory=list)

    @classmethod
    def succeeded(cls, elapsed_ms: float, saved_directory: Path,
                  results: List[FaceResult]) -> "ExtractionOutcome":
        return cls(True, elapsed_ms, saved_directory, results=results)

    @classmethod
    def failed(cls, elapsed_ms: float, saved_directory: Path, failure: FaceResult,
               results: List[FaceResult]) -> "ExtractionOutcome":
        return cls(
            False,
            elapsed_ms,
            saved_directory,
            cause=failure.error,
            failed_face=failure.face,
            results=results,
        )

    @property
    def failures(self) -> List[FaceResult]:
        return [result for result in self.results if not result.ok]

    def raise_for_failure(self) -> None:
        """Raise ExtractionError if the batch failed."""
        if not self.success:
            raise ExtractionError(self.failed_face, self.cause) from self.cause


class FaceExtractor:
    """Fans six face jobs out to a thread pool and joins their results."""

    def __init__(self, config: Optional[ExtractionConfig] = None, backend: Backend = crop_to_file):
        self.config = config or ExtractionConfig()
        self.backend = backend

    def build_jobs(self, source_path: PathLike, destination_dir: PathLike,
                   regions: Sequence[Region]) -> List[ExtractionJob]:
        """Pair region i with FACE_ORDER[i] and its destination file."""
        if len(regions) != len(FACE_ORDER):
            raise ValueError(f"Expected {len(FACE_ORDER)} regions, got {len(regions)}")

        source_path = Path(source_path)
        destination_dir = Path(destination_dir)

        return [
            ExtractionJob(
                face=face,
                source_path=source_path,
                region=region,
                destination_path=destination_dir / face.filename,
            )
            for face, region in zip(FACE_ORDER, regions)
        ]

    def extract_faces(
        self,
        source_path: PathLike,
        destination_dir: PathLike,
        regions: Sequence[Region],
        on_face_done: Optional[Callable[[FaceResult], None]] = None,
    ) -> ExtractionOutcome:
        """Extract all faces concurrently and report the aggregate outcome.

        ``on_face_done`` is called on the calling thread each time a job
        settles. With ``FailurePolicy.FAIL_FAST`` the outcome is returned as
        soon as one job fails; jobs already running are not cancelled.
        """
        destination_dir = Path(destination_dir)
        jobs = self.build_jobs(source_path, destination_dir, regions)
        policy = self.config.failure_policy

        logger.info(
            f"Extracting {len(jobs)} faces from {source_path} into {destination_dir} "
            f"({policy.value}, {self.config.max_workers} workers)"
        )

        settled: Dict[FaceName, FaceResult] = {}
        first_failure: Optional[FaceResult] = None

        start = time.perf_counter()
        executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers, thread_name_prefix="face"
        )
        try:
            futures = [executor.submit(self._run_job, job) for job in jobs]

            for future in as_completed(futures):
                result = future.result()
                settled[result.face] = result

                if on_face_done is not None:
                    on_face_done(result)

                if not result.ok and first_failure is None:
                    first_failure = result
                    if policy is FailurePolicy.FAIL_FAST:
                        break
        finally:
            executor.shutdown(wait=policy is FailurePolicy.WAIT_ALL)

        elapsed_ms = (time.perf_counter() - start) * 1000
        results = [settled[face] for face in FACE_ORDER if face in settled]

        if first_failure is None:
            logger.info(f"Saved {len(results)} faces to {destination_dir} in {elapsed_ms:.0f} ms")
            return ExtractionOutcome.succeeded(elapsed_ms, destination_dir, results)

        logger.error(
            f"Extraction failed on {first_failure.face.value} face: {first_failure.error}"
        )
        outcome = ExtractionOutcome.failed(elapsed_ms, destination_dir, first_failure, results)

        if self.config.cleanup_on_failure:
            outcome.removed = self._remove_written(results)

        return outcome

    def _run_job(self, job: ExtractionJob) -> FaceResult:
        """Run one job, capturing its failure in the result."""
        start = time.perf_counter()
        try:
            self.backend(job.source_path, job.region, job.destination_path)
        except Exception as e:
            logger.warning(f"{job.face.value} face failed: {e}")
            error: Optional[BaseException] = e
        else:
            error = None
            logger.debug(f"{job.face.value} face written to {job.destination_path}")

        return FaceResult(
            face=job.face,
            destination_path=job.destination_path,
            error=error,
            elapsed_ms=(time.perf_counter() - start) * 1000,
        )

    def _remove_written(self, results: List[FaceResult]) -> List[Path]:
        removed = []
        for result in results:
            if result.ok and result.destination_path.exists():
                result.destination_path.unlink()
                removed.append(result.destination_path)

        logger.info(f"Removed {len(removed)} partially written faces")
        return removed


def extract_faces(
    source_path: PathLike,
    destination_dir: PathLike,
    regions: Sequence[Region],
    config: Optional[ExtractionConfig] = None,
    on_face_done: Optional[Callable[[FaceResult], None]] = None,
) -> ExtractionOutcome:
    """Convenience function to run a FaceExtractor once."""
    extractor = FaceExtractor(config=config)
    return extractor.extract_faces(source_path, destination_dir, regions, on_face_done)
