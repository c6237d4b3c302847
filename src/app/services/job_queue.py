"""
Background job contract.

A Job carries a JSON-serialisable payload and implements `handle()`.
Dispatch stores a JobRecord in a QueueStorage; any worker process sharing
that storage rebuilds the job from its name and payload through the
factories registered on the queue. Jobs that return a value from
`unique_id()` are unique: while one instance with that id is pending or
running, further dispatches are suppressed.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class JobStatus(str, Enum):
    """Job execution status"""

    queued = "queued"
    running = "running"
    retrying = "retrying"
    completed = "completed"
    failed = "failed"


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


@dataclass
class JobRecord:
    """Tracking record of a dispatched job"""

    job_id: str
    name: str
    status: JobStatus
    payload: Dict[str, Any] = field(default_factory=dict)
    unique_id: Optional[str] = None
    tries: int = 1
    backoff: float = 0.0
    attempts: int = 0
    queued_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    result: Optional[Any] = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def finished(self) -> bool:
        return self.status in (JobStatus.completed, JobStatus.failed)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        return {
            "job_id": self.job_id,
            "name": self.name,
            "status": self.status.value,
            "payload": self.payload,
            "unique_id": self.unique_id,
            "tries": self.tries,
            "backoff": self.backoff,
            "attempts": self.attempts,
            "queued_at": self.queued_at.isoformat() if self.queued_at else None,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "result": self.result,
            "error": self.error,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JobRecord":
        return cls(
            job_id=data["job_id"],
            name=data["name"],
            status=JobStatus(data["status"]),
            payload=data.get("payload") or {},
            unique_id=data.get("unique_id"),
            tries=data.get("tries", 1),
            backoff=data.get("backoff", 0.0),
            attempts=data.get("attempts", 0),
            queued_at=_parse_datetime(data.get("queued_at")),
            started_at=_parse_datetime(data.get("started_at")),
            finished_at=_parse_datetime(data.get("finished_at")),
            result=data.get("result"),
            error=data.get("error"),
            metadata=data.get("metadata") or {},
        )


class Job(ABC):
    """Unit of background work"""

    # Attempts before the job is marked failed
    tries: Optional[int] = None
    # Seconds to wait between attempts (multiplied by the attempt number)
    backoff: Optional[float] = None
    # Seconds the unique lock is held at most
    unique_for: Optional[int] = None

    @classmethod
    def job_name(cls) -> str:
        return cls.__name__

    @property
    def name(self) -> str:
        return self.job_name()

    def unique_id(self) -> Optional[str]:
        """Uniqueness key; None for non-unique jobs"""
        return None

    def payload(self) -> Dict[str, Any]:
        """Arguments a worker needs to rebuild the job"""
        return {}

    def metadata(self) -> Dict[str, Any]:
        return {}

    @abstractmethod
    async def handle(self) -> Any:
        pass


JobFactory = Callable[[Dict[str, Any]], Job]


class QueueStorage(ABC):
    """
    Persistent side of the queue: job records plus the pending and
    processing sets. Implementations must make `claim` atomic across
    workers.
    """

    @abstractmethod
    async def save(self, record: JobRecord) -> None:
        pass

    @abstractmethod
    async def get(self, job_id: str) -> Optional[JobRecord]:
        pass

    @abstractmethod
    async def push(self, job_id: str, available_at: float) -> None:
        """Make a job claimable from `available_at` (epoch seconds)"""
        pass

    @abstractmethod
    async def claim(self, now: float) -> Optional[str]:
        """Move the first due job from pending to processing; its id or None"""
        pass

    @abstractmethod
    async def ack(self, job_id: str) -> None:
        """Remove a finished job from processing"""
        pass

    @abstractmethod
    async def requeue(self, job_id: str, available_at: float) -> None:
        """Move a job from processing back to pending"""
        pass

    @abstractmethod
    async def requeue_stale(self, claimed_before: float) -> List[str]:
        """Return jobs claimed before the cutoff (crashed workers) to pending"""
        pass

    @abstractmethod
    async def pending_count(self) -> int:
        pass

    async def close(self) -> None:
        pass


class JobQueue(ABC):
    """Dispatches jobs and tracks their status"""

    @abstractmethod
    def register(self, name: str, factory: JobFactory) -> None:
        """Teach workers how to rebuild jobs called `name`"""
        pass

    @abstractmethod
    async def dispatch(self, job: Job) -> Optional[str]:
        """Queue a job; returns its id, or None when a unique job is already in flight"""
        pass

    @abstractmethod
    async def get_job(self, job_id: str) -> Optional[JobRecord]:
        pass

    @abstractmethod
    async def work_once(self) -> bool:
        """Claim and run one due job; False when nothing was due"""
        pass
