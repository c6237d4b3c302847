"""
Job queue backends.

Dispatch stores the job record and pushes its id onto the pending set of
a QueueStorage. In `async` mode the request returns immediately and any
JobWorker sharing the storage (the API process itself, or independent
`worker.py` processes with the Redis backend) claims and runs it. In
`sync` mode the job runs inline during dispatch. Unique locks live in the
shared Cache so that, across processes, a unique job runs once at a time.
"""

import asyncio
import json
import logging
import time
import uuid
from typing import Dict, List, Optional

from redis.asyncio import Redis

from src.app.services.cache import Cache
from src.app.services.job_queue import (
    Job,
    JobFactory,
    JobQueue,
    JobRecord,
    JobStatus,
    QueueStorage,
)
from src.domain.base import utcnow

logger = logging.getLogger(__name__)

QUEUE_MODES = ("async", "sync")

# Pops the first due job id from pending into processing in one step
CLAIM_SCRIPT = """
local ids = redis.call('ZRANGEBYSCORE', KEYS[1], '-inf', ARGV[1], 'LIMIT', 0, 1)
if #ids == 0 then
    return false
end
redis.call('ZREM', KEYS[1], ids[1])
redis.call('ZADD', KEYS[2], ARGV[1], ids[1])
return ids[1]
"""

REQUEUE_STALE_SCRIPT = """
local ids = redis.call('ZRANGEBYSCORE', KEYS[1], '-inf', ARGV[1])
for _, id in ipairs(ids) do
    redis.call('ZREM', KEYS[1], id)
    redis.call('ZADD', KEYS[2], ARGV[2], id)
end
return ids
"""


class InMemoryQueueStorage(QueueStorage):
    """Process-local storage for tests and single-process deployments"""

    def __init__(self):
        self._records: Dict[str, dict] = {}
        self._pending: Dict[str, float] = {}
        self._processing: Dict[str, float] = {}

    async def save(self, record: JobRecord) -> None:
        self._records[record.job_id] = record.to_dict()

    async def get(self, job_id: str) -> Optional[JobRecord]:
        data = self._records.get(job_id)
        return JobRecord.from_dict(data) if data is not None else None

    async def push(self, job_id: str, available_at: float) -> None:
        self._pending[job_id] = available_at

    async def claim(self, now: float) -> Optional[str]:
        due = [(at, job_id) for job_id, at in self._pending.items() if at <= now]
        if not due:
            return None
        _, job_id = min(due)
        del self._pending[job_id]
        self._processing[job_id] = now
        return job_id

    async def ack(self, job_id: str) -> None:
        self._processing.pop(job_id, None)

    async def requeue(self, job_id: str, available_at: float) -> None:
        self._processing.pop(job_id, None)
        self._pending[job_id] = available_at

    async def requeue_stale(self, claimed_before: float) -> List[str]:
        stale = [job_id for job_id, at in self._processing.items() if at < claimed_before]
        now = time.time()
        for job_id in stale:
            del self._processing[job_id]
            self._pending[job_id] = now
        return stale

    async def pending_count(self) -> int:
        return len(self._pending)


class RedisQueueStorage(QueueStorage):
    """
    Redis-backed storage shared by every API and worker process.

    Pending and processing jobs are sorted sets scored by the time they
    become due / were claimed; records are JSON strings that expire after
    `record_ttl` seconds.
    """

    def __init__(self, client: Redis, prefix: str = "tenancy", record_ttl: int = 604800):
        self.client = client
        self.prefix = prefix
        self.record_ttl = record_ttl
        self._claim = client.register_script(CLAIM_SCRIPT)
        self._requeue_stale = client.register_script(REQUEUE_STALE_SCRIPT)

    @property
    def pending_key(self) -> str:
        return f"{self.prefix}:queue:pending"

    @property
    def processing_key(self) -> str:
        return f"{self.prefix}:queue:processing"

    def record_key(self, job_id: str) -> str:
        return f"{self.prefix}:queue:job:{job_id}"

    async def save(self, record: JobRecord) -> None:
        await self.client.set(
            self.record_key(record.job_id), json.dumps(record.to_dict()), ex=self.record_ttl
        )

    async def get(self, job_id: str) -> Optional[JobRecord]:
        raw = await self.client.get(self.record_key(job_id))
        if raw is None:
            return None
        return JobRecord.from_dict(json.loads(raw))

    async def push(self, job_id: str, available_at: float) -> None:
        await self.client.zadd(self.pending_key, {job_id: available_at})

    async def claim(self, now: float) -> Optional[str]:
        job_id = await self._claim(keys=[self.pending_key, self.processing_key], args=[now])
        return job_id or None

    async def ack(self, job_id: str) -> None:
        await self.client.zrem(self.processing_key, job_id)

    async def requeue(self, job_id: str, available_at: float) -> None:
        pipe = self.client.pipeline(transaction=True)
        pipe.zrem(self.processing_key, job_id)
        pipe.zadd(self.pending_key, {job_id: available_at})
        await pipe.execute()

    async def requeue_stale(self, claimed_before: float) -> List[str]:
        ids = await self._requeue_stale(
            keys=[self.processing_key, self.pending_key], args=[claimed_before, time.time()]
        )
        return list(ids or [])

    async def pending_count(self) -> int:
        return await self.client.zcard(self.pending_key)

    async def close(self) -> None:
        await self.client.aclose()


class AsyncJobQueue(JobQueue):
    """Storage-backed queue with cache-held unique locks and retries"""

    def __init__(
        self,
        cache: Cache,
        storage: Optional[QueueStorage] = None,
        mode: str = "async",
        default_tries: int = 3,
        default_backoff: float = 5.0,
        default_unique_for: int = 3600,
        visibility_timeout: int = 900,
    ):
        if mode not in QUEUE_MODES:
            raise ValueError(f"Unsupported QUEUE_MODE: {mode}")
        self.cache = cache
        self.storage = storage or InMemoryQueueStorage()
        self.mode = mode
        self.default_tries = default_tries
        self.default_backoff = default_backoff
        self.default_unique_for = default_unique_for
        self.visibility_timeout = visibility_timeout
        self._factories: Dict[str, JobFactory] = {}

    @staticmethod
    def lock_key(name: str, unique_id: str) -> str:
        return f"unique_job:{name}:{unique_id}"

    def register(self, name: str, factory: JobFactory) -> None:
        self._factories[name] = factory

    async def dispatch(self, job: Job) -> Optional[str]:
        job_id = str(uuid.uuid4())
        unique_id = job.unique_id()

        if unique_id is not None:
            unique_for = job.unique_for or self.default_unique_for
            acquired = await self.cache.add(self.lock_key(job.name, unique_id), job_id, unique_for)
            if not acquired:
                logger.info(f"{job.name} for {unique_id} already in flight, dispatch suppressed")
                return None

        record = JobRecord(
            job_id=job_id,
            name=job.name,
            status=JobStatus.queued,
            payload=job.payload(),
            unique_id=unique_id,
            tries=max(job.tries or self.default_tries, 1),
            backoff=job.backoff if job.backoff is not None else self.default_backoff,
            queued_at=utcnow(),
            metadata=job.metadata(),
        )
        await self.storage.save(record)
        logger.info(f"Job {job_id} ({job.name}) queued")

        if self.mode == "sync":
            while not await self._attempt(job, record):
                await asyncio.sleep(record.backoff * record.attempts)
        else:
            await self.storage.push(job_id, time.time())

        return job_id

    async def get_job(self, job_id: str) -> Optional[JobRecord]:
        return await self.storage.get(job_id)

    async def work_once(self) -> bool:
        job_id = await self.storage.claim(time.time())
        if job_id is None:
            return False

        record = await self.storage.get(job_id)
        if record is None:
            logger.warning(f"Job {job_id} has no record left, dropped")
            await self.storage.ack(job_id)
            return True

        factory = self._factories.get(record.name)
        if factory is None:
            record.error = f"No factory registered for {record.name}"
            logger.error(f"Job {job_id}: {record.error}")
            await self._finish(record, JobStatus.failed)
            await self.storage.ack(job_id)
            return True

        try:
            job = factory(record.payload)
        except Exception as e:
            record.error = f"Could not rebuild {record.name}: {e}"
            logger.error(f"Job {job_id}: {record.error}")
            await self._finish(record, JobStatus.failed)
            await self.storage.ack(job_id)
            return True

        if await self._attempt(job, record):
            await self.storage.ack(job_id)
        else:
            await self.storage.requeue(job_id, time.time() + record.backoff * record.attempts)
        return True

    async def recover_stale(self) -> List[str]:
        """Return jobs whose worker stopped responding to the pending set"""
        stale = await self.storage.requeue_stale(time.time() - self.visibility_timeout)
        if stale:
            logger.warning(f"Requeued {len(stale)} stale job(s): {', '.join(stale)}")
        return stale

    async def close(self) -> None:
        await self.storage.close()

    async def _attempt(self, job: Job, record: JobRecord) -> bool:
        """Run one attempt; True once the job is completed or finally failed"""
        record.status = JobStatus.running
        record.attempts += 1
        record.started_at = utcnow()
        await self.storage.save(record)

        try:
            record.result = await job.handle()
        except Exception as e:
            record.error = str(e)
            logger.error(
                f"Job {record.job_id} ({record.name}) failed on attempt "
                f"{record.attempts}/{record.tries}: {e}",
                exc_info=True,
            )
            if record.attempts >= record.tries:
                await self._finish(record, JobStatus.failed)
                return True
            record.status = JobStatus.retrying
            await self.storage.save(record)
            return False

        record.error = None
        await self._finish(record, JobStatus.completed)
        logger.info(f"Job {record.job_id} ({record.name}) completed")
        return True

    async def _finish(self, record: JobRecord, status: JobStatus) -> None:
        record.status = status
        record.finished_at = utcnow()
        await self.storage.save(record)
        if record.unique_id is not None:
            await self.cache.delete(self.lock_key(record.name, record.unique_id))


class JobWorker:
    """Claims and runs due jobs until stopped"""

    def __init__(
        self,
        queue: AsyncJobQueue,
        poll_interval: float = 1.0,
        recover_every: float = 60.0,
        worker_id: Optional[str] = None,
    ):
        self.queue = queue
        self.poll_interval = poll_interval
        self.recover_every = recover_every
        self.worker_id = worker_id or f"worker-{uuid.uuid4().hex[:8]}"
        self._stopping = asyncio.Event()

    def stop(self) -> None:
        self._stopping.set()

    async def run(self) -> None:
        logger.info(f"{self.worker_id} started")
        last_recovery = None
        while not self._stopping.is_set():
            now = time.monotonic()
            if last_recovery is None or now - last_recovery >= self.recover_every:
                await self.queue.recover_stale()
                last_recovery = now

            try:
                worked = await self.queue.work_once()
            except Exception:
                logger.exception(f"{self.worker_id} could not process a job")
                worked = False

            if not worked:
                try:
                    await asyncio.wait_for(self._stopping.wait(), timeout=self.poll_interval)
                except asyncio.TimeoutError:
                    pass
        logger.info(f"{self.worker_id} stopped")


def build_job_queue(config, cache: Cache) -> AsyncJobQueue:
    """Create the queue selected by QUEUE_MODE / QUEUE_BACKEND"""
    backend = config.QUEUE_BACKEND
    if backend == "memory":
        storage = InMemoryQueueStorage()
    elif backend == "redis":
        if config.CACHE_BACKEND != "redis":
            raise ValueError("QUEUE_BACKEND=redis requires CACHE_BACKEND=redis")
        client = Redis.from_url(config.REDIS_URL, decode_responses=True)
        storage = RedisQueueStorage(
            client, prefix=config.CACHE_PREFIX, record_ttl=config.JOB_RECORD_TTL
        )
    else:
        raise ValueError(f"Unsupported QUEUE_BACKEND: {backend}")

    return AsyncJobQueue(
        cache,
        storage,
        mode=config.QUEUE_MODE,
        default_tries=config.JOB_TRIES,
        default_backoff=config.JOB_BACKOFF,
        default_unique_for=config.JOB_UNIQUE_FOR,
        visibility_timeout=config.JOB_VISIBILITY_TIMEOUT,
    )
