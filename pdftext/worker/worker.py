from concurrent.futures import Future, ThreadPoolExecutor, wait

from kombu.message import Message

from pdftext.config.settings import Settings
from pdftext.logging.logger import Log
from pdftext.messaging.job_queue import JobQueue
from pdftext.worker.job_runner import JobOutcome, JobRunner

# Upper bound on each drain while any job is in flight.
BUSY_DRAIN_TIMEOUT_SECONDS = 0.05


class Worker:
    """Consume loop: drain deliveries -> run jobs on the pool -> settle finished jobs.

    Prefetch equals the pool size, so the broker withholds deliveries while
    every slot is busy. Only the consuming thread touches the channel: job
    threads return an outcome and the consuming thread acks or rejects.
    """

    def __init__(
        self,
        job_queue: JobQueue,
        job_runner: JobRunner,
        settings: Settings,
    ) -> None:
        self._job_queue = job_queue
        self._job_runner = job_runner
        self._settings = settings
        self._pool: ThreadPoolExecutor | None = None
        self._in_flight: dict[Future[JobOutcome], Message] = {}
        self._jobs_settled = 0

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def run(self, max_jobs: int | None = None) -> None:
        """Main consume loop. Runs forever until interrupted.

        If max_jobs is set, stop after settling that many messages (for testing).
        In-flight jobs always finish and are settled before returning.
        """
        concurrency = self._settings.worker_concurrency
        self._job_queue.declare_topology()
        Log.info(
            f"Worker consuming queue={self._job_queue.topology.queue_name} "
            f"concurrency={concurrency}"
        )
        with ThreadPoolExecutor(
            max_workers=concurrency, thread_name_prefix="pdftext-job"
        ) as pool:
            self._pool = pool
            with self._job_queue.consume(self._on_message, prefetch_count=concurrency):
                try:
                    while max_jobs is None or self._jobs_settled < max_jobs:
                        self._job_queue.drain_events(timeout=self._drain_timeout())
                        self._settle_finished()
                except KeyboardInterrupt:
                    Log.info("Worker shutting down gracefully")
                finally:
                    self._settle_remaining()
            self._pool = None
        Log.info(f"Worker stopped after settling {self._jobs_settled} messages")

    def _drain_timeout(self) -> float:
        idle_timeout = self._settings.worker_drain_timeout_seconds
        if self._in_flight:
            return min(idle_timeout, BUSY_DRAIN_TIMEOUT_SECONDS)
        return idle_timeout

    def _on_message(self, message: Message) -> None:
        if self._pool is None:
            raise RuntimeError("Message delivered while the worker is not running")
        Log.debug(f"Dispatching delivery {message.delivery_tag}")
        future = self._pool.submit(self._job_runner.run, message.body)
        self._in_flight[future] = message

    def _settle_finished(self) -> None:
        for future in [f for f in self._in_flight if f.done()]:
            self._settle(future)

    def _settle_remaining(self) -> None:
        if self._in_flight:
            Log.info(f"Waiting for {len(self._in_flight)} in-flight jobs")
            wait(list(self._in_flight))
        self._settle_finished()

    def _settle(self, future: Future[JobOutcome]) -> None:
        message = self._in_flight.pop(future)
        try:
            outcome = future.result()
        except Exception as exc:
            Log.error(f"Job for delivery {message.delivery_tag} crashed: {exc}")
            outcome = JobOutcome.REJECT

        try:
            if outcome is JobOutcome.ACK:
                self._job_queue.ack(message)
            else:
                self._job_queue.nack(message, requeue=False)
        except Exception as exc:
            Log.warning(
                f"Could not settle delivery {message.delivery_tag}, "
                f"broker will redeliver: {exc}"
            )
        self._jobs_settled += 1
