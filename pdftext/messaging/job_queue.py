from collections.abc import Callable, Mapping
from typing import Any

from amqp.exceptions import MessageNacked
from kombu import Connection, Consumer, Producer
from kombu.entity import PERSISTENT_DELIVERY_MODE
from kombu.exceptions import KombuError
from kombu.message import Message

from pdftext.config.settings import Settings
from pdftext.logging.logger import Log
from pdftext.messaging.exceptions import QueuePublishError
from pdftext.messaging.topology import QueueTopology


def open_connection(settings: Settings) -> Connection:
    """Create a broker connection. Use as a context manager to close it."""
    return Connection(
        settings.rabbitmq_url,
        transport_options={"confirm_publish": settings.rabbitmq_confirm_publish},
    )


class JobQueue:
    """Durable job channel over one explicitly owned kombu connection.

    Not thread-safe: publish, consume, drain and settle from one thread.
    """

    def __init__(
        self,
        connection: Connection,
        topology: QueueTopology,
        publish_max_retries: int = 3,
    ) -> None:
        self._connection = connection
        self._topology = topology
        self._retry_policy = {
            "max_retries": publish_max_retries,
            "interval_start": 0,
            "interval_step": 1,
            "interval_max": 5,
        }

    @property
    def topology(self) -> QueueTopology:
        return self._topology

    def declare_topology(self) -> None:
        """Declare exchange, queue and binding. Safe to call repeatedly."""
        self._topology.queue(self._connection.default_channel).declare()
        Log.info(
            f"Queue topology ready: exchange={self._topology.exchange_name} "
            f"queue={self._topology.queue_name} routing_key={self._topology.routing_key}"
        )

    def publish(
        self,
        routing_key: str,
        payload: Mapping[str, Any],
        *,
        message_id: str | None = None,
    ) -> None:
        """Enqueue one persistent JSON message.

        Returning means the broker accepted the message, not that anyone
        consumed it.

        Raises:
            QueuePublishError: if the broker stays unreachable, nacks the
                message under publisher confirms (e.g. a full queue), or refuses
                it after the retry policy is exhausted.
        """
        errors = (
            KombuError,
            OSError,
            MessageNacked,
            *self._connection.connection_errors,
            *self._connection.channel_errors,
        )
        try:
            producer = Producer(
                self._connection.default_channel,
                exchange=self._topology.exchange,
                serializer="json",
            )
            producer.publish(
                dict(payload),
                routing_key=routing_key,
                delivery_mode=PERSISTENT_DELIVERY_MODE,
                message_id=message_id,
                declare=[self._topology.queue],
                retry=True,
                retry_policy=self._retry_policy,
            )
        except errors as exc:
            raise QueuePublishError(
                f"Could not publish to {self._topology.exchange_name}/{routing_key}: {exc}"
            ) from exc

    def consume(
        self,
        on_message: Callable[[Message], None],
        *,
        prefetch_count: int,
    ) -> Consumer:
        """Build a manual-ack consumer; enter it with `with` to start consuming.

        The broker stops delivering once prefetch_count messages are unacked.
        """
        return Consumer(
            self._connection.default_channel,
            queues=[self._topology.queue],
            on_message=on_message,
            prefetch_count=prefetch_count,
            no_ack=False,
        )

    def drain_events(self, timeout: float) -> bool:
        """Deliver pending messages to consumers. False if none arrived in time."""
        try:
            self._connection.drain_events(timeout=timeout)
        except TimeoutError:
            return False
        return True

    def ack(self, message: Message) -> None:
        message.ack()

    def nack(self, message: Message, *, requeue: bool) -> None:
        message.reject(requeue=requeue)
