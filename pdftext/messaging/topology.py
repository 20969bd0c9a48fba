from dataclasses import dataclass

from kombu import Exchange, Queue

from pdftext.config.settings import Settings


@dataclass(frozen=True)
class QueueTopology:
    """Durable direct exchange bound to one durable queue by routing key."""

    exchange_name: str = "pdftext"
    queue_name: str = "pdftext.extract"
    routing_key: str = "extract_text"

    @classmethod
    def from_settings(cls, settings: Settings) -> "QueueTopology":
        return cls(
            exchange_name=settings.rabbitmq_exchange,
            queue_name=settings.rabbitmq_queue,
            routing_key=settings.rabbitmq_routing_key,
        )

    @property
    def exchange(self) -> Exchange:
        return Exchange(self.exchange_name, type="direct", durable=True)

    @property
    def queue(self) -> Queue:
        return Queue(
            self.queue_name,
            exchange=self.exchange,
            routing_key=self.routing_key,
            durable=True,
        )
