"""Kafka notifier publishing contract events."""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from confluent_kafka import Producer

from installments.config import KafkaConfig
from installments.models import Event
from installments.sinks.base import Notifier
from installments.sinks.serialization import to_dict

logger = logging.getLogger(__name__)

EVENT_SOURCE = "installments"


class KafkaNotifier(Notifier):
    """Publish ``contract.created`` and ``contract.failed`` events.

    Events are keyed by contract number so a contract's events stay on one
    partition.
    """

    def __init__(self, config: KafkaConfig | str) -> None:
        """Initialize Kafka notifier.

        Parameters
        ----------
        config : KafkaConfig | str
            Producer configuration or bootstrap servers string.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.producer = Producer(config.to_dict())
        self.delivered = 0
        self.failed = 0

    def success(self, contract_number: str) -> None:
        self.publish(
            self._event("contract.created", contract_number, {"contract_number": contract_number})
        )

    def error(self, message: str) -> None:
        self.publish(self._event("contract.failed", "", {"message": message}))

    def publish(self, event: Event) -> None:
        """Send one event and serve delivery callbacks."""
        value = json.dumps(to_dict(event), ensure_ascii=False).encode("utf-8")
        self.producer.produce(
            topic=self.config.topic,
            key=event.subject.encode("utf-8") if event.subject else None,
            value=value,
            callback=self._delivery_callback,
        )
        self.producer.poll(0)

    def flush(self, timeout: float = 10.0) -> None:
        """Flush pending messages."""
        self.producer.flush(timeout)

    def close(self) -> None:
        """Flush and log delivery totals."""
        self.flush()
        logger.info(
            "Kafka notifier closed: delivered=%d, failed=%d", self.delivered, self.failed
        )

    def _event(self, event_type: str, subject: str, data: dict[str, Any]) -> Event:
        return Event(
            event_id=str(uuid.uuid4()),
            event_type=event_type,
            event_time=datetime.now(timezone.utc),
            source=EVENT_SOURCE,
            subject=subject,
            data=data,
        )

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())
