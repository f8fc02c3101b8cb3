"""
Kafka-backed reading source with automatic reconnection.

The source owns the connection state. It is only mutated from the source's own
handlers (connect, poll worker, retry timer) under a single lock; everyone else
gets immutable ``ConnectionState`` snapshots.

    connecting   -> connected     consumer created, brokers reachable
    connecting   -> error         handshake failed (no brokers)
    connected    -> disconnected  poll raised a transport error
    disconnected -> connecting    retry timer fired
    error        -> connecting    retry timer fired

Retries back off exponentially: ``min(base * 2**attempt, cap)``.
"""

import threading
import time
from collections.abc import Callable
from typing import Any

import structlog
from kafka import KafkaConsumer
from kafka.errors import KafkaConnectionError, KafkaError

from src.core.readings import MalformedReadingError, Reading

from .models import ConnectionState, ConnectionStatus, MonitorConfig

logger = structlog.get_logger(__name__)


def backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Delay before retry number ``attempt + 1`` (attempt counts from 0)"""
    return min(base_delay * (2**attempt), max_delay)


def kafka_consumer_factory(config: MonitorConfig) -> KafkaConsumer:
    """Open a consumer on the readings topic (raises NoBrokersAvailable if unreachable)"""
    return KafkaConsumer(
        config.kafka_topic,
        bootstrap_servers=config.kafka_bootstrap_servers,
        group_id=config.kafka_group_id,
        auto_offset_reset=config.kafka_auto_offset_reset,
        max_poll_records=config.max_poll_records,
    )


def broker_connected(consumer: KafkaConsumer) -> bool:
    """True while the consumer holds a connection to at least one known broker

    kafka-python keeps polling quietly when brokers go away, so an outage shows up
    as empty polls with no live connection rather than as an exception.
    """
    client = consumer._client
    return any(client.connected(broker.nodeId) for broker in client.cluster.brokers())


class ReadingSource:
    """Streams readings from Kafka into a callback, reconnecting on failure"""

    def __init__(
        self,
        config: MonitorConfig,
        on_reading: Callable[[Reading], None],
        on_state_change: Callable[[ConnectionState], None] | None = None,
        consumer_factory: Callable[[MonitorConfig], Any] = kafka_consumer_factory,
        timer_factory: Callable[[float, Callable[[], None]], Any] = threading.Timer,
        liveness_check: Callable[[Any], bool] = broker_connected,
    ):
        self.config = config
        self._on_reading = on_reading
        self._on_state_change = on_state_change
        self._consumer_factory = consumer_factory
        self._timer_factory = timer_factory
        self._liveness_check = liveness_check

        self._lock = threading.RLock()
        self._state = ConnectionState()
        self._consumer = None
        self._worker: threading.Thread | None = None
        self._timer = None
        self._started = False
        self._stopped = False

        self.stats = {
            "received": 0,
            "malformed": 0,
            "callback_errors": 0,
            "disconnects": 0,
            "handshake_failures": 0,
        }

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def stopped(self) -> bool:
        return self._stopped

    def start(self):
        """Open the first connection; later ones are driven by the retry timer"""
        with self._lock:
            if self._started:
                return
            self._started = True

        logger.info(
            "Starting reading source",
            bootstrap_servers=self.config.kafka_bootstrap_servers,
            topic=self.config.kafka_topic,
        )
        self._connect()

    def stop(self, timeout: float = 5.0):
        """Cancel any pending retry, stop the poll worker and close the consumer

        No reading is delivered to the callback once this returns.
        """
        with self._lock:
            if self._stopped:
                return
            self._set_state(ConnectionStatus.DISCONNECTED)
            self._stopped = True
            timer, self._timer = self._timer, None
            worker = self._worker

        if timer is not None:
            timer.cancel()

        worker_running = False
        if worker is not None and worker is not threading.current_thread():
            worker.join(timeout)
            worker_running = worker.is_alive()

        consumer = self._consumer
        if worker_running:
            # The worker closes its own consumer once poll returns
            logger.warning("Poll worker did not exit in time", timeout=timeout)
        elif consumer is not None:
            self._release_consumer(consumer)

        logger.info("Reading source stopped", **self.stats)

    # Event handlers

    def _connect(self):
        with self._lock:
            if self._stopped:
                return
            self._timer = None
            self._set_state(ConnectionStatus.CONNECTING)

        try:
            consumer = self._consumer_factory(self.config)
        except KafkaError as e:
            logger.warning("Feed handshake failed", error=str(e))
            self._on_handshake_failure()
            return

        with self._lock:
            if self._stopped:
                consumer.close()
                return
            self._consumer = consumer
            self._set_state(ConnectionStatus.CONNECTED, reconnect_attempts=0)
            self._worker = threading.Thread(
                target=self._poll_loop, args=(consumer,), name="reading-source", daemon=True
            )
            self._worker.start()

        logger.info("Feed connected", topic=self.config.kafka_topic)

    def _poll_loop(self, consumer):
        unreachable_since = None
        try:
            while not self._stopped:
                records = consumer.poll(timeout_ms=self.config.poll_timeout_ms)
                if records:
                    unreachable_since = None
                    self._deliver(records)
                elif self._liveness_check(consumer):
                    unreachable_since = None
                else:
                    now = time.monotonic()
                    if unreachable_since is None:
                        unreachable_since = now
                    if now - unreachable_since >= self.config.liveness_timeout_seconds:
                        raise KafkaConnectionError(
                            f"no broker connection for {self.config.liveness_timeout_seconds}s"
                        )
        except KafkaError as e:
            logger.warning("Feed connection lost", error=str(e))
            self._release_consumer(consumer)
            self._on_connection_lost()
        except Exception as e:
            logger.error("Unexpected poll failure", error=str(e), exc_info=True)
            self._release_consumer(consumer)
            self._on_connection_lost()
        else:
            self._release_consumer(consumer)

    def _deliver(self, records):
        for batch in records.values():
            for record in batch:
                if self._stopped:
                    return
                try:
                    self._on_message(record.value)
                except Exception as e:
                    self.stats["malformed"] += 1
                    logger.error("Dropping undecodable record", error=str(e), exc_info=True)

    def _on_message(self, payload: Any):
        try:
            reading = Reading.from_message(payload)
        except MalformedReadingError as e:
            self.stats["malformed"] += 1
            logger.warning("Dropping malformed reading", error=str(e))
            return

        with self._lock:
            if self._stopped:
                return
            self.stats["received"] += 1
            try:
                self._on_reading(reading)
            except Exception as e:
                self.stats["callback_errors"] += 1
                logger.error(
                    "Reading handler failed", zone_id=reading.zone_id, error=str(e), exc_info=True
                )

    def _on_connection_lost(self):
        with self._lock:
            if self._stopped:
                return
            self.stats["disconnects"] += 1
            self._set_state(ConnectionStatus.DISCONNECTED)
            self._schedule_retry()

    def _on_handshake_failure(self):
        with self._lock:
            if self._stopped:
                return
            self.stats["handshake_failures"] += 1
            self._set_state(ConnectionStatus.ERROR)
            self._schedule_retry()

    # Internals (lock held by caller)

    def _schedule_retry(self):
        attempts = self._state.reconnect_attempts
        max_attempts = self.config.max_reconnect_attempts
        if max_attempts is not None and attempts >= max_attempts:
            logger.error("Giving up reconnecting", attempts=attempts, status=self._state.status.value)
            return

        delay = backoff_delay(
            attempts,
            self.config.reconnect_base_delay_seconds,
            self.config.reconnect_max_delay_seconds,
        )
        self._set_state(self._state.status, reconnect_attempts=attempts + 1)
        self._timer = self._timer_factory(delay, self._connect)
        self._timer.start()
        logger.info("Reconnect scheduled", attempt=attempts + 1, delay_seconds=delay)

    def _set_state(self, status: ConnectionStatus, reconnect_attempts: int | None = None):
        with self._lock:
            if reconnect_attempts is None:
                reconnect_attempts = self._state.reconnect_attempts
            new_state = ConnectionState(status=status, reconnect_attempts=reconnect_attempts)
            if new_state == self._state:
                return
            previous, self._state = self._state, new_state
            logger.debug(
                "Connection state changed",
                previous=previous.status.value,
                status=status.value,
                attempts=reconnect_attempts,
            )
            if self._on_state_change is not None:
                self._on_state_change(new_state)

    def _release_consumer(self, consumer):
        with self._lock:
            if self._consumer is not consumer:
                return
            self._consumer = None
        try:
            consumer.close()
        except Exception as e:
            logger.warning("Failed to close consumer cleanly", error=str(e))
