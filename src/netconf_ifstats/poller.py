"""
Interface statistics poller.

Drives one poll pass across all configured devices: obtain a cached or
new session, fetch the statistics reply, decode it, and emit the
counters. Every device is an isolated unit of work; a failure on one
device is recorded and the pass continues with the next.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from netconf_ifstats.collectors.netconf import NetconfConnector, SessionStore
from netconf_ifstats.collectors.netconf.store import Connector
from netconf_ifstats.collectors.xml import decode_interface_stats
from netconf_ifstats.constants import Measurements
from netconf_ifstats.core.config import DeviceConfig, PollerConfig
from netconf_ifstats.core.exceptions import IfStatsError, RpcError
from netconf_ifstats.formatters.output import MetricsSink
from netconf_ifstats.models.metrics import DeviceError, PollResult

logger = logging.getLogger(__name__)


class InterfacePoller:
    """
    Polls interface counters from NETCONF devices.

    Exposes the three hooks a metrics host drives: start(), gather()
    once per interval, and stop(). Sessions are cached between passes
    and evicted after an RPC failure so the next pass reconnects.

    Attributes:
        config: Polling configuration (device list, timeouts, workers)
        store: Session store shared by all passes
    """

    def __init__(
        self,
        config: PollerConfig,
        store: SessionStore | None = None,
        connector: Connector | None = None,
    ):
        self.config = config
        if store is None:
            connector = connector or NetconfConnector(
                connect_timeout=config.connect_timeout,
                rpc_timeout=config.rpc_timeout,
            )
            store = SessionStore(connector)
        self.store = store
        self._started = False

    def start(self) -> None:
        """Prepare for polling. Sessions are opened lazily on first gather."""
        if self._started:
            return
        self._started = True
        logger.info(
            f"Polling {len(self.config.devices)} device(s) "
            f"with {self.config.workers} worker(s)"
        )

    def gather(self, sink: MetricsSink) -> PollResult:
        """
        Run one poll pass and emit its measurements and errors.

        Args:
            sink: Receives one measurement per interface and one error
                per failed device

        Returns:
            The PollResult that was emitted
        """
        result = self.poll_all()
        for stat in result.stats:
            sink.add_fields(Measurements.INTERFACE, stat.fields(), stat.tags())
        for error in result.errors:
            sink.add_error(error)
        sink.flush()
        return result

    def stop(self) -> None:
        """Close every cached session."""
        self.store.close_all()
        self._started = False

    def poll_all(self, devices: list[DeviceConfig] | None = None) -> PollResult:
        """
        Poll every device once.

        Args:
            devices: Devices to poll; defaults to the configured list

        Returns:
            PollResult with stats and errors in device-list order
        """
        if devices is None:
            devices = self.config.devices

        result = PollResult()
        if self.config.workers > 1 and len(devices) > 1:
            workers = min(self.config.workers, len(devices))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ifstats") as pool:
                for device_result in pool.map(self.poll_device, devices):
                    result.extend(device_result)
        else:
            for device in devices:
                result.extend(self.poll_device(device))

        logger.debug(
            f"Poll pass complete: {len(result.stats)} interface(s), "
            f"{len(result.errors)} error(s)"
        )
        return result

    def poll_device(self, device: DeviceConfig) -> PollResult:
        """
        Poll one device, capturing any failure as a DeviceError.

        An RpcError evicts the device's session so the next pass opens
        a fresh one.
        """
        try:
            session = self.store.get_or_create(device)
        except IfStatsError as e:
            logger.warning(f"{device.address}: {e}")
            return self._failed(device, e)

        try:
            raw = session.fetch_interface_stats()
        except RpcError as e:
            logger.warning(f"{device.address}: {e}")
            self.store.evict(device.address, session)
            return self._failed(device, e)

        try:
            stats = decode_interface_stats(raw, device.address)
        except IfStatsError as e:
            logger.warning(f"{device.address}: {e}")
            return self._failed(device, e)

        return PollResult(stats=stats)

    @staticmethod
    def _failed(device: DeviceConfig, error: IfStatsError) -> PollResult:
        return PollResult(errors=[DeviceError(address=device.address, error=error)])

    def __enter__(self) -> InterfacePoller:
        self.start()
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: Any) -> bool:
        self.stop()
        return False
