"""Startup — the orchestrated sequence from settings to a serving API.

Pipeline: LOGGING → VALIDATE → OPEN STORE → BOOTSTRAP → ASSEMBLE → SERVE

State machine::

    STARTING → VALIDATING → BOOTSTRAPPING (optional) → SERVING → TERMINATED

There are no back-edges. The first failed stage moves straight to
TERMINATED and its result is returned; nothing after it runs. The listen
socket is only opened once SERVING is reached. Once opened, the store is
closed on every exit path.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog

from bootcfg.config.logging import configure_logging
from bootcfg.infrastructure.store import Store, StoreError, open_store
from bootcfg.server.app import Server, ServerConfig, TransportError, build_server
from bootcfg.services.bootstrap import BootstrapService
from bootcfg.services.preconditions import validate_settings
from bootcfg.services.result import STORE_ERROR, TRANSPORT_ERROR, ServiceResult

if TYPE_CHECKING:
    from bootcfg.config.settings import BootcfgSettings
    from bootcfg.domain.address import ListenAddress


class StartupState(enum.StrEnum):
    STARTING = "starting"
    VALIDATING = "validating"
    BOOTSTRAPPING = "bootstrapping"
    SERVING = "serving"
    TERMINATED = "terminated"


class Startup:
    """Runs the startup sequence for one process.

    Collaborators are injectable so the sequence can be exercised without
    touching a real database or socket.

    Usage::

        result = Startup(settings).run()
        if not result.ok:
            ...  # report and exit non-zero
    """

    def __init__(
        self,
        settings: BootcfgSettings,
        *,
        store_opener: Callable[[str], Store] = open_store,
        server_factory: Callable[[ServerConfig], Server] = build_server,
        logging_setup: Callable[..., structlog.stdlib.BoundLogger] = configure_logging,
    ) -> None:
        self.settings = settings
        self.state = StartupState.STARTING
        self.store: Store | None = None
        self.server: Server | None = None
        self._store_opener = store_opener
        self._server_factory = server_factory
        self._logging_setup = logging_setup
        self._log: structlog.stdlib.BoundLogger = structlog.stdlib.get_logger("bootcfg")

    def run(self) -> ServiceResult:
        """Run every stage in order; blocks while serving.

        Returns the first failed stage result, or a successful ``serve``
        result once the server has shut down cleanly.
        """
        self._log = self._logging_setup(
            level=self.settings.log_level, log_json=self.settings.log_json
        )

        self.state = StartupState.VALIDATING
        validated = validate_settings(self.settings)
        if not validated.ok:
            return self._terminate(validated)
        address: ListenAddress = validated.data["address"]

        try:
            self.store = self._store_opener(self.settings.data_path)
        except StoreError as exc:
            return self._terminate(ServiceResult.failure("open_store", STORE_ERROR, str(exc)))

        try:
            if self.settings.config:
                self.state = StartupState.BOOTSTRAPPING
            seeded = BootstrapService(
                self.store, log=self._log.bind(stage="bootstrap")
            ).bootstrap(self.settings.config)
            if not seeded.ok:
                return self._terminate(seeded)

            return self._serve(address)
        finally:
            self.store.close()

    def _serve(self, address: ListenAddress) -> ServiceResult:
        assert self.store is not None
        config = ServerConfig(store=self.store, image_path=self.settings.images_path)
        self.server = self._server_factory(config)

        self.state = StartupState.SERVING
        self._log.info("starting bootcfg API server", address=str(address))
        try:
            self.server.serve(address)
        except TransportError as exc:
            return self._terminate(
                ServiceResult.failure("serve", TRANSPORT_ERROR, str(exc), address=str(address))
            )

        self.state = StartupState.TERMINATED
        self._log.info("bootcfg API server stopped", address=str(address))
        return ServiceResult(ok=True, op="serve", data={"address": str(address)})

    def _terminate(self, result: ServiceResult) -> ServiceResult:
        self.state = StartupState.TERMINATED
        error = result.error
        self._log.debug(
            "startup failed",
            stage=result.op,
            code=error.code if error else None,
            detail=error.detail if error else None,
        )
        return result
