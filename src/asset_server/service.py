from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from http import HTTPStatus
from typing import Optional

from websockets.asyncio.server import ServerConnection, serve
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from .config import StaticServerConfig
from .responder import AssetResponse, StaticAssetHandler
from .static_files import FileReader, ensure_index_document, read_file_bytes


class StaticAssetServer:
    """Threaded asyncio HTTP server answering every request with a static asset."""

    def __init__(
        self,
        config: StaticServerConfig,
        logger: Optional[logging.Logger] = None,
        *,
        read: Optional[FileReader] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("asset_server")
        self._read = read or read_file_bytes
        self._handler = StaticAssetHandler(config, read=self._read)
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stop_async: Optional[asyncio.Event] = None
        self._started = threading.Event()
        self._startup_error: Optional[Exception] = None
        self._bound_port: Optional[int] = None

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        """Bound port once running, otherwise the configured one."""
        if self._bound_port is not None:
            return self._bound_port
        return self._config.port

    @property
    def is_running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and self._startup_error is None
        )

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("Static asset server is already running")
            return

        # Raises MissingIndexError before any socket is bound.
        ensure_index_document(
            self._config.root_dir,
            index_file=self._config.index_file,
            read=self._read,
        )

        self._startup_error = None
        self._bound_port = None
        self._started.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            daemon=True,
            name="asset-server",
        )
        self._thread.start()

        if not self._started.wait(timeout_seconds):
            raise RuntimeError(
                f"Static asset server did not start within {timeout_seconds:.1f}s"
            )

        if self._startup_error is not None:
            raise RuntimeError(
                f"Static asset server startup failed: {self._startup_error}"
            )

    def stop(self, timeout_seconds: float = 5.0) -> None:
        if self._thread is None:
            return

        if self._loop and self._stop_async:
            self._loop.call_soon_threadsafe(self._stop_async.set)

        self._thread.join(timeout=timeout_seconds)
        if self._thread.is_alive():
            self._logger.error(
                "Static asset server thread did not stop within %.1fs",
                timeout_seconds,
            )

        self._thread = None
        self._loop = None
        self._stop_async = None
        self._bound_port = None

    def _run_loop(self) -> None:
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)
        self._stop_async = asyncio.Event()

        try:
            self._loop.run_until_complete(self._serve())
        except Exception as error:
            self._startup_error = error
            self._logger.error("Static asset server failed: %s", error, exc_info=True)
            self._started.set()
        finally:
            if self._loop is not None:
                pending = asyncio.all_tasks(self._loop)
                for task in pending:
                    task.cancel()
                with contextlib.suppress(Exception):
                    self._loop.run_until_complete(
                        asyncio.gather(*pending, return_exceptions=True)
                    )
                self._loop.close()

    async def _serve(self) -> None:
        async with serve(
            self._reject_websocket,
            host=self._config.host,
            port=self._config.port,
            process_request=self._process_request,
            logger=self._logger,
        ) as server:
            sockets = list(server.sockets)
            if sockets:
                self._bound_port = sockets[0].getsockname()[1]
            self._logger.info(
                "Serving static files from %s (index %s) on http://%s:%d",
                self._config.root_dir,
                self._config.index_path,
                self._config.host,
                self.port,
            )
            self._started.set()
            await self._stop_async.wait()

    async def _reject_websocket(self, websocket: ServerConnection) -> None:
        # Unreachable in practice: every request is answered in _process_request.
        await websocket.close(code=1008, reason="Static assets only")

    async def _process_request(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Response:
        del connection  # Unused in static routing.
        # File reads block; keep them off the event loop.
        result = await asyncio.to_thread(self._handler.handle, request.path)
        self._logger.debug(
            "%s %s -> %d", request.method, request.path, result.status_code
        )
        return self._response(result, head=request.method == "HEAD")

    @staticmethod
    def _response(result: AssetResponse, *, head: bool = False) -> Response:
        headers = Headers()
        for name, value in result.headers.items():
            headers[name] = value
        headers["Content-Length"] = str(len(result.body))
        return Response(
            result.status_code,
            HTTPStatus(result.status_code).phrase,
            headers,
            b"" if head else result.body,
        )
