"""Development server for Windvane.

Serves the built site over HTTP and rebuilds it when sources change:
- Builds into a staging directory and swaps it into place, so requests never
  see a half-written tree.
- Watches content/, content/posts/ and templates/ plus every directory under
  static/ and triggers a full rebuild on each change.
- Serializes rebuilds with a lock; a failed rebuild is logged and the last good
  build keeps being served.

Key classes:
- DevServer: Main class for running the development server.
- _ChangeHandler: File system event handler for triggering rebuilds.
"""

from __future__ import annotations

import functools
import logging
import os
import shutil
import threading
import time
from enum import Enum
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .build import build_site
from .config import SitePaths
from .errors import SiteIOError, WatchError, WindvaneError

logger = logging.getLogger(__name__)

DEFAULT_BIND = "localhost:8090"

REBUILD_EVENTS = frozenset(
    {EVENT_TYPE_CREATED, EVENT_TYPE_DELETED, EVENT_TYPE_MODIFIED, EVENT_TYPE_MOVED}
)


class WatchState(Enum):
    IDLE = "idle"
    REBUILDING = "rebuilding"


def parse_bind(bind: str) -> tuple[str, int]:
    """Split a ``host:port`` bind address.

    An empty host (``:8090``) binds every interface.

    Raises:
        ValueError: If the port is missing or not a number.
    """
    host, sep, port = bind.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid bind address {bind!r}; expected HOST:PORT")
    return host, int(port)


class _RequestHandler(SimpleHTTPRequestHandler):
    """Static file handler that logs through the logging module."""

    def end_headers(self):
        self.send_header("Cache-Control", "no-cache, no-store, must-revalidate")
        super().end_headers()

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)


class DevServer:
    """Development server with rebuild-on-change.

    Attributes:
        paths: Project layout.
        output_dir: Directory served over HTTP.
        host: Interface to bind.
        port: Port to bind.
        state: Whether a rebuild is running.
    """

    def __init__(self, paths: SitePaths, bind: str = DEFAULT_BIND):
        """Initialize the development server.

        Args:
            paths: Project layout.
            bind: Address to serve on, as ``host:port``.
        """
        self.paths = paths
        self.output_dir = paths.output_dir
        self.host, self.port = parse_bind(bind)
        self.state = WatchState.IDLE
        self._staging_dir = self.output_dir.with_name(self.output_dir.name + ".staging")
        self._previous_dir = self.output_dir.with_name(self.output_dir.name + ".previous")
        self._lock = threading.Lock()
        self._last_signature: tuple | None = None
        self._observer: Observer | None = None
        self._httpd: ThreadingHTTPServer | None = None

    def start(self) -> None:  # pragma: no cover - integration path
        """Build once, then serve and watch until interrupted."""
        logger.info("About to start development server")
        with self._lock:
            self._last_signature = self._compute_signature()
            self._build_and_swap()
        self._httpd = self.make_http_server()
        threading.Thread(target=self._httpd.serve_forever, daemon=True).start()
        logger.info("Server listening on http://%s:%d", self.host or "0.0.0.0", self.port)
        self.start_watcher()
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        if self._httpd:
            self._httpd.shutdown()
            self._httpd.server_close()
            self._httpd = None

    def make_http_server(self) -> ThreadingHTTPServer:
        handler = functools.partial(_RequestHandler, directory=str(self.output_dir))
        try:
            return ThreadingHTTPServer((self.host, self.port), handler)
        except OSError as exc:
            raise SiteIOError(
                f"Could not listen on {self.host or '0.0.0.0'}:{self.port}: {exc}", None, exc
            ) from exc

    def start_watcher(self) -> None:
        """Start watching the source directories.

        Raises:
            WatchError: If a directory cannot be watched.
        """
        logger.info("Watching for changes...")
        handler = _ChangeHandler(self)
        observer = Observer()
        watches = [
            (self.paths.content_dir, False),
            (self.paths.posts_dir, False),
            (self.paths.templates_dir, False),
        ]
        if self.paths.static_dir.is_dir():
            watches.append((self.paths.static_dir, True))
        try:
            for directory, recursive in watches:
                observer.schedule(handler, str(directory), recursive=recursive)
            observer.start()
        except OSError as exc:
            raise WatchError(f"Could not watch for changes: {exc}", None, exc) from exc
        self._observer = observer

    def rebuild(self) -> bool:
        """Rebuild the site unless the sources are unchanged.

        Concurrent calls wait for the running rebuild to finish. Failures are
        logged; the previous output stays in place.

        Returns:
            True if a rebuild ran and succeeded.
        """
        with self._lock:
            signature = self._compute_signature()
            if signature == self._last_signature:
                return False
            self._last_signature = signature
            self.state = WatchState.REBUILDING
            logger.info("Change detected. Regenerating site...")
            try:
                self._build_and_swap()
            except WindvaneError as exc:
                logger.error("Rebuild failed: %s", exc)
                return False
            except Exception:
                logger.exception("Rebuild failed with an unexpected error")
                return False
            finally:
                self.state = WatchState.IDLE
            return True

    def _build_and_swap(self) -> None:
        build_site(self.paths, output_dir=self._staging_dir)
        self._activate_staging()

    def _activate_staging(self) -> None:
        """Move the staging build into place as the served output."""
        target = self.output_dir
        previous = self._previous_dir
        try:
            if previous.exists():
                shutil.rmtree(previous)
            if target.exists():
                os.replace(target, previous)
            os.replace(self._staging_dir, target)
            if previous.exists():
                shutil.rmtree(previous)
        except OSError as exc:
            raise SiteIOError(f"Could not activate new build: {exc}", target, exc) from exc

    def _compute_signature(self) -> tuple:
        entries: list[tuple] = []
        sources = [
            (self.paths.content_dir, False),
            (self.paths.posts_dir, False),
            (self.paths.templates_dir, False),
            (self.paths.static_dir, True),
        ]
        for root, recursive in sources:
            if not root.is_dir():
                continue
            try:
                candidates = sorted(root.rglob("*") if recursive else root.iterdir())
            except OSError:
                continue
            for path in candidates:
                try:
                    if path.is_dir():
                        continue
                    stat = path.stat()
                except OSError:
                    continue
                entries.append((str(path), stat.st_mtime_ns, stat.st_size))
        return tuple(entries)

    def ignores(self, path: Path) -> bool:
        """Whether a changed path is part of the generated output."""
        for ignored in (self.output_dir, self._staging_dir, self._previous_dir):
            try:
                path.relative_to(ignored)
                return True
            except ValueError:
                pass
        return False


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, server: DevServer):
        super().__init__()
        self.server = server

    def on_any_event(self, event):
        if event.is_directory or event.event_type not in REBUILD_EVENTS:
            return
        if self.server.ignores(Path(os.fsdecode(event.src_path))):
            return
        self.server.rebuild()
