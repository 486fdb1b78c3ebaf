"""Diagnostics that sit around a Universe without the core knowing about them.

  TimedUniverse   times every tick() and keeps a short history
  StatsLogger     writes per-generation telemetry to CSV
  init_log        stdlib logging setup shared by the hosts
  install_error_hook
                  logs uncaught exceptions before the interpreter reports them
"""

from __future__ import annotations

import logging
import sys
import time
from collections import deque
from pathlib import Path
from types import TracebackType
from typing import IO, Any, Callable, ClassVar

import numpy as np

from gol import Universe

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
TIMING_HISTORY: int = 500

ExceptHook = Callable[
    [type[BaseException], BaseException, "TracebackType | None"], Any
]


# ═══════════════════════════════════════════════════════════════════════
#  Tick timing
# ═══════════════════════════════════════════════════════════════════════

class TimedUniverse:
    """Wraps a Universe and records how long each tick() takes.

    Everything other than tick() is forwarded to the wrapped universe, so a
    host can use this wherever it would use the universe itself.
    """

    def __init__(self, universe: Universe, history: int = TIMING_HISTORY) -> None:
        self.universe = universe
        self.tick_ms: deque[float] = deque(maxlen=history)

    def tick(self) -> float:
        """Advance one generation. Returns the time it took in milliseconds."""
        t0 = time.perf_counter()
        self.universe.tick()
        dt = (time.perf_counter() - t0) * 1000.0
        self.tick_ms.append(dt)
        return dt

    @property
    def last_ms(self) -> float:
        return self.tick_ms[-1] if self.tick_ms else 0.0

    def mean_ms(self) -> float:
        if not self.tick_ms:
            return 0.0
        return float(np.mean(self.tick_ms))

    def __getattr__(self, name: str) -> Any:
        # Only reached for attributes TimedUniverse does not define itself
        return getattr(self.universe, name)


# ═══════════════════════════════════════════════════════════════════════
#  Stats logger
# ═══════════════════════════════════════════════════════════════════════

class StatsLogger:
    """Writes engine telemetry to CSV for post-hoc tuning."""

    HEADER: ClassVar[str] = "gen,time_s,population,width,height,tick_ms,event\n"

    def __init__(self, path: Path) -> None:
        self._path = path
        self._fh: IO[str] | None = None
        self._t0: float = time.monotonic()

    @property
    def enabled(self) -> bool:
        return self._fh is not None

    def open(self) -> None:
        try:
            self._fh = open(self._path, "w")
            self._fh.write(self.HEADER)
            self._fh.flush()
        except OSError as e:
            logging.warning("stats logging disabled, cannot open %s: %s", self._path, e)
            self._fh = None

    def log(
        self,
        gen: int,
        pop: int,
        width: int,
        height: int,
        tick_ms: float,
        event: str = "",
    ) -> None:
        if self._fh is None:
            return
        t = time.monotonic() - self._t0
        try:
            self._fh.write(f"{gen},{t:.1f},{pop},{width},{height},{tick_ms:.3f},{event}\n")
            # Flush on events or periodically
            if event or gen % 50 == 0:
                self._fh.flush()
        except OSError as e:
            logging.warning("stats logging disabled, cannot write %s: %s", self._path, e)
            self.close()

    def log_universe(self, life: TimedUniverse, event: str = "") -> None:
        u = life.universe
        self.log(
            gen=u.generation,
            pop=u.population(),
            width=u.width,
            height=u.height,
            tick_ms=life.last_ms,
            event=event,
        )

    def close(self) -> None:
        fh, self._fh = self._fh, None
        if fh is not None:
            try:
                fh.close()
            except OSError:
                pass

    def __enter__(self) -> StatsLogger:
        self.open()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


# ═══════════════════════════════════════════════════════════════════════
#  Logging and the error hook
# ═══════════════════════════════════════════════════════════════════════

def init_log(title: str, lvl: int = logging.INFO, path: Path | None = None) -> None:
    """Configure root logging. Without a path, records go to stderr."""
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(filename=str(path), level=lvl, format=LOG_FORMAT)
    else:
        logging.basicConfig(level=lvl, format=LOG_FORMAT)
    logging.info("Game of life [%s] started logging at %s.", title, path or "stderr")


def install_error_hook(logger: logging.Logger | None = None) -> ExceptHook:
    """Log uncaught exceptions at CRITICAL, then hand them to the old hook.

    Returns the hook that was replaced so it can be put back.
    """
    log = logger or logging.getLogger("gol")
    previous = sys.excepthook

    def hook(
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> Any:
        log.critical("uncaught %s", exc_type.__name__, exc_info=(exc_type, exc, tb))
        return previous(exc_type, exc, tb)

    sys.excepthook = hook
    return previous
