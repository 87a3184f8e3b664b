#!/usr/bin/env python3
"""
Simulation runner with logging and data recording.

This module wires the configured controllers into a ModeArbiter, drives it
either as fast as possible (fixed-step, deterministic) or paced against the
wall clock at the tick period, and records every tick and notification to
CSV files through the DataCollector.
"""

import asyncio
import logging
import signal
import time
from typing import Any, List, Optional, Sequence

from .arbiter import ModeArbiter, check_duration
from .config import TERM_BLUE, TERM_RED, TERM_RESET
from .data_collector import DataCollector
from .state import Notification, Waypoint


class CustomFormatter(logging.Formatter):
    """Logging formatter that removes timestamps from INFO messages.

    INFO messages print as bare text for clean console output; WARNING,
    ERROR and DEBUG keep the timestamp and level.
    """

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return record.getMessage()
        return f"{self.formatTime(record, self.datefmt)} - {record.levelname} - {record.getMessage()}"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: If True, show all levels with timestamps. If False, show INFO
                 without timestamps and WARNING/ERROR with timestamps.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(CustomFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
        logger = logging.getLogger()
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)


class SimulationRunner:
    """Drives a ModeArbiter and records the run.

    Attributes:
        arbiter: The simulation being driven.
        data_collector: CSV recorder, None when recording is disabled.
        notifications: Every notification observed during the run.
        should_stop: Flag checked between ticks to end the run early.
    """

    def __init__(
        self,
        arbiter: Optional[ModeArbiter] = None,
        output_dir: str = ".",
        record: bool = True,
        run_dir: Optional[str] = None,
    ) -> None:
        """Initialize the runner.

        Args:
            arbiter: Simulation to drive (default: controllers configured from config).
            output_dir: Base directory for output files (default: current directory).
            record: Whether to write CSV files.
            run_dir: Optional explicit run directory for the CSV files.
        """
        self.arbiter = arbiter or ModeArbiter()
        self.data_collector = DataCollector(output_dir=output_dir, run_dir=run_dir) if record else None
        self.notifications: List[Notification] = []
        self.should_stop: bool = False

        self.arbiter.subscribe(self._on_notification)

    def _on_notification(self, notification: Notification) -> None:
        self.notifications.append(notification)
        if self.data_collector:
            state = self.arbiter.state
            self.data_collector.log_event(state.tick, state.time, notification)

    # ------------------------------------------------------------------
    # Operator inputs, recorded before being forwarded
    # ------------------------------------------------------------------

    def set_voltages(self, left_voltage: float, right_voltage: float) -> None:
        self.arbiter.set_voltages(left_voltage, right_voltage)
        logging.info(
            f"{TERM_BLUE}Manual drive: left={left_voltage:.1f}V right={right_voltage:.1f}V{TERM_RESET}"
        )

    def program_path(self, waypoints: Sequence[Waypoint]) -> bool:
        started = self.arbiter.program_path(waypoints)
        if started and self.data_collector:
            self.data_collector.log_waypoints("path", waypoints)
        return started

    def go_to(self, target: Waypoint) -> None:
        accepted = self.arbiter.go_to(target.x, target.y, target.theta)
        if self.data_collector:
            self.data_collector.log_waypoints("target", [accepted])

    # ------------------------------------------------------------------
    # Loops
    # ------------------------------------------------------------------

    def _tick(self) -> None:
        mode = self.arbiter.mode
        self.arbiter.advance()
        if self.data_collector:
            self.data_collector.log_state(self.arbiter.state, mode.name)
        logging.debug(str(self.arbiter.telemetry()))

    def run(self, duration: float, until_idle: bool = False) -> None:
        """Run ticks back to back for a simulated duration.

        Args:
            duration: Simulated time to cover (s).
            until_idle: Stop once the vehicle is back in manual mode.
        """
        ticks = int(round(check_duration(duration) / self.arbiter.dt))
        for _ in range(ticks):
            if self.should_stop or (until_idle and self.arbiter.is_idle):
                break
            self._tick()

    async def run_realtime(self, duration: float, until_idle: bool = False) -> None:
        """Run ticks paced to the wall clock, one every `arbiter.dt` seconds.

        The schedule is kept against absolute deadlines so a slow tick does
        not shift later ones. Each tick runs to completion before the stop
        flag is checked again.

        Args:
            duration: Simulated time to cover (s).
            until_idle: Stop once the vehicle is back in manual mode.
        """
        period = self.arbiter.dt
        ticks = int(round(check_duration(duration) / period))
        start = time.monotonic()

        for i in range(ticks):
            if self.should_stop or (until_idle and self.arbiter.is_idle):
                break
            self._tick()
            delay = start + (i + 1) * period - time.monotonic()
            if delay > 0:
                await asyncio.sleep(delay)
            else:
                # Yield so signal handlers can run even when behind schedule
                await asyncio.sleep(0)

    def stop(self) -> None:
        """Signal the runner to stop after the current tick."""
        self.should_stop = True

    def summary(self) -> str:
        pose = self.arbiter.pose
        return (
            f"Final pose: x={pose.x:.3f}m y={pose.y:.3f}m "
            f"heading={self.arbiter.telemetry().heading_deg:.1f}° "
            f"after {self.arbiter.state.time:.2f}s ({self.arbiter.state.tick} ticks)"
        )

    def __enter__(self) -> "SimulationRunner":
        if self.data_collector:
            self.data_collector.setup()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.data_collector:
            self.data_collector.save_trajectory(self.arbiter.trajectory())
            self.data_collector.cleanup()


async def run_with_signals(runner: SimulationRunner, duration: float, until_idle: bool) -> None:
    """Run in real time, stopping cleanly on SIGINT/SIGTERM.

    Args:
        runner: Runner to drive.
        duration: Simulated time to cover (s).
        until_idle: Stop once the vehicle is back in manual mode.
    """
    loop = asyncio.get_running_loop()

    def signal_handler() -> None:
        logging.info("\nShutdown signal received...")
        runner.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, signal_handler)
        except NotImplementedError:
            # Windows event loops do not support signal handlers
            logging.debug(f"Signal handler for {sig.name} not supported on this platform")

    await runner.run_realtime(duration, until_idle=until_idle)


def report(runner: SimulationRunner) -> None:
    """Log the end-of-run summary."""
    logging.info(f"{TERM_RED}\033[1m→ {runner.summary()}{TERM_RESET}")
    logging.info(f"{TERM_BLUE}→ Notifications: {len(runner.notifications)}{TERM_RESET}")
