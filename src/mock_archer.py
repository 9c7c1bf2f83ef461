"""
Simulated archer for development and testing.

Generates statistically realistic shot placements without anyone clicking
on a target. Each preset describes where an archer's group tends to sit
and how wide it spreads, so accuracy and grouping can be exercised
independently.

This is a first-class feature, not just a test utility: a full practice
can be recorded and reviewed from the command line.
"""

import logging
import random
import time

from PyQt6.QtCore import QThread, pyqtSignal

logger = logging.getLogger(__name__)


# Archer presets: group centre offset and per-shot spread, in target radii
PRESETS = {
    "club_archer": {
        "description": "Regular club archer, decent group near the middle",
        "center": (0.05, 0.08),     # Mean x, y of the group
        "drift": 0.06,              # StdDev of the group centre, per end
        "spread": 0.12,             # StdDev of each shot around the centre
    },
    "beginner": {
        "description": "New archer, wide group and the occasional miss",
        "center": (0.1, 0.2),
        "drift": 0.15,
        "spread": 0.3,
    },
    "tight_but_off": {
        "description": "Consistent form, sight set off-centre (high left)",
        "center": (-0.55, -0.5),
        "drift": 0.02,
        "spread": 0.03,
    },
    "olympian": {
        "description": "Elite archer, small group on the gold",
        "center": (0.0, 0.0),
        "drift": 0.02,
        "spread": 0.04,
    },
}

# Placements are clamped to this box so off-face misses stay plausible
PLACEMENT_LIMIT = 1.5


class MockArcher(QThread):
    """Simulates shot placements on a timer.

    Signals:
        shot_placed(float, float): A simulated arrow landed at (x, y).
        started_shooting(): Emitted when the thread starts.
        stopped_shooting(): Emitted when the thread stops.
    """

    shot_placed = pyqtSignal(float, float)
    started_shooting = pyqtSignal()
    stopped_shooting = pyqtSignal()

    def __init__(
        self,
        preset: str = "club_archer",
        shot_interval: tuple[float, float] = (2.0, 5.0),
        shots_per_end: int = 3,
        seed=None,
        parent=None,
    ):
        """
        Args:
            preset: Archer preset name (see PRESETS).
            shot_interval: (min, max) seconds between simulated shots.
            shots_per_end: Shots before the group centre drifts again.
            seed: Optional random seed for repeatable sessions.
        """
        super().__init__(parent)
        self._running = False
        self._preset_name = preset
        self._preset = PRESETS.get(preset, PRESETS["club_archer"])
        self._shot_interval = shot_interval
        self._shots_per_end = max(1, shots_per_end)
        self._rng = random.Random(seed)
        self._shot_count = 0
        self._group_center = self._preset["center"]

    def set_preset(self, preset: str):
        """Change the archer preset."""
        if preset in PRESETS:
            self._preset_name = preset
            self._preset = PRESETS[preset]
            self._group_center = self._preset["center"]
            logger.info(f"Mock preset changed to: {preset}")

    def run(self):
        """Main thread loop: place shots at random intervals."""
        self._running = True
        logger.info(f"Mock archer started (preset={self._preset_name})")
        self.started_shooting.emit()

        while self._running:
            delay = self._rng.uniform(*self._shot_interval)
            # Sleep in small increments so we can stop quickly
            elapsed = 0.0
            while elapsed < delay and self._running:
                time.sleep(0.1)
                elapsed += 0.1

            if not self._running:
                break

            self._generate_shot()

        self.stopped_shooting.emit()
        logger.info("Mock archer stopped")

    def _generate_shot(self):
        """Generate a single simulated placement."""
        p = self._preset

        # The group centre wanders a little at the start of every end
        if self._shot_count % self._shots_per_end == 0:
            cx, cy = p["center"]
            self._group_center = (
                self._rng.gauss(cx, p["drift"]),
                self._rng.gauss(cy, p["drift"]),
            )

        gx, gy = self._group_center
        x = max(-PLACEMENT_LIMIT, min(PLACEMENT_LIMIT, self._rng.gauss(gx, p["spread"])))
        y = max(-PLACEMENT_LIMIT, min(PLACEMENT_LIMIT, self._rng.gauss(gy, p["spread"])))

        self._shot_count += 1
        logger.debug(f"Mock shot #{self._shot_count}: ({x:.3f}, {y:.3f})")
        self.shot_placed.emit(round(x, 4), round(y, 4))

    def trigger_shot(self):
        """Manually place a single shot (for the CLI / testing)."""
        self._generate_shot()

    def stop(self):
        """Signal the thread to stop."""
        self._running = False
