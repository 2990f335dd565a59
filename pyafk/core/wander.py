"""
Wander Scheduler
================

Mob-like idle movement. Every few seconds a random point near the current
position becomes the planner goal, with small jump / walk / look pulses on
top so the bot does not look scripted.

Timer slots owned by the scheduler:
- ``pick``: re-arms itself with a fresh random delay after every pick
- ``target_timeout``: abandons the current target if it is never reached
- ephemeral timers that end each cosmetic pulse

``stop()`` is the one teardown path and cancels all of them.
"""

import asyncio
import logging
import math
import random
from dataclasses import dataclass
from typing import Optional

from ..config.bot_config import WanderConfig
from ..exceptions import WorldConnectionError
from ..session.events import EventType
from ..world.connection import WorldConnection, Vec3
from ..world.goals import MoveNear, MovementProfile
from .movement import MovementArbiter, OWNER_WANDER
from .timers import TimerSet

logger = logging.getLogger(__name__)

PICK_SLOT = "pick"
TARGET_TIMEOUT_SLOT = "target_timeout"

# Cosmetic pulses: (probability, min seconds, max seconds)
JUMP_PULSE = (0.35, 0.3, 1.0)
FORWARD_PULSE = (0.6, 0.5, 2.3)
LOOK_CHANCE = 0.7


@dataclass
class WanderTarget:
    """The point currently handed to the planner"""
    x: int
    y: float
    z: int
    origin: Vec3
    deadline: float
    reached: bool = False


class WanderScheduler:
    """Periodically picks nearby targets and hands them to the planner"""

    def __init__(self, connection: WorldConnection, arbiter: MovementArbiter,
                 movement_profile: Optional[MovementProfile] = None,
                 rng: Optional[random.Random] = None,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.connection = connection
        self.arbiter = arbiter
        self.movement_profile = movement_profile
        self.rng = rng or random.Random()
        self.timers = TimerSet(loop)
        self.config = WanderConfig()
        self.target: Optional[WanderTarget] = None
        self.running = False
        self.picks = 0
        self.abandoned = 0
        self._listening = False

    def start(self, config: Optional[WanderConfig] = None) -> bool:
        """Start wandering. Returns False if no movement profile could be had."""
        if config is not None:
            self.config = config

        if self.movement_profile is None:
            # The profile normally comes from spawn; try once more now
            try:
                self.movement_profile = self.connection.create_movement_profile()
            except WorldConnectionError as e:
                logger.warning(f"Unable to create movement profile yet: {e}")
                return False

        # Restarting replaces the old schedule
        self._cancel_schedule()

        self.running = True
        if not self._listening:
            self.connection.events.subscribe(EventType.GOAL_REACHED, self._on_goal_reached)
            self._listening = True

        logger.info(
            f"Wandering within {self.config.radius} blocks every "
            f"{self.config.min_delay:g}-{self.config.max_delay:g}s"
        )
        self._pick_and_rearm()
        return True

    def stop(self):
        """Cancel every timer, release the goal and all control inputs.

        Safe before start() and safe to repeat.
        """
        was_running = self.running
        self.running = False
        self._cancel_schedule()

        if self._listening:
            self.connection.events.unsubscribe(EventType.GOAL_REACHED, self._on_goal_reached)
            self._listening = False

        self._release_movement()
        self.target = None

        if was_running:
            logger.info("Stopped wandering")

    def pick(self) -> Optional[WanderTarget]:
        """Choose a target around the current position and hand it to the planner"""
        pos = self.connection.position
        if pos is None:
            logger.debug("No position yet, skipping pick")
            return None

        radius = self.config.radius
        dx = self.rng.randint(-radius, radius)
        dz = self.rng.randint(-radius, radius)
        target = WanderTarget(
            x=math.floor(pos.x + dx),
            y=pos.y,
            z=math.floor(pos.z + dz),
            origin=pos,
            deadline=self.timers.loop.time() + self.config.wander_timeout,
        )

        try:
            self.arbiter.claim(OWNER_WANDER, MoveNear(target.x, target.y, target.z, 1), self.movement_profile)
        except WorldConnectionError as e:
            logger.debug(f"Could not set wander goal: {e}")
            return None
        self.target = target
        self.picks += 1
        logger.debug(f"Heading to ({target.x}, {target.y}, {target.z})")

        # One target timeout at a time; the previous one is cancelled here
        self.timers.set(TARGET_TIMEOUT_SLOT, self.config.wander_timeout, self._on_target_timeout)

        self._cosmetics()
        return target

    def _pick_and_rearm(self):
        if not self.running:
            return
        try:
            self.pick()
        finally:
            # Re-arm even when the pick raised
            if self.running:
                delay = self.rng.uniform(self.config.min_delay, self.config.max_delay)
                self.timers.set(PICK_SLOT, delay, self._pick_and_rearm)

    def _on_target_timeout(self):
        target = self.target
        if target is not None:
            logger.info(
                f"Target ({target.x}, {target.y}, {target.z}) not reached within "
                f"{self.config.wander_timeout:g}s, giving up"
            )
        self.abandoned += 1
        self._release_movement()

    def _on_goal_reached(self, event):
        # The pick timer keeps running; only the stale abandonment goes away
        self.timers.cancel(TARGET_TIMEOUT_SLOT)
        if self.target is not None:
            self.target.reached = True

    def _cosmetics(self):
        chance, low, high = JUMP_PULSE
        if self.rng.random() < chance:
            self._pulse('jump', self.rng.uniform(low, high))

        chance, low, high = FORWARD_PULSE
        if self.rng.random() < chance:
            self._pulse('forward', self.rng.uniform(low, high))

        if self.rng.random() < LOOK_CHANCE:
            yaw = (self.rng.random() - 0.5) * math.pi * 2
            pitch = (self.rng.random() - 0.5) * 0.6
            try:
                self.connection.look(yaw, pitch)
            except WorldConnectionError as e:
                logger.debug(f"look failed: {e}")

    def _pulse(self, control: str, duration: float):
        try:
            self.connection.set_control_state(control, True)
        except WorldConnectionError as e:
            logger.debug(f"{control} pulse failed: {e}")
            return
        self.timers.add(duration, lambda: self._end_pulse(control))

    def _end_pulse(self, control: str):
        try:
            self.connection.set_control_state(control, False)
        except WorldConnectionError as e:
            logger.debug(f"Ending {control} pulse failed: {e}")

    def _cancel_schedule(self):
        self.timers.cancel_all()

    def _release_movement(self):
        try:
            self.connection.clear_control_states()
        except WorldConnectionError as e:
            logger.debug(f"Could not clear control states: {e}")
        try:
            self.arbiter.release(OWNER_WANDER)
        except WorldConnectionError as e:
            logger.debug(f"Could not clear goal: {e}")
