"""Built-in arena scenarios and a headless runner.

Each scenario places the agent at the origin and a handful of straight-line
contacts around it, then runs the guidance loop for a fixed number of
ticks and reports what happened: states visited, designations, shots.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from .arena import ArenaHost, Body
from .comms.event_bus import EventBus
from .config import GuidanceSettings
from .host import ShipClass
from .ship import Fighter, Missile, Ship
from .tracking.track import TrackClass


@dataclass
class Scenario:
    name: str
    description: str
    bodies: list[Body]
    ticks: int = 600
    ship_class: ShipClass = ShipClass.FIGHTER
    agent_velocity: tuple[float, float] = (0.0, 0.0)
    agent_heading: float = 0.0
    plot_noise_std: float = 0.0


@dataclass
class ScenarioResult:
    name: str
    ticks: int
    states: list[str] = field(default_factory=list)
    designations: list[int | None] = field(default_factory=list)
    guns_fired: int = 0
    missiles_fired: int = 0
    self_destructed: bool = False
    final_state: str | None = None
    tracks_alive: int = 0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "ticks": self.ticks,
            "states": self.states,
            "designations": self.designations,
            "guns_fired": self.guns_fired,
            "missiles_fired": self.missiles_fired,
            "self_destructed": self.self_destructed,
            "final_state": self.final_state,
            "tracks_alive": self.tracks_alive,
        }


def _library() -> dict[str, Scenario]:
    return {
        "stationary": Scenario(
            name="stationary",
            description="One parked contact 800 m off the nose",
            bodies=[Body("foe-1", (800.0, 0.0), classification=TrackClass.FOE)],
            ticks=300,
        ),
        "crossing": Scenario(
            name="crossing",
            description="Contact crossing left to right at 1.5 km",
            bodies=[Body("foe-1", (1500.0, -400.0), (0.0, 120.0))],
        ),
        "pair": Scenario(
            name="pair",
            description="Two contacts at similar range, exercises designation hysteresis",
            bodies=[
                Body("foe-1", (900.0, 100.0), (-20.0, 0.0)),
                Body("foe-2", (0.0, 950.0), (0.0, -25.0)),
            ],
        ),
        "outrun": Scenario(
            name="outrun",
            description="Contact running away faster than the gun can reach",
            bodies=[Body("foe-1", (1200.0, 0.0), (1500.0, 0.0))],
            ticks=240,
        ),
        "munition": Scenario(
            name="munition",
            description="Missile launched at a slow contact 600 m away",
            bodies=[Body("foe-1", (600.0, 200.0), (0.0, -30.0))],
            ticks=600,
            ship_class=ShipClass.MISSILE,
            agent_velocity=(100.0, 0.0),
        ),
    }


SCENARIOS: dict[str, Scenario] = _library()


def run_scenario(scenario: Scenario, settings: GuidanceSettings | None = None,
                 seed: int | None = 0) -> ScenarioResult:
    """Drive the guidance loop through ``scenario`` and summarise."""
    settings = settings or GuidanceSettings()
    arena = ArenaHost(
        velocity=scenario.agent_velocity,
        heading=scenario.agent_heading,
        ticks_per_second=settings.ticks_per_second,
        plot_noise_std=scenario.plot_noise_std,
        seed=seed,
    )
    for body in scenario.bodies:
        arena.add_body(Body(body.body_id, body.position, body.velocity, body.classification))

    bus = EventBus(maxsize=scenario.ticks * 4 + 16)
    events = bus.subscribe()
    ship = Ship.for_class(scenario.ship_class, arena, settings, bus)
    result = ScenarioResult(name=scenario.name, ticks=scenario.ticks)

    for _ in range(scenario.ticks):
        if arena.destroyed:
            break
        ship.tick()
        arena.step()

    while not events.empty():
        msg = events.get_nowait()
        if msg["type"] == "engagement_state":
            result.states.append(msg["data"]["state"])
        elif msg["type"] == "target_designated":
            result.designations.append(msg["data"]["track_id"])

    result.guns_fired = arena.commands.fired(settings.gun_index)
    result.missiles_fired = arena.commands.fired(settings.missile_index)
    result.self_destructed = arena.destroyed
    role = ship.role
    if isinstance(role, Fighter):
        result.final_state = role.engagement.state.value
        result.tracks_alive = len(role.tracker)
    elif isinstance(role, Missile):
        result.tracks_alive = len(role.tracker)
    logger.info(
        "scenario {} done: {} gun / {} missile shots, states {}",
        scenario.name, result.guns_fired, result.missiles_fired, result.states,
    )
    return result

