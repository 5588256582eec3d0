import yaml
from pathlib import Path
from transitions import Machine


CALLBACK_KINDS = ("enter", "exit")


class CaptureSession:
    """
    One photo strip session: its state machine plus the data it owns.

    The graph is loaded from states.yaml. Session data (shots, deadline,
    composed strip) lives on the same object, so a state change and the data
    it implies are never out of step.
    """

    def __init__(self, frames: int = 4, config_path=None, callbacks=None):
        """
        :param frames: Number of shots that completes the session.
        :param config_path: Optional path to the YAML FSM definition.
        :param callbacks: Optional dict of state callbacks.
                          Example: {"on_enter_capturing": some_function}
        """
        if frames < 1:
            raise ValueError(f"frames must be >= 1, got {frames}")

        self.frames = frames
        self.config_path = config_path or Path(__file__).parent / "states.yaml"
        self.callbacks = callbacks or {}

        self._shots = []
        self.next_deadline = None
        self.strip = None

        with open(self.config_path, "r") as f:
            fsm_config = yaml.safe_load(f)

        states = fsm_config.get("states", [])
        transitions = fsm_config.get("transitions", [])
        initial = fsm_config.get("initial", "idle")

        self.machine = Machine(
            model=self,
            states=states,
            transitions=transitions,
            initial=initial,
            auto_transitions=False,
        )

        # Register and validate callbacks
        for name, func in self.callbacks.items():
            if not callable(func):
                raise ValueError(f"Callback '{name}' must be callable, got {type(func)}")
            kind, state_name = self._parse_callback_name(name)
            state = self.machine.get_state(state_name)
            state.add_callback(kind, func)

    def _parse_callback_name(self, name):
        parts = name.split("_", 2)
        if len(parts) != 3 or parts[0] != "on" or parts[1] not in CALLBACK_KINDS:
            raise ValueError(
                f"Callback name '{name}' should look like 'on_enter_<state>' or 'on_exit_<state>'"
            )
        state_name = parts[2]
        if state_name not in self.machine.states:
            raise ValueError(f"Callback '{name}' refers to unknown state '{state_name}'")
        return parts[1], state_name

    # -------------------- Session data --------------------

    @property
    def shots(self):
        """Processed shots in capture order (read-only view)."""
        return tuple(self._shots)

    @property
    def shot_count(self) -> int:
        return len(self._shots)

    def add_shot(self, shot):
        if self.is_full():
            raise RuntimeError(f"Session already holds {self.frames} shots")
        self._shots.append(shot)

    def clear(self):
        """Drop shots, deadline and strip."""
        self._shots = []
        self.next_deadline = None
        self.strip = None

    def schedule(self, now: float, interval: float):
        self.next_deadline = now + interval

    def remaining(self, now: float) -> float:
        """Seconds until the next shot, never negative; 0 when nothing is scheduled."""
        if self.next_deadline is None:
            return 0.0
        return max(0.0, self.next_deadline - now)

    # -------------------- Condition Methods --------------------
    # Referenced in states.yaml as conditions for transitions

    def is_full(self) -> bool:
        return len(self._shots) >= self.frames
