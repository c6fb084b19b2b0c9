"""
Agendador de modos (scatter/chase/frightened) e fila de eventos temporizados.

Both run on the simulation's own tick counter, never on wall-clock time.
"""

import heapq
import itertools
from collections import namedtuple

from engine.config import SCHEDULE, FRIGHTENED, FRIGHTENED_BASE, FRIGHTENED_STEP, FRIGHTENED_MIN, seconds_to_ticks

# Tipos de evento adiado
FRIGHTENED_END, LIFE_RESET, GAME_RESET = "frightened-end", "life-reset", "game-reset"

TimedEvent = namedtuple("TimedEvent", "due kind epoch data")


def frightened_seconds(level):
    return max(FRIGHTENED_MIN, FRIGHTENED_BASE - (level - 1) * FRIGHTENED_STEP)


class ModeScheduler:
    """
    Walks the (duration, mode) table. The last phase has no duration and
    never ends. Frightened is layered on top: while it is active the phase
    clock stands still, so calming down resumes the interrupted phase.
    """

    def __init__(self, schedule=SCHEDULE):
        self.schedule = [(None if d is None else seconds_to_ticks(d), m) for d, m in schedule]
        self.period = 0
        self.reset()

    def reset(self):
        self.index      = 0
        self.elapsed    = 0
        self.frightened = False

    @property
    def scheduled_mode(self):
        return self.schedule[self.index][1]

    @property
    def mode(self):
        return FRIGHTENED if self.frightened else self.scheduled_mode

    def update(self) -> bool:
        """Advance one tick. Returns True when a scheduled transition fired."""
        if self.frightened:
            return False
        duration = self.schedule[self.index][0]
        if duration is None:
            return False
        self.elapsed += 1
        if self.elapsed < duration:
            return False
        self.index   = min(self.index + 1, len(self.schedule) - 1)
        self.elapsed = 0
        return True

    def frighten(self) -> int:
        self.frightened = True
        self.period += 1
        return self.period

    def calm(self):
        self.frightened = False


class EventQueue:
    def __init__(self):
        self._heap = []
        self._seq  = itertools.count()

    def __len__(self):
        return len(self._heap)

    def schedule(self, due, kind, epoch, **data):
        event = TimedEvent(due, kind, epoch, data)
        # seq desempata eventos no mesmo tick pela ordem de agendamento
        heapq.heappush(self._heap, (due, next(self._seq), event))
        return event

    def pop_due(self, tick):
        while self._heap and self._heap[0][0] <= tick:
            yield heapq.heappop(self._heap)[2]

    def pending(self, kind=None):
        return [e for _, _, e in sorted(self._heap) if kind is None or e.kind == kind]

    def clear(self):
        self._heap.clear()
