import pytest

from mandelzoom import FieldBuffer, FrameStepper, FrontierScheduler


class FakeClock:
    def __init__(self, tick=1.0):
        self.now = 0.0
        self.tick = tick

    def __call__(self):
        value = self.now
        self.now += self.tick
        return value


def flat_stepper(width=5, height=5, color=42):
    field = FieldBuffer(width, height)
    scheduler = FrontierScheduler(field, lambda index: color)
    scheduler.seed()
    return field, scheduler, FrameStepper(scheduler, clock=FakeClock())


def test_step_yields_when_budget_is_spent():
    field, scheduler, stepper = flat_stepper()
    results = [stepper.step(0.5) for _ in range(16)]
    assert results == [True] * 15 + [False]
    assert stepper.ticks == 16
    assert stepper.propagations == 16
    assert scheduler.settled
    assert field.computed_count() == 25


def test_step_resumes_without_reseeding():
    field, scheduler, stepper = flat_stepper()
    assert stepper.step(0.5) is True
    assert scheduler.pending == 15
    assert stepper.step(0.5) is True
    assert scheduler.pending == 14
    assert scheduler.enqueued == 16


def test_step_processes_until_budget():
    field, scheduler, stepper = flat_stepper()
    assert stepper.step(10.0) is True
    assert scheduler.pending == 6
    assert stepper.step(10.0) is False
    assert stepper.propagations == 16


def test_step_after_settling_does_no_work():
    field, scheduler, stepper = flat_stepper()
    while stepper.step(100.0):
        pass
    ticks = stepper.ticks
    assert stepper.step(100.0) is False
    assert stepper.ticks == ticks


def test_fill_runs_when_queue_empties():
    field, scheduler, stepper = flat_stepper(width=7, height=7, color=7)
    field.colors[24] = 99
    assert stepper.step(100.0) is False
    assert field.colors[24] == 7
    assert field.computed_count() == 49


@pytest.mark.parametrize("budget", [0, -1.0])
def test_non_positive_budget_is_rejected(budget):
    field, scheduler, stepper = flat_stepper()
    with pytest.raises(ValueError):
        stepper.step(budget)
