from block_duel.game import Clock


def test_call_later_fires_in_due_order():
    clock = Clock()
    fired = []
    clock.call_later(300, lambda: fired.append("b"))
    clock.call_later(100, lambda: fired.append("a"))
    clock.call_later(300, lambda: fired.append("c"))

    clock.advance(99)
    assert fired == []
    clock.advance(1)
    assert fired == ["a"]
    clock.advance(500)
    assert fired == ["a", "b", "c"]
    assert clock.now == 600


def test_call_every_repeats_until_cancelled():
    clock = Clock()
    seen = []
    timer = clock.call_every(100, lambda: seen.append(clock.now))
    clock.advance(350)
    assert seen == [100, 200, 300]
    timer.cancel()
    clock.advance(1000)
    assert seen == [100, 200, 300]
    assert clock.pending() == 0


def test_timer_scheduled_from_callback_runs_in_same_advance():
    clock = Clock()
    seen = []
    clock.call_later(100, lambda: clock.call_later(50, lambda: seen.append(clock.now)))
    clock.advance(200)
    assert seen == [150]


def test_run_until_stops_at_condition_or_limit():
    clock = Clock()
    flag = []
    clock.call_later(420, lambda: flag.append(True))
    assert clock.run_until(lambda: bool(flag), limit_ms=1000)
    assert 420 <= clock.now <= 450

    clock = Clock()
    assert not clock.run_until(lambda: False, limit_ms=300)
    assert clock.now == 300
