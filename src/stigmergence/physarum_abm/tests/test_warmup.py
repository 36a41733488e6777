from stigmergence.warmup import numba_warmup, run_global_warmup


def test_numba_warmup_reports_time():
    assert numba_warmup() >= 0.0


def test_run_global_warmup():
    run_global_warmup(width=16, height=12, agent_count=32)
