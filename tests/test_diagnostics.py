import logging
import re
import threading

from xtract.diagnostics import DiagnosticsLog

STAMP = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} - ")


def test_history_is_timestamped_in_post_order():
    log = DiagnosticsLog(verbose=False)
    try:
        for message in ["one", "two", "three"]:
            log.log(message)
        history = log.history()
    finally:
        log.close()
    assert [STAMP.sub("", line) for line in history] == ["one", "two", "three"]
    assert all(STAMP.match(line) for line in history)


def test_verbose_echoes_through_logger(caplog):
    caplog.set_level(logging.INFO, logger="xtract.diagnostics")
    log = DiagnosticsLog(verbose=False)
    try:
        log.log("quiet")
        log.flush()
        log.set_verbose(True)
        log.log("loud")
        log.flush()
    finally:
        log.close()
    echoed = [r.getMessage() for r in caplog.records if r.name == "xtract.diagnostics"]
    assert len(echoed) == 1
    assert echoed[0].endswith(" - loud")


def test_history_captured_when_not_verbose():
    log = DiagnosticsLog(verbose=False)
    log.log("kept")
    assert len(log.history()) == 1
    log.close()


def test_messages_from_many_threads_all_arrive():
    log = DiagnosticsLog(verbose=False)

    def producer(n):
        for i in range(50):
            log.log(f"{n}-{i}")

    threads = [threading.Thread(target=producer, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    history = log.history()
    log.close()
    assert len(history) == 200
    mine = [STAMP.sub("", line) for line in history if STAMP.sub("", line).startswith("2-")]
    assert mine == [f"2-{i}" for i in range(50)]


def test_log_after_close_is_dropped():
    log = DiagnosticsLog(verbose=False)
    log.close()
    log.log("late")
    assert log.history() == []


def test_close_while_logging_does_not_hang_history():
    log = DiagnosticsLog(verbose=False)
    started = threading.Event()

    def producer():
        started.set()
        for i in range(500):
            log.log(f"m-{i}")

    threads = [threading.Thread(target=producer) for _ in range(4)]
    for t in threads:
        t.start()
    started.wait()
    log.close()
    for t in threads:
        t.join()

    result = []
    reader = threading.Thread(target=lambda: result.append(log.history()), daemon=True)
    reader.start()
    reader.join(timeout=5)
    assert not reader.is_alive()
    assert all(STAMP.match(line) for line in result[0])
