import threading

import pytest

from revisor.evidence import EvidencePipeline, MockOcrEngine
from revisor.portal import APPROVED_PREVIOUSLY, QUEST_FAILED, MockBrowser, PortalLocators
from revisor.portal.locators import nth
from revisor.review import OutcomeLog, ReviewState, TaskReviewer, TaskStatus
from revisor.settings import ReviewSettings

LOC = PortalLocators()
LIST_URL = "https://portal.example/submissions/new"


def _settings(**changes):
    base = ReviewSettings(list_url=LIST_URL, client="Cliente Demo", recovery_delay_sec=0.0)
    return base.with_overrides(**changes)


def _portal(reviewer_text="Reviewer: ", task_id="  T-100 \n"):
    return MockBrowser(
        visible={LOC.task_row, LOC.reviewer, LOC.list_ready},
        texts={LOC.task_id(): task_id, LOC.reviewer: reviewer_text},
    )


def _reviewer(browser, tmp_path, pipeline=None, **settings):
    log = OutcomeLog(tmp_path / "revisiones.log")
    return TaskReviewer(browser, _settings(**settings), log, pipeline=pipeline), log


def _log_lines(tmp_path):
    return (tmp_path / "revisiones.log").read_text(encoding="utf-8").splitlines()


def test_already_reviewed_task_is_not_approved(tmp_path):
    browser = _portal(reviewer_text="Reviewer: alice@example.com")
    reviewer, _ = _reviewer(browser, tmp_path)

    record = reviewer.process_next()

    assert record.task_id == "T-100"
    assert record.status == TaskStatus.ALREADY_REVIEWED
    assert ("click", LOC.approve_button) not in browser.calls
    assert "Ya revisada por alice@example.com" in _log_lines(tmp_path)[0]


def test_unreviewed_task_is_approved_and_list_refiltered(tmp_path):
    browser = _portal()
    reviewer, _ = _reviewer(browser, tmp_path)

    record = reviewer.process_next()

    assert record.status == TaskStatus.APPROVED
    assert record.detail == "Aprobada"
    assert ("click", LOC.task_view()) in browser.calls
    assert ("click", LOC.approve_button) in browser.calls
    assert ("goto", LIST_URL) in browser.calls
    assert ("fill", LOC.client_filter, "Cliente Demo") in browser.calls
    assert _log_lines(tmp_path)[0].endswith("ID: T-100 - Estado: Aprobada")
    assert reviewer.state == ReviewState.RETURNING_TO_LIST


@pytest.mark.parametrize(
    "signal, detail",
    [
        (QUEST_FAILED, "Ya aprobada por otro usuario (Quest Completion Failed)"),
        (APPROVED_PREVIOUSLY, "Ya aprobada previamente por otro usuario"),
    ],
)
def test_race_loss_is_recorded_as_done(tmp_path, signal, detail):
    browser = _portal()
    browser.on_click[LOC.approve_button] = lambda b: b.visible.add(signal.locator)
    reviewer, _ = _reviewer(browser, tmp_path)

    record = reviewer.process_next()

    assert record.status == TaskStatus.ALREADY_APPROVED_RACE
    assert record.detail == detail
    assert len(_log_lines(tmp_path)) == 1
    assert len(browser.called("goto")) == 1


def test_missing_reviewer_field_is_logged_and_skipped(tmp_path):
    browser = _portal()
    browser.visible.discard(LOC.reviewer)
    reviewer, _ = _reviewer(browser, tmp_path)

    record = reviewer.process_next()

    assert record.status == TaskStatus.ERROR
    assert record.detail == "Error - No se encontró Reviewer"
    assert ("click", LOC.approve_button) not in browser.calls
    assert ("goto", LIST_URL) in browser.calls


def test_no_task_visible_reloads_list(tmp_path):
    browser = MockBrowser()
    reviewer, _ = _reviewer(browser, tmp_path)

    assert reviewer.process_next() is None
    assert browser.called("reload") == [("reload",)]
    assert not (tmp_path / "revisiones.log").exists()


def test_row_without_id_is_skipped(tmp_path):
    browser = _portal(task_id="   ")
    reviewer, _ = _reviewer(browser, tmp_path)

    assert reviewer.process_next() is None
    assert ("click", LOC.task_view()) not in browser.calls


def test_list_not_ready_is_soft_warning(tmp_path, caplog):
    browser = _portal()
    browser.visible.discard(LOC.list_ready)
    reviewer, _ = _reviewer(browser, tmp_path)

    record = reviewer.process_next()

    assert record.status == TaskStatus.APPROVED
    assert "did not load" in caplog.text


def test_run_honours_iteration_bound(tmp_path):
    browser = _portal()
    reviewer, _ = _reviewer(browser, tmp_path)

    assert reviewer.run(max_iterations=3) == 3
    assert len(_log_lines(tmp_path)) == 3


def test_run_stops_when_event_is_set(tmp_path):
    stop = threading.Event()
    browser = _portal()
    browser.on_click[LOC.approve_button] = lambda b: stop.set()
    reviewer, _ = _reviewer(browser, tmp_path)

    assert reviewer.run(stop_event=stop) == 1


def test_navigation_failure_triggers_recovery(tmp_path):
    browser = _portal()
    browser.goto_errors = [RuntimeError("net down"), None]
    reviewer, _ = _reviewer(browser, tmp_path)

    assert reviewer.run(max_iterations=1) == 1

    gotos = browser.called("goto")
    assert len(gotos) == 2
    fills = [c for c in browser.called("fill") if c[1] == LOC.client_filter]
    assert len(fills) == 1


def test_failed_recovery_does_not_end_loop(tmp_path, caplog):
    browser = _portal()
    browser.goto_errors = [RuntimeError("down"), RuntimeError("still down")]
    reviewer, _ = _reviewer(browser, tmp_path)

    assert reviewer.run(max_iterations=2) == 2
    assert "recovery failed" in caplog.text


def test_unexpected_task_error_is_recorded_once_then_recovered(tmp_path, monkeypatch):
    browser = _portal()
    reviewer, _ = _reviewer(browser, tmp_path)

    def _boom(task_id, address_code=None):
        raise RuntimeError("modal stuck")

    monkeypatch.setattr(reviewer, "approve", _boom)
    reviewer.run(max_iterations=1)

    lines = _log_lines(tmp_path)
    assert len(lines) == 1
    assert lines[0].endswith("Estado: Error - modal stuck")
    assert ("goto", LIST_URL) in browser.calls


def _portal_with_evidence(texts):
    browser = _portal()
    thumbs = LOC.thumbnails()
    browser.visible.add(LOC.evidence_container)
    browser.counts[thumbs] = len(texts)
    for i in range(len(texts)):
        browser.screenshots[nth(thumbs, i)] = b"png"
    engine = MockOcrEngine({f"evidencia-{i + 1}": text for i, text in enumerate(texts)})
    return browser, EvidencePipeline(engine)


def test_advisory_evidence_attaches_address_code(tmp_path):
    browser, pipeline = _portal_with_evidence(["selfie", "Ticket\nDomicilio: JMB-901 norte"])
    reviewer, _ = _reviewer(browser, tmp_path, pipeline=pipeline, evidence_mode="advisory")

    record = reviewer.process_next()

    assert record.status == TaskStatus.APPROVED
    assert record.address_code == "JMB-901"


def test_advisory_evidence_failure_still_approves(tmp_path):
    browser, pipeline = _portal_with_evidence(["sin domicilio"])
    reviewer, _ = _reviewer(browser, tmp_path, pipeline=pipeline, evidence_mode="advisory")

    record = reviewer.process_next()

    assert record.status == TaskStatus.APPROVED
    assert record.address_code is None


def test_required_evidence_blocks_approval(tmp_path):
    browser, pipeline = _portal_with_evidence(["sin domicilio"])
    reviewer, _ = _reviewer(browser, tmp_path, pipeline=pipeline, evidence_mode="required")

    record = reviewer.process_next()

    assert record.status == TaskStatus.ERROR
    assert record.detail.startswith("Error - ")
    assert ("click", LOC.approve_button) not in browser.calls


def test_evidence_off_skips_capture(tmp_path):
    browser, pipeline = _portal_with_evidence(["Domicilio: JMB-1"])
    reviewer, _ = _reviewer(browser, tmp_path, pipeline=pipeline, evidence_mode="off")

    record = reviewer.process_next()

    assert record.address_code is None
    assert browser.called("screenshot") == []


def test_multiline_exception_keeps_one_log_line(tmp_path, monkeypatch):
    browser = _portal()
    reviewer, _ = _reviewer(browser, tmp_path)

    def _boom(task_id, address_code=None):
        raise RuntimeError("Locator.click: Timeout exceeded.\nCall log:\n  - waiting for button")

    monkeypatch.setattr(reviewer, "approve", _boom)
    reviewer.run(max_iterations=1)

    lines = _log_lines(tmp_path)
    assert len(lines) == 1
    assert lines[0].endswith("Estado: Error - Locator.click: Timeout exceeded. Call log: - waiting for button")


def test_multiline_ocr_failure_keeps_one_log_line(tmp_path):
    from revisor.errors import OcrEngineUnavailable

    class BrokenEngine(MockOcrEngine):
        def session(self, language="spa"):
            raise OcrEngineUnavailable("tesseract failed\nError opening data file")

    browser, _ = _portal_with_evidence(["Domicilio: JMB-1"])
    reviewer, _ = _reviewer(
        browser, tmp_path, pipeline=EvidencePipeline(BrokenEngine()), evidence_mode="required"
    )

    record = reviewer.process_next()

    assert record.status == TaskStatus.ERROR
    lines = _log_lines(tmp_path)
    assert len(lines) == 1
    assert "tesseract failed Error opening data file" in lines[0]
