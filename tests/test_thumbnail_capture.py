import pytest

from revisor.errors import ElementTimeout
from revisor.evidence import EvidencePipeline, ExtractionSuccess, MockOcrEngine
from revisor.portal import MockBrowser, PortalLocators, ThumbnailEvidenceSource
from revisor.portal.locators import nth

LOC = PortalLocators()


def _page_with_thumbs(count):
    thumbs = LOC.thumbnails()
    return MockBrowser(
        visible={LOC.evidence_container},
        counts={thumbs: count},
        screenshots={nth(thumbs, i): f"png-{i}".encode() for i in range(count)},
    )


def test_captures_each_thumbnail_in_order():
    browser = _page_with_thumbs(3)
    images = ThumbnailEvidenceSource(browser).capture()

    assert [img.label for img in images] == ["evidencia-1", "evidencia-2", "evidencia-3"]
    assert [img.data for img in images] == [b"png-0", b"png-1", b"png-2"]
    assert browser.called("wait_visible")[0] == ("wait_visible", LOC.evidence_container, "10000")


def test_missing_container_raises():
    with pytest.raises(ElementTimeout):
        ThumbnailEvidenceSource(MockBrowser()).capture()


def test_interactive_mode_shares_pipeline_logic():
    browser = _page_with_thumbs(2)
    engine = MockOcrEngine({"evidencia-1": "foto", "evidencia-2": "Ticket\nDomicilio: JMB-300 CDMX"})

    outcome = EvidencePipeline(engine).analyze_source(ThumbnailEvidenceSource(browser))

    assert isinstance(outcome, ExtractionSuccess)
    assert outcome.ticket_image.label == "evidencia-2"
    assert outcome.address_code == "JMB-300"
