from lexscan.events.bus import EventBus
from lexscan.events.document_events import DocumentUploaded


def test_publish_calls_handlers_in_registration_order():
    bus = EventBus()
    seen = []
    bus.register(DocumentUploaded, lambda event: seen.append(("first", event.file_id)))
    bus.register(DocumentUploaded, lambda event: seen.append(("second", event.file_id)))

    bus.publish(DocumentUploaded("f1", "nda.pdf", "application/pdf"))

    assert seen == [("first", "f1"), ("second", "f1")]


def test_publish_without_handlers_is_a_no_op(caplog):
    EventBus().publish(DocumentUploaded("f1", "nda.pdf", "application/pdf"))

    assert "No handlers registered for DocumentUploaded" in caplog.text
