from core.import_results import (
    ImportResult,
    ImportStatus,
    created,
    failed,
    summarize_results,
    updated,
)


def test_status_values():
    assert ImportStatus.CREATED.value == "Created"
    assert ImportStatus.ERROR == "Error"


def test_summarize_results():
    results = [
        created(2, "Name: Tea"),
        created(3, "Name: Coffee"),
        updated(4, "SKU: T-1"),
        failed(5, "name is required"),
        ImportResult(row=6, status=ImportStatus.WARNING, message="check"),
    ]
    summary = summarize_results(results)
    assert (summary.created, summary.updated, summary.warning, summary.error) == (2, 1, 1, 1)


def test_summarize_empty():
    summary = summarize_results([])
    assert summary.model_dump() == {"created": 0, "updated": 0, "warning": 0, "error": 0}


def test_result_serializes_status_text():
    assert failed(1, "bad").model_dump(mode="json") == {"row": 1, "status": "Error", "message": "bad"}
