from typing import List

from pydantic import BaseModel

from core.import_results import ImportResult, ImportSummary


class ImportReport(BaseModel):
    results: List[ImportResult]
    summary: ImportSummary
