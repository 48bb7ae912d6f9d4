# file: models/report.py

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# The year range ends on Jan 1 of the following year, which must still be a valid datetime
MIN_REPORT_YEAR = 1900
MAX_REPORT_YEAR = 9998


class ReportRequest(BaseModel):
    year: Optional[int] = Field(default=None, ge=MIN_REPORT_YEAR, le=MAX_REPORT_YEAR)


class ReportResponse(BaseModel):
    fileContents: str


class ReportAnswersPayload(BaseModel):
    p1: str = ""
    p2: str = ""
    p3: str = ""
    p4: str = ""
    p5: str = ""
    p6: str = ""


class ReportAnswersResponse(ReportAnswersPayload):
    year: int

    model_config = ConfigDict(from_attributes=True)
