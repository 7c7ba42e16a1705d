"""
Export helpers: pivot responses and answers into rows and serialize them.
"""
import csv
import io
import json
from typing import Any, Dict, Iterable, List

import pandas as pd

from app.models import QuestionTypes
from app.utils.aggregation import isoformat_utc
from app.utils.answer_value import option_token

FORM_EXPORT_HEADERS = ['Response ID', 'Timestamp', 'Overall Rating']
QUESTION_EXPORT_HEADERS = ['Response ID', 'Submission Date', 'Response Value']

CSV_MIMETYPE = 'text/csv'
JSON_MIMETYPE = 'application/json'
XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def format_cell(value: Any) -> str:
    """Render an answer value as a single export cell."""
    if value is None:
        return ''
    if isinstance(value, (list, tuple)):
        return ', '.join(format_cell(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, separators=(',', ':'), ensure_ascii=False)
    return option_token(value)


def _rating_cell(rating) -> Any:
    return rating if rating else ''


def build_form_export_rows(questions: List[Any], responses: List[Any],
                           answers: Iterable[Any]) -> List[List[Any]]:
    """
    One header row followed by one row per response, in the order given.

    :param questions: questions in display order
    :param responses: responses in the desired row order
    :param answers: answers belonging to those responses
    """
    values_by_response: Dict[Any, Dict[Any, Any]] = {}
    for answer in answers:
        values_by_response.setdefault(answer.response_id, {})[answer.question_id] = answer.value

    rows = [FORM_EXPORT_HEADERS + [question.text for question in questions]]
    for response in responses:
        values = values_by_response.get(response.id, {})
        row = [
            str(response.id),
            isoformat_utc(response.submitted_at) or '',
            _rating_cell(response.overall_rating),
        ]
        row.extend(format_cell(values.get(question.id)) for question in questions)
        rows.append(row)
    return rows


def build_question_export_rows(question, answers: Iterable[Any],
                               responses_by_id: Dict[Any, Any]) -> List[List[Any]]:
    """Rows for a single question, joined with the originating response."""
    headers = list(QUESTION_EXPORT_HEADERS)
    if question.type == QuestionTypes.RATING.value:
        headers.append('Overall Form Rating')
    elif question.type in (QuestionTypes.MULTIPLE_CHOICE.value, QuestionTypes.CHECKBOX.value):
        headers.append('Selected Options')

    rows = [headers]
    for answer in answers:
        response = responses_by_id.get(answer.response_id)
        row = [
            str(answer.response_id),
            isoformat_utc(response.submitted_at) if response else 'Unknown',
            format_cell(answer.value),
        ]
        if question.type == QuestionTypes.RATING.value and response:
            row.append(_rating_cell(response.overall_rating))
        elif headers[-1] == 'Selected Options' and isinstance(answer.value, list):
            row.append(str(len(answer.value)))
        rows.append(row)
    return rows


def to_csv(rows: List[List[Any]]) -> str:
    """Quote every field, double embedded quotes, join rows with newlines."""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator='\n')
    for row in rows:
        writer.writerow(['' if cell is None else str(cell) for cell in row])
    content = output.getvalue()
    return content[:-1] if content.endswith('\n') else content


def to_json(rows: List[List[Any]]) -> str:
    return json.dumps(rows, separators=(',', ':'), ensure_ascii=False, default=str)


def to_xlsx(rows: List[List[Any]], sheet_name: str = 'Responses') -> bytes:
    header, body = (rows[0], rows[1:]) if rows else ([], [])
    # pad short rows so every record lines up with the header
    body = [row + [''] * (len(header) - len(row)) for row in body]
    df = pd.DataFrame(body, columns=header)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return output.getvalue()


def serialize_rows(rows: List[List[Any]], format_type: str):
    """
    Serialize rows for download.

    :return: tuple of (content, mimetype, file extension). Formats other than
             csv and xlsx fall back to a JSON array.
    """
    if format_type == 'csv':
        return to_csv(rows), CSV_MIMETYPE, 'csv'
    if format_type == 'xlsx':
        return to_xlsx(rows), XLSX_MIMETYPE, 'xlsx'
    return to_json(rows), JSON_MIMETYPE, 'json'
