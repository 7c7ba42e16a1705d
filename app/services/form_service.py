from datetime import datetime

from flask import current_app

from app.extensions import db
from app.services.feedback_repository import FeedbackRepository
from app.utils.aggregation import isoformat_utc

EDITABLE_QUESTION_FIELDS = ('text', 'description', 'type', 'required', 'order', 'options', 'settings')


class FormService:
    @staticmethod
    def update_question(form_id, question_id, data):
        """
        Updates a question of a form.

        When the text changes, the previous wording is appended to the
        question's modification history so analytics can flag it.
        """
        question = FeedbackRepository.find_question_by_id(question_id)
        if not question or question.form_id != form_id:
            return None, "Question not found"

        new_text = data.get('text')
        if new_text and new_text != question.text:
            history = list(question.modification_history or [])
            history.append({
                'text': question.text,
                'changedAt': isoformat_utc(datetime.utcnow())
            })
            question.modification_history = history

        for field in EDITABLE_QUESTION_FIELDS:
            if field in data:
                setattr(question, field, data[field])

        db.session.commit()

        current_app.logger.info(
            f"Updated question {question.id} on form {form_id}: "
            f"fields={sorted(k for k in data if k in EDITABLE_QUESTION_FIELDS)}"
        )
        return question, None
