"""
Analytics utilities for the feedback application.
Per-question-type analyzers, daily trend generators and the response-level
rollups used by the form analytics endpoint. Everything here works on data
that has already been loaded; database access lives in the services.
"""
import re
from datetime import datetime
from typing import Any, Dict, Iterable, List

from app.models import QuestionTypes, CHOICE_QUESTION_TYPES
from app.utils.aggregation import (
    as_utc,
    distribution,
    group_by_date,
    group_by_key,
    isoformat_utc,
    js_round,
    numeric_summary,
    sorted_by_date,
)
from app.utils.answer_value import DatedAnswer, option_token

RECENT_RATINGS_LIMIT = 5
COMMON_WORDS_LIMIT = 20
COMMON_WORD_MIN_LENGTH = 4
_PUNCTUATION = re.compile(r'[.,?!;:()"\'\-_]')

RATING_SCALE = (1, 2, 3, 4, 5)

WEEKDAY_NAMES = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']
MONTH_NAMES = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
               'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']
TIMELINE_PERIODS = ('week', 'month', 'quarter', 'year')

# Placeholder completion rates until form starts are tracked
PLACEHOLDER_COMPLETION_RATES = {
    'week': 92.5,
    'month': 88.1,
    'quarter': 90.3,
    'year': 89.7,
}


# ---------------------------------------------------------------------------
# Per-question analyzers
# ---------------------------------------------------------------------------

def _numbers(answers: Iterable[DatedAnswer]) -> List[Any]:
    numbers = []
    for answer in answers:
        number = answer.value.as_number()
        if number is not None:
            numbers.append(number)
    return numbers


def _texts(answers: Iterable[DatedAnswer]) -> List[DatedAnswer]:
    return [answer for answer in answers if answer.value.as_text() is not None]


def _choice_tokens(answer: DatedAnswer):
    options = answer.value.as_options()
    if options is not None:
        return options
    return answer.value.as_option()


def _declared_options(question) -> List[str]:
    declared = []
    for option in getattr(question, 'options', None) or []:
        if isinstance(option, str):
            declared.append(option)
        elif isinstance(option, dict) and option.get('value'):
            declared.append(option_token(option['value']))
    return declared


def analyze_rating(answers: List[DatedAnswer]) -> Dict[str, Any]:
    """Average, mode and distribution of the numeric readings of rating answers."""
    numbers = _numbers(answers)
    if not numbers:
        return {'total': 0, 'average': 0, 'distribution': {}}

    summary = numeric_summary(numbers)
    recent = answers[-RECENT_RATINGS_LIMIT:]
    return {
        'total': summary['count'],
        'average': summary['average'],
        'mode': summary['mode'],
        'distribution': distribution(numbers, lambda n: n),
        'recentRatings': [
            {'value': answer.value.raw, 'date': isoformat_utc(answer.submitted_at)}
            for answer in reversed(recent)
        ],
    }


def analyze_choice(answers: List[DatedAnswer], question) -> Dict[str, Any]:
    """
    Option counts for multiplechoice, checkbox and dropdown questions.

    Every declared option starts at zero. A multi-select answer counts once
    toward ``total`` but increments each option it contains.
    """
    counts = {option: 0 for option in _declared_options(question)}
    total = 0
    for answer in answers:
        tokens = _choice_tokens(answer)
        if tokens is None:
            continue
        total += 1
        for token in tokens if isinstance(tokens, list) else [tokens]:
            counts[token] = counts.get(token, 0) + 1

    allow_other = bool(getattr(question, 'allow_other', False))
    other_responses = []
    for answer in answers:
        other = answer.value.other_text(allow_other)
        if other is not None:
            other_responses.append(other)

    return {
        'total': total,
        'distribution': counts,
        'otherResponses': other_responses,
    }


def common_words(texts: Iterable[str], limit: int = COMMON_WORDS_LIMIT) -> List[Dict[str, Any]]:
    """Words longer than three letters used more than once, most frequent first."""
    frequency: Dict[str, int] = {}
    for text in texts:
        for word in _PUNCTUATION.sub('', text.lower()).split():
            if len(word) >= COMMON_WORD_MIN_LENGTH:
                frequency[word] = frequency.get(word, 0) + 1

    repeated = [{'text': word, 'count': count} for word, count in frequency.items() if count > 1]
    repeated.sort(key=lambda entry: entry['count'], reverse=True)
    return repeated[:limit]


def _average_length(texts: List[str]) -> int:
    if not texts:
        return 0
    return js_round(sum(len(text) for text in texts) / len(texts))


def analyze_text(answers: List[DatedAnswer]) -> Dict[str, Any]:
    valid = _texts(answers)
    if not valid:
        return {
            'total': 0,
            'responses': [],
            'averageLength': 0,
            'responseRate': 0,
            'commonWords': [],
        }

    texts = [answer.value.raw for answer in valid]
    newest_first = sorted(valid, key=lambda a: a.submitted_at or datetime.min, reverse=True)

    return {
        'total': len(valid),
        'responses': [
            {'text': answer.value.raw, 'date': isoformat_utc(answer.submitted_at)}
            for answer in newest_first
        ],
        'averageLength': _average_length(texts),
        'responseRate': len(valid) / len(answers) * 100,
        'commonWords': common_words(texts),
    }


def analyze_default(answers: List[DatedAnswer]) -> Dict[str, Any]:
    return {
        'total': len(answers),
        'responses': [
            {'value': answer.value.raw, 'date': isoformat_utc(answer.submitted_at)}
            for answer in answers
        ],
    }


def analyze_question(question, answers: List[DatedAnswer]) -> Dict[str, Any]:
    """Run the analyzer matching the declared question type."""
    question_type = getattr(question, 'type', None)
    if question_type == QuestionTypes.RATING.value:
        return analyze_rating(answers)
    if question_type in CHOICE_QUESTION_TYPES:
        return analyze_choice(answers, question)
    if question_type == QuestionTypes.TEXT.value:
        return analyze_text(answers)
    return analyze_default(answers)


# ---------------------------------------------------------------------------
# Trend generators
# ---------------------------------------------------------------------------

def _by_day(answers: List[DatedAnswer]) -> Dict[str, List[DatedAnswer]]:
    return group_by_date(answers, lambda answer: answer.submitted_at)


def rating_trend(answers: List[DatedAnswer]) -> List[Dict[str, Any]]:
    return sorted_by_date([
        {
            'date': day,
            'count': len(bucket),
            'average': numeric_summary(_numbers(bucket))['average'],
        }
        for day, bucket in _by_day(answers).items()
    ])


def choice_trend(answers: List[DatedAnswer]) -> List[Dict[str, Any]]:
    trend = []
    for day, bucket in _by_day(answers).items():
        # option counts sit beside date/count; an option named "date" or "count" never replaces them
        trend.append({**distribution(bucket, _choice_tokens), 'date': day, 'count': len(bucket)})
    return sorted_by_date(trend)


def text_trend(answers: List[DatedAnswer]) -> List[Dict[str, Any]]:
    trend = []
    for day, bucket in _by_day(answers).items():
        texts = [answer.value.raw for answer in _texts(bucket)]
        trend.append({
            'date': day,
            'count': len(texts),
            'averageLength': _average_length(texts),
        })
    return sorted_by_date(trend)


def question_trend(question, answers: List[DatedAnswer]) -> List[Dict[str, Any]]:
    question_type = getattr(question, 'type', None)
    if question_type == QuestionTypes.RATING.value:
        return rating_trend(answers)
    if question_type in CHOICE_QUESTION_TYPES:
        return choice_trend(answers)
    if question_type == QuestionTypes.TEXT.value:
        return text_trend(answers)
    return []


# ---------------------------------------------------------------------------
# Response-level rollups
# ---------------------------------------------------------------------------

def submission_lookup(responses: Iterable[Any]) -> Dict[Any, Any]:
    """Map response id -> submitted_at, built once per request."""
    return {response.id: response.submitted_at for response in responses}


def response_date_range(responses: List[Any]):
    dates = [as_utc(r.submitted_at) for r in responses if r.submitted_at is not None]
    if not dates:
        return None, None
    return min(dates), max(dates)


def summarize_ratings(responses: List[Any]) -> Dict[str, Any]:
    """Average overall rating, 1-5 distribution and promoter segmentation."""
    ratings = [r.overall_rating for r in responses if r.overall_rating is not None]
    summary = numeric_summary(ratings)
    counts = distribution(ratings, lambda rating: rating)

    return {
        'averageRating': summary['average'],
        'ratingResponseCount': summary['count'],
        'ratingDistribution': [
            {'rating': rating, 'count': counts.get(rating, 0)} for rating in RATING_SCALE
        ],
        'npsData': {
            'detractors': sum(1 for rating in ratings if rating <= 3),
            'passives': sum(1 for rating in ratings if 3 < rating <= 4),
            'promoters': sum(1 for rating in ratings if rating > 4),
            'total': summary['count'],
        },
    }


def response_trend(responses: List[Any]) -> List[Dict[str, Any]]:
    """Number of responses per submission day, oldest day first."""
    return sorted_by_date([
        {'date': day, 'count': len(bucket)}
        for day, bucket in group_by_date(responses, lambda r: r.submitted_at).items()
    ])


def _timeline_labels(submitted_at) -> Dict[str, Any]:
    submitted_at = as_utc(submitted_at)
    month_name = MONTH_NAMES[submitted_at.month - 1]
    return {
        'week': WEEKDAY_NAMES[(submitted_at.weekday() + 1) % 7],
        'month': submitted_at.day,
        'quarter': month_name,
        'year': month_name,
    }


def _timeline_sort_key(period: str):
    if period == 'week':
        return lambda point: WEEKDAY_NAMES.index(point['name'])
    if period in ('quarter', 'year'):
        return lambda point: MONTH_NAMES.index(point['name'])
    return lambda point: point['name']


def average_rating_over_all(responses: List[Any]) -> float:
    """Sum of overall ratings divided by every response, rated or not."""
    if not responses:
        return 0
    total = sum(r.overall_rating for r in responses if r.overall_rating is not None)
    return total / len(responses)


def build_timeline(responses: List[Any]) -> Dict[str, Any]:
    """
    Week/month/quarter/year rollups of response counts.

    Week buckets by weekday name, month by day of month, quarter and year by
    month name. The average rating reported for each period is computed over
    all responses rather than the period, and completion rates are fixed
    placeholders; dashboards consume these values as-is.
    """
    dated = [r for r in responses if r.submitted_at is not None]
    if not dated:
        return {period: {} for period in TIMELINE_PERIODS}

    counts = {period: {} for period in TIMELINE_PERIODS}
    for response in dated:
        for period, label in _timeline_labels(response.submitted_at).items():
            counts[period][label] = counts[period].get(label, 0) + 1

    result: Dict[str, Any] = {}
    for period in TIMELINE_PERIODS:
        points = [{'name': name, 'value': value} for name, value in counts[period].items()]
        points.sort(key=_timeline_sort_key(period))
        result[period] = {'responses': {0: points}, 'ratings': {}, 'completion': {}}

    average = average_rating_over_all(responses)
    result['averageRatings'] = {period: {0: average} for period in TIMELINE_PERIODS}
    result['completionRates'] = {
        period: {0: rate} for period, rate in PLACEHOLDER_COMPLETION_RATES.items()
    }
    return result


def summarize_question(question, answers: List[DatedAnswer]) -> Dict[str, Any]:
    """Analyzer output for one question with its identifying fields."""
    return {
        'questionId': question.id,
        'text': question.text,
        'type': question.type,
        'responseCount': len(answers),
        'hasBeenModified': bool(getattr(question, 'modification_history', None)),
        'data': analyze_question(question, answers),
    }


def first_and_last_dates(answers: List[DatedAnswer]):
    """Submission time of the first and last answer, as ISO strings."""
    if not answers:
        return None, None
    return isoformat_utc(answers[0].submitted_at), isoformat_utc(answers[-1].submitted_at)


def answers_by_question(answers: List[DatedAnswer]) -> Dict[Any, List[DatedAnswer]]:
    return group_by_key(answers, lambda answer: answer.question_id)
