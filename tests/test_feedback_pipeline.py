from interview_coach.core.errors import AnalysisFailure
from interview_coach.core.feedback_pipeline import FeedbackPipeline
from interview_coach.models.interview import Question
from tests.conftest import FakeAnalysisClient


def _questions():
    return [
        Question(id=2, text="Q2", answer="third answer here", audio_duration=3.0),
        Question(id=0, text="Q0", answer="a b c d", audio_duration=2.0),
        Question(id=1, text="Q1", answer="", audio_duration=1.0),
        Question(id=3, text="Q3", answer="no timing", audio_duration=0.0),
        Question(id=4, text="Q4"),
    ]


def test_queue_holds_answered_questions_in_id_order():
    pipeline = FeedbackPipeline(FakeAnalysisClient(), default_wpm=140)
    queue = pipeline.build_queue(_questions())

    assert [item.question_id for item in queue] == [0, 2, 3]
    assert [item.words_per_minute for item in queue] == [120, 60, 140]


async def test_failed_item_is_reported_and_batch_continues():
    analysis = FakeAnalysisClient(failing_texts={"Q2"})
    pipeline = FeedbackPipeline(analysis)
    results, failures = [], []

    async def on_result(question_id, feedback):
        results.append(question_id)

    async def on_failure(question_id, error):
        failures.append(question_id)

    outcome = await pipeline.run(pipeline.build_queue(_questions()), on_result, on_failure, lambda: True)

    assert results == [0, 3]
    assert failures == [2]
    assert outcome.succeeded == [0, 3]
    assert outcome.failed == [2]
    assert not outcome.abandoned
    assert [call[0] for call in analysis.feedback_calls] == ["Q0", "Q2", "Q3"]


async def test_stale_session_stops_processing():
    analysis = FakeAnalysisClient()
    pipeline = FeedbackPipeline(analysis)
    current = {"value": True}
    results = []

    async def on_result(question_id, feedback):
        results.append(question_id)
        current["value"] = False

    async def on_failure(question_id, error):
        raise AssertionError("no failures expected")

    outcome = await pipeline.run(
        pipeline.build_queue(_questions()), on_result, on_failure, lambda: current["value"],
    )

    assert results == [0]
    assert outcome.abandoned
    assert len(analysis.feedback_calls) == 1


async def test_unexpected_client_error_counts_as_failed_item():
    class FlakyAnalysisClient(FakeAnalysisClient):
        async def get_feedback(self, question_text, answer_text, words_per_minute):
            if question_text == "Q0":
                raise AttributeError("'list' object has no attribute 'get'")
            return await super().get_feedback(question_text, answer_text, words_per_minute)

    pipeline = FeedbackPipeline(FlakyAnalysisClient())
    failures = []

    async def on_result(question_id, feedback):
        pass

    async def on_failure(question_id, error):
        failures.append((question_id, error))

    outcome = await pipeline.run(pipeline.build_queue(_questions()), on_result, on_failure, lambda: True)

    assert outcome.failed == [0]
    assert outcome.succeeded == [2, 3]
    assert isinstance(failures[0][1], AnalysisFailure)
