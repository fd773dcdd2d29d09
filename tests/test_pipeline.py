"""Tests for the evaluation presentation pipeline."""

from unittest.mock import MagicMock

import pytest

from krishi_mitra.notify import ToastVariant
from krishi_mitra.pipeline import EvaluationPipeline, is_report_email
from krishi_mitra.soil import FindingStatus, SoilSample
from krishi_mitra.speech import Speaker
from krishi_mitra.store import RecordStore, WriteResult

HEALTHY = SoilSample(moisture=72, ph=6.8, nitrogen=85)


@pytest.fixture
def speaker():
    return MagicMock(spec=Speaker)


class TestReportEmail:
    """Test the report address check."""

    @pytest.mark.parametrize("email", ["farmer@gmail.com", " Farmer@Gmail.com "])
    def test_gmail_accepted(self, email):
        """Test that Gmail addresses are accepted regardless of case and padding."""
        assert is_report_email(email)

    @pytest.mark.parametrize(
        "email",
        [
            "",
            None,
            "farmer@yahoo.com",
            "@gmail.com",
            "gmail.com",
            "a@gmail.com.evil",
            "a@@gmail.com",
            "farmer name@gmail.com",
        ],
    )
    def test_other_addresses_rejected(self, email):
        """Test that malformed and non-Gmail addresses are rejected."""
        assert not is_report_email(email)


class TestEvaluate:
    """Test evaluation and localization."""

    def test_english_findings(self, store):
        """Test that a healthy sample yields three good findings."""
        pipeline = EvaluationPipeline(store)
        findings = pipeline.evaluate(HEALTHY)

        assert [f.status for f in findings] == [FindingStatus.GOOD] * 3
        assert findings[1].message == "Soil moisture is optimal"

    def test_findings_in_session_language(self, store):
        """Test that findings are translated into the session language."""
        pipeline = EvaluationPipeline(store, language="hi")
        findings = pipeline.evaluate(SoilSample(moisture=30, ph=6.8, nitrogen=85))

        assert findings[1].status == FindingStatus.CRITICAL
        assert findings[1].message == "मिट्टी में नमी बहुत कम है"

    def test_unsupported_language_uses_english(self, store):
        """Test that an unsupported language resolves to English."""
        pipeline = EvaluationPipeline(store, language="fr")
        assert pipeline.language.value == "en"

    def test_evaluate_does_not_write(self):
        """Test that evaluating alone never touches the store."""
        store = MagicMock(spec=RecordStore)
        EvaluationPipeline(store).evaluate(HEALTHY)
        store.insert.assert_not_called()


class TestNarration:
    """Test speech text and playback."""

    def test_single_finding(self, store):
        """Test the narration of one finding."""
        pipeline = EvaluationPipeline(store)
        finding = pipeline.evaluate(HEALTHY)[0]

        assert pipeline.narrate(finding) == (
            "Soil pH: Soil pH is optimal. Recommendation: Maintain current pH level"
        )

    def test_all_findings(self, store):
        """Test the narration of a whole evaluation."""
        pipeline = EvaluationPipeline(store)
        text = pipeline.narrate_all(pipeline.evaluate(HEALTHY))

        assert text.startswith("Krishi Mitra Evaluation Results. Soil pH: ")
        assert "Soil Moisture: Soil moisture is optimal" in text
        assert text.endswith("Continue current fertilization program")

    def test_speak_all_uses_language_locale(self, store, speaker):
        """Test that narration is spoken in the session's locale."""
        pipeline = EvaluationPipeline(store, speaker=speaker, language="ta")
        findings = pipeline.evaluate(HEALTHY)

        pipeline.speak_all(findings)

        text = speaker.speak.call_args.args[0]
        assert text.startswith("கிருஷி மித்ரா மதிப்பீட்டு முடிவுகள்")
        assert speaker.speak.call_args.kwargs["locale"] == "ta-IN"

    def test_speak_single_and_stop(self, store, speaker):
        """Test speaking one finding and stopping playback."""
        pipeline = EvaluationPipeline(store, speaker=speaker)
        finding = pipeline.evaluate(HEALTHY)[2]

        pipeline.speak(finding)
        pipeline.stop_speaking()

        speaker.speak.assert_called_once_with(pipeline.narrate(finding), locale="en-IN")
        speaker.stop.assert_called_once()

    def test_no_speaker_is_silent(self, store):
        """Test that narration without a speaker is a no-op."""
        pipeline = EvaluationPipeline(store)
        pipeline.speak_all(pipeline.evaluate(HEALTHY))
        pipeline.stop_speaking()


class TestSave:
    """Test persisting evaluations for emailed reports."""

    def test_saves_record_and_confirms(self, store, notifier):
        """Test that a Gmail opt-in stores the evaluation and confirms it."""
        pipeline = EvaluationPipeline(store, notifier=notifier)
        findings = pipeline.evaluate(HEALTHY)

        result = pipeline.save("farmer@gmail.com", HEALTHY, findings)

        assert result.ok
        rows = store.select("evaluation_results")
        assert len(rows) == 1
        assert rows[0]["email"] == "farmer@gmail.com"
        assert rows[0]["soil_data"]["moisture"] == 72
        assert len(rows[0]["evaluation_results"]) == 3
        assert notifier.last.title == "Success!"
        assert notifier.last.variant == ToastVariant.DEFAULT

    @pytest.mark.parametrize("email", ["farmer@example.com", "a@@gmail.com"])
    def test_invalid_email_writes_nothing(self, notifier, email):
        """Test that an unusable address is refused before any write."""
        store = MagicMock(spec=RecordStore)
        pipeline = EvaluationPipeline(store, notifier=notifier)

        result = pipeline.save(email, HEALTHY, pipeline.evaluate(HEALTHY))

        assert not result.ok
        store.insert.assert_not_called()
        assert notifier.last.title == "Invalid Email"
        assert notifier.last.variant == ToastVariant.DESTRUCTIVE

    def test_store_failure_is_reported_once(self, notifier):
        """Test that a failed write is attempted once and reported."""
        store = MagicMock(spec=RecordStore)
        store.insert.return_value = WriteResult.failure("connection refused")
        pipeline = EvaluationPipeline(store, notifier=notifier)

        result = pipeline.save("farmer@gmail.com", HEALTHY, pipeline.evaluate(HEALTHY))

        assert not result.ok
        assert result.error == "connection refused"
        store.insert.assert_called_once()
        assert notifier.last.title == "Error"
        assert notifier.last.variant == ToastVariant.DESTRUCTIVE
