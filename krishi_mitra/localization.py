"""Static translation tables and language fallback.

Supported languages form a closed enum. Any other code, and any key missing
from a non-English table, resolves to the English text. Nothing in this
module raises on unknown input.
"""

import re
from enum import Enum
from typing import TypeVar

from krishi_mitra.logging_config import get_logger
from krishi_mitra.soil.classifier import FINDING_TEXT
from krishi_mitra.soil.models import Finding, FindingStatus, SoilCategory

logger = get_logger(__name__)

K = TypeVar("K")


class Language(str, Enum):
    """Languages with translation tables."""

    EN = "en"
    HI = "hi"
    TE = "te"
    TA = "ta"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def speech_locale(self) -> str:
        """Locale tag handed to the speech engine (Indian variants)."""
        return f"{self.value}-IN"


DEFAULT_LANGUAGE = Language.EN

_DISPLAY_NAMES = {
    Language.EN: "English",
    Language.HI: "हिंदी",
    Language.TE: "తెలుగు",
    Language.TA: "தமிழ்",
}


class Intent(str, Enum):
    """Farming topics the chat responder knows how to answer."""

    GREETING = "greeting"
    SOIL = "soil"
    PEST = "pest"
    CROP = "crop"
    WEATHER = "weather"
    DEFAULT = "default"


def resolve_language(code: "str | Language | None") -> Language:
    """Map a language code to a supported language.

    Accepts region-qualified and differently cased codes (``hi-IN``,
    ``TE``). Unsupported or empty codes resolve to English.
    """
    if isinstance(code, Language):
        return code
    if not code:
        return DEFAULT_LANGUAGE

    primary = re.split(r"[-_]", code.strip().lower(), maxsplit=1)[0]
    try:
        return Language(primary)
    except ValueError:
        logger.debug(f"Unsupported language code {code!r}, using {DEFAULT_LANGUAGE.value}")
        return DEFAULT_LANGUAGE


def _lookup(table: dict[Language, dict[K, str]], language: Language, key: K) -> str:
    """Translated entry, or the English one when the language lacks the key."""
    value = table.get(language, {}).get(key)
    if value is None:
        return table[DEFAULT_LANGUAGE][key]
    return value


# Chat replies per intent
RESPONSES: dict[Language, dict[Intent, str]] = {
    Language.EN: {
        Intent.GREETING: "Hello! I'm Krishi Mitra, your farming assistant. How can I help you today?",
        Intent.SOIL: "Based on your location and crop type, I recommend testing soil pH and nutrient levels. Consider adding organic compost to improve soil health.",
        Intent.PEST: "I've detected potential pest risks in your area. Check for aphids and caterpillars. Consider using neem oil as a natural pesticide.",
        Intent.CROP: "Your crops are showing good growth patterns. Maintain current watering schedule and monitor for any nutrient deficiencies.",
        Intent.WEATHER: "Weather forecast shows optimal conditions for farming this week. Perfect time for planting or harvesting.",
        Intent.DEFAULT: "I understand your concern about farming. Let me help you with the best agricultural practices for your situation.",
    },
    Language.HI: {
        Intent.GREETING: "नमस्ते! मैं कृषि मित्र हूं, आपका कृषि सहायक। आज मैं आपकी कैसे मदद कर सकता हूं?",
        Intent.SOIL: "आपके स्थान और फसल के प्रकार के आधार पर, मैं मिट्टी की pH और पोषक तत्वों के स्तर की जांच की सिफारिश करता हूं।",
        Intent.PEST: "आपके क्षेत्र में कीट के जोखिम का पता चला है। एफिड्स और कैटरपिलर की जांच करें।",
        Intent.CROP: "आपकी फसलें अच्छी वृद्धि के पैटर्न दिखा रही हैं। वर्तमान पानी देने का कार्यक्रम बनाए रखें।",
        Intent.WEATHER: "मौसम पूर्वानुमान इस सप्ताह कृषि के लिए अनुकूल परिस्थितियां दिखाता है।",
        Intent.DEFAULT: "मैं कृषि के बारे में आपकी चिंता समझता हूं। मैं आपकी स्थिति के लिए सर्वोत्तम कृषि प्रथाओं में मदद करूंगा।",
    },
    Language.TE: {
        Intent.GREETING: "నమస్కారం! నేను కృషి మిత్ర, మీ వ్యవసాయ సహాయకుడిని. ఈరోజు నేను మీకు ఎలా సహాయం చేయగలను?",
        Intent.SOIL: "మీ ప్రాంతం మరియు పంట రకం ఆధారంగా, నేను మట్టి pH మరియు పోషక స్థాయిలను పరీక్షించమని సిఫార్సు చేస్తున్నాను.",
        Intent.PEST: "మీ ప్రాంతంలో కీటకాల ప్రమాదాలను గుర్తించాను. అఫిడ్స్ మరియు గొంగళి పురుగుల కోసం చూడండి.",
        Intent.CROP: "మీ పంటలు మంచి పెరుగుదల నమూనాలను చూపిస్తున్నాయి. ప్రస్తుత నీటిపారుదల షెడ్యూల్‌ను కొనసాగించండి.",
        Intent.WEATHER: "వాతావరణ సూచన ఈ వారం వ్యవసాయానికి అనుకూలమైన పరిస్థితులను చూపిస్తుంది.",
        Intent.DEFAULT: "వ్యవసాయం గురించి మీ ఆందోళనను నేను అర్థం చేసుకున్నాను. మీ పరిస్థితికి ఉత్తమ వ్యవసాయ పద్ధతులతో నేను మీకు సహాయం చేస్తాను.",
    },
    Language.TA: {
        Intent.GREETING: "வணக்கம்! நான் கிருஷி மித்ரா, உங்கள் விவசாய உதவியாளர். இன்று நான் உங்களுக்கு எப்படி உதவ முடியும்?",
        Intent.SOIL: "உங்கள் இடம் மற்றும் பயிர் வகையின் அடிப்படையில், மண்ணின் pH மற்றும் ஊட்டச்சத்து அளவுகளை பரிசோதிக்க பரிந்துரைக்கிறேன்.",
        Intent.PEST: "உங்கள் பகுதியில் பூச்சி அபாயங்கள் கண்டறியப்பட்டுள்ளன. அசுவினி மற்றும் கம்பளிப்பூச்சிகளை சரிபார்க்கவும்.",
        Intent.CROP: "உங்கள் பயிர்கள் நல்ல வளர்ச்சியைக் காட்டுகின்றன. தற்போதைய நீர்ப்பாசன அட்டவணையைத் தொடரவும்.",
        Intent.WEATHER: "இந்த வாரம் விவசாயத்திற்கு சாதகமான வானிலை நிலவுகிறது.",
        Intent.DEFAULT: "விவசாயம் பற்றிய உங்கள் கவலையை நான் புரிந்துகொள்கிறேன். உங்கள் சூழ்நிலைக்கு சிறந்த விவசாய முறைகளில் உதவுகிறேன்.",
    },
}

# Checked in this order; first match wins
INTENT_KEYWORDS: list[tuple[Intent, tuple[str, ...]]] = [
    (Intent.SOIL, ("soil", "मिट्टी", "మట్టి", "నేల", "மண்")),
    (Intent.PEST, ("pest", "कीट", "కీటకాలు", "పురుగు", "பூச்சி")),
    (Intent.CROP, ("crop", "फसल", "పంట", "பயிர்")),
    (Intent.WEATHER, ("weather", "मौसम", "వాతావరణం", "வானிலை")),
    (Intent.GREETING, ("hello", "hi", "namaste", "नमस्ते", "నమస్కారం", "வணக்கம்")),
]


def _contains_keyword(text: str, keyword: str) -> bool:
    # Latin keywords must match whole words ("hi" is not in "this")
    if keyword.isascii():
        return re.search(rf"\b{re.escape(keyword)}\b", text) is not None
    return keyword in text


def detect_intent(message: str) -> Intent:
    """Pick the chat intent for a free-text message."""
    text = message.lower()
    for intent, keywords in INTENT_KEYWORDS:
        if any(_contains_keyword(text, keyword) for keyword in keywords):
            return intent
    return Intent.DEFAULT


def format_response(category: "Intent | str", language_code: "str | Language | None") -> str:
    """Localized reply for an intent.

    Unknown intents are answered with the default reply; unsupported
    languages with English.
    """
    language = resolve_language(language_code)
    try:
        intent = Intent(category)
    except ValueError:
        intent = Intent.DEFAULT
    return _lookup(RESPONSES, language, intent)


CATEGORY_LABELS: dict[Language, dict[SoilCategory, str]] = {
    Language.EN: {category: category.label for category in SoilCategory},
    Language.HI: {
        SoilCategory.PH: "मिट्टी का pH",
        SoilCategory.MOISTURE: "मिट्टी की नमी",
        SoilCategory.NITROGEN: "नाइट्रोजन स्तर",
    },
    Language.TE: {
        SoilCategory.PH: "నేల pH",
        SoilCategory.MOISTURE: "నేల తేమ",
        SoilCategory.NITROGEN: "నత్రజని స్థాయి",
    },
    Language.TA: {
        SoilCategory.PH: "மண் pH",
        SoilCategory.MOISTURE: "மண் ஈரப்பதம்",
        SoilCategory.NITROGEN: "நைட்ரஜன் அளவு",
    },
}

FINDING_MESSAGES: dict[Language, dict[tuple[SoilCategory, FindingStatus], str]] = {
    Language.EN: {key: text[0] for key, text in FINDING_TEXT.items()},
    Language.HI: {
        (SoilCategory.PH, FindingStatus.CRITICAL): "मिट्टी का pH बहुत कम है",
        (SoilCategory.PH, FindingStatus.WARNING): "मिट्टी का pH बहुत अधिक है",
        (SoilCategory.PH, FindingStatus.GOOD): "मिट्टी का pH उचित है",
        (SoilCategory.MOISTURE, FindingStatus.CRITICAL): "मिट्टी में नमी बहुत कम है",
        (SoilCategory.MOISTURE, FindingStatus.WARNING): "मिट्टी में नमी बहुत अधिक है",
        (SoilCategory.MOISTURE, FindingStatus.GOOD): "मिट्टी में नमी उचित है",
        (SoilCategory.NITROGEN, FindingStatus.CRITICAL): "नाइट्रोजन स्तर बहुत कम है",
        (SoilCategory.NITROGEN, FindingStatus.WARNING): "नाइट्रोजन स्तर बहुत अधिक है",
        (SoilCategory.NITROGEN, FindingStatus.GOOD): "नाइट्रोजन स्तर पर्याप्त है",
    },
    Language.TE: {
        (SoilCategory.PH, FindingStatus.CRITICAL): "నేల pH చాలా తక్కువగా ఉంది",
        (SoilCategory.PH, FindingStatus.WARNING): "నేల pH చాలా ఎక్కువగా ఉంది",
        (SoilCategory.PH, FindingStatus.GOOD): "నేల pH సరైన స్థాయిలో ఉంది",
        (SoilCategory.MOISTURE, FindingStatus.CRITICAL): "నేలలో తేమ చాలా తక్కువగా ఉంది",
        (SoilCategory.MOISTURE, FindingStatus.WARNING): "నేలలో తేమ చాలా ఎక్కువగా ఉంది",
        (SoilCategory.MOISTURE, FindingStatus.GOOD): "నేలలో తేమ సరైన స్థాయిలో ఉంది",
        (SoilCategory.NITROGEN, FindingStatus.CRITICAL): "నత్రజని స్థాయి చాలా తక్కువగా ఉంది",
        (SoilCategory.NITROGEN, FindingStatus.WARNING): "నత్రజని స్థాయి చాలా ఎక్కువగా ఉంది",
        (SoilCategory.NITROGEN, FindingStatus.GOOD): "నత్రజని స్థాయి సరిపోతుంది",
    },
    Language.TA: {
        (SoilCategory.PH, FindingStatus.CRITICAL): "மண்ணின் pH மிகவும் குறைவாக உள்ளது",
        (SoilCategory.PH, FindingStatus.WARNING): "மண்ணின் pH மிகவும் அதிகமாக உள்ளது",
        (SoilCategory.PH, FindingStatus.GOOD): "மண்ணின் pH சரியான அளவில் உள்ளது",
        (SoilCategory.MOISTURE, FindingStatus.CRITICAL): "மண்ணின் ஈரப்பதம் மிகவும் குறைவாக உள்ளது",
        (SoilCategory.MOISTURE, FindingStatus.WARNING): "மண்ணின் ஈரப்பதம் மிகவும் அதிகமாக உள்ளது",
        (SoilCategory.MOISTURE, FindingStatus.GOOD): "மண்ணின் ஈரப்பதம் சரியான அளவில் உள்ளது",
        (SoilCategory.NITROGEN, FindingStatus.CRITICAL): "நைட்ரஜன் அளவு மிகவும் குறைவாக உள்ளது",
        (SoilCategory.NITROGEN, FindingStatus.WARNING): "நைட்ரஜன் அளவு மிகவும் அதிகமாக உள்ளது",
        (SoilCategory.NITROGEN, FindingStatus.GOOD): "நைட்ரஜன் அளவு போதுமானது",
    },
}

# Telugu and Tamil recommendations are not translated yet and use English
FINDING_RECOMMENDATIONS: dict[Language, dict[tuple[SoilCategory, FindingStatus], str]] = {
    Language.EN: {key: text[1] for key, text in FINDING_TEXT.items()},
    Language.HI: {
        (SoilCategory.PH, FindingStatus.CRITICAL): "pH को 6.0-7.0 तक बढ़ाने के लिए चूना डालें",
        (SoilCategory.PH, FindingStatus.WARNING): "pH कम करने के लिए गंधक या जैविक पदार्थ डालें",
        (SoilCategory.PH, FindingStatus.GOOD): "वर्तमान pH स्तर बनाए रखें",
        (SoilCategory.MOISTURE, FindingStatus.CRITICAL): "सिंचाई की आवृत्ति बढ़ाएं",
        (SoilCategory.MOISTURE, FindingStatus.WARNING): "सिंचाई कम करें और जल निकासी सुधारें",
        (SoilCategory.MOISTURE, FindingStatus.GOOD): "वर्तमान सिंचाई कार्यक्रम जारी रखें",
        (SoilCategory.NITROGEN, FindingStatus.CRITICAL): "नाइट्रोजन उर्वरक (यूरिया या अमोनियम नाइट्रेट) डालें",
        (SoilCategory.NITROGEN, FindingStatus.WARNING): "लीचिंग रोकने के लिए नाइट्रोजन का प्रयोग कम करें",
        (SoilCategory.NITROGEN, FindingStatus.GOOD): "वर्तमान उर्वरक कार्यक्रम जारी रखें",
    },
    Language.TE: {},
    Language.TA: {},
}

UI_TEXT: dict[Language, dict[str, str]] = {
    Language.EN: {
        "evaluation_title": "Krishi Mitra Evaluation Results",
        "recommendation": "Recommendation",
    },
    Language.HI: {
        "evaluation_title": "कृषि मित्र मूल्यांकन परिणाम",
        "recommendation": "सुझाव",
    },
    Language.TE: {
        "evaluation_title": "కృషి మిత్ర మూల్యాంకన ఫలితాలు",
        "recommendation": "సిఫార్సు",
    },
    Language.TA: {
        "evaluation_title": "கிருஷி மித்ரா மதிப்பீட்டு முடிவுகள்",
        "recommendation": "பரிந்துரை",
    },
}


def ui_text(key: str, language: "str | Language | None") -> str:
    """Localized interface string."""
    return _lookup(UI_TEXT, resolve_language(language), key)


def category_label(category: SoilCategory, language: "str | Language | None") -> str:
    """Localized label for a soil category."""
    return _lookup(CATEGORY_LABELS, resolve_language(language), category)


def localize_finding(finding: Finding, language: "str | Language | None") -> Finding:
    """Copy of a finding with message and recommendation in ``language``."""
    resolved = resolve_language(language)
    key = (finding.category, finding.status)
    return finding.model_copy(
        update={
            "message": _lookup(FINDING_MESSAGES, resolved, key),
            "recommendation": _lookup(FINDING_RECOMMENDATIONS, resolved, key),
        }
    )
