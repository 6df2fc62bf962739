"""Tests for CategoryClassifier."""

import pytest

from support_triage.config.constants import Category, ResultSource
from support_triage.config.keywords import REASONING_TEMPLATES, CategoryDisambiguation, KeywordTables
from support_triage.infrastructure.llm.errors import InferenceCancelledError
from support_triage.services.categorization import CategoryClassifier
from support_triage.services.categorization.classifier import coerce_confidence
from support_triage.utils.cancellation import CancellationToken
from support_triage.utils.selector import FirstTemplateSelector, TemplateSelector
from tests.fakes import auth_error, completion, unavailable


def _replying(text):
    async def responder(kwargs):
        return completion(text)

    return responder


@pytest.fixture
def make_classifier(make_call_client, settings):
    def _make(responder, tables=None):
        call_client, fake = make_call_client(responder)
        kwargs = {"selector": FirstTemplateSelector()}
        if tables is not None:
            kwargs["tables"] = tables
        return CategoryClassifier(settings, call_client, **kwargs), fake

    return _make


# ==========================================
#  Model replies
# ==========================================


@pytest.mark.asyncio
async def test_json_reply_is_used(make_classifier):
    reply = '{"category": "Technical Problem", "reasoning": "App crashes on launch", "confidence": 0.92}'
    classifier, fake = make_classifier(_replying(reply))

    result = await classifier.categorize("The app crashes on launch", CancellationToken())

    assert result.category is Category.TECHNICAL_PROBLEM
    assert result.reasoning == "App crashes on launch"
    assert result.confidence == 0.92
    assert result.source is ResultSource.AI
    assert len(fake.completions.calls) == 1


@pytest.mark.asyncio
async def test_request_uses_categorization_settings(make_classifier, settings):
    classifier, fake = make_classifier(_replying('{"category": "Billing Issue"}'))

    await classifier.categorize("I was charged twice", CancellationToken())

    call = fake.completions.calls[0]
    assert call["model"] == settings.categorization_model
    assert call["temperature"] == settings.categorization_temperature
    assert call["max_tokens"] == settings.categorization_max_tokens
    assert call["messages"][0]["role"] == "system"
    assert "I was charged twice" in call["messages"][1]["content"]


@pytest.mark.asyncio
async def test_category_match_is_case_insensitive(make_classifier):
    classifier, _ = make_classifier(_replying('{"category": "  billing issue ", "reasoning": "r"}'))

    result = await classifier.categorize("Refund please", CancellationToken())

    assert result.category is Category.BILLING_ISSUE


@pytest.mark.asyncio
async def test_missing_reasoning_defaults_to_raw_reply(make_classifier):
    reply = 'Answer: {"category": "Feature Request"}'
    classifier, _ = make_classifier(_replying(reply))

    result = await classifier.categorize("Please add dark mode", CancellationToken())

    assert result.category is Category.FEATURE_REQUEST
    assert result.reasoning == reply
    assert result.confidence == 0.8


@pytest.mark.asyncio
async def test_prose_reply_matches_category_name(make_classifier):
    reply = "This looks like a Feature Request to me."
    classifier, _ = make_classifier(_replying(reply))

    result = await classifier.categorize("Could you add exports?", CancellationToken())

    assert result.category is Category.FEATURE_REQUEST
    assert result.confidence == 0.7
    assert result.reasoning == reply
    assert result.source is ResultSource.AI


@pytest.mark.asyncio
async def test_unknown_category_falls_back_to_rules(make_classifier):
    classifier, _ = make_classifier(_replying('{"category": "Unknown", "confidence": 0.9}'))

    result = await classifier.categorize("I was charged twice", CancellationToken())

    assert result.category is Category.BILLING_ISSUE
    assert result.source is ResultSource.FALLBACK
    assert result.confidence == 0.6


@pytest.mark.asyncio
async def test_unrecognizable_reply_falls_back_to_rules(make_classifier):
    classifier, _ = make_classifier(_replying("I am not sure what this is."))

    result = await classifier.categorize("Can you add a dark mode feature?", CancellationToken())

    assert result.category is Category.FEATURE_REQUEST
    assert result.source is ResultSource.FALLBACK


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, 0.8),
        (0, 0.8),
        (-0.3, 0.8),
        ("high", 0.8),
        (True, 0.8),
        (0.55, 0.55),
        ("0.4", 0.4),
        (1.7, 1.0),
    ],
)
def test_coerce_confidence(value, expected):
    assert coerce_confidence(value) == expected


# ==========================================
#  Failures
# ==========================================


@pytest.mark.asyncio
async def test_unavailable_service_uses_fallback(make_classifier, sleep_recorder):
    classifier, fake = make_classifier(unavailable)

    result = await classifier.categorize("Our payment failed", CancellationToken())

    assert result.category is Category.BILLING_ISSUE
    assert result.source is ResultSource.FALLBACK
    assert len(fake.completions.calls) == 3
    assert sleep_recorder.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_auth_failure_uses_fallback_without_retry(make_classifier, sleep_recorder):
    async def rejected(kwargs):
        raise auth_error()

    classifier, fake = make_classifier(rejected)

    result = await classifier.categorize("The app is broken", CancellationToken())

    assert result.category is Category.TECHNICAL_PROBLEM
    assert result.source is ResultSource.FALLBACK
    assert len(fake.completions.calls) == 1
    assert sleep_recorder.delays == []


@pytest.mark.asyncio
async def test_cancellation_propagates(make_classifier):
    classifier, fake = make_classifier(_replying('{"category": "Billing Issue"}'))
    token = CancellationToken()
    token.cancel()

    with pytest.raises(InferenceCancelledError):
        await classifier.categorize("I was charged twice", token)
    assert fake.completions.calls == []


# ==========================================
#  Rule-based categorization
# ==========================================


def test_payment_failure_is_billing(make_classifier):
    classifier, _ = make_classifier(unavailable)

    scores = classifier.score_categories("Our payment failed and we can't access our account")
    result = classifier.categorize_with_rules("Our payment failed and we can't access our account")

    assert scores[Category.BILLING_ISSUE] == 3
    assert scores[Category.TECHNICAL_PROBLEM] == 1
    assert result.category is Category.BILLING_ISSUE
    assert result.confidence == 0.8


def test_multi_word_keywords_weigh_more(make_classifier):
    classifier, _ = make_classifier(unavailable)

    scores = classifier.score_categories("Please cancel subscription")

    # "cancel subscription" (2) + "subscription" (1)
    assert scores[Category.BILLING_ISSUE] == 3


def test_no_keywords_defaults_to_general_inquiry(make_classifier):
    classifier, _ = make_classifier(unavailable)

    result = classifier.categorize_with_rules("Hello there")

    assert result.category is Category.GENERAL_INQUIRY
    assert result.confidence == 0.4
    assert result.source is ResultSource.FALLBACK


def test_tie_keeps_first_category(make_classifier):
    classifier, _ = make_classifier(unavailable)

    result = classifier.categorize_with_rules("invoice error")

    assert result.category is Category.BILLING_ISSUE
    assert result.confidence == 0.6


def test_fallback_reasoning_comes_from_templates(make_classifier):
    classifier, _ = make_classifier(unavailable)

    result = classifier.categorize_with_rules("Can you add a dark mode feature?")

    assert result.reasoning == REASONING_TEMPLATES[Category.FEATURE_REQUEST][0]


def test_seeded_selector_is_reproducible():
    options = REASONING_TEMPLATES[Category.BILLING_ISSUE]
    first = [TemplateSelector(seed=3).choose(options) for _ in range(3)]

    assert len(set(first)) == 1
    with pytest.raises(ValueError):
        TemplateSelector(seed=3).choose(())


def test_custom_disambiguation_table(make_classifier):
    tables = KeywordTables(
        disambiguations=(
            CategoryDisambiguation(
                anchor="roadmap",
                qualifiers=("crash",),
                category=Category.FEATURE_REQUEST,
                bonus=5,
            ),
        )
    )
    classifier, _ = make_classifier(unavailable, tables=tables)

    result = classifier.categorize_with_rules("roadmap page crash")

    assert result.category is Category.FEATURE_REQUEST
    assert result.confidence == 0.8


@pytest.mark.asyncio
async def test_fallback_category_does_not_depend_on_selector_or_client(make_call_client, settings):
    message = "Our payment failed"
    outcomes = set()

    for seed in range(10):
        seeded = settings.model_copy(update={"reasoning_seed": seed})
        call_client, _ = make_call_client(unavailable)
        classifier = CategoryClassifier(seeded, call_client)
        result = await classifier.categorize(message, CancellationToken())
        assert result.source is ResultSource.FALLBACK
        outcomes.add((result.category, result.confidence))
        direct = classifier.categorize_with_rules(message)
        outcomes.add((direct.category, direct.confidence))

    for selector in (FirstTemplateSelector(), TemplateSelector(seed=99)):
        call_client, _ = make_call_client(unavailable)
        classifier = CategoryClassifier(settings, call_client, selector=selector)
        result = await classifier.categorize(message, CancellationToken())
        outcomes.add((result.category, result.confidence))

    assert len(outcomes) == 1
    assert next(iter(outcomes))[0] is Category.BILLING_ISSUE
