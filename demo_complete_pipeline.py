#!/usr/bin/env python3
"""
Complete Pipeline Demo: Author → Publish → Take → Statistics

Shows the full workflow:
1. Build a draft survey and validate it
2. Publish it and generate a share link
3. Answer it page by page as a respondent
4. Aggregate the stored responses
"""

from survey_engine.collector import Phase, advance, answer, current_questions, progress, start_response, submit
from survey_engine.config import load_settings
from survey_engine.examples import build_example_assessment, build_sample_surveys
from survey_engine.logging_setup import configure_logging
from survey_engine.model import QuestionType
from survey_engine.statistics import compute_statistics, format_duration, option_distribution
from survey_engine.storage import FileStore, LocalGateway, MemoryStore
from survey_engine.validator import publish, validate

CANNED_ANSWERS = {
    QuestionType.TEXT: "Page objects plus API fixtures",
    QuestionType.RATING: 4,
}


def main():
    settings = load_settings()
    configure_logging(settings.log_level)
    store = FileStore(settings.data_dir) if settings.data_dir else MemoryStore()
    gateway = LocalGateway(store, base_url=settings.base_url)
    gateway.seed(build_sample_surveys())

    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: Author → Publish → Take → Statistics")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Author
    # =========================================================================
    print("\n1. AUTHORING...")
    survey = build_example_assessment()
    report = validate(survey)
    print(f"   ✓ Sections: {len(survey.sections)}  Pages: {len(survey.pages)}  Questions: {len(survey.questions)}")
    print(f"   ✓ Valid: {report.is_valid}")

    # =========================================================================
    # STEP 2: Publish and share
    # =========================================================================
    print("\n2. PUBLISHING...")
    publish(survey)
    gateway.put_survey(survey)
    print(f"   ✓ Share link: {gateway.generate_share_link(survey.id)}")

    # =========================================================================
    # STEP 3: Take the survey
    # =========================================================================
    print("\n3. TAKING...")
    state = start_response(gateway.get_survey(survey.id))
    while state.phase == Phase.ANSWERING:
        print(f"   Page {state.page_index + 1}/{state.page_count} ({progress(state)}%)")
        for question in current_questions(state):
            if question.is_choice:
                value = question.options[0] if question.type == QuestionType.SINGLE_CHOICE else question.options[:2]
            else:
                value = CANNED_ANSWERS[question.type]
            state = answer(state, question.id, value)
        state = advance(state)

    state = submit(state, client_info="demo")
    gateway.put_response(state.response)
    print(f"   ✓ Submitted response {state.response.id}")

    # =========================================================================
    # STEP 4: Statistics
    # =========================================================================
    print("\n4. STATISTICS:")
    print("-" * 80)
    stored = gateway.get_survey(survey.id)
    stats = compute_statistics(stored, gateway.list_responses(survey.id))
    print(f"   Responses: {stats.total_responses} (completion count {stored.completion_count})")
    print(f"   Average time: {format_duration(stats.average_completion_time)}")
    for question in stored.questions:
        qstats = stats.question_stats[question.id]
        print(f"   - {question.prompt}")
        if question.is_choice:
            for option, count, pct in option_distribution(question, qstats):
                print(f"       {option}: {count} ({pct}%)")
        elif question.type == QuestionType.RATING:
            print(f"       average {qstats.average_rating:.1f} from {qstats.response_count} responses")
        else:
            print(f"       {len(qstats.text_responses)} text response(s)")

    print("\n" + "=" * 80)
    print(f"Surveys in store: {len(gateway.list_surveys())}")
    print("=" * 80)


if __name__ == "__main__":
    main()
