import pytest

from shared.constants import Collections, Environment, EventTypes


def test_progress_event_types():
    assert EventTypes.progress(25) == "audio.progress.25"
    assert EventTypes.progress(75) == "audio.progress.75"


def test_progress_rejects_unknown_milestone():
    with pytest.raises(ValueError):
        EventTypes.progress(90)


def test_all_event_types_are_unique():
    types = EventTypes.all_event_types()

    assert len(types) == len(set(types)) == 12
    assert "audio.abandoned" in types
    assert "audio.progress.50" in types


def test_collection_paths():
    assert Collections.project_path("analytics", "p1") == "projects/p1/analytics"
    assert Collections.project_path("segments", "p1") == "projects/p1/segments"
    assert (
        Collections.page_segments_path("p1", "page-9")
        == "projects/p1/pages/page-9/segments"
    )


def test_collection_path_unknown_subcollection():
    with pytest.raises(ValueError):
        Collections.project_path("users", "p1")


@pytest.mark.parametrize(
    "env,expected",
    [
        ("production", False),
        ("PRODUCTION", False),
        ("development", True),
        (" testing ", True),
        ("unknown", False),
    ],
)
def test_docs_exposure(env, expected):
    assert Environment.exposes_docs(env) is expected


def test_environment_parse():
    assert Environment.parse("Staging") is Environment.STAGING
    assert Environment.parse("qa") is Environment.PRODUCTION
