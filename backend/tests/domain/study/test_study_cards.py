import random

from card_flasher.domain.study.cards import (
    filter_cards_by_list_query,
    filter_cards_by_study_group,
    mask_phrase_in_example,
    random_next_index,
    split_filtered_cards,
)
from card_flasher.domain.study.dto import StudyCard, StudyGroup

CARDS = [
    StudyCard(id=1, phrase="apple", translation="яблоко", group_ids=(10,)),
    StudyCard(id=2, phrase="run", translation="бежать", group_ids=(10, 20)),
    StudyCard(id=3, phrase="table", translation="стол"),
]
GROUPS = [StudyGroup(id=10, name="Food"), StudyGroup(id=20, name="Verbs"), StudyGroup(id=30, name="Empty")]


def ids(cards):
    return [card.id for card in cards]


def test_random_next_index_differs():
    rng = random.Random(7)
    for current in range(5):
        assert random_next_index(current, 5, rng) != current


def test_random_next_index_single_card():
    assert random_next_index(0, 1) == 0
    assert random_next_index(0, 0) == 0


def test_filter_by_study_group():
    assert ids(filter_cards_by_study_group(CARDS, "allGroups")) == [1, 2, 3]
    assert ids(filter_cards_by_study_group(CARDS, "unsorted")) == [3]
    assert ids(filter_cards_by_study_group(CARDS, "20")) == [2]
    assert ids(filter_cards_by_study_group(CARDS, 10)) == [1, 2]
    assert filter_cards_by_study_group(CARDS, "nonsense") == []


def test_filter_by_list_query():
    assert ids(filter_cards_by_list_query(CARDS, "  ")) == [1, 2, 3]
    assert ids(filter_cards_by_list_query(CARDS, "APP")) == [1]
    assert ids(filter_cards_by_list_query(CARDS, "стол")) == [3]


def test_split_filtered_cards():
    split = split_filtered_cards(CARDS, GROUPS)

    assert ids(split.unsorted) == [3]
    assert [(bucket.group.name, ids(bucket.cards)) for bucket in split.grouped] == [
        ("Food", [1, 2]),
        ("Verbs", [2]),
    ]


def test_mask_whole_phrase():
    assert mask_phrase_in_example("I ran out of milk. Run Out Of time.", "run out of") == (
        "I ran ______ ______ milk. ______ time."
    )


def test_mask_inflections():
    assert mask_phrase_in_example("She studies every day.", "study") == "She ______ every day."
    assert mask_phrase_in_example("We used it and are using it.", "use") == "We ______ it and are ______ it."
    assert mask_phrase_in_example("He walks, walked and is walking.", "walk") == (
        "He ______, ______ and is ______."
    )


def test_mask_keeps_unrelated_words():
    assert mask_phrase_in_example("A walker passed by.", "walk") == "A walker passed by."


def test_mask_blank_phrase():
    assert mask_phrase_in_example("Nothing changes.", "  ") == "Nothing changes."
