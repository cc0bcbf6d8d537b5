import random

from card_flasher.domain.study.dto import StudyCard
from card_flasher.domain.study.entities import StudyMode, StudySession


def make_session(**kwargs) -> StudySession:
    cards = [
        StudyCard(id=1, phrase="cat", translation="кошка", group_ids=(10,)),
        StudyCard(id=2, phrase="dog", translation="собака"),
        StudyCard(id=3, phrase="bird", translation="птица", group_ids=(10,)),
    ]
    return StudySession(cards=cards, rng=random.Random(1), **kwargs)


def test_defaults():
    session = make_session()

    assert session.mode == StudyMode.random
    assert session.group_filter == "allGroups"
    assert session.active_card.id == 1
    assert session.revealed is False


def test_set_mode_accepts_strings():
    session = make_session()
    session.set_mode("writing")
    assert session.mode == StudyMode.writing


def test_next_random_moves_and_hides_answer():
    session = make_session()
    session.toggle_reveal()
    assert session.revealed is True

    session.next_random()

    assert session.index != 0
    assert session.revealed is False


def test_set_group_filter_resets_progress():
    session = make_session(index=2, writing_index=1, writing_input="do", writing_checked=True)

    session.set_group_filter("10")

    assert session.index == 0
    assert session.writing_index == 0
    assert session.writing_input == ""
    assert session.writing_checked is False
    assert [card.id for card in session.study_cards] == [1, 3]


def test_empty_filter_has_no_cards():
    session = make_session()
    session.set_group_filter("99")

    assert session.active_card is None
    assert session.writing_card is None
    assert session.check() is None


def test_writing_check_and_next():
    session = make_session()
    session.set_mode("writing")

    session.type("CAT ")
    result = session.check()
    assert result.correct is True
    assert session.writing_checked is True

    session.next_writing()
    assert session.writing_index != 0
    assert session.writing_input == ""
    assert session.writing_checked is False


def test_typing_clears_checked_state():
    session = make_session()
    session.type("ca")
    session.check()

    session.type("cat")
    assert session.writing_checked is False


def test_submit_checks_then_moves_on():
    session = make_session()
    session.type("cot")

    result = session.submit()
    assert result.correct is False
    assert [s.tone.value for s in result.segments] == ["good", "bad", "good"]

    assert session.submit() is None
    assert session.writing_index != 0
    assert session.writing_checked is False


def test_toggle_selection():
    session = make_session()
    session.toggle_selection(2)
    session.toggle_selection(3)
    session.toggle_selection(2)

    assert session.selected_ids == [3]
