"""
Тесты машины состояний мастера создания тикета.
"""

from core.conversation import (
    WizardStep,
    advance,
    prompt_for,
    start_conversation,
)
from templates import message_templates as tpl


def _state():
    return start_conversation("994501234567", 994501234567, "Aysel")


class TestWizardTransitions:
    """Переходы по шагам мастера."""

    def test_starts_at_corpus(self):
        state = _state()
        assert state.step == WizardStep.AWAIT_CORPUS
        assert prompt_for(state) == tpl.WELCOME

    def test_full_flow_with_catalog_problem(self):
        t1 = advance(_state(), "1")
        assert t1.state.step == WizardStep.AWAIT_ROOM
        assert t1.reply == tpl.ROOM_PROMPT

        t2 = advance(t1.state, "205")
        assert t2.state.step == WizardStep.AWAIT_PROBLEM_CHOICE
        assert t2.reply == tpl.problem_list_message()

        t3 = advance(t2.state, "3")
        assert t3.completed
        assert t3.state is None
        assert t3.draft.corpus == "1"
        assert t3.draft.room == "205"
        assert t3.draft.problem == "🧾 Printer işləmir"
        assert t3.draft.display_name == "Aysel"

    def test_custom_problem(self):
        state = advance(advance(_state(), "2").state, "1205").state
        t = advance(state, "16")
        assert t.state.step == WizardStep.AWAIT_CUSTOM_PROBLEM
        assert t.reply == tpl.CUSTOM_PROBLEM_PROMPT

        done = advance(t.state, "  Kondisioner işləmir ")
        assert done.completed
        assert done.draft.problem == "Kondisioner işləmir"

    def test_room_out_of_range_does_not_advance(self):
        state = advance(_state(), "1").state
        t = advance(state, "1400")
        assert t.rejected
        assert t.state.step == WizardStep.AWAIT_ROOM
        assert t.state.room is None
        assert t.reply == tpl.ROOM_OUT_OF_RANGE["1"]

    def test_invalid_problem_choice(self):
        state = advance(advance(_state(), "1").state, "205").state
        t = advance(state, "17")
        assert t.rejected
        assert t.state.step == WizardStep.AWAIT_PROBLEM_CHOICE
        assert t.reply == tpl.PROBLEM_CHOICE_INVALID

    def test_empty_custom_problem_rejected(self):
        state = advance(advance(advance(_state(), "1").state, "205").state, "16").state
        t = advance(state, "   ")
        assert t.rejected
        assert t.reply == tpl.CUSTOM_PROBLEM_EMPTY

    def test_attempts_counted(self):
        state = _state()
        state = advance(state, "9").state
        state = advance(state, "1").state
        assert state.attempts == 2

    def test_advance_does_not_mutate_input(self):
        state = _state()
        advance(state, "1")
        assert state.step == WizardStep.AWAIT_CORPUS
        assert state.attempts == 0

    def test_prompt_for_each_step(self):
        state = advance(_state(), "1").state
        assert prompt_for(state) == tpl.ROOM_PROMPT
        state = advance(state, "205").state
        assert prompt_for(state) == tpl.problem_list_message()
