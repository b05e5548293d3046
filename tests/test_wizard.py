import pytest

from src.concierge.wizard import (
    Advance,
    Back,
    SetAnswer,
    SetLeadField,
    Start,
    SubmissionPhase,
    SubmitFailed,
    SubmitRequested,
    SubmitSucceeded,
    WizardMachine,
    WizardState,
    prompt_hint,
)
from src.utils.config_loader import QuestionConfig


def _walk_to(machine, step, answer_all=True):
    state = machine.transition(machine.initial_state(), Start())
    while state.step < step:
        q = machine.current_question(state)
        if answer_all and q is not None:
            state = machine.transition(state, SetAnswer(q.id, q.options[0]))
        state = machine.transition(state, Advance())
    return state


def _contact_state(machine, lead):
    state = _walk_to(machine, machine.contact_step)
    for field, value in lead.to_dict().items():
        state = machine.transition(state, SetLeadField(field, value))
    return state


def test_start_leaves_hero(machine):
    state = machine.initial_state()
    assert machine.is_hero(state)
    state = machine.transition(state, Start())
    assert state.step == 1
    assert machine.current_question(state).id == "concern"


def test_start_outside_hero_is_noop(machine):
    state = _walk_to(machine, 2)
    assert machine.transition(state, Start()) is state


def test_advance_blocked_on_required_question_without_answer(machine):
    state = machine.transition(machine.initial_state(), Start())
    assert machine.can_advance(state) is False
    assert machine.transition(state, Advance()) is state

    state = machine.transition(state, SetAnswer("concern", ""))
    assert machine.transition(state, Advance()) is state


def test_advance_after_answer(machine):
    state = machine.transition(machine.initial_state(), Start())
    state = machine.transition(state, SetAnswer("concern", "Acne"))
    state = machine.transition(state, Advance())
    assert state.step == 2


def test_optional_question_advances_unanswered(machine):
    state = _walk_to(machine, 4)
    question = machine.current_question(state)
    assert question.id == "heardFrom" and question.required is False
    assert "heardFrom" not in state.answers
    state = machine.transition(state, Advance())
    assert machine.is_contact_form(state)


def test_advance_gate_holds_for_every_question(machine):
    for step in range(1, machine.question_count + 1):
        state = WizardState(step=step)
        q = machine.current_question(state)
        advanced = machine.transition(state, Advance())
        if q.required:
            assert advanced is state
        else:
            assert advanced.step == step + 1

        answered = machine.transition(state, SetAnswer(q.id, q.options[0]))
        assert machine.transition(answered, Advance()).step == step + 1


def test_advance_on_contact_form_is_noop(machine):
    state = _walk_to(machine, machine.contact_step)
    assert machine.transition(state, Advance()) is state


def test_back_then_advance_returns_to_same_step_and_keeps_answers(machine):
    for step in range(2, machine.contact_step + 1):
        state = _walk_to(machine, step)
        answers_before = dict(state.answers)
        back = machine.transition(state, Back())
        assert back.step == step - 1
        again = machine.transition(back, Advance())
        assert again.step == step
        assert again.answers == answers_before


def test_back_from_first_question_returns_to_hero(machine):
    state = machine.transition(machine.initial_state(), Start())
    state = machine.transition(state, Back())
    assert machine.is_hero(state)
    assert machine.transition(state, Back()) is state


def test_back_from_contact_form_goes_to_last_question(machine):
    state = _walk_to(machine, machine.contact_step)
    state = machine.transition(state, Back())
    assert state.step == machine.question_count


def test_set_answer_only_touches_its_key(machine):
    state = _walk_to(machine, 3)
    before = dict(state.answers)
    updated = machine.transition(state, SetAnswer("timeline", "Later"))
    assert updated.step == state.step
    assert updated.answers == {**before, "timeline": "Later"}
    # previous state untouched
    assert state.answers == before


def test_set_answer_rejects_unknown_question(machine):
    state = _walk_to(machine, 1)
    assert machine.transition(state, SetAnswer("budget", "High")) is state


def test_set_lead_field_rejects_unknown_field(machine):
    state = _walk_to(machine, machine.contact_step)
    assert machine.transition(state, SetLeadField("company", "ACME")) is state
    state = machine.transition(state, SetLeadField("name", "Jane"))
    assert state.lead.name == "Jane"


def test_progress_values(machine):
    assert machine.contact_step == 5
    expected = [0, 20, 40, 60, 80, 100]
    state = machine.initial_state()
    assert machine.progress(state) == 0
    for step, value in enumerate(expected):
        assert machine.progress(WizardState(step=step)) == value


def test_progress_rounds_half_up():
    questions = [QuestionConfig(id=f"q{i}", label=f"Q{i}", options=("a",)) for i in range(7)]
    m = WizardMachine(questions)
    # 1/8 * 100 == 12.5
    assert m.progress(WizardState(step=1)) == 13


def test_submit_requires_valid_lead(machine):
    state = _walk_to(machine, machine.contact_step)
    state = machine.transition(state, SetLeadField("name", "J"))
    assert machine.can_submit(state) is False
    assert machine.transition(state, SubmitRequested()) is state


def test_submit_success_path(machine, valid_lead):
    state = _contact_state(machine, valid_lead)
    state = machine.transition(state, SubmitRequested())
    assert state.submission_phase == SubmissionPhase.SUBMITTING
    assert machine.transition(state, SubmitRequested()) is state

    state = machine.transition(state, SubmitSucceeded())
    assert state.submitted is True
    assert state.submission_phase == SubmissionPhase.IDLE
    assert machine.progress(state) == 100


def test_success_is_terminal(machine, valid_lead):
    state = _contact_state(machine, valid_lead)
    state = machine.transition(machine.transition(state, SubmitRequested()), SubmitSucceeded())
    for action in (Back(), Advance(), Start(), SetAnswer("concern", "Aging"), SubmitRequested()):
        assert machine.transition(state, action) is state


def test_submit_failure_stays_on_contact_form(machine, valid_lead):
    state = _contact_state(machine, valid_lead)
    state = machine.transition(state, SubmitRequested())
    state = machine.transition(state, SubmitFailed(error="quota exceeded"))
    assert machine.is_contact_form(state)
    assert state.submitted is False
    assert state.submission_phase == SubmissionPhase.IDLE
    assert state.last_error == "quota exceeded"
    # retry is allowed
    assert machine.transition(state, SubmitRequested()).submitting


def test_outcomes_ignored_when_not_submitting(machine, valid_lead):
    state = _contact_state(machine, valid_lead)
    assert machine.transition(state, SubmitSucceeded()) is state
    assert machine.transition(state, SubmitFailed("x")) is state


def test_unknown_action_raises(machine):
    with pytest.raises(TypeError):
        machine.transition(machine.initial_state(), object())


def test_prompt_hint(landing_config):
    required, optional = landing_config.questions[0], landing_config.questions[-1]
    assert prompt_hint(required) == "(Required)"
    assert prompt_hint(optional) == "(Optional)"
