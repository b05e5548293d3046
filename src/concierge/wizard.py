"""Wizard state machine for the conversational lead form.

Steps are ordinals: 0 is the hero screen, 1..N are the configured questions and
N+1 is the contact form. `submitted` is a terminal flag on top of the step and is
only set once the server confirmed the lead with `ok: true`.

`WizardMachine.transition(state, action)` is pure. An action the current state
does not permit returns the *same* state object, so callers can detect a rejected
action with an identity check.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple, Union

from src.concierge.validation import lead_valid
from src.integrations.contracts.interfaces import Answers, LeadContact
from src.utils.config_loader import QuestionConfig

HERO_STEP = 0
LEAD_FIELDS = ("name", "email", "phone")


class SubmissionPhase(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


@dataclass(frozen=True)
class WizardState:
    step: int = HERO_STEP
    answers: Dict[str, str] = field(default_factory=dict)
    lead: LeadContact = field(default_factory=LeadContact)
    submission_phase: SubmissionPhase = SubmissionPhase.IDLE
    submitted: bool = False
    last_error: Optional[str] = None

    @property
    def submitting(self) -> bool:
        return self.submission_phase == SubmissionPhase.SUBMITTING

    def answers_snapshot(self) -> Answers:
        return dict(self.answers)


# --- Actions -----------------------------------------------------------------


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class SetAnswer:
    question_id: str
    value: str


@dataclass(frozen=True)
class SetLeadField:
    field: str
    value: str


@dataclass(frozen=True)
class SubmitRequested:
    pass


@dataclass(frozen=True)
class SubmitSucceeded:
    pass


@dataclass(frozen=True)
class SubmitFailed:
    error: Optional[str] = None


Action = Union[Start, Advance, Back, SetAnswer, SetLeadField, SubmitRequested, SubmitSucceeded, SubmitFailed]


def prompt_hint(question: QuestionConfig) -> str:
    return "(Required)" if question.required else "(Optional)"


class WizardMachine:
    """Transition rules for a fixed question list."""

    def __init__(self, questions: Sequence[QuestionConfig]):
        if not questions:
            raise ValueError("WizardMachine needs at least one question")
        self.questions: Tuple[QuestionConfig, ...] = tuple(questions)
        self._by_id = {q.id: q for q in self.questions}

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def contact_step(self) -> int:
        return self.question_count + 1

    def initial_state(self) -> WizardState:
        return WizardState()

    # --- Derived values ------------------------------------------------------

    def progress(self, state: WizardState) -> int:
        total = self.contact_step
        ratio = min(state.step, total) / total * 100
        # half-up, not banker's rounding
        return int(math.floor(ratio + 0.5))

    def is_hero(self, state: WizardState) -> bool:
        return state.step == HERO_STEP

    def is_question(self, state: WizardState) -> bool:
        return 1 <= state.step <= self.question_count

    def is_contact_form(self, state: WizardState) -> bool:
        return state.step == self.contact_step

    def current_question(self, state: WizardState) -> Optional[QuestionConfig]:
        if not self.is_question(state):
            return None
        return self.questions[state.step - 1]

    def can_advance(self, state: WizardState) -> bool:
        question = self.current_question(state)
        if question is None or state.submitted:
            return False
        if not question.required:
            return True
        value = state.answers.get(question.id)
        return isinstance(value, str) and len(value) > 0

    def can_submit(self, state: WizardState) -> bool:
        return (
            self.is_contact_form(state)
            and not state.submitted
            and not state.submitting
            and lead_valid(state.lead)
        )

    # --- Transition ----------------------------------------------------------

    def transition(self, state: WizardState, action: Action) -> WizardState:
        if state.submitted:
            return state

        if isinstance(action, Start):
            if not self.is_hero(state):
                return state
            return replace(state, step=1)

        if isinstance(action, Advance):
            if not self.can_advance(state):
                return state
            return replace(state, step=state.step + 1)

        if isinstance(action, Back):
            if self.is_hero(state):
                return state
            return replace(state, step=state.step - 1)

        if isinstance(action, SetAnswer):
            if action.question_id not in self._by_id or not isinstance(action.value, str):
                return state
            answers = dict(state.answers)
            answers[action.question_id] = action.value
            return replace(state, answers=answers)

        if isinstance(action, SetLeadField):
            if action.field not in LEAD_FIELDS or not isinstance(action.value, str):
                return state
            return replace(state, lead=replace(state.lead, **{action.field: action.value}))

        if isinstance(action, SubmitRequested):
            if not self.can_submit(state):
                return state
            return replace(state, submission_phase=SubmissionPhase.SUBMITTING, last_error=None)

        if isinstance(action, SubmitSucceeded):
            if not state.submitting:
                return state
            return replace(state, submission_phase=SubmissionPhase.IDLE, submitted=True, last_error=None)

        if isinstance(action, SubmitFailed):
            if not state.submitting:
                return state
            return replace(state, submission_phase=SubmissionPhase.IDLE, last_error=action.error)

        raise TypeError(f"Unknown wizard action: {action!r}")
