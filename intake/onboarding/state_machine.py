"""Provider onboarding wizard as an explicit finite-state machine.

Phase 1 collects the application (account, business, documents) and ends
with a submission. Phase 2 runs after approval and covers the business
setup steps. Rendering and navigation are left to the caller; this module
only knows which step follows which.

Leaving the documents step is guarded by ``documents_complete``. Callers pass
``IntakeResult.all_required_uploaded`` from the last upload, or
``RequirementEvaluator().evaluate(...).satisfied`` for documents on file.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum


class OnboardingPhase(str, Enum):
    PHASE1 = "phase1"
    PHASE2 = "phase2"
    COMPLETE = "complete"


class Phase1Step(str, Enum):
    SIGNUP = "signup"
    BUSINESS_INFO = "business_info"
    DOCUMENTS = "documents"
    REVIEW = "review"
    SUBMITTED = "submitted"


class Phase2Step(str, Enum):
    WELCOME = "welcome"
    BUSINESS_PROFILE = "business_profile"
    PERSONAL_PROFILE = "personal_profile"
    BUSINESS_HOURS = "business_hours"
    STAFF_MANAGEMENT = "staff_management"
    BANKING_PAYOUT = "banking_payout"
    SERVICE_PRICING = "service_pricing"
    FINAL_REVIEW = "final_review"
    IDENTITY_VERIFICATION = "identity_verification"
    BANK_CONNECTION = "bank_connection"
    STRIPE_SETUP = "stripe_setup"
    COMPLETE = "complete"


class OnboardingEvent(str, Enum):
    SIGNUP_COMPLETED = "signup_completed"
    BUSINESS_INFO_SAVED = "business_info_saved"
    DOCUMENTS_COMPLETED = "documents_completed"
    APPLICATION_SUBMITTED = "application_submitted"
    EDIT_USER = "edit_user"
    EDIT_BUSINESS = "edit_business"
    EDIT_DOCUMENTS = "edit_documents"
    APPLICATION_APPROVED = "application_approved"
    STEP_COMPLETED = "step_completed"
    IDENTITY_VERIFIED = "identity_verified"
    BANK_CONNECTED = "bank_connected"
    PAYMENTS_CONFIGURED = "payments_configured"


class InvalidTransitionError(Exception):
    """Raised when an event is not accepted in the current state."""


# Steps shown in the progress indicator, in order.
PHASE1_DISPLAY_STEPS: tuple[Phase1Step, ...] = (
    Phase1Step.SIGNUP,
    Phase1Step.BUSINESS_INFO,
    Phase1Step.DOCUMENTS,
    Phase1Step.REVIEW,
)
PHASE2_DISPLAY_STEPS: tuple[Phase2Step, ...] = (
    Phase2Step.WELCOME,
    Phase2Step.BUSINESS_PROFILE,
    Phase2Step.PERSONAL_PROFILE,
    Phase2Step.BUSINESS_HOURS,
    Phase2Step.STAFF_MANAGEMENT,
    Phase2Step.BANKING_PAYOUT,
    Phase2Step.SERVICE_PRICING,
    Phase2Step.FINAL_REVIEW,
)

PHASE1_TRANSITIONS: dict[tuple[Phase1Step, OnboardingEvent], Phase1Step] = {
    (Phase1Step.SIGNUP, OnboardingEvent.SIGNUP_COMPLETED): Phase1Step.BUSINESS_INFO,
    (Phase1Step.BUSINESS_INFO, OnboardingEvent.BUSINESS_INFO_SAVED): Phase1Step.DOCUMENTS,
    (Phase1Step.DOCUMENTS, OnboardingEvent.DOCUMENTS_COMPLETED): Phase1Step.REVIEW,
    (Phase1Step.REVIEW, OnboardingEvent.APPLICATION_SUBMITTED): Phase1Step.SUBMITTED,
    (Phase1Step.REVIEW, OnboardingEvent.EDIT_USER): Phase1Step.SIGNUP,
    (Phase1Step.REVIEW, OnboardingEvent.EDIT_BUSINESS): Phase1Step.BUSINESS_INFO,
    (Phase1Step.REVIEW, OnboardingEvent.EDIT_DOCUMENTS): Phase1Step.DOCUMENTS,
}

PHASE2_TRANSITIONS: dict[tuple[Phase2Step, OnboardingEvent], Phase2Step] = {
    **{
        (step, OnboardingEvent.STEP_COMPLETED): following
        for step, following in zip(PHASE2_DISPLAY_STEPS, PHASE2_DISPLAY_STEPS[1:])
    },
    (Phase2Step.FINAL_REVIEW, OnboardingEvent.STEP_COMPLETED): Phase2Step.COMPLETE,
    (Phase2Step.IDENTITY_VERIFICATION, OnboardingEvent.IDENTITY_VERIFIED): (
        Phase2Step.BANK_CONNECTION
    ),
    (Phase2Step.BANK_CONNECTION, OnboardingEvent.BANK_CONNECTED): Phase2Step.STRIPE_SETUP,
    (Phase2Step.STRIPE_SETUP, OnboardingEvent.PAYMENTS_CONFIGURED): Phase2Step.COMPLETE,
}


@dataclass(frozen=True)
class OnboardingState:
    phase: OnboardingPhase = OnboardingPhase.PHASE1
    phase1_step: Phase1Step = Phase1Step.SIGNUP
    phase2_step: Phase2Step = Phase2Step.WELCOME

    @property
    def current_step(self) -> Phase1Step | Phase2Step:
        if self.phase == OnboardingPhase.PHASE1:
            return self.phase1_step
        return self.phase2_step


class OnboardingStateMachine:
    """Applies onboarding events to states using the transition tables."""

    def fire(
        self,
        state: OnboardingState,
        event: OnboardingEvent,
        *,
        documents_complete: bool = False,
    ) -> OnboardingState:
        """Return the state reached by applying ``event`` to ``state``.

        ``documents_complete`` guards DOCUMENTS_COMPLETED: the wizard may only
        leave the documents step once every required document is on file.

        Raises:
            InvalidTransitionError: if the event is not accepted in ``state``.
        """
        if state.phase == OnboardingPhase.PHASE1:
            return self._fire_phase1(state, event, documents_complete)
        if state.phase == OnboardingPhase.PHASE2:
            return self._fire_phase2(state, event)
        raise InvalidTransitionError(f"Onboarding is complete; cannot apply {event.value}")

    def _fire_phase1(
        self, state: OnboardingState, event: OnboardingEvent, documents_complete: bool
    ) -> OnboardingState:
        approved = event == OnboardingEvent.APPLICATION_APPROVED
        if state.phase1_step == Phase1Step.SUBMITTED and approved:
            return replace(state, phase=OnboardingPhase.PHASE2, phase2_step=Phase2Step.WELCOME)

        target = PHASE1_TRANSITIONS.get((state.phase1_step, event))
        if target is None:
            raise InvalidTransitionError(
                f"Cannot apply {event.value} at phase 1 step {state.phase1_step.value}"
            )
        if event == OnboardingEvent.DOCUMENTS_COMPLETED and not documents_complete:
            raise InvalidTransitionError("Required documents have not all been uploaded")
        return replace(state, phase1_step=target)

    def _fire_phase2(self, state: OnboardingState, event: OnboardingEvent) -> OnboardingState:
        target = PHASE2_TRANSITIONS.get((state.phase2_step, event))
        if target is None:
            raise InvalidTransitionError(
                f"Cannot apply {event.value} at phase 2 step {state.phase2_step.value}"
            )
        if target == Phase2Step.COMPLETE:
            return replace(state, phase=OnboardingPhase.COMPLETE, phase2_step=target)
        return replace(state, phase2_step=target)


def resume(phase: str, current_step: str | None = None) -> OnboardingState:
    """Rebuild a state from a persisted onboarding status.

    A phase 1 user without a recorded step has already signed up, so they
    resume at business_info; phase 2 resumes at welcome.

    Raises:
        ValueError: for an unknown phase or step name.
    """
    resumed_phase = OnboardingPhase(phase)
    if resumed_phase == OnboardingPhase.COMPLETE:
        return OnboardingState(phase=resumed_phase, phase2_step=Phase2Step.COMPLETE)
    if resumed_phase == OnboardingPhase.PHASE2:
        step = Phase2Step(current_step) if current_step else Phase2Step.WELCOME
        return OnboardingState(phase=resumed_phase, phase2_step=step)
    step1 = Phase1Step(current_step) if current_step else Phase1Step.BUSINESS_INFO
    return OnboardingState(phase=resumed_phase, phase1_step=step1)


def progress_percentage(state: OnboardingState) -> int:
    """Percent of displayed steps reached, rounded half up.

    Steps outside the displayed list (submitted, the payments branch)
    report 0, as the progress bar does not show them.
    """
    if state.phase == OnboardingPhase.COMPLETE:
        return 100
    if state.phase == OnboardingPhase.PHASE1:
        steps: tuple[Enum, ...] = PHASE1_DISPLAY_STEPS
    else:
        steps = PHASE2_DISPLAY_STEPS
    current = state.current_step
    position = steps.index(current) + 1 if current in steps else 0
    return math.floor(position / len(steps) * 100 + 0.5)
