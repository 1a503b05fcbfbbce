import pytest

from intake.documents.requirements import RequirementEvaluator
from intake.onboarding.state_machine import (
    InvalidTransitionError,
    OnboardingEvent,
    OnboardingPhase,
    OnboardingState,
    OnboardingStateMachine,
    Phase1Step,
    Phase2Step,
    progress_percentage,
    resume,
)


def _phase1(step: Phase1Step) -> OnboardingState:
    return OnboardingState(phase=OnboardingPhase.PHASE1, phase1_step=step)


def _phase2(step: Phase2Step) -> OnboardingState:
    return OnboardingState(phase=OnboardingPhase.PHASE2, phase2_step=step)


class TestPhase1:
    def test_happy_path_to_submission(self) -> None:
        machine = OnboardingStateMachine()
        state = OnboardingState()

        state = machine.fire(state, OnboardingEvent.SIGNUP_COMPLETED)
        state = machine.fire(state, OnboardingEvent.BUSINESS_INFO_SAVED)
        state = machine.fire(state, OnboardingEvent.DOCUMENTS_COMPLETED, documents_complete=True)
        state = machine.fire(state, OnboardingEvent.APPLICATION_SUBMITTED)

        assert state == _phase1(Phase1Step.SUBMITTED)

    def test_documents_step_requires_all_documents(self) -> None:
        machine = OnboardingStateMachine()

        with pytest.raises(InvalidTransitionError, match="Required documents"):
            machine.fire(_phase1(Phase1Step.DOCUMENTS), OnboardingEvent.DOCUMENTS_COMPLETED)

    @pytest.mark.parametrize(
        ("event", "target"),
        [
            (OnboardingEvent.EDIT_USER, Phase1Step.SIGNUP),
            (OnboardingEvent.EDIT_BUSINESS, Phase1Step.BUSINESS_INFO),
            (OnboardingEvent.EDIT_DOCUMENTS, Phase1Step.DOCUMENTS),
        ],
    )
    def test_review_can_return_to_sections(
        self, event: OnboardingEvent, target: Phase1Step
    ) -> None:
        machine = OnboardingStateMachine()
        assert machine.fire(_phase1(Phase1Step.REVIEW), event).phase1_step == target

    def test_cannot_skip_steps(self) -> None:
        machine = OnboardingStateMachine()
        with pytest.raises(InvalidTransitionError, match="signup"):
            machine.fire(_phase1(Phase1Step.SIGNUP), OnboardingEvent.APPLICATION_SUBMITTED)

    def test_approval_enters_phase2(self) -> None:
        machine = OnboardingStateMachine()
        state = machine.fire(_phase1(Phase1Step.SUBMITTED), OnboardingEvent.APPLICATION_APPROVED)
        assert state.phase == OnboardingPhase.PHASE2
        assert state.phase2_step == Phase2Step.WELCOME

    def test_approval_before_submission_is_rejected(self) -> None:
        machine = OnboardingStateMachine()
        with pytest.raises(InvalidTransitionError):
            machine.fire(_phase1(Phase1Step.REVIEW), OnboardingEvent.APPLICATION_APPROVED)

    def test_requirement_status_drives_documents_guard(self) -> None:
        machine = OnboardingStateMachine()
        on_file = ["drivers_license", "proof_of_address", "professional_license"]
        status = RequirementEvaluator().evaluate("sole_proprietorship", on_file)

        with pytest.raises(InvalidTransitionError):
            machine.fire(
                _phase1(Phase1Step.DOCUMENTS),
                OnboardingEvent.DOCUMENTS_COMPLETED,
                documents_complete=status.satisfied,
            )

        status = RequirementEvaluator().evaluate(
            "sole_proprietorship", [*on_file, "professional_certificate"]
        )
        state = machine.fire(
            _phase1(Phase1Step.DOCUMENTS),
            OnboardingEvent.DOCUMENTS_COMPLETED,
            documents_complete=status.satisfied,
        )
        assert state.phase1_step == Phase1Step.REVIEW


class TestPhase2:
    def test_linear_setup_chain(self) -> None:
        machine = OnboardingStateMachine()
        state = _phase2(Phase2Step.WELCOME)
        visited = [state.phase2_step]
        while state.phase == OnboardingPhase.PHASE2:
            state = machine.fire(state, OnboardingEvent.STEP_COMPLETED)
            visited.append(state.phase2_step)

        assert visited == [
            Phase2Step.WELCOME,
            Phase2Step.BUSINESS_PROFILE,
            Phase2Step.PERSONAL_PROFILE,
            Phase2Step.BUSINESS_HOURS,
            Phase2Step.STAFF_MANAGEMENT,
            Phase2Step.BANKING_PAYOUT,
            Phase2Step.SERVICE_PRICING,
            Phase2Step.FINAL_REVIEW,
            Phase2Step.COMPLETE,
        ]
        assert state.phase == OnboardingPhase.COMPLETE

    def test_payments_branch(self) -> None:
        machine = OnboardingStateMachine()
        state = _phase2(Phase2Step.IDENTITY_VERIFICATION)

        state = machine.fire(state, OnboardingEvent.IDENTITY_VERIFIED)
        assert state.phase2_step == Phase2Step.BANK_CONNECTION
        state = machine.fire(state, OnboardingEvent.BANK_CONNECTED)
        assert state.phase2_step == Phase2Step.STRIPE_SETUP
        state = machine.fire(state, OnboardingEvent.PAYMENTS_CONFIGURED)
        assert state.phase == OnboardingPhase.COMPLETE

    def test_wrong_event_for_step(self) -> None:
        machine = OnboardingStateMachine()
        with pytest.raises(InvalidTransitionError, match="bank_connection"):
            machine.fire(_phase2(Phase2Step.BANK_CONNECTION), OnboardingEvent.STEP_COMPLETED)

    def test_complete_accepts_nothing(self) -> None:
        machine = OnboardingStateMachine()
        done = OnboardingState(phase=OnboardingPhase.COMPLETE, phase2_step=Phase2Step.COMPLETE)
        with pytest.raises(InvalidTransitionError, match="complete"):
            machine.fire(done, OnboardingEvent.STEP_COMPLETED)


class TestResume:
    def test_phase1_defaults_to_business_info(self) -> None:
        assert resume("phase1") == _phase1(Phase1Step.BUSINESS_INFO)

    def test_phase1_with_step(self) -> None:
        assert resume("phase1", "documents").phase1_step == Phase1Step.DOCUMENTS

    def test_phase2_defaults_to_welcome(self) -> None:
        assert resume("phase2").current_step == Phase2Step.WELCOME

    def test_complete(self) -> None:
        assert resume("complete").phase == OnboardingPhase.COMPLETE

    def test_unknown_step_raises(self) -> None:
        with pytest.raises(ValueError):
            resume("phase2", "documents")


class TestProgress:
    @pytest.mark.parametrize(
        ("step", "expected"),
        [
            (Phase1Step.SIGNUP, 25),
            (Phase1Step.DOCUMENTS, 75),
            (Phase1Step.REVIEW, 100),
            (Phase1Step.SUBMITTED, 0),
        ],
    )
    def test_phase1(self, step: Phase1Step, expected: int) -> None:
        assert progress_percentage(_phase1(step)) == expected

    @pytest.mark.parametrize(
        ("step", "expected"),
        [
            (Phase2Step.WELCOME, 13),
            (Phase2Step.PERSONAL_PROFILE, 38),
            (Phase2Step.SERVICE_PRICING, 88),
            (Phase2Step.FINAL_REVIEW, 100),
            (Phase2Step.STRIPE_SETUP, 0),
        ],
    )
    def test_phase2_rounds_half_up(self, step: Phase2Step, expected: int) -> None:
        assert progress_percentage(_phase2(step)) == expected

    def test_complete_is_100(self) -> None:
        done = OnboardingState(phase=OnboardingPhase.COMPLETE)
        assert progress_percentage(done) == 100
