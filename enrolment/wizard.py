"""Five-step wizard navigation over a FormState.

Moving forward validates the current section first; moving back or jumping
to a section never validates. Submitting is only possible from the last
section and is delegated to the SubmissionPipeline.
"""

from __future__ import annotations

from typing import Callable

from enrolment import audit_log
from enrolment.catalogs import FIRST_SECTION, LAST_SECTION, section_key
from enrolment.config import get_validation_variant
from enrolment.form_state import FormState
from enrolment.submission import (
    REQUIRED_FIELDS_MSG,
    EnrolmentService,
    Notifier,
    SubmissionOutcome,
    SubmissionPipeline,
)
from enrolment.validators import validate_section
from shared.enrolment_client import get_client

RESET_MSG = "Form has been reset."
SUBMIT_NOT_AVAILABLE_MSG = "Submit is only available on the last section"

STAGE_NAVIGATION = "navigation"


class Wizard:
    """Section-by-section navigation with gated forward movement.

    Args:
        state: The form being edited.
        notifier: Receives user-facing notices.
        variant: Validation variant; defaults to the tool config.
        on_section_change: Called with the new section number whenever the
            wizard moves (presentation layers scroll to the top here).
        client: Enrolment API client used on submit; defaults to the shared
            cached client.
    """

    def __init__(
        self,
        state: FormState,
        notifier: Notifier,
        variant: str | None = None,
        on_section_change: Callable[[int], None] | None = None,
        client: EnrolmentService | None = None,
        student_id: str = "",
    ):
        self.state = state
        self.notifier = notifier
        self.variant = variant or get_validation_variant()
        self.on_section_change = on_section_change
        self.client = client
        self.student_id = student_id

    @property
    def current_section(self) -> int:
        return self.state.current_section

    @property
    def progress_pct(self) -> float:
        return self.state.current_section / LAST_SECTION * 100

    @property
    def is_last_section(self) -> bool:
        return self.state.current_section == LAST_SECTION

    def _move_to(self, section: int) -> None:
        previous = self.state.current_section
        self.state.go_to(section)
        if self.on_section_change is not None:
            self.on_section_change(section)
        if section != previous:
            audit_log.record(
                audit_log.SECTION_CHANGED,
                student_id=self.student_id,
                section=section_key(section),
                details={"from": previous, "to": section},
            )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def next(self) -> bool:
        """Validate the current section and advance if it is valid."""
        key = section_key(self.state.current_section)
        errors = validate_section(key, self.state.section(key), self.variant)
        self.state.set_section_errors(key, errors)
        if errors:
            self.notifier.error(REQUIRED_FIELDS_MSG)
            return False
        self._move_to(min(self.state.current_section + 1, LAST_SECTION))
        return True

    def previous(self) -> None:
        self._move_to(max(self.state.current_section - 1, FIRST_SECTION))

    def jump_to(self, section: int) -> None:
        """Go straight to a section (e.g. from the step indicator)."""
        if not FIRST_SECTION <= section <= LAST_SECTION:
            raise ValueError(f"Section must be between {FIRST_SECTION} and {LAST_SECTION}: {section}")
        self._move_to(section)

    # ------------------------------------------------------------------
    # Submit / reset
    # ------------------------------------------------------------------

    def pipeline(self) -> SubmissionPipeline:
        client = self.client if self.client is not None else get_client()
        return SubmissionPipeline(self.state, client, self.notifier, self.variant)

    def submit(self, student_id: str | None = None) -> SubmissionOutcome:
        if not self.is_last_section:
            return SubmissionOutcome(success=False, stage=STAGE_NAVIGATION, message=SUBMIT_NOT_AVAILABLE_MSG)
        sid = student_id if student_id is not None else self.student_id
        outcome = self.pipeline().submit(sid)
        # A validation failure sends the wizard back to the first invalid section
        if self.state.current_section != LAST_SECTION and self.on_section_change is not None:
            self.on_section_change(self.state.current_section)
        return outcome

    def reset(self) -> None:
        self.state.reset()
        self.notifier.info(RESET_MSG)
        audit_log.record(audit_log.FORM_RESET, student_id=self.student_id)
        if self.on_section_change is not None:
            self.on_section_change(FIRST_SECTION)
