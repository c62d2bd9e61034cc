"""
Submission Service Module

Grades a respondent's answers against the stored form and records the graded
submission.
"""

import math
from typing import Any, Dict, List, Mapping, Optional

from formbuilder.common.exceptions import NotFoundError
from formbuilder.common.logger import LoggerAdapter, app_logger
from formbuilder.common.utils import utcnow
from formbuilder.domain.forms.repository import FormRepository
from formbuilder.domain.forms.scoring import score_submission
from .model import FormResponse, build_answer_payload
from .repository import ResponseRepository

logger = LoggerAdapter(app_logger.getChild("responses.service"))


class SubmissionService:
    """
    Ties the scoring engine to the form and response repositories.
    """

    def __init__(
        self,
        forms: FormRepository,
        responses: ResponseRepository,
        require_existing_form: bool = False
    ):
        """
        Args:
            forms: Repository the submitted form is resolved from
            responses: Repository the graded submission is recorded in
            require_existing_form: Refuse submissions for unknown forms instead
                of recording them as given
        """
        self.forms = forms
        self.responses = responses
        self.require_existing_form = require_existing_form

    async def submit(self, form_id: Optional[str], answers: Optional[Mapping[str, Any]]) -> FormResponse:
        """
        Grade and record a submission.

        Args:
            form_id: Identifier of the form being answered
            answers: Client payload; ``responses`` maps question ids to answers
                and ``timeSpent`` is the elapsed time in seconds

        Returns:
            The recorded FormResponse

        Raises:
            NotFoundError: If the form does not exist and require_existing_form is set
        """
        answers = dict(answers) if isinstance(answers, Mapping) else {}
        log = logger.with_context(form_id=form_id)

        form = None
        if form_id:
            try:
                form = await self.forms.get(form_id)
            except NotFoundError:
                if self.require_existing_form:
                    raise
        elif self.require_existing_form:
            raise NotFoundError("Form", form_id)

        if form is None:
            # Orphaned submission: keep the client's payload untouched
            log.warning(f"Recording response for unknown form {form_id}")
            return await self.responses.record(form_id, answers)

        submitted = answers.get("responses")
        if not isinstance(submitted, Mapping):
            submitted = {}
        time_spent = answers.get("timeSpent")
        if (
            isinstance(time_spent, bool)
            or not isinstance(time_spent, (int, float))
            or not math.isfinite(time_spent)
        ):
            time_spent = 0

        score, max_score = score_submission(form, submitted)
        payload: Dict[str, Any] = build_answer_payload(
            responses=submitted,
            score=score,
            max_score=max_score,
            time_spent=int(round(time_spent)),
            submitted_at=utcnow(),
        )

        response = await self.responses.record(form.id, payload)
        log.info(f"Graded response {response.id}: {score}/{max_score}")
        return response

    async def list_responses(self, form_id: Optional[str] = None) -> List[FormResponse]:
        """
        List responses, most recent first, optionally for one form.

        Responses are recorded under the form's public id, so a form given by
        its system id is resolved first. Identifiers of unknown forms filter
        as given, which keeps orphaned responses reachable.
        """
        if form_id:
            try:
                form_id = (await self.forms.get(form_id)).id
            except NotFoundError:
                pass
        return await self.responses.list_by_form(form_id)
