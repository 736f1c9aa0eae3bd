from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.validators import optional_limit, optional_week, require_score_type, require_student_id
from ..conditions.model import ScoringCondition
from ..conditions.service import ConditionService
from ..core.enums import ScoreType
from ..core.exceptions import NotFoundError
from ..ledger.model import HistoryEntry
from ..ledger.service import HistoryLedger
from ..students.repository import StudentRepository
from .factory import ScoringStrategyFactory
from .model import ScoreResult
from .mutator import CascadeOutcome, ScoreMutator
from .observations import ObservationEvent, PercentageObservation, parse_event
from .strategies.base import DeltaDecision, ScoringStrategy
from .streak import StreakResult, compute_bonus

logger = logging.getLogger(__name__)


class ScoringService:
    """CalculateScore: evaluate -> net delta -> streak bonus -> mutate -> record."""

    def __init__(
        self,
        conditions: ConditionService,
        students: StudentRepository,
        ledger: HistoryLedger,
        mutator: ScoreMutator,
        *,
        strategy_factory: Optional[ScoringStrategyFactory] = None,
        enabled: bool = True,
    ):
        self._conditions = conditions
        self._students = students
        self._ledger = ledger
        self._mutator = mutator
        self._factory = strategy_factory or ScoringStrategyFactory()
        self._enabled = bool(enabled)

    def calculate_score(
        self,
        student_id: Any,
        score_type: Any,
        week: Any = None,
        data: Any = None,
    ) -> ScoreResult:
        if not self._enabled:
            return ScoreResult.disabled()

        sid = require_student_id(student_id)
        stype = require_score_type(score_type)
        event = parse_event(sid, stype, optional_week(week), data)

        condition = self._conditions.resolve(stype, event.with_degree)
        strategy = self._factory.for_type(stype, event.with_degree)

        with self._mutator.locked(sid):
            if self._students.get_by_id(sid) is None:
                raise NotFoundError(f"Student {sid} not found")

            if event.is_reversal:
                result = self._reverse(event, condition, strategy)
            else:
                result = self._apply(event, condition, strategy)

            if stype == ScoreType.ATTENDANCE and event.is_reversal and event.week is not None:
                result = self._cascade(event, result)

        logger.info(
            "Scored %s for student %s: %s -> %s (%+d points)",
            stype.value,
            sid,
            result.previous_score,
            result.new_score,
            result.points_added,
        )
        return result

    def last_history(self, student_id: Any, score_type: Any, week: Any = None) -> Optional[HistoryEntry]:
        sid = require_student_id(student_id)
        stype = require_score_type(score_type)
        wk = optional_week(week)
        if wk is None:
            return self._ledger.find_last(sid, stype)
        return self._ledger.find_for_week(sid, stype, wk)

    def history(self, student_id: Any, score_type: Any = None, limit: Any = None) -> Sequence[HistoryEntry]:
        """Audit listing, newest first."""
        sid = require_student_id(student_id)
        stype = None if score_type in (None, "") else require_score_type(score_type)
        return self._ledger.history(sid, score_type=stype, limit=optional_limit(limit))

    def _reverse(self, event: ObservationEvent, condition: ScoringCondition, strategy: ScoringStrategy) -> ScoreResult:
        recorded = self._ledger.find_last(event.student_id, event.type, event.week)
        decision = strategy.compute_delta(
            condition,
            event.current,
            event.previous,
            reverse_only=True,
            recorded=recorded,
        )
        net_bonus = -recorded.standing_bonus if recorded is not None else 0
        bonus_weeks = recorded.bonus_weeks if recorded is not None and net_bonus else ()

        return self._commit(
            event,
            strategy,
            decision,
            net_bonus=net_bonus,
            stored_bonus=net_bonus,
            bonus_weeks=bonus_weeks,
            process_name=strategy.process_name(event.previous),
            reverses=recorded.process_id if recorded is not None else None,
        )

    def _apply(self, event: ObservationEvent, condition: ScoringCondition, strategy: ScoringStrategy) -> ScoreResult:
        same_week = self._ledger.find_for_week(event.student_id, event.type, event.week)
        decision = strategy.compute_delta(
            condition,
            event.current,
            event.previous,
            reverse_only=False,
            recorded=same_week if event.previous is not None else None,
        )

        awarded = self._streak_bonus(event, condition)
        prior_bonus = same_week.standing_bonus if same_week is not None else 0

        return self._commit(
            event,
            strategy,
            decision,
            net_bonus=awarded.bonus_points - prior_bonus,
            stored_bonus=awarded.bonus_points,
            bonus_weeks=awarded.involved_weeks,
            process_name=strategy.process_name(event.current),
            reverses=None,
        )

    def _streak_bonus(self, event: ObservationEvent, condition: ScoringCondition) -> StreakResult:
        if not condition.bonus_rules or not isinstance(event.current, PercentageObservation):
            return StreakResult()

        weekly = dict(self._students.get_weekly_percentages(event.student_id, event.type))
        if event.week is not None:
            weekly[event.week] = event.current.percentage

        streak = compute_bonus(condition, weekly, triggering_week=event.week)
        if not streak.groups:
            return streak

        credited = self._ledger.credited_bonus_weeks(event.student_id, event.type, exclude_week=event.week)
        return streak.without(credited)

    def _commit(
        self,
        event: ObservationEvent,
        strategy: ScoringStrategy,
        decision: DeltaDecision,
        *,
        net_bonus: int,
        stored_bonus: int,
        bonus_weeks,
        process_name: str,
        reverses: Optional[str],
    ) -> ScoreResult:
        before, after = self._mutator.apply(event.student_id, decision.net_points, net_bonus)

        process_id = self._ledger.new_process_id(event.student_id, event.type)
        data = dict(event.data)
        data["bonusWeeks"] = list(bonus_weeks)
        entry = self._ledger.record(
            student_id=event.student_id,
            score_type=event.type,
            process_id=process_id,
            process_name=process_name,
            week=event.week,
            score_before=before,
            score_after=after,
            score_added=decision.net_points + net_bonus,
            base_points=decision.base_points,
            bonus_points=stored_bonus,
            bonus_weeks=bonus_weeks,
            data=data,
            reverse_only=event.is_reversal,
            reverses=reverses,
        )

        return ScoreResult(
            success=True,
            points_added=decision.net_points + net_bonus,
            base_points=decision.net_points,
            bonus_points=net_bonus,
            previous_score=before,
            new_score=after,
            process_id=process_id,
            history_recorded=entry is not None,
        )

    def _cascade(self, event: ObservationEvent, result: ScoreResult) -> ScoreResult:
        report = self._mutator.reverse_dependents(
            event.student_id,
            event.week,
            caused_by=result.process_id,
            reverse_homework=event.auto_reverse_homework,
            reverse_quiz=event.auto_reverse_quiz,
        )
        message = None
        if report.failed:
            # The attendance change and any committed reversals stand; report what is missing.
            failed = ", ".join(t.value for t in report.failed)
            message = f"Attendance reversed; auto-reverse failed for: {failed}"
        return _with_cascades(result, report.outcomes, message=message)


def _with_cascades(
    result: ScoreResult,
    outcomes: Sequence[CascadeOutcome],
    *,
    message: Optional[str] = None,
) -> ScoreResult:
    extra = sum(o.points for o in outcomes)
    return ScoreResult(
        success=result.success,
        points_added=result.points_added + extra,
        base_points=result.base_points,
        bonus_points=result.bonus_points,
        previous_score=result.previous_score,
        new_score=outcomes[-1].score_after if outcomes else result.new_score,
        process_id=result.process_id,
        history_recorded=result.history_recorded and all(o.history_recorded for o in outcomes),
        cascades=tuple(outcomes),
        message=message or result.message,
    )
