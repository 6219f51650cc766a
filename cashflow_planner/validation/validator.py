"""
Two-Stage Profile Validation

STAGE 1 - STRUCTURAL VALIDATION:
- Every expense references an existing pot
- Pot and expense ids are unique
- A failure here means the engine would refuse the profile

STAGE 2 - SEMANTIC VALIDATION:
- Dated expenses falling outside the forecast month
- Bi-weekly expenses that the month's calendar never charges
- Expenses their funding pot can never cover
- Auto-funded pots with nothing to fund towards
- This catches profiles that forecast fine but not as the user expects

IMPORTANT: Validation NEVER silently fixes issues.
It reports them and leaves the profile untouched.
"""

from collections import Counter
from datetime import date
from typing import Optional

from cashflow_planner.engine.forecaster import iter_month_days
from cashflow_planner.engine.simulator import (
    BI_WEEKLY_ANCHOR_DAYS,
    FRIDAY,
    format_amount,
    index_pots,
)
from cashflow_planner.models.finance import (
    DATED_FREQUENCIES,
    ExpenseFrequency,
    PotFrequency,
    UserProfile,
)
from cashflow_planner.models.forecast import ValidationIssue, ValidationResult


AUTO_FUNDED = frozenset({PotFrequency.DAILY, PotFrequency.WEEKLY, PotFrequency.MONTHLY})


class ProfileValidator:
    """
    Validates a profile before it is forecast.

    Stage 2 only runs when stage 1 passes: semantic checks assume every
    expense can find its pot.
    """

    def _validate_structure(
        self,
        profile: UserProfile,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: Structural validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        pot_ids = {pot.id for pot in profile.pots}

        for expense in profile.expenses:
            if expense.pot_id not in pot_ids:
                issues.append(ValidationIssue(
                    field=f"expenses.{expense.id}.pot_id",
                    issue_type="dangling_reference",
                    message=f"Expense '{expense.name}' is funded from unknown pot '{expense.pot_id}'",
                    severity="error",
                    suggested_fix="Point the expense at an existing pot or add the pot",
                ))

        for pot_id, count in Counter(pot.id for pot in profile.pots).items():
            if count > 1:
                issues.append(ValidationIssue(
                    field=f"pots.{pot_id}",
                    issue_type="duplicate_id",
                    message=f"Pot id '{pot_id}' is used by {count} pots",
                    severity="error",
                    suggested_fix="Give every pot its own id",
                ))

        for expense_id, count in Counter(e.id for e in profile.expenses).items():
            if count > 1:
                issues.append(ValidationIssue(
                    field=f"expenses.{expense_id}",
                    issue_type="duplicate_id",
                    message=f"Expense id '{expense_id}' is used by {count} expenses",
                    severity="error",
                    suggested_fix="Give every expense its own id",
                ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _validate_semantic(
        self,
        profile: UserProfile,
        month: Optional[date],
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        pots = index_pots(profile.pots)

        if profile.starting_balance < 0:
            issues.append(ValidationIssue(
                field="starting_balance",
                issue_type="negative_balance",
                message="Month starts overdrawn",
                severity="warning",
                suggested_fix="Every day will be a danger day until income catches up",
            ))

        if month is not None:
            issues.extend(self._check_schedules(profile, month))

        for expense in profile.expenses:
            pot = pots[expense.pot_id]
            if pot.current_balance >= expense.amount:
                continue
            if pot.frequency not in AUTO_FUNDED:
                issues.append(ValidationIssue(
                    field=f"expenses.{expense.id}",
                    issue_type="unfunded_pot",
                    message=(
                        f"'{expense.name}' draws on '{pot.name}', which is never "
                        f"funded automatically and holds less than {format_amount(expense.amount)}"
                    ),
                    severity="warning",
                    suggested_fix="Top the pot up manually or change its frequency",
                ))
            elif pot.target_amount < expense.amount:
                issues.append(ValidationIssue(
                    field=f"expenses.{expense.id}",
                    issue_type="target_too_low",
                    message=(
                        f"'{pot.name}' targets {format_amount(pot.target_amount)}, "
                        f"less than '{expense.name}' ({format_amount(expense.amount)})"
                    ),
                    severity="warning",
                    suggested_fix="Raise the pot target to at least the expense amount",
                ))

        for pot in profile.pots:
            if pot.frequency in AUTO_FUNDED and pot.target_amount == 0:
                issues.append(ValidationIssue(
                    field=f"pots.{pot.id}",
                    issue_type="zero_target",
                    message=f"'{pot.name}' is funded {pot.frequency.value} but has no target",
                    severity="warning",
                    suggested_fix="Set a target or make the pot flexible",
                ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _check_schedules(
        self,
        profile: UserProfile,
        month: date,
    ) -> list[ValidationIssue]:
        """Expenses the target month's calendar never charges."""
        issues = []
        days = list(iter_month_days(month))
        has_bi_weekly_day = any(
            day.weekday() == FRIDAY and day.day in BI_WEEKLY_ANCHOR_DAYS
            for day in days
        )

        for expense in profile.expenses:
            if expense.frequency in DATED_FREQUENCIES:
                if expense.due_date not in days:
                    issues.append(ValidationIssue(
                        field=f"expenses.{expense.id}.due_date",
                        issue_type="never_charged",
                        message=(
                            f"'{expense.name}' is due {expense.due_date}, "
                            f"outside {month:%B %Y}"
                        ),
                        severity="warning",
                        suggested_fix="Move the due date into the forecast month",
                    ))
            elif expense.frequency == ExpenseFrequency.BI_WEEKLY and not has_bi_weekly_day:
                issues.append(ValidationIssue(
                    field=f"expenses.{expense.id}.frequency",
                    issue_type="never_charged",
                    message=(
                        f"'{expense.name}' is bi-weekly, but neither the 4th nor the "
                        f"18th of {month:%B %Y} is a Friday"
                    ),
                    severity="info",
                ))

        return issues

    def validate(
        self,
        profile: UserProfile,
        month: Optional[date] = None,
    ) -> ValidationResult:
        """
        Run full two-stage validation pipeline.

        Args:
            profile: The profile to validate
            month: Any day of the month about to be forecast. Enables the
                calendar checks.

        Returns:
            ValidationResult with all issues found
        """
        all_issues = []

        structure_valid, structure_issues = self._validate_structure(profile)
        all_issues.extend(structure_issues)

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if structure_valid:
            semantic_valid, semantic_issues = self._validate_semantic(profile, month)
            all_issues.extend(semantic_issues)

        warnings = [issue.message for issue in all_issues if issue.severity == "warning"]

        return ValidationResult(
            profile_id=profile.id,
            structure_valid=structure_valid,
            semantic_valid=semantic_valid,
            is_valid=structure_valid and semantic_valid,
            issues=all_issues,
            warnings=warnings,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "✅ All checks passed! Your plan is ready to forecast."

        lines = []

        if not result.structure_valid:
            lines.append("❌ This plan cannot be forecast yet:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please check the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        lines.append("")
        if result.is_valid:
            lines.append("You can still forecast, but expect shortfalls.")
        else:
            lines.append("Please fix the issues above before forecasting.")

        return "\n".join(lines)
