"""
Interest Assessment — terminal front-end
========================================
Walks a student through the four wizard steps with Rich prompts, backed by
the local SQLite student store.

Run:
    interest-assessment            (console script)
    python -m interest_assessment.cli
"""

from __future__ import annotations

import logging
from typing import Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from interest_assessment.config import get_settings
from interest_assessment.database import StudentStore
from interest_assessment.entry import EntryDecision, open_wizard
from interest_assessment.models import (
    CAREER_TYPES,
    CHALLENGE_APPROACHES,
    CLUSTER_LABELS,
    CORE_VALUES,
    LEARNING_STYLES,
    Principal,
    STUDENT_ROLE,
)
from interest_assessment.selection import SELECTION_RULES
from interest_assessment.service import InterestAssessmentService
from interest_assessment.step_validator import WizardStep
from interest_assessment.wizard import StepOutcome, WizardSession

console = Console()


class InterestAssessmentCLI:
    """Drives a WizardSession from the terminal."""

    BANNER = "[bold magenta]Discover Your Interests[/bold magenta]"

    def __init__(self, session: WizardSession) -> None:
        self.session = session

    # ── Rendering helpers ────────────────────────────────────────────────────

    def _show_errors(self) -> None:
        for key, message in self.session.errors.items():
            console.print(f"  [red]✗ {message}[/red] [dim]({key})[/dim]")

    def _pick_many(self, path: str, options: Sequence, labels: Sequence[str], title: str) -> None:
        rule = SELECTION_RULES[path]
        while True:
            current = self._current_selection(path)
            table = Table(box=box.SIMPLE, show_header=False)
            table.add_column("#", style="cyan", no_wrap=True)
            table.add_column("Option")
            for i, (opt, label) in enumerate(zip(options, labels), start=1):
                mark = "[green]●[/green]" if opt in current else "○"
                table.add_row(str(i), f"{mark} {label}")
            console.print(Panel(table, title=title,
                                subtitle=f"Selected: {len(current)}/{rule.max_size}",
                                expand=False))
            choice = Prompt.ask("   Toggle a number (blank when done)", default="")
            if not choice.strip():
                return
            if not choice.strip().isdigit() or not 1 <= int(choice) <= len(options):
                console.print("   [yellow]Pick a number from the list.[/yellow]")
                continue
            if not self.session.toggle(path, options[int(choice) - 1]):
                console.print(f"   [dim]You can pick up to {rule.max_size}.[/dim]")

    def _current_selection(self, path: str) -> list:
        answers = self.session.answers
        return {
            "broadInterestClusters":               answers.selected_clusters,
            "personalityInsights.learningStyle":   answers.learning_styles,
            "personalityInsights.coreValues":      answers.core_values,
            "careerDirection.excitingCareerTypes": answers.exciting_career_types,
        }[path]

    # ── Steps ────────────────────────────────────────────────────────────────

    def _step_clusters(self) -> None:
        clusters = list(CLUSTER_LABELS)
        self._pick_many("broadInterestClusters", clusters,
                        [c.label for c in clusters], "Pick up to 3 interest areas")

    def _step_deep_dive(self) -> None:
        for cluster, questions, answers in self.session.deep_dive_forms():
            console.print(f"\n[bold purple]{cluster.label}[/bold purple]")
            self.session.touch_cluster(cluster)
            for spec in questions:
                text = Prompt.ask(f"   {spec.prompt} [dim]({spec.placeholder})[/dim]",
                                  default=answers.get(spec.key, ""))
                self.session.set_field(f"clusterDeepDive.{cluster.value}.{spec.key}", text)

    def _step_personality(self) -> None:
        self._pick_many("personalityInsights.learningStyle", LEARNING_STYLES,
                        LEARNING_STYLES, "How do you learn best? (up to 2)")
        for i, approach in enumerate(CHALLENGE_APPROACHES, start=1):
            console.print(f"   [cyan]{i}.[/cyan] {approach}")
        pick = IntPrompt.ask("   When something is hard, you…",
                             choices=[str(i) for i in range(1, len(CHALLENGE_APPROACHES) + 1)])
        self.session.set_field("personalityInsights.challengeApproach",
                               CHALLENGE_APPROACHES[pick - 1])
        self._pick_many("personalityInsights.coreValues", CORE_VALUES,
                        CORE_VALUES, "What matters most to you? (up to 3)")

    def _step_career(self) -> None:
        answers = self.session.answers
        self.session.set_field(
            "careerDirection.dreamCareer",
            Prompt.ask("   What is your dream career?", default=answers.dream_career_text),
        )
        self._pick_many("careerDirection.excitingCareerTypes", CAREER_TYPES,
                        CAREER_TYPES, "Which careers excite you? (up to 2)")
        self.session.set_field(
            "careerDirection.careerAttraction",
            Prompt.ask("   What attracts you to this career?",
                       default=answers.career_attraction_text),
        )

    _STEPS = {
        WizardStep.CLUSTER_SELECTION:    _step_clusters,
        WizardStep.DEEP_DIVE:            _step_deep_dive,
        WizardStep.PERSONALITY_INSIGHTS: _step_personality,
        WizardStep.CAREER_DIRECTION:     _step_career,
    }

    # ── Main loop ────────────────────────────────────────────────────────────

    def run(self) -> bool:
        console.print()
        console.print(Panel(self.BANNER, subtitle="Four short steps", expand=False))

        while not self.session.closed:
            step = self.session.current_step
            console.rule(f"[bold]Step {int(step)} of 4: {step.title}[/bold]")
            self._STEPS[step](self)
            self._show_errors()

            action = Prompt.ask("   [n]ext, [b]ack or [q]uit", choices=["n", "b", "q"], default="n")
            if action == "q":
                console.print("[dim]Nothing was saved.[/dim]")
                return False
            if action == "b":
                self.session.retreat()
                continue

            outcome = self.session.advance()
            if outcome in (StepOutcome.BLOCKED, StepOutcome.SUBMIT_FAILED):
                self._show_errors()
            elif outcome is StepOutcome.IGNORED:
                console.print("   [dim]Still saving, please wait…[/dim]")

        self._show_summary()
        return True

    def _show_summary(self) -> None:
        answers = self.session.answers
        table = Table(box=box.ROUNDED, show_header=False, padding=(0, 1))
        table.add_column("Key", style="bold cyan", no_wrap=True)
        table.add_column("Value")
        table.add_row("Interests",       ", ".join(c.label for c in answers.selected_clusters))
        table.add_row("Learning style",  ", ".join(answers.learning_styles))
        table.add_row("Challenges",      answers.challenge_approach or "")
        table.add_row("Core values",     ", ".join(answers.core_values))
        table.add_row("Dream career",    answers.dream_career_text)
        table.add_row("Exciting careers", ", ".join(answers.exciting_career_types))
        console.print(Panel(table, title="[bold green]✓ Assessment saved[/bold green]",
                            border_style="green"))
        console.print(f"Next: [bold]{self.session.next_destination}[/bold]")


def main() -> int:
    settings = get_settings()
    logging.basicConfig(level=settings.app.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    status = Table(box=box.SIMPLE, show_header=False)
    status.add_column("Component", style="dim")
    status.add_column("Status")
    for component, line in settings.status_summary().items():
        status.add_row(component, line)
    console.print(status)

    store = StudentStore(settings.store.db_path)
    service = InterestAssessmentService(store, settings.webhook)

    user_id = Prompt.ask("[cyan]Student login[/cyan]")
    unique_id = Prompt.ask("[cyan]Student ID[/cyan]", default=f"STU-{user_id}")
    full_name = Prompt.ask("[cyan]Your name[/cyan]", default=user_id)
    store.upsert_student(user_id, unique_id, full_name=full_name)
    principal = Principal(user_id=user_id, role=STUDENT_ROLE,
                          unique_id=unique_id, full_name=full_name)

    decision, session = open_wizard(principal, service,
                                    debounce_ms=settings.wizard.submit_debounce_ms)
    if decision is not EntryDecision.SHOW_WIZARD:
        console.print(f"[yellow]Interest assessment already completed.[/yellow] "
                      f"Next: [bold]{decision.value}[/bold]")
        return 0

    return 0 if InterestAssessmentCLI(session).run() else 1


if __name__ == "__main__":
    raise SystemExit(main())
