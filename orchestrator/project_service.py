"""Project Service - the glue between agents, scoring and the record store.

The service owns the project lifecycle:
1. Relays intake turns to the Intake Agent
2. Creates a project only once its charter has been generated
3. Persists the charter's milestones, stakeholders and risks as records
4. Scores health on every project fetch from live task/escalation/update data
5. Applies task edits, analyzed progress updates and escalation reviews
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from agents import CharterAgent, EscalationAgent, IntakeAgent, UpdateAgent
from config import settings
from contracts import (
    ConversationContext,
    EscalationStatus,
    HealthScore,
    IntakeTurnResult,
    ProjectIntakeData,
    ProjectSnapshot,
    TaskPriority,
    TaskStatus,
    parse_timestamp,
)
from scoring import calculate_health_score, count_overdue_tasks, determine_project_scale
from store import (
    CHARTERS,
    ESCALATIONS,
    MILESTONES,
    PROJECTS,
    RISKS,
    STAKEHOLDERS,
    TASKS,
    UPDATES,
    InMemoryRecordStore,
    Record,
    RecordNotFoundError,
    RecordStore,
)

logger = logging.getLogger(__name__)

# Task fields a caller may change through update_task
ALLOWED_TASK_FIELDS = (
    "title",
    "description",
    "status",
    "priority",
    "assignee_name",
    "due_date",
    "milestone_id",
    "actual_hours",
)

# Tables holding per-project child records
PROJECT_CHILD_TABLES = (CHARTERS, MILESTONES, TASKS, RISKS, STAKEHOLDERS, ESCALATIONS, UPDATES)

UPDATE_WINDOW = timedelta(days=7)


class ProjectNotFoundError(RecordNotFoundError):
    """The requested project does not exist."""

    def __init__(self, project_id: str):
        super().__init__(PROJECTS, project_id)


class ProjectService:
    """Project lifecycle on top of a RecordStore."""

    def __init__(
        self,
        store: Optional[RecordStore] = None,
        intake_agent: Optional[IntakeAgent] = None,
        charter_agent: Optional[CharterAgent] = None,
        update_agent: Optional[UpdateAgent] = None,
        escalation_agent: Optional[EscalationAgent] = None,
        provider: Optional[str] = None,
        model: Optional[str] = None,
    ):
        """Initialize the service.

        Args:
            store: Record store (defaults to a fresh in-memory store)
            intake_agent: Agent for intake turns
            charter_agent: Agent for charter generation
            update_agent: Agent for progress update analysis
            escalation_agent: Agent for escalation advice
            provider: LLM provider for any agent not passed in
            model: Model name for any agent not passed in
        """
        self.store = store or InMemoryRecordStore()
        self.intake_agent = intake_agent or IntakeAgent(model=model, provider=provider)
        self.charter_agent = charter_agent or CharterAgent(model=model, provider=provider)
        self.update_agent = update_agent or UpdateAgent(model=model, provider=provider)
        self.escalation_agent = escalation_agent or EscalationAgent(model=model, provider=provider)

    # ------------------------------------------------------------------
    # Intake and creation
    # ------------------------------------------------------------------

    def process_intake_message(self, message: str, context: ConversationContext) -> IntakeTurnResult:
        """Run one intake dialogue turn."""
        if not message or not message.strip():
            raise ValueError("Message is required")
        return self.intake_agent.advance(message, context)

    def create_project(self, intake: ProjectIntakeData) -> Dict[str, Any]:
        """Generate the charter, then persist the project and its charter-derived records.

        Nothing is written if charter generation fails.

        Returns:
            Dict with the stored ``project`` and the ``charter`` content

        Raises:
            ValueError: If the intake has no name or objective
            ModelError, GenerationError: From charter generation
        """
        if not intake.name or not intake.objective:
            raise ValueError("Project name and objective are required")

        charter = self.charter_agent.generate(intake)
        scale = determine_project_scale(intake)

        project = self.store.insert(PROJECTS, {
            "name": intake.name,
            "description": intake.description or intake.objective,
            "status": "active",
            "scale": scale.value,
            "objective": intake.objective,
            "success_criteria": intake.success_criteria or [],
            "constraints": intake.constraints or [],
            "target_end_date": intake.target_timeline,
            "health_score": settings.initial_health_score,
            "intake_data": intake.model_dump(exclude_none=True, warnings=False),
        })
        project_id = project["id"]

        self.store.insert(CHARTERS, {
            "project_id": project_id,
            "version": 1,
            "content": charter.model_dump(),
        })

        if charter.timeline:
            self.store.insert_many(MILESTONES, [
                {
                    "project_id": project_id,
                    "name": m.name,
                    "description": m.description,
                    "target_date": m.target_date,
                    "status": "pending",
                    "completion_percentage": 0,
                }
                for m in charter.timeline
            ])

        if charter.stakeholders:
            self.store.insert_many(STAKEHOLDERS, [
                {
                    "project_id": project_id,
                    "name": s.name,
                    "role": s.role,
                    "raci_level": s.raci_level,
                }
                for s in charter.stakeholders
            ])

        if charter.risks:
            self.store.insert_many(RISKS, [
                {
                    "project_id": project_id,
                    "description": r.description,
                    "probability": r.probability,
                    "impact": r.impact,
                    "mitigation": r.mitigation,
                    "status": "identified",
                }
                for r in charter.risks
            ])

        logger.info("Created project %s (%s, scale=%s)", project_id, intake.name, scale.value)
        return {"project": project, "charter": charter}

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def _require_project(self, project_id: str) -> Record:
        project = self.store.get(PROJECTS, project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    def list_projects(self) -> List[Record]:
        """All projects, newest first, with task totals."""
        projects = []
        for project in self.store.query(PROJECTS, order_by="created_at", descending=True):
            tasks = self.store.query(TASKS, project_id=project["id"])
            projects.append({
                **project,
                "tasks_total": len(tasks),
                "tasks_completed": sum(1 for t in tasks if t.get("status") == TaskStatus.COMPLETED.value),
            })
        return projects

    def get_project(self, project_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        """A project with its latest charter, related records and a fresh health score."""
        project = self._require_project(project_id)
        charters = self.store.query(CHARTERS, order_by="version", descending=True, limit=1, project_id=project_id)
        return {
            "project": project,
            "charter": charters[0] if charters else None,
            "milestones": self.store.query(MILESTONES, order_by="target_date", project_id=project_id),
            "tasks": self.store.query(TASKS, order_by="created_at", descending=True, project_id=project_id),
            "risks": self.store.query(RISKS, project_id=project_id),
            "stakeholders": self.store.query(STAKEHOLDERS, project_id=project_id),
            "health": self.get_health(project_id, now=now),
        }

    def update_project(self, project_id: str, changes: Dict[str, Any]) -> Record:
        self._require_project(project_id)
        return self.store.update(PROJECTS, project_id, changes)

    def delete_project(self, project_id: str) -> None:
        """Delete a project and every record that belongs to it."""
        self._require_project(project_id)
        for table in PROJECT_CHILD_TABLES:
            for record in self.store.query(table, project_id=project_id):
                self.store.delete(table, record["id"])
        self.store.delete(PROJECTS, project_id)
        logger.info("Deleted project %s", project_id)

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    def build_snapshot(self, project_id: str, now: Optional[datetime] = None) -> ProjectSnapshot:
        """Collect the live statistics the health scorer needs."""
        now = now or datetime.now(timezone.utc)
        week_start = parse_timestamp(now) - UPDATE_WINDOW
        updates = self.store.query(UPDATES, project_id=project_id)
        return ProjectSnapshot(
            tasks=self.store.query(TASKS, project_id=project_id),
            milestones=self.store.query(MILESTONES, project_id=project_id),
            escalations=self.store.query(ESCALATIONS, project_id=project_id),
            updates_this_week=sum(
                1 for u in updates if parse_timestamp(u.get("created_at")) >= week_start
            ),
        )

    def get_health(self, project_id: str, now: Optional[datetime] = None) -> HealthScore:
        now = now or datetime.now(timezone.utc)
        return calculate_health_score(self.build_snapshot(project_id, now=now), now=now)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def create_task(
        self,
        project_id: str,
        title: str,
        description: str = "",
        priority: str = TaskPriority.NORMAL.value,
        assignee_name: Optional[str] = None,
        due_date: Optional[str] = None,
        milestone_id: Optional[str] = None,
    ) -> Record:
        if not project_id or not title:
            raise ValueError("Project ID and title are required")
        self._require_project(project_id)
        return self.store.insert(TASKS, {
            "project_id": project_id,
            "title": title,
            "description": description or "",
            "status": TaskStatus.PENDING.value,
            "priority": priority or TaskPriority.NORMAL.value,
            "assignee_name": assignee_name or None,
            "due_date": due_date or None,
            "milestone_id": milestone_id or None,
            "dependencies": [],
        })

    def update_task(self, task_id: str, changes: Dict[str, Any]) -> Record:
        """Apply the allowed subset of ``changes``; completing a task stamps ``completed_at``."""
        updates = {k: changes[k] for k in ALLOWED_TASK_FIELDS if k in changes}
        status = updates.get("status")
        if status == TaskStatus.COMPLETED.value:
            updates["completed_at"] = datetime.now(timezone.utc).isoformat()
        elif status:
            updates["completed_at"] = None
        return self.store.update(TASKS, task_id, updates)

    def delete_task(self, task_id: str) -> None:
        self.store.delete(TASKS, task_id)

    # ------------------------------------------------------------------
    # Updates and escalations
    # ------------------------------------------------------------------

    def record_update(
        self,
        task_id: str,
        content: str,
        participant_id: Optional[str] = None,
        channel: str = "api",
    ) -> Dict[str, Any]:
        """Analyze a progress update, store it, and move the task to the status it reports."""
        task = self.store.get(TASKS, task_id)
        if task is None:
            raise RecordNotFoundError(TASKS, task_id)

        analysis = self.update_agent.analyze(
            update_content=content,
            title=task.get("title", ""),
            description=task.get("description", ""),
            current_status=task.get("status", TaskStatus.PENDING.value),
        )
        update = self.store.insert(UPDATES, {
            "task_id": task_id,
            "project_id": task["project_id"],
            "participant_id": participant_id,
            "content": content,
            "parsed_progress": analysis.progress_percentage,
            "parsed_status": analysis.new_status.value,
            "parsed_blockers": analysis.blockers,
            "channel": channel,
        })
        if analysis.new_status.value != task.get("status"):
            task = self.update_task(task_id, {"status": analysis.new_status.value})
        return {"update": update, "analysis": analysis, "task": task}

    def review_escalation(
        self,
        project_id: str,
        recent_issues: Optional[List[str]] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Ask for an escalation recommendation and open an escalation if advised.

        ``recent_issues`` defaults to the blockers reported in this week's updates.
        """
        project = self._require_project(project_id)
        now = now or datetime.now(timezone.utc)
        snapshot = self.build_snapshot(project_id, now=now)
        health = calculate_health_score(snapshot, now=now)

        if recent_issues is None:
            week_start = parse_timestamp(now) - UPDATE_WINDOW
            recent_issues = [
                blocker
                for u in self.store.query(UPDATES, order_by="created_at", project_id=project_id)
                if parse_timestamp(u.get("created_at")) >= week_start
                for blocker in (u.get("parsed_blockers") or [])
            ]

        recommendation = self.escalation_agent.recommend(
            name=project["name"],
            health_score=health.overall,
            overdue_tasks=count_overdue_tasks(snapshot, now=now),
            blocked_tasks=sum(1 for t in snapshot.tasks if t.status == TaskStatus.BLOCKED),
            recent_issues=recent_issues,
        )

        escalation = None
        if recommendation.should_escalate:
            escalation = self.store.insert(ESCALATIONS, {
                "project_id": project_id,
                "trigger_type": recommendation.trigger_type.value,
                "severity": recommendation.severity.value,
                "description": recommendation.message,
                "recommended_action": recommendation.recommended_action,
                "status": EscalationStatus.OPEN.value,
            })
            logger.info(
                "Opened %s escalation on project %s (%s)",
                recommendation.severity.value, project_id, recommendation.trigger_type.value,
            )

        self.store.update(PROJECTS, project_id, {"health_score": health.overall})
        return {"recommendation": recommendation, "escalation": escalation, "health": health}
