"""Project templates: a named task list that seeds a new project."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from src.workspace.entities import Task


DAYS_PER_TEMPLATE_TASK = 3


@dataclass(frozen=True)
class ProjectTemplate:
    id: str
    name: str
    description: str
    category: str
    icon: str
    tasks: Tuple[str, ...]
    usage_count: int = 0


TEMPLATES: Tuple[ProjectTemplate, ...] = (
    ProjectTemplate(
        id="web-development",
        name="Web Development Project",
        description="Standard web development workflow with discovery, design, development, and launch phases",
        category="Development",
        icon="💻",
        tasks=(
            "Project kickoff & requirements",
            "Information architecture",
            "Wireframes & prototypes",
            "Visual design",
            "Frontend development",
            "Backend integration",
            "QA & testing",
            "Launch & deployment",
        ),
        usage_count=24,
    ),
    ProjectTemplate(
        id="mobile-mvp",
        name="Mobile App MVP",
        description="Agile mobile app development from concept to app store submission",
        category="Development",
        icon="🚀",
        tasks=(
            "User research & personas",
            "Feature prioritization",
            "UX design sprints",
            "UI design system",
            "Core feature development",
            "Beta testing",
            "App store preparation",
            "Launch marketing",
        ),
        usage_count=18,
    ),
    ProjectTemplate(
        id="brand-identity",
        name="Brand Identity Design",
        description="Complete brand identity project from strategy to guidelines",
        category="Design",
        icon="🎨",
        tasks=(
            "Brand discovery workshop",
            "Competitive analysis",
            "Brand strategy",
            "Logo concepts",
            "Logo refinement",
            "Color & typography",
            "Brand applications",
            "Brand guidelines",
        ),
        usage_count=12,
    ),
    ProjectTemplate(
        id="bug-fix-sprint",
        name="Bug Fix Sprint",
        description="Structured approach to addressing technical debt and bugs",
        category="Maintenance",
        icon="🐛",
        tasks=(
            "Bug triage & prioritization",
            "Root cause analysis",
            "Fix implementation",
            "Code review",
            "Testing & verification",
            "Documentation update",
            "Deployment",
        ),
        usage_count=31,
    ),
    ProjectTemplate(
        id="product-launch",
        name="Product Launch",
        description="Go-to-market campaign and product launch coordination",
        category="Marketing",
        icon="⚡",
        tasks=(
            "Launch strategy",
            "Marketing assets",
            "Press kit preparation",
            "Email campaign setup",
            "Social media planning",
            "Partner coordination",
            "Launch day execution",
            "Post-launch analysis",
        ),
        usage_count=9,
    ),
)


def get_template(template_id: str) -> Optional[ProjectTemplate]:
    for template in TEMPLATES:
        if template.id == template_id:
            return template
    return None


def search_templates(query: str = "") -> List[ProjectTemplate]:
    q = (query or "").strip().lower()
    if not q:
        return list(TEMPLATES)
    return [t for t in TEMPLATES if q in t.name.lower() or q in t.category.lower()]


def template_tasks(template: ProjectTemplate, start: datetime, assignee: str = "Unassigned") -> List[Task]:
    """Sequential tasks, each DAYS_PER_TEMPLATE_TASK long, starting at ``start``."""
    tasks = []
    for index, name in enumerate(template.tasks):
        begin = start + timedelta(days=index * DAYS_PER_TEMPLATE_TASK)
        tasks.append(
            Task(
                id=str(uuid.uuid4()),
                name=name,
                assignee=assignee,
                status="todo",
                start_date=begin,
                end_date=begin + timedelta(days=DAYS_PER_TEMPLATE_TASK),
            )
        )
    return tasks


def wizard_data_from_template(
    template: ProjectTemplate,
    project_name: str,
    *,
    owner_name: str,
    start: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Wizard answers for ``create_project`` that reproduce the template."""
    start = start or datetime.utcnow()
    tasks = template_tasks(template, start, assignee=owner_name)
    end = tasks[-1].end_date if tasks else start
    return {
        "title": project_name.strip() or template.name,
        "description": template.description,
        "status": "planned",
        "priority": "medium",
        "start_date": start,
        "deadline_date": end,
        "owner_name": owner_name,
        "tags": [template.category.lower()],
        "intent": template.category,
        "tasks": tasks,
    }
