# app/db/seed.py
"""Reference and sample data for development databases and tests"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Dict, Any
from loguru import logger

from app.db.models import User, StatusDefinition, Translation, Project, Task, Tag, TaskPriority

STATUS_DEFINITIONS = {
    "TO_DO": "Tasks that are planned but not yet started",
    "IN_PROGRESS": "Tasks currently being worked on",
    "IN_REVIEW": "Tasks awaiting code review or approval",
    "DONE": "Completed tasks",
    "TESTING": "Tasks in testing phase",
    "AWAITING_APPROVAL": "Tasks waiting for stakeholder approval",
    "READY_FOR_DEPLOY": "Tasks ready to be deployed to production",
    "ICEBOX": "Tasks that are deprioritized or on hold",
}

USERS = [
    {"full_name": "Alice Johnson", "email": "alice@taskblaster.dev", "access_token": "550e8400-e29b-41d4-a716-446655440000"},
    {"full_name": "Bob Smith", "email": "bob@taskblaster.dev", "access_token": "6ba7b810-9dad-11d1-80b4-00c04fd430c8"},
    {"full_name": "Carol Davis", "email": "carol@taskblaster.dev", "access_token": "6ba7b811-9dad-11d1-80b4-00c04fd430c8"},
    {"full_name": "Dan Wilson", "email": "dan@taskblaster.dev", "access_token": "6ba7b812-9dad-11d1-80b4-00c04fd430c8"},
]

# Leaders refer to USERS by index
PROJECTS = [
    {
        "title": "Website Redesign",
        "code": "WEBRED",
        "description": "Complete overhaul of company website with modern design",
        "leader": 0,
        "status_workflow": ["TO_DO", "IN_PROGRESS", "IN_REVIEW", "DONE"],
    },
    {
        "title": "Mobile App Development",
        "code": "MOBDEV",
        "description": "Native mobile app for iOS and Android platforms",
        "leader": 1,
        "status_workflow": ["TO_DO", "IN_PROGRESS", "TESTING", "DONE"],
    },
    {
        "title": "API Modernization",
        "code": "APIMOD",
        "description": "Migrate legacy APIs to modern REST architecture",
        "leader": 2,
        "status_workflow": ["TO_DO", "IN_PROGRESS", "IN_REVIEW", "READY_FOR_DEPLOY", "DONE"],
    },
]

TAGS = {
    "frontend": "#3B82F6",
    "backend": "#10B981",
    "bug": "#EF4444",
    "design": "#A855F7",
    "urgent": "#F97316",
    "documentation": "#64748B",
}

# (project code, title, status, priority, tags)
SAMPLE_TASKS = [
    ("WEBRED", "Design new landing page", "IN_PROGRESS", TaskPriority.HIGH, ["frontend", "design"]),
    ("WEBRED", "Fix navigation menu on mobile", "TO_DO", TaskPriority.CRITICAL, ["frontend", "bug", "urgent"]),
    ("MOBDEV", "Set up push notifications", "TO_DO", TaskPriority.MEDIUM, ["backend"]),
    ("APIMOD", "Document v2 endpoints", "IN_REVIEW", TaskPriority.LOW, ["documentation", "backend"]),
    ("APIMOD", "Replace legacy auth middleware", "IN_PROGRESS", TaskPriority.HIGH, ["backend", "urgent"]),
]

_STATUS_LABELS = {
    "en": {
        "TO_DO": "To Do", "IN_PROGRESS": "In Progress", "IN_REVIEW": "In Review", "DONE": "Done",
        "TESTING": "Testing", "AWAITING_APPROVAL": "Awaiting Approval",
        "READY_FOR_DEPLOY": "Ready for Deploy", "ICEBOX": "Icebox",
    },
    "es": {
        "TO_DO": "Por Hacer", "IN_PROGRESS": "En Progreso", "IN_REVIEW": "En Revisión", "DONE": "Completado",
        "TESTING": "Pruebas", "AWAITING_APPROVAL": "En Espera de Aprobación",
        "READY_FOR_DEPLOY": "Listo para Desplegar", "ICEBOX": "Congelador",
    },
    "fr": {
        "TO_DO": "À Faire", "IN_PROGRESS": "En Cours", "IN_REVIEW": "En Révision", "DONE": "Terminé",
        "TESTING": "Tests", "AWAITING_APPROVAL": "En Attente d'Approbation",
        "READY_FOR_DEPLOY": "Prêt pour le Déploiement", "ICEBOX": "Frigo",
    },
    "de": {
        "TO_DO": "Zu Erledigen", "IN_PROGRESS": "In Bearbeitung", "IN_REVIEW": "In Prüfung", "DONE": "Erledigt",
        "TESTING": "Testen", "AWAITING_APPROVAL": "Wartet auf Genehmigung",
        "READY_FOR_DEPLOY": "Bereit für Bereitstellung", "ICEBOX": "Eiskiste",
    },
}

_STATUS_DESCRIPTIONS = {
    "en": STATUS_DEFINITIONS,
    "es": {
        "TO_DO": "Tareas planificadas pero no iniciadas",
        "IN_PROGRESS": "Tareas en las que se está trabajando actualmente",
        "IN_REVIEW": "Tareas en espera de revisión de código o aprobación",
        "DONE": "Tareas completadas",
        "TESTING": "Tareas en fase de pruebas",
        "AWAITING_APPROVAL": "Tareas en espera de aprobación de interesados",
        "READY_FOR_DEPLOY": "Tareas listas para desplegarse en producción",
        "ICEBOX": "Tareas despriorizadas o en espera",
    },
    "fr": {
        "TO_DO": "Tâches planifiées mais pas encore commencées",
        "IN_PROGRESS": "Tâches en cours de traitement",
        "IN_REVIEW": "Tâches en attente de révision de code ou d'approbation",
        "DONE": "Tâches terminées",
        "TESTING": "Tâches en phase de test",
        "AWAITING_APPROVAL": "Tâches en attente d'approbation des parties prenantes",
        "READY_FOR_DEPLOY": "Tâches prêtes à être déployées en production",
        "ICEBOX": "Tâches déprioritarisées ou en attente",
    },
    "de": {
        "TO_DO": "Geplante, aber noch nicht begonnene Aufgaben",
        "IN_PROGRESS": "Aufgaben, an denen derzeit gearbeitet wird",
        "IN_REVIEW": "Aufgaben, die auf Code-Review oder Genehmigung warten",
        "DONE": "Abgeschlossene Aufgaben",
        "TESTING": "Aufgaben in der Testphase",
        "AWAITING_APPROVAL": "Aufgaben, die auf Stakeholder-Genehmigung warten",
        "READY_FOR_DEPLOY": "Aufgaben, die bereit für die Produktionsbereitstellung sind",
        "ICEBOX": "Zurückgestellte oder pausierte Aufgaben",
    },
}

_COMMON_LABELS = {
    "en": {"projects": "Projects", "tasks": "Tasks", "save": "Save", "cancel": "Cancel", "delete": "Delete"},
    "es": {"projects": "Proyectos", "tasks": "Tareas", "save": "Guardar", "cancel": "Cancelar", "delete": "Eliminar"},
    "fr": {"projects": "Projets", "tasks": "Tâches", "save": "Enregistrer", "cancel": "Annuler", "delete": "Supprimer"},
    "de": {"projects": "Projekte", "tasks": "Aufgaben", "save": "Speichern", "cancel": "Abbrechen", "delete": "Löschen"},
}


def build_translations(language: str) -> Dict[str, Any]:
    """UI label bundle for one of the seeded languages"""
    return {
        "common": dict(_COMMON_LABELS[language]),
        "tasks": {
            "statuses": dict(_STATUS_LABELS[language]),
            "statusDescriptions": dict(_STATUS_DESCRIPTIONS[language]),
        },
    }


async def seed_database(db: AsyncSession, with_sample_tasks: bool = True) -> None:
    """
    Load status definitions, users, translations, tags and projects, plus a
    handful of sample tasks. Does nothing when users already exist.
    """
    if await db.scalar(select(User.id).limit(1)) is not None:
        logger.info("Database already seeded, skipping")
        return

    try:
        users = [User(**data) for data in USERS]
        db.add_all(users)
        await db.flush()
        logger.info(f"Seeded {len(users)} users")

        db.add_all([
            StatusDefinition(code=code, description=description, created_by=users[0].id, updated_by=users[0].id)
            for code, description in STATUS_DEFINITIONS.items()
        ])
        db.add_all([
            Translation(language_code=language, translations=build_translations(language), created_by=users[0].id)
            for language in _STATUS_LABELS
        ])
        tags = {name: Tag(tag=name, color=color) for name, color in TAGS.items()}
        db.add_all(tags.values())

        projects = {}
        for data in PROJECTS:
            leader = users[data["leader"]]
            project = Project(
                title=data["title"],
                code=data["code"],
                description=data["description"],
                leader_id=leader.id,
                status_workflow=list(data["status_workflow"]),
                next_task_sequence=1,
                created_by=leader.id,
                updated_by=leader.id
            )
            projects[project.code] = project
        db.add_all(projects.values())
        await db.flush()
        logger.info(f"Seeded {len(STATUS_DEFINITIONS)} status definitions, {len(TAGS)} tags, {len(projects)} projects")

        if with_sample_tasks:
            column_tops: Dict[tuple, int] = {}
            for code, title, status, priority, tag_names in SAMPLE_TASKS:
                project = projects[code]
                key = (code, status)
                column_tops[key] = column_tops.get(key, 0) + 10
                db.add(Task(
                    task_id=f"{code}-{project.next_task_sequence}",
                    project_id=project.id,
                    title=title,
                    status=status,
                    position=column_tops[key],
                    priority=priority,
                    assignee_id=project.leader_id,
                    tags=[tags[name] for name in tag_names]
                ))
                project.next_task_sequence += 1
            logger.info(f"Seeded {len(SAMPLE_TASKS)} sample tasks")

        await db.commit()
        logger.info("✅ Database seeding completed")

    except Exception as e:
        logger.error(f"❌ Database seeding failed: {e}")
        await db.rollback()
        raise
